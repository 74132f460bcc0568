from bisect import bisect_right


class LineIndex:
    """Maps byte offsets of a buffer to zero-based ``(row, column)`` pairs.

    Line starts are collected once with a single scan of the buffer, lookups
    are a binary search. Columns count decoded characters, so a multi-byte
    character before the offset advances the column by one.
    """

    def __init__(self, source: bytes) -> None:
        self._source = source
        starts = [0]
        index = source.find(b"\n")
        while index != -1:
            starts.append(index + 1)
            index = source.find(b"\n", index + 1)
        self._starts = starts

    def __len__(self) -> int:
        return len(self._starts)

    def locate(self, offset: int) -> tuple[int, int]:
        if offset < 0 or offset > len(self._source):
            raise IndexError(f"offset {offset} is outside of a buffer of {len(self._source)} bytes")
        row = bisect_right(self._starts, offset) - 1
        prefix = self._source[self._starts[row] : offset]
        return row, len(prefix.decode("utf-8", errors="replace"))

    def line(self, row: int) -> str:
        start = self._starts[row]
        end = self._starts[row + 1] - 1 if row + 1 < len(self._starts) else len(self._source)
        return self._source[start:end].decode("utf-8", errors="replace").rstrip("\r")
