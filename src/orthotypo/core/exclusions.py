from bisect import bisect_left, bisect_right
from collections.abc import Iterator

from orthotypo.models import ByteSpan


class RangeExclusionMap:
    """Set of byte offsets that must never be treated as prose.

    Inserted spans may overlap; they are merged on insertion so the map
    always holds sorted, disjoint intervals and every query is a binary
    search.
    """

    def __init__(self, spans: "list[ByteSpan] | None" = None) -> None:
        self._starts: list[int] = []
        self._ends: list[int] = []
        for span in spans or ():
            self.insert(span)

    def __len__(self) -> int:
        return len(self._starts)

    def __bool__(self) -> bool:
        return bool(self._starts)

    def __iter__(self) -> Iterator[ByteSpan]:
        for start, end in zip(self._starts, self._ends, strict=True):
            yield ByteSpan(start=start, end=end)

    def insert(self, span: ByteSpan) -> None:
        if span.is_empty:
            return
        start, end = span.start, span.end
        # intervals touching or overlapping [start, end) are absorbed
        first = bisect_left(self._ends, start)
        last = bisect_right(self._starts, end)
        if first < last:
            start = min(start, self._starts[first])
            end = max(end, self._ends[last - 1])
        self._starts[first:last] = [start]
        self._ends[first:last] = [end]

    def contains(self, offset: int) -> bool:
        index = bisect_right(self._starts, offset) - 1
        return index >= 0 and offset < self._ends[index]

    def overlaps(self, span: ByteSpan) -> bool:
        if span.is_empty:
            return self.contains(span.start)
        index = bisect_right(self._ends, span.start)
        return index < len(self._starts) and self._starts[index] < span.end

    def clip(self, span: ByteSpan) -> list[ByteSpan]:
        """Return the parts of ``span`` not covered by any exclusion, in order."""
        pieces: list[ByteSpan] = []
        cursor = span.start
        index = bisect_right(self._ends, span.start)
        while index < len(self._starts) and self._starts[index] < span.end:
            if self._starts[index] > cursor:
                pieces.append(ByteSpan(start=cursor, end=self._starts[index]))
            cursor = max(cursor, self._ends[index])
            index += 1
        if cursor < span.end:
            pieces.append(ByteSpan(start=cursor, end=span.end))
        return pieces
