from collections.abc import Iterable

from orthotypo.core.errors import MalformedFixError
from orthotypo.models import Fix


def apply_fixes(source: bytes, fixes: Iterable[Fix]) -> bytes:
    """Rewrite ``source`` with ``fixes`` in a single left-to-right pass.

    Spans refer to the original buffer, so earlier replacements never shift
    later ones. Fixes must be sorted by start offset and must not overlap.
    """
    chunks: list[bytes] = []
    cursor = 0
    for fix in fixes:
        if fix.span.end > len(source):
            raise MalformedFixError(f"fix {fix.span.start}..{fix.span.end} is outside of a {len(source)} bytes buffer")
        if fix.span.start < cursor:
            raise MalformedFixError(f"fix {fix.span.start}..{fix.span.end} overlaps or precedes the previous fix")
        chunks.append(source[cursor : fix.span.start])
        chunks.append(fix.replacement.encode("utf-8"))
        cursor = fix.span.end
    chunks.append(source[cursor:])
    return b"".join(chunks)
