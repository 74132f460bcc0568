"""Unit tests for applying fixes to a buffer."""

import pytest

from orthotypo.core.errors import MalformedFixError
from orthotypo.core.fixer import apply_fixes
from orthotypo.models import ByteSpan, Fix


def fix(start: int, end: int, replacement: str = "") -> Fix:
    return Fix(span=ByteSpan(start=start, end=end), replacement=replacement)


class TestApplyFixes:
    """Tests for apply_fixes."""

    def test_no_fix_returns_source(self) -> None:
        assert apply_fixes(b"Hello , world!", []) == b"Hello , world!"

    def test_removes_bytes(self) -> None:
        assert apply_fixes(b'"Hello , world!"', [fix(6, 7)]) == b'"Hello, world!"'

    def test_offsets_refer_to_original_buffer(self) -> None:
        assert apply_fixes(b"a ! b ? c .", [fix(1, 2), fix(5, 6), fix(9, 10)]) == b"a! b? c."

    def test_replacement_and_insertion(self) -> None:
        assert apply_fixes(b"abcdef", [fix(1, 1, "X"), fix(2, 4, "é")]) == "aXbéef".encode()

    def test_fix_at_end_of_buffer(self) -> None:
        assert apply_fixes(b"ab", [fix(2, 2, "!")]) == b"ab!"

    def test_rejects_out_of_bounds_fix(self) -> None:
        with pytest.raises(MalformedFixError):
            apply_fixes(b"abc", [fix(2, 4)])

    def test_rejects_overlapping_fixes(self) -> None:
        with pytest.raises(MalformedFixError):
            apply_fixes(b"abcdef", [fix(1, 3), fix(2, 4)])

    def test_rejects_unsorted_fixes(self) -> None:
        with pytest.raises(MalformedFixError):
            apply_fixes(b"abcdef", [fix(4, 5), fix(1, 2)])

    def test_malformed_fix_is_a_value_error(self) -> None:
        with pytest.raises(ValueError):
            apply_fixes(b"", [fix(0, 1)])
