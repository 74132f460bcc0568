"""Punctuation spacing rule.

In English typography there is no space before a punctuation mark:
``Oh no !`` should be ``Oh no!`` and ``a list :`` should be ``a list:``.

A violation is a single ``U+0020`` space sitting between a non-whitespace
character and a punctuation mark. Tabs, newlines and runs of spaces are
never reported: wrapped or aligned text is not a typo.
"""

import re
from collections.abc import Iterable

from orthotypo.core.config import DEFAULT_PUNCTUATION_MARKS, EngineConfig
from orthotypo.core.exclusions import RangeExclusionMap
from orthotypo.models import ByteSpan, Diagnostic, Fix

CODE = "orthotypo::space-before-punctuation-mark"
MESSAGE = "In English typography there is no space before a punctuation mark"

# These marks only end a word when whitespace (or nothing) follows them:
# ``.gitignore``, ``...``, ``:fire:`` and ``:)`` are not punctuation.
_WORD_ENDING_MARKS = frozenset(".,;:")

# Known false positives in strings that embed code, queries or shell snippets
DEFAULT_IGNORE_PATTERNS = (
    r" \?\d+",  # SELECT a FROM b WHERE c = ?1
    r"(?:&&?|\|\|?|==?|>) !",  # a & !b, x || !y, fn() -> !
    r" !\(",  # !(x | y)
    r" !(?:Send|Sync)\b",
    r" \?Sized\b",
    r" \?\w+=",  # add ?param=2 to the URL
    r"\[ ! -[b-hGkLNOprsStuwx] ",  # [ ! -e /some/file ]
    r" !defined\(",  # #elif !defined(FOO)
    r"> :",
)


class SpaceBeforePunctuationRule:
    def __init__(
        self,
        marks: str = DEFAULT_PUNCTUATION_MARKS,
        ignore_patterns: Iterable[str] = DEFAULT_IGNORE_PATTERNS,
    ) -> None:
        if not marks:
            raise ValueError("at least one punctuation mark is required")
        self.marks = marks
        self._candidates = re.compile(rf"(?<=\S) (?=[{re.escape(marks)}])")
        self._ignore = [re.compile(pattern) for pattern in ignore_patterns]

    @classmethod
    def from_config(cls, engine: EngineConfig) -> "SpaceBeforePunctuationRule":
        patterns: list[str] = list(DEFAULT_IGNORE_PATTERNS) if engine.default_ignore_re() else []
        patterns.extend(engine.extend_ignore_re)
        return cls(engine.marks(), patterns)

    def check(self, text: str, offset: int = 0, exclusions: RangeExclusionMap | None = None) -> list[Diagnostic]:
        """Return the violations found in ``text``.

        ``offset`` is the byte offset of ``text`` in its file; spans of the
        returned diagnostics are absolute. Offsets covered by ``exclusions``
        are skipped.
        """
        diagnostics: list[Diagnostic] = []
        ignored: list[tuple[int, int]] | None = None
        cursor = _ByteCursor(text)
        for match in self._candidates.finditer(text):
            index = match.start()
            mark = text[index + 1]
            if not _is_punctuation(text, index + 1, mark):
                continue
            if ignored is None:
                ignored = [m.span() for pattern in self._ignore for m in pattern.finditer(text)]
            if any(start <= index < end for start, end in ignored):
                continue
            start = offset + cursor.advance(index)
            if exclusions is not None and exclusions.contains(start):
                continue
            span = ByteSpan(start=start, end=start + 1)
            diagnostics.append(
                Diagnostic(
                    span=span,
                    message=MESSAGE,
                    code=CODE,
                    help=f"remove the space before `{mark}`",
                    fix=Fix(span=span, replacement=""),
                )
            )
        return diagnostics


def _is_punctuation(text: str, index: int, mark: str) -> bool:
    following = text[index + 1 : index + 2]
    if mark in _WORD_ENDING_MARKS:
        return not following or following.isspace()
    if mark == "?" and following.isdigit():
        return False
    if mark == "!" and following == "=":
        return False
    return True


class _ByteCursor:
    """Maps increasing character indexes of ``text`` to UTF-8 byte offsets."""

    def __init__(self, text: str) -> None:
        self.text = text
        self.ascii = text.isascii()
        self.index = 0
        self.offset = 0

    def advance(self, index: int) -> int:
        if self.ascii:
            return index
        self.offset += len(self.text[self.index : index].encode("utf-8", errors="surrogateescape"))
        self.index = index
        return self.offset


def decode_prose(raw: bytes) -> str:
    """Decode prose so that every character maps back to its exact bytes."""
    return raw.decode("utf-8", errors="surrogateescape")

