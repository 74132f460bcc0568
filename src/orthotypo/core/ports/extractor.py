from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Protocol

from orthotypo.core.exclusions import RangeExclusionMap
from orthotypo.models import ProseRange


@dataclass(frozen=True)
class ExtractedProse:
    """Prose of one parsed file.

    ``ranges`` may be a generator walking the syntax tree on demand; it is
    meant to be consumed once. ``exclusions`` is complete when returned.
    """

    ranges: Iterable[ProseRange]
    exclusions: RangeExclusionMap = field(default_factory=RangeExclusionMap)


class Extractor(Protocol):
    def extract(self, source: bytes) -> ExtractedProse: ...
