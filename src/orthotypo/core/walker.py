import fnmatch
import functools
import logging
import os
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from pathlib import Path

from orthotypo.core.config import WalkConfig

logger = logging.getLogger(__name__)

IGNORE_FILE_NAMES = (".gitignore", ".ignore")
_ALWAYS_SKIPPED_DIRS = frozenset({".git", ".hg", ".svn"})


@functools.lru_cache(maxsize=None)
def _glob_regex(pattern: str) -> re.Pattern[str]:
    """Translate a gitignore glob; ``*`` and ``?`` never match ``/``."""
    parts = []
    i = 0
    while i < len(pattern):
        if pattern.startswith("**/", i):
            parts.append("(?:.*/)?")
            i += 3
            continue
        if pattern.startswith("**", i):
            parts.append(".*")
            i += 2
            continue
        char = pattern[i]
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        elif char == "\\" and i + 1 < len(pattern):
            parts.append(re.escape(pattern[i + 1]))
            i += 1
        elif char == "[" and (end := pattern.find("]", i + (3 if pattern[i + 1 : i + 2] == "!" else 2))) != -1:
            body = pattern[i + 1 : end].replace("\\", "\\\\")
            if body.startswith("!"):
                body = "^" + body[1:]
            parts.append(f"[{body}]")
            i = end
        else:
            parts.append(re.escape(char))
        i += 1
    return re.compile("".join(parts))


@dataclass(frozen=True)
class IgnoreRule:
    base: Path
    pattern: str
    negated: bool
    directory_only: bool
    anchored: bool

    def matches(self, path: Path, is_dir: bool) -> bool:
        if self.directory_only and not is_dir:
            return False
        try:
            relative = path.relative_to(self.base).as_posix()
        except ValueError:
            return False
        regex = _glob_regex(self.pattern)
        if self.anchored:
            return regex.fullmatch(relative) is not None
        return regex.fullmatch(path.name) is not None


def parse_ignore_file(path: Path) -> list[IgnoreRule]:
    """Read gitignore-style patterns; unreadable files contribute no rule."""
    try:
        lines = path.read_text(encoding="utf-8", errors="replace").splitlines()
    except OSError as exc:
        logger.warning("Could not read ignore file %s: %s", path, exc)
        return []

    rules = []
    for line in lines:
        pattern = line.strip()
        if not pattern or pattern.startswith("#"):
            continue
        negated = pattern.startswith("!")
        pattern = pattern.removeprefix("!")
        directory_only = pattern.endswith("/")
        pattern = pattern.rstrip("/")
        anchored = "/" in pattern
        pattern = pattern.lstrip("/")
        if pattern:
            rules.append(IgnoreRule(path.parent, pattern, negated, directory_only, anchored))
    return rules


def _is_ignored(rules: list[IgnoreRule], path: Path, is_dir: bool) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(path, is_dir):
            ignored = not rule.negated
    return ignored


def _is_excluded(patterns: list[str], root: Path, path: Path) -> bool:
    relative = path.relative_to(root).as_posix() if path != root else path.name
    return any(fnmatch.fnmatch(relative, pattern) or fnmatch.fnmatch(path.name, pattern) for pattern in patterns)


def iter_files(paths: Iterable[str | Path], walk: WalkConfig | None = None) -> Iterator[Path]:
    """Yield the files below ``paths``, honoring hidden, exclude and ignore settings.

    Explicitly named files are always yielded.
    """
    walk = walk or WalkConfig()
    for top in map(Path, paths):
        if top.is_file():
            yield top
            continue
        if not top.is_dir():
            logger.warning("Skipping %s: no such file or directory", top)
            continue

        rules_by_dir: dict[str, list[IgnoreRule]] = {}
        for dirpath, dirnames, filenames in os.walk(top):
            directory = Path(dirpath)
            rules = list(rules_by_dir.get(dirpath, []))
            if walk.respect_ignore_files():
                for name in IGNORE_FILE_NAMES:
                    if name in filenames:
                        rules.extend(parse_ignore_file(directory / name))

            def keep(name: str, is_dir: bool) -> bool:
                if walk.skip_hidden() and name.startswith("."):
                    return False
                candidate = directory / name
                if _is_excluded(walk.extend_exclude, top, candidate):
                    return False
                return not _is_ignored(rules, candidate, is_dir)

            dirnames[:] = sorted(d for d in dirnames if d not in _ALWAYS_SKIPPED_DIRS and keep(d, True))
            for name in dirnames:
                rules_by_dir[os.path.join(dirpath, name)] = rules
            for name in sorted(filenames):
                if keep(name, False):
                    yield directory / name
