import logging
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path

from orthotypo.core.config import Config
from orthotypo.core.errors import MalformedFixError, ParseFailureError
from orthotypo.core.extractors import get_extractor
from orthotypo.core.fixer import apply_fixes
from orthotypo.core.languages import Language, resolve_language
from orthotypo.core.rules import SpaceBeforePunctuationRule, decode_prose
from orthotypo.models import Diagnostic, ErrorKind, FileError, FileResult

logger = logging.getLogger(__name__)

_DEFAULT_CONFIG = Config()


def _ordered(diagnostics: list[Diagnostic]) -> list[Diagnostic]:
    """Sort by start offset and drop any diagnostic overlapping an earlier one."""
    kept: list[Diagnostic] = []
    for diagnostic in sorted(diagnostics, key=lambda d: (d.span.start, d.span.end)):
        if kept and diagnostic.span.start < kept[-1].span.end:
            continue
        kept.append(diagnostic)
    return kept


def check_source(
    path: str | Path,
    source: bytes,
    language: str | Language | None = None,
    config: Config | None = None,
) -> FileResult:
    """Collect the diagnostics of one file's content."""
    config = config or _DEFAULT_CONFIG
    resolved = resolve_language(language, Path(path))
    result = FileResult(path=str(path), language=resolved.value if resolved else None, source=source)
    if resolved is None:
        return result

    engine = config.engine_for(resolved)
    if not engine.enabled():
        logger.debug("Skipping %s: checks disabled for %s", path, resolved.value)
        return result

    try:
        extracted = get_extractor(resolved).extract(source)
    except ParseFailureError as exc:
        logger.warning("%s: %s", path, exc)
        result.errors.append(FileError(kind=ErrorKind.PARSE, message=str(exc)))
        return result

    rule = SpaceBeforePunctuationRule.from_config(engine)
    diagnostics: list[Diagnostic] = []
    for prose in extracted.ranges:
        if extracted.exclusions.overlaps(prose.span) and not extracted.exclusions.clip(prose.span):
            continue
        text = decode_prose(source[prose.span.start : prose.span.end])
        diagnostics.extend(rule.check(text, prose.span.start, extracted.exclusions))
    result.diagnostics = _ordered(diagnostics)
    logger.debug("%s: %d diagnostic(s)", path, len(result.diagnostics))
    return result


def fix_source(
    path: str | Path,
    source: bytes,
    language: str | Language | None = None,
    config: Config | None = None,
) -> tuple[FileResult, bytes]:
    """Collect the diagnostics of one file's content and return it rewritten.

    When the fixes cannot be applied the original bytes are returned and the
    result carries an internal error.
    """
    result = check_source(path, source, language, config)
    fixes = [diagnostic.fix for diagnostic in result.diagnostics if diagnostic.fix is not None]
    if not fixes:
        return result, source
    try:
        rewritten = apply_fixes(source, fixes)
    except MalformedFixError as exc:
        logger.error("%s: refusing to apply fixes: %s", path, exc)
        result.errors.append(FileError(kind=ErrorKind.INTERNAL, message=f"fixes not applied: {exc}"))
        return result, source
    result.fixed = len(fixes)
    return result, rewritten


def _replace_atomically(path: Path, content: bytes) -> None:
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "wb") as temp_file:
            temp_file.write(content)
        os.chmod(temp_path, path.stat().st_mode & 0o7777)
        os.replace(temp_path, path)
    finally:
        temp_path.unlink(missing_ok=True)


def check_file(path: str | Path, config: Config | None = None, write: bool = False) -> FileResult:
    """Check one file on disk; with ``write`` the fixes are written back in place."""
    file_path = Path(path)
    language = resolve_language(None, file_path)
    if language is None:
        return FileResult(path=str(path))

    try:
        source = file_path.read_bytes()
    except OSError as exc:
        logger.warning("Could not read %s: %s", path, exc)
        return FileResult(
            path=str(path),
            language=language.value,
            errors=[FileError(kind=ErrorKind.IO, message=f"could not read file: {exc}")],
        )

    if not write:
        return check_source(file_path, source, language, config)

    result, rewritten = fix_source(file_path, source, language, config)
    if rewritten != source:
        try:
            _replace_atomically(file_path, rewritten)
        except OSError as exc:
            logger.warning("Could not write %s: %s", path, exc)
            result.errors.append(FileError(kind=ErrorKind.IO, message=f"could not write file: {exc}"))
            result.fixed = 0
    return result


def iter_prose(source: bytes, language: Language) -> Iterator[tuple[int, str]]:
    """Yield ``(offset, text)`` for every prose range the checker would read."""
    extracted = get_extractor(language).extract(source)
    for prose in extracted.ranges:
        yield prose.span.start, decode_prose(source[prose.span.start : prose.span.end])
