from enum import Enum
from pathlib import Path

from orthotypo.core.errors import UnsupportedLanguageError


class Language(str, Enum):
    C = "c"
    CPP = "cpp"
    GO = "go"
    PYTHON = "python"
    RUST = "rust"
    KOTLIN = "kotlin"
    JAVASCRIPT = "javascript"
    TYPESCRIPT = "typescript"
    JSON = "json"
    TOML = "toml"
    YAML = "yaml"
    MARKDOWN = "markdown"
    CARGO_TOML = "cargo-toml"
    PYPROJECT = "pyproject"


_LANGUAGE_ALIASES = {
    "c++": "cpp",
    "cxx": "cpp",
    "golang": "go",
    "py": "python",
    "rs": "rust",
    "kt": "kotlin",
    "js": "javascript",
    "ts": "typescript",
    "yml": "yaml",
    "md": "markdown",
    "cargo": "cargo-toml",
    "cargo.toml": "cargo-toml",
    "pyproject.toml": "pyproject",
}

# Whole file names win over extensions
_FILENAME_LANGUAGE_MAP = {
    "Cargo.toml": Language.CARGO_TOML,
    "pyproject.toml": Language.PYPROJECT,
}

_EXTENSION_LANGUAGE_MAP = {
    ".c": Language.C,
    ".h": Language.C,
    ".cc": Language.CPP,
    ".cpp": Language.CPP,
    ".cxx": Language.CPP,
    ".hh": Language.CPP,
    ".hpp": Language.CPP,
    ".go": Language.GO,
    ".py": Language.PYTHON,
    ".pyi": Language.PYTHON,
    ".rs": Language.RUST,
    ".kt": Language.KOTLIN,
    ".kts": Language.KOTLIN,
    ".js": Language.JAVASCRIPT,
    ".jsx": Language.JAVASCRIPT,
    ".mjs": Language.JAVASCRIPT,
    ".cjs": Language.JAVASCRIPT,
    ".ts": Language.TYPESCRIPT,
    ".mts": Language.TYPESCRIPT,
    ".cts": Language.TYPESCRIPT,
    ".json": Language.JSON,
    ".toml": Language.TOML,
    ".yml": Language.YAML,
    ".yaml": Language.YAML,
    ".md": Language.MARKDOWN,
    ".markdown": Language.MARKDOWN,
}


def normalize_language(language: str) -> Language:
    normalized = language.strip().lower()
    resolved = _LANGUAGE_ALIASES.get(normalized, normalized)
    try:
        return Language(resolved)
    except ValueError:
        supported = sorted(lang.value for lang in Language)
        raise UnsupportedLanguageError(f"Unsupported language '{language}'. Supported: {supported}") from None


def detect_language_from_path(file_path: Path) -> Language | None:
    if file_path.name in _FILENAME_LANGUAGE_MAP:
        return _FILENAME_LANGUAGE_MAP[file_path.name]
    return _EXTENSION_LANGUAGE_MAP.get(file_path.suffix.lower())


def resolve_language(language: str | Language | None, file_path: Path | None) -> Language | None:
    if isinstance(language, Language):
        return language
    if language:
        return normalize_language(language)
    if file_path:
        return detect_language_from_path(file_path)
    raise ValueError("Language must be provided when no file path is available.")


def language_patterns(language: Language) -> list[str]:
    """Filename patterns, in the glob syntax used by ``types`` listings."""
    names = [name for name, lang in _FILENAME_LANGUAGE_MAP.items() if lang is language]
    suffixes = [f"*{suffix}" for suffix, lang in _EXTENSION_LANGUAGE_MAP.items() if lang is language]
    return names + suffixes
