"""Unit tests for language detection."""

from pathlib import Path

import pytest

from orthotypo.core.errors import UnsupportedLanguageError
from orthotypo.core.languages import (
    Language,
    detect_language_from_path,
    language_patterns,
    normalize_language,
    resolve_language,
)


class TestDetectLanguage:
    """Tests for detect_language_from_path."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("main.c", Language.C),
            ("lib.h", Language.C),
            ("lib.HPP", Language.CPP),
            ("main.go", Language.GO),
            ("app.py", Language.PYTHON),
            ("lib.rs", Language.RUST),
            ("build.gradle.kts", Language.KOTLIN),
            ("index.mjs", Language.JAVASCRIPT),
            ("index.ts", Language.TYPESCRIPT),
            ("package.json", Language.JSON),
            ("config.toml", Language.TOML),
            ("ci.yml", Language.YAML),
            ("README.md", Language.MARKDOWN),
            ("Cargo.toml", Language.CARGO_TOML),
            ("pyproject.toml", Language.PYPROJECT),
        ],
    )
    def test_detects(self, name: str, expected: Language) -> None:
        assert detect_language_from_path(Path("some/dir") / name) is expected

    @pytest.mark.parametrize("name", ["image.png", "Makefile", "notes.txt", "component.tsx"])
    def test_unknown_files(self, name: str) -> None:
        assert detect_language_from_path(Path(name)) is None


class TestNormalizeLanguage:
    """Tests for language names and aliases."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [("python", Language.PYTHON), ("PY", Language.PYTHON), (" c++ ", Language.CPP), ("yml", Language.YAML)],
    )
    def test_aliases(self, name: str, expected: Language) -> None:
        assert normalize_language(name) is expected

    def test_unsupported_language(self) -> None:
        with pytest.raises(UnsupportedLanguageError, match="Unsupported language 'cobol'"):
            normalize_language("cobol")


class TestResolveLanguage:
    """Tests for resolve_language."""

    def test_explicit_language_wins(self) -> None:
        assert resolve_language("go", Path("main.py")) is Language.GO

    def test_falls_back_to_path(self) -> None:
        assert resolve_language(None, Path("main.py")) is Language.PYTHON

    def test_requires_language_or_path(self) -> None:
        with pytest.raises(ValueError, match="Language must be provided"):
            resolve_language(None, None)


class TestLanguagePatterns:
    """Tests for the type listing."""

    def test_file_names_come_first(self) -> None:
        assert language_patterns(Language.CARGO_TOML) == ["Cargo.toml"]
        assert language_patterns(Language.YAML) == ["*.yml", "*.yaml"]

    def test_every_language_has_a_pattern(self) -> None:
        assert all(language_patterns(language) for language in Language)
