from collections.abc import Callable

from orthotypo.core.extractors.base import KotlinExtractor, TomlExtractor, TreeSitterExtractor, c_family
from orthotypo.core.extractors.manifest import ManifestExtractor, cargo_manifest, pyproject_manifest
from orthotypo.core.extractors.markdown import MarkdownExtractor
from orthotypo.core.extractors.python import PythonExtractor
from orthotypo.core.languages import Language
from orthotypo.core.ports.extractor import ExtractedProse, Extractor

_EXTRACTOR_FACTORIES: dict[Language, Callable[[], Extractor]] = {
    Language.C: lambda: c_family("c"),
    Language.CPP: lambda: c_family("cpp"),
    Language.GO: lambda: TreeSitterExtractor(
        "go", frozenset({"interpreted_string_literal"}), frozenset({"raw_string_literal"})
    ),
    Language.PYTHON: PythonExtractor,
    Language.RUST: lambda: TreeSitterExtractor(
        "rust", frozenset({"string_literal"}), frozenset({"raw_string_literal"})
    ),
    Language.KOTLIN: KotlinExtractor,
    Language.JAVASCRIPT: lambda: TreeSitterExtractor("javascript", frozenset({"string", "template_string"})),
    Language.TYPESCRIPT: lambda: TreeSitterExtractor("typescript", frozenset({"string", "template_string"})),
    Language.JSON: lambda: TreeSitterExtractor("json", frozenset({"string"})),
    Language.TOML: TomlExtractor,
    Language.YAML: lambda: TreeSitterExtractor(
        "yaml",
        frozenset({"string_scalar", "double_quote_scalar"}),
        trim={"double_quote_scalar": (1, 1)},
    ),
    Language.MARKDOWN: MarkdownExtractor,
    Language.CARGO_TOML: cargo_manifest,
    Language.PYPROJECT: pyproject_manifest,
}


def get_extractor(language: Language) -> Extractor:
    return _EXTRACTOR_FACTORIES[language]()


__all__ = [
    "ExtractedProse",
    "Extractor",
    "KotlinExtractor",
    "ManifestExtractor",
    "MarkdownExtractor",
    "PythonExtractor",
    "TomlExtractor",
    "TreeSitterExtractor",
    "get_extractor",
]
