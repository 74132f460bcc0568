import tomllib
from collections.abc import Iterator

from tree_sitter import Node

from orthotypo.core.errors import ParseFailureError
from orthotypo.core.extractors.base import TomlExtractor, is_literal_string, literal_content_spans, parse_source
from orthotypo.core.ports.extractor import ExtractedProse
from orthotypo.models import ProseRange

_KEY_TYPES = frozenset({"bare_key", "quoted_key", "dotted_key"})


def _key_path(node: Node, source: bytes) -> tuple[str, ...]:
    if node.type == "dotted_key":
        return tuple(part for child in node.named_children for part in _key_path(child, source))
    text = source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")
    if node.type == "quoted_key":
        text = text[1:-1]
    return (text.strip(),)


def _first_key(node: Node, source: bytes) -> tuple[str, ...]:
    for child in node.named_children:
        if child.type in _KEY_TYPES:
            return _key_path(child, source)
    return ()


class ManifestExtractor:
    """Package manifests, where only the description fields are prose.

    The rest of a manifest is made of identifiers, versions and paths, so
    these files bypass the generic TOML extractor.
    """

    def __init__(self, fields: tuple[tuple[str, ...], ...]) -> None:
        self.fields = frozenset(fields)
        self._toml = TomlExtractor()

    def extract(self, source: bytes) -> ExtractedProse:
        try:
            tomllib.loads(source.decode("utf-8"))
        except (UnicodeDecodeError, tomllib.TOMLDecodeError) as exc:
            raise ParseFailureError("toml", str(exc)) from exc
        tree = parse_source("toml", source)
        return ExtractedProse(ranges=self._ranges(tree.root_node, source))

    def _ranges(self, root: Node, source: bytes) -> Iterator[ProseRange]:
        for table_path, pair in self._pairs(root, source):
            value = pair.named_children[-1]
            if table_path + _first_key(pair, source) not in self.fields or value.type != "string":
                continue
            if is_literal_string(value, source):
                continue
            for span in literal_content_spans(value, trim=self._toml.delimiters(value, source)):
                yield ProseRange(span=span)

    def _pairs(self, root: Node, source: bytes) -> Iterator[tuple[tuple[str, ...], Node]]:
        for child in root.named_children:
            if child.type == "pair":
                yield (), child
            elif child.type == "table":
                table_path = _first_key(child, source)
                for pair in child.named_children:
                    if pair.type == "pair":
                        yield table_path, pair


def cargo_manifest() -> ManifestExtractor:
    return ManifestExtractor((("package", "description"), ("workspace", "package", "description")))


def pyproject_manifest() -> ManifestExtractor:
    return ManifestExtractor((("project", "description"),))
