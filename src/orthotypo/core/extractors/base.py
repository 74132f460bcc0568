import logging
from collections.abc import Callable, Iterator
from typing import cast

from tree_sitter import Node, Tree
from tree_sitter_language_pack import SupportedLanguage, get_parser

from orthotypo.core.errors import ParseFailureError
from orthotypo.core.exclusions import RangeExclusionMap
from orthotypo.core.ports.extractor import ExtractedProse
from orthotypo.core.tree import preorder
from orthotypo.models import ByteSpan, ProseKind, ProseRange

logger = logging.getLogger(__name__)

# Node types that hold the text of a literal. Any other node found inside a
# literal (quotes, prefixes, escape sequences, interpolations) is cut out.
CONTENT_TYPES = frozenset(
    {
        "string_content",
        "string_fragment",
        "interpreted_string_literal_content",
        "string_scalar",
    }
)


def parse_source(grammar: str, source: bytes) -> Tree:
    parser = get_parser(cast(SupportedLanguage, grammar))
    tree = parser.parse(source)
    if tree is None:
        raise ParseFailureError(grammar)
    if tree.root_node.type == "ERROR":
        raise ParseFailureError(grammar, "no syntax could be recognized")
    if tree.root_node.has_error:
        logger.debug("Recovered from syntax errors while parsing %s source", grammar)
    return tree


def literal_content_spans(
    node: Node,
    content_types: frozenset[str] = CONTENT_TYPES,
    trim: tuple[int, int] = (0, 0),
) -> list[ByteSpan]:
    """Byte spans of ``node`` that hold literal text.

    ``trim`` drops a fixed number of delimiter bytes on each side for
    grammars that do not expose their quotes as child nodes.
    """
    start = node.start_byte + trim[0]
    end = node.end_byte - trim[1]
    if start >= end:
        return []
    holes = RangeExclusionMap()
    stack = list(node.children)
    while stack:
        child = stack.pop()
        if child.type in content_types:
            stack.extend(child.children)
        else:
            holes.insert(ByteSpan(start=child.start_byte, end=child.end_byte))
    return holes.clip(ByteSpan(start=start, end=end))


class TreeSitterExtractor:
    """Emits the content of every string-like literal of a grammar."""

    def __init__(
        self,
        grammar: str,
        literal_types: frozenset[str],
        verbatim_types: frozenset[str] = frozenset(),
        trim: dict[str, tuple[int, int]] | None = None,
        kind: ProseKind = ProseKind.PLAIN_LITERAL,
    ) -> None:
        self.grammar = grammar
        self.literal_types = literal_types
        self.verbatim_types = verbatim_types
        self.trim = trim or {}
        self.kind = kind

    def extract(self, source: bytes) -> ExtractedProse:
        tree = parse_source(self.grammar, source)
        return ExtractedProse(ranges=self._ranges(tree, source))

    def skip_predicate(self, tree: Tree, source: bytes) -> Callable[[Node], bool]:
        """Return a predicate telling which subtrees are never prose."""
        return lambda node: node.type in self.verbatim_types

    def delimiters(self, node: Node, source: bytes) -> tuple[int, int]:
        return self.trim.get(node.type, (0, 0))

    def literal_spans(self, node: Node, source: bytes) -> list[ByteSpan]:
        return literal_content_spans(node, trim=self.delimiters(node, source))

    def _ranges(self, tree: Tree, source: bytes) -> Iterator[ProseRange]:
        skip = self.skip_predicate(tree, source)
        for node in preorder(tree.root_node, prune=skip):
            if node.type not in self.literal_types or skip(node):
                continue
            for span in self.literal_spans(node, source):
                yield ProseRange(span=span, kind=self.kind)


def is_literal_string(node: Node, source: bytes) -> bool:
    """TOML literal strings are quoted with `'` and have no escapes."""
    return source[node.start_byte : node.start_byte + 1] == b"'"


class TomlExtractor(TreeSitterExtractor):
    """TOML basic strings; literal ``'...'`` strings are verbatim."""

    def __init__(self) -> None:
        super().__init__("toml", frozenset({"string"}))

    def skip_predicate(self, tree: Tree, source: bytes) -> Callable[[Node], bool]:
        return lambda node: node.type == "string" and is_literal_string(node, source)

    def delimiters(self, node: Node, source: bytes) -> tuple[int, int]:
        width = 3 if source[node.start_byte : node.start_byte + 3] == b'"""' else 1
        return width, width


class KotlinExtractor(TreeSitterExtractor):
    """Kotlin single and multi-line strings.

    Only ``string_content`` nodes are read: depending on the grammar build
    the quotes may not be child nodes of the literal.
    """

    def __init__(self) -> None:
        super().__init__("kotlin", frozenset({"string_literal", "multiline_string_literal"}))

    def literal_spans(self, node: Node, source: bytes) -> list[ByteSpan]:
        spans = []
        stack = list(reversed(node.children))
        while stack:
            child = stack.pop()
            if child.type == "string_content":
                spans.extend(literal_content_spans(child))
            elif child.type not in self.literal_types:
                stack.extend(reversed(child.children))
        return spans


def c_family(grammar: str) -> TreeSitterExtractor:
    return TreeSitterExtractor(grammar, frozenset({"string_literal"}), frozenset({"raw_string_literal"}))
