"""Markdown prose extraction.

Markdown is parsed twice: the block grammar gives the document structure
(paragraphs, headings, code blocks, block quotes) and every ``inline`` node
it contains is parsed again with the inline grammar to find code spans,
images and link targets. All of those non-prose regions go into a
:class:`RangeExclusionMap`, and each inline node is emitted clipped against
it, so exclusions nested at any depth are honored.
"""

import logging

from orthotypo.core.exclusions import RangeExclusionMap
from orthotypo.core.extractors.base import parse_source
from orthotypo.core.ports.extractor import ExtractedProse
from orthotypo.core.tree import preorder
from orthotypo.models import ByteSpan, ProseKind, ProseRange

logger = logging.getLogger(__name__)

# Block quotes hold quoted material, outside of the author's typographic control
_EXCLUDED_BLOCK_TYPES = frozenset(
    {
        "block_quote",
        "fenced_code_block",
        "indented_code_block",
        "html_block",
        "link_reference_definition",
        "minus_metadata",
        "plus_metadata",
    }
)

_EXCLUDED_INLINE_TYPES = frozenset(
    {
        "code_span",
        "image",
        "link_destination",
        "link_title",
        "uri_autolink",
        "email_autolink",
        "html_tag",
        "latex_block",
    }
)


class MarkdownExtractor:
    def __init__(self, block_grammar: str = "markdown", inline_grammar: str = "markdown_inline") -> None:
        self.block_grammar = block_grammar
        self.inline_grammar = inline_grammar

    def extract(self, source: bytes) -> ExtractedProse:
        block_tree = parse_source(self.block_grammar, source)
        exclusions = RangeExclusionMap()
        inlines: list[ByteSpan] = []

        for node in preorder(block_tree.root_node, prune=lambda n: n.type in _EXCLUDED_BLOCK_TYPES):
            if node.type in _EXCLUDED_BLOCK_TYPES:
                exclusions.insert(ByteSpan(start=node.start_byte, end=node.end_byte))
            elif node.type == "inline":
                inlines.append(ByteSpan(start=node.start_byte, end=node.end_byte))

        for inline in inlines:
            if exclusions.overlaps(inline) and not exclusions.clip(inline):
                continue
            self._exclude_inline_syntax(source, inline, exclusions)

        ranges = tuple(
            ProseRange(span=piece, kind=ProseKind.MARKDOWN_PROSE)
            for inline in inlines
            for piece in exclusions.clip(inline)
        )
        logger.debug("Found %d prose ranges and %d excluded regions", len(ranges), len(exclusions))
        return ExtractedProse(ranges=ranges, exclusions=exclusions)

    def _exclude_inline_syntax(self, source: bytes, inline: ByteSpan, exclusions: RangeExclusionMap) -> None:
        text = source[inline.start : inline.end]
        tree = parse_source(self.inline_grammar, text)
        for node in preorder(tree.root_node, prune=lambda n: n.type in _EXCLUDED_INLINE_TYPES):
            if node.type in _EXCLUDED_INLINE_TYPES:
                exclusions.insert(ByteSpan(start=node.start_byte, end=node.end_byte).shift(inline.start))
