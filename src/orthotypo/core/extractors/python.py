from collections.abc import Callable, Iterator

from tree_sitter import Node, Tree

from orthotypo.core.extractors.base import TreeSitterExtractor, literal_content_spans
from orthotypo.core.tree import preorder
from orthotypo.models import ProseKind, ProseRange

_STRING_TYPES = frozenset({"string", "concatenated_string"})
_DEFINITION_TYPES = frozenset({"function_definition", "class_definition"})


def _first_statement(body: Node | None) -> Node | None:
    if body is None:
        return None
    for child in body.named_children:
        if child.type != "comment":
            return child
    return None


def _as_docstring(statement: Node | None) -> Node | None:
    # Newer grammar builds put a bare string directly in the block
    if statement is not None and statement.type in _STRING_TYPES:
        return statement
    if statement is None or statement.type != "expression_statement":
        return None
    children = statement.named_children
    if len(children) == 1 and children[0].type in _STRING_TYPES:
        return children[0]
    return None


def find_docstrings(root: Node) -> list[Node]:
    """Leading bare string expressions of the module, functions and classes."""
    docstrings = []
    module_docstring = _as_docstring(_first_statement(root))
    if module_docstring is not None:
        docstrings.append(module_docstring)
    for node in preorder(root):
        if node.type in _DEFINITION_TYPES:
            docstring = _as_docstring(_first_statement(node.child_by_field_name("body")))
            if docstring is not None:
                docstrings.append(docstring)
    return docstrings


def _is_raw(node: Node, source: bytes) -> bool:
    if node.type != "string":
        return False
    start = node.children[0] if node.children else None
    if start is None or start.type != "string_start":
        return False
    return b"r" in source[start.start_byte : start.end_byte].lower()


class PythonExtractor(TreeSitterExtractor):
    """Python string literals, minus raw strings and docstrings.

    Docstrings follow their own conventions and are skipped unless
    ``include_docstrings`` is set, in which case they are reported as
    documentation text.
    """

    def __init__(self, include_docstrings: bool = False) -> None:
        super().__init__("python", frozenset({"string"}))
        self.include_docstrings = include_docstrings

    def skip_predicate(self, tree: Tree, source: bytes) -> Callable[[Node], bool]:
        docstrings = {(node.start_byte, node.end_byte) for node in find_docstrings(tree.root_node)}

        def skip(node: Node) -> bool:
            if node.type in _STRING_TYPES and (node.start_byte, node.end_byte) in docstrings:
                return True
            return _is_raw(node, source)

        return skip

    def _ranges(self, tree: Tree, source: bytes) -> Iterator[ProseRange]:
        yield from super()._ranges(tree, source)
        if not self.include_docstrings:
            return
        for docstring in find_docstrings(tree.root_node):
            strings = [docstring] if docstring.type == "string" else docstring.named_children
            for string in strings:
                if string.type != "string" or _is_raw(string, source):
                    continue
                for span in literal_content_spans(string):
                    yield ProseRange(span=span, kind=ProseKind.DOC_COMMENT)
