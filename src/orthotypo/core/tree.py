from collections.abc import Callable, Iterator

from tree_sitter import Node


def preorder(root: Node, prune: Callable[[Node], bool] | None = None) -> Iterator[Node]:
    """Depth-first, left-to-right walk below ``root`` (included).

    Nodes for which ``prune`` returns true are yielded but their children
    are not visited.
    """
    cursor = root.walk()
    while True:
        node = cursor.node
        assert node is not None
        yield node
        if (prune is None or not prune(node)) and cursor.goto_first_child():
            continue
        while not cursor.goto_next_sibling():
            if not cursor.goto_parent():
                return
