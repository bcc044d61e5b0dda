"""
Lazy view over a node's children (all of them, or only the named ones).
"""

from collections.abc import Iterator
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from codegraph_document.parsing.ast_node import AstNode


class AstNodeArray:
    """
    Ordered children of a parent handle at the parent's version.

    Nothing is materialized up front: each index access asks the engine for
    that child again. The view goes stale together with its parent handle,
    after which ``length`` is None, ``len()`` is 0 and indexing yields None.
    """

    __slots__ = ("_parent", "_named")

    def __init__(self, parent: "AstNode", named: bool = False):
        self._parent = parent
        self._named = named

    @property
    def named(self) -> bool:
        return self._named

    def is_valid(self) -> bool:
        return self._parent.is_valid()

    @property
    def length(self) -> int | None:
        node = self._parent._valid_node()
        if node is None:
            return None
        return node.named_child_count if self._named else node.child_count

    def __len__(self) -> int:
        return self.length or 0

    def __getitem__(self, index):
        node = self._parent._valid_node()
        if node is None:
            return None

        count = node.named_child_count if self._named else node.child_count
        if isinstance(index, slice):
            return [self._child(node, i) for i in range(*index.indices(count))]

        if index < 0:
            index += count
        if not 0 <= index < count:
            raise IndexError("child index out of range")
        return self._child(node, index)

    def _child(self, node, index: int) -> "AstNode | None":
        child = node.named_child(index) if self._named else node.child(index)
        return self._parent._mint(child)

    def __iter__(self) -> Iterator["AstNode"]:
        index = 0
        while True:
            node = self._parent._valid_node()
            if node is None:
                return
            count = node.named_child_count if self._named else node.child_count
            if index >= count:
                return
            yield self._child(node, index)
            index += 1

    def __repr__(self) -> str:
        kind = "named_children" if self._named else "children"
        length = self.length
        return f"AstNodeArray({kind}, {'stale' if length is None else f'length={length}'})"
