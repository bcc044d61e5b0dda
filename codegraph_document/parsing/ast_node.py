"""
AST Node handle

A versioned reference into a document's syntax tree. The document mutates its
tree in place on every edit and reparse, so a handle remembers the document
version it was minted at and checks it on every access. Once the version moves
on, every property answers ``None`` instead of reading shifted or freed data.
"""

import weakref
from typing import TYPE_CHECKING, Any

from tree_sitter import Node as TSNode

from codegraph_document.common.exceptions import ArgumentArityError
from codegraph_document.parsing.ast_node_array import AstNodeArray
from codegraph_document.parsing.models import Point

if TYPE_CHECKING:
    from codegraph_document.parsing.document import Document

# Reported by to_dict() and repr(); the structural properties are not.
ENUMERABLE_PROPERTIES = (
    "start_index",
    "start_position",
    "end_index",
    "end_position",
    "type",
    "is_named",
)


def _range_arguments(args: tuple[Any, ...], convert, what: str) -> tuple[Any, Any]:
    if len(args) == 1:
        value = convert(args[0])
        return value, value
    if len(args) == 2:
        return convert(args[0]), convert(args[1])
    raise ArgumentArityError(f"Must provide 1 or 2 {what}", {"count": len(args)})


def _depth(node: TSNode) -> int:
    depth = 0
    parent = node.parent
    while parent is not None:
        depth += 1
        parent = parent.parent
    return depth


class AstNode:
    """
    Handle to one node of a Document's tree at one version.

    Handles are minted by ``Document.root_node`` and by navigation; they are
    never mutated. Stale handles and missing relations both yield ``None``.
    """

    __slots__ = ("_node", "_document_ref", "_version", "_key", "__weakref__")

    def __init__(self, node: TSNode, document_ref: "weakref.ref[Document]", version: int):
        self._node = node
        self._document_ref = document_ref
        self._version = version
        self._key = (node.start_byte, node.end_byte, node.kind_id)

    @classmethod
    def wrap(cls, node: TSNode | None, document: "Document") -> "AstNode | None":
        """Mint a handle stamped with the document's current version"""
        if node is None:
            return None
        return cls(node, weakref.ref(document), document.version)

    # ============================================================
    # Validity
    # ============================================================

    def _resolve(self) -> "tuple[TSNode, Document] | None":
        document = self._document_ref()
        if document is None or document.version != self._version:
            return None
        return self._node, document

    def _valid_node(self) -> TSNode | None:
        resolved = self._resolve()
        return resolved[0] if resolved else None

    def _mint(self, node: TSNode | None) -> "AstNode | None":
        if node is None:
            return None
        return AstNode(node, self._document_ref, self._version)

    def is_valid(self) -> bool:
        """True while the document has not been edited, invalidated or reparsed since this handle was minted"""
        return self._resolve() is not None

    @property
    def version(self) -> int:
        """Document version this handle was minted at"""
        return self._version

    # ============================================================
    # Enumerable properties
    # ============================================================

    @property
    def start_index(self) -> int | None:
        resolved = self._resolve()
        if resolved is None:
            return None
        node, document = resolved
        return document.codec.to_external(node.start_byte)

    @property
    def end_index(self) -> int | None:
        resolved = self._resolve()
        if resolved is None:
            return None
        node, document = resolved
        return document.codec.to_external(node.end_byte)

    @property
    def start_position(self) -> Point | None:
        resolved = self._resolve()
        if resolved is None:
            return None
        node, document = resolved
        return document.codec.point_to_external(node.start_point)

    @property
    def end_position(self) -> Point | None:
        resolved = self._resolve()
        if resolved is None:
            return None
        node, document = resolved
        return document.codec.point_to_external(node.end_point)

    @property
    def type(self) -> str | None:
        node = self._valid_node()
        return node.type if node is not None else None

    @property
    def is_named(self) -> bool | None:
        node = self._valid_node()
        return node.is_named if node is not None else None

    # ============================================================
    # Structure
    # ============================================================

    @property
    def parent(self) -> "AstNode | None":
        node = self._valid_node()
        return self._mint(node.parent) if node is not None else None

    @property
    def children(self) -> AstNodeArray | None:
        if not self.is_valid():
            return None
        return AstNodeArray(self, named=False)

    @property
    def named_children(self) -> AstNodeArray | None:
        if not self.is_valid():
            return None
        return AstNodeArray(self, named=True)

    @property
    def next_sibling(self) -> "AstNode | None":
        node = self._valid_node()
        return self._mint(node.next_sibling) if node is not None else None

    @property
    def next_named_sibling(self) -> "AstNode | None":
        node = self._valid_node()
        return self._mint(node.next_named_sibling) if node is not None else None

    @property
    def previous_sibling(self) -> "AstNode | None":
        node = self._valid_node()
        return self._mint(node.prev_sibling) if node is not None else None

    @property
    def previous_named_sibling(self) -> "AstNode | None":
        node = self._valid_node()
        return self._mint(node.prev_named_sibling) if node is not None else None

    # ============================================================
    # Descendant queries
    # ============================================================

    def descendant_for_index(self, *args: Any) -> "AstNode | None":
        """
        Find the smallest node spanning an offset range.

        Args:
            *args: ``(index)`` or ``(min, max)`` in external units

        Returns:
            Smallest covering node, or None if this handle is stale

        Raises:
            ArgumentArityError: Neither one nor two indices given
            ArgumentTypeError: An index is not a non-negative number

        ``min > max`` is passed to the engine unchecked; the result is unspecified.
        """
        return self._descendant_for_index(args, named=False)

    def named_descendant_for_index(self, *args: Any) -> "AstNode | None":
        """Like ``descendant_for_index`` but only named nodes qualify"""
        return self._descendant_for_index(args, named=True)

    def descendant_for_position(self, *args: Any) -> "AstNode | None":
        """
        Find the smallest node spanning a row/column range.

        Args:
            *args: ``(point)`` or ``(min, max)``; each a {row, column} object

        Returns:
            Smallest covering node, or None if this handle is stale

        Raises:
            ArgumentArityError: Neither one nor two points given
            ArgumentTypeError: A point is not a {row, column} object of numbers
        """
        return self._descendant_for_position(args, named=False)

    def named_descendant_for_position(self, *args: Any) -> "AstNode | None":
        """Like ``descendant_for_position`` but only named nodes qualify"""
        return self._descendant_for_position(args, named=True)

    def _descendant_for_index(self, args: tuple[Any, ...], named: bool) -> "AstNode | None":
        resolved = self._resolve()
        if resolved is None:
            return None
        node, document = resolved

        start, end = _range_arguments(args, document.codec.index_from_host, "character indices")
        if named:
            return self._mint(node.named_descendant_for_byte_range(start, end))
        return self._mint(node.descendant_for_byte_range(start, end))

    def _descendant_for_position(self, args: tuple[Any, ...], named: bool) -> "AstNode | None":
        resolved = self._resolve()
        if resolved is None:
            return None
        node, document = resolved
        codec = document.codec

        start, end = _range_arguments(args, codec.point_from_host, "points")
        start, end = codec.point_to_internal(start), codec.point_to_internal(end)
        if named:
            return self._mint(node.named_descendant_for_point_range(start, end))
        return self._mint(node.descendant_for_point_range(start, end))

    # ============================================================
    # Rendering
    # ============================================================

    def to_string(self) -> str | None:
        """S-expression rendering of this subtree, or None if stale"""
        node = self._valid_node()
        return str(node) if node is not None else None

    def to_dict(self) -> dict[str, Any] | None:
        """Enumerable properties as a dict, or None if stale"""
        if not self.is_valid():
            return None
        return {name: getattr(self, name) for name in ENUMERABLE_PROPERTIES}

    def __str__(self) -> str:
        return self.to_string() or ""

    def __repr__(self) -> str:
        properties = self.to_dict()
        if properties is None:
            return f"AstNode(stale, version={self._version})"
        fields = ", ".join(f"{name}={value!r}" for name, value in properties.items())
        return f"AstNode({fields})"

    # ============================================================
    # Structural equality
    # ============================================================

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AstNode):
            return NotImplemented
        if self is other:
            return True
        if (
            self._document_ref() is not other._document_ref()
            or self._version != other._version
            or self._key != other._key
        ):
            return False
        # Nested nodes can share a range and kind only at different depths
        return _depth(self._node) == _depth(other._node)

    def __hash__(self) -> int:
        return hash((id(self._document_ref()), self._version, self._key))
