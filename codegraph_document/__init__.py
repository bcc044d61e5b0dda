"""
CodeGraph Document

Stable-feeling references into a tree-sitter tree that is edited and
reparsed in place. Node handles carry the document version they were
minted at and answer None once the tree has moved on.
"""

__version__ = "0.1.0"

from codegraph_document.common.exceptions import (
    ArgumentArityError,
    ArgumentTypeError,
    DocumentClosedError,
    DocumentError,
    InvalidLanguageError,
)
from codegraph_document.parsing import (
    AstNode,
    AstNodeArray,
    Document,
    InputEdit,
    Point,
    PositionCodec,
    SourceText,
)

__all__ = [
    "Document",
    "AstNode",
    "AstNodeArray",
    "Point",
    "InputEdit",
    "PositionCodec",
    "SourceText",
    "DocumentError",
    "ArgumentTypeError",
    "ArgumentArityError",
    "InvalidLanguageError",
    "DocumentClosedError",
]
