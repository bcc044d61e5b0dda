"""
Parsing Layer

Versioned handles into an incrementally reparsed tree-sitter tree.

Components:
- document: Tree lifecycle (edit / parse / invalidate) and root handle
- ast_node: Versioned node handle and navigation
- ast_node_array: Lazy children views
- position: External unit <-> byte offset codec
- input_reader / trace_logger: Adapters for host callbacks
- source_text: Ready-made in-memory input source
- language_registry: Grammar lookup by name
"""

from codegraph_document.parsing.ast_node import AstNode
from codegraph_document.parsing.ast_node_array import AstNodeArray
from codegraph_document.parsing.document import Document
from codegraph_document.parsing.input_reader import InputReader, InputSource
from codegraph_document.parsing.language_registry import LanguageRegistry, get_registry
from codegraph_document.parsing.models import InputEdit, Point
from codegraph_document.parsing.position import PositionCodec
from codegraph_document.parsing.source_text import SourceText
from codegraph_document.parsing.trace_logger import TraceLogger

__all__ = [
    "Document",
    "AstNode",
    "AstNodeArray",
    "Point",
    "InputEdit",
    "PositionCodec",
    "InputReader",
    "InputSource",
    "TraceLogger",
    "SourceText",
    "LanguageRegistry",
    "get_registry",
]
