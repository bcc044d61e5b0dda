"""
Document

Owns a tree-sitter tree that is edited and reparsed in place, plus the input
and logger adapters plugged into the parser. Every edit, invalidation and
reparse bumps ``version``; node handles compare their captured version
against it to detect that the tree moved underneath them.

Usage:
    source = SourceText.from_content("a + b")
    document = Document().set_language("python").set_input(source).parse()
    root = document.root_node

    edit = source.splice(4, 1, "c")
    document.edit(edit).parse()
    assert not root.is_valid()
"""

import os
import sys
from collections.abc import Mapping
from typing import IO, Any

from tree_sitter import Language, Parser, Tree

from codegraph_document.common.exceptions import ArgumentTypeError, DocumentClosedError, InvalidLanguageError
from codegraph_document.common.observability import LogPerformance, get_logger
from codegraph_document.parsing.ast_node import AstNode
from codegraph_document.parsing.input_reader import InputReader, InputSource
from codegraph_document.parsing.language_registry import get_registry
from codegraph_document.parsing.models import InputEdit
from codegraph_document.parsing.position import PositionCodec
from codegraph_document.parsing.trace_logger import TraceCallback, TraceLogger

logger = get_logger(__name__)

EDIT_FIELDS = (
    ("position", "position"),
    ("chars_removed", "charsRemoved"),
    ("chars_inserted", "charsInserted"),
)


class _EngineDescriptor:
    """A duplicated descriptor whose ownership passes to the engine, which closes it when tracing stops"""

    __slots__ = ("_fd",)

    def __init__(self, fd: int):
        self._fd = fd

    def fileno(self) -> int:
        return self._fd


class Document:
    """
    Incrementally reparsed syntax tree with versioned node handles.

    Single-threaded: every call runs to completion on the calling thread.
    Input and logger callbacks run nested inside ``parse()`` and must not
    call ``parse()`` on the same document.
    """

    def __init__(self, unit_width: int | None = None):
        """
        Create an empty document (no language, no input, version 0).

        Args:
            unit_width: Bytes per external text unit (settings default if None)
        """
        self.codec = PositionCodec(unit_width)
        self._parser = Parser()
        self._tree: Tree | None = None
        self._language: Language | None = None
        self._input: InputReader | None = None
        self._logger: TraceLogger | None = None
        self._version = 0
        self._needs_parse = True
        self._reusable = False
        self._closed = False

    # ============================================================
    # Introspection
    # ============================================================

    @property
    def version(self) -> int:
        return self._version

    @property
    def language(self) -> Language | None:
        return self._language

    @property
    def input(self) -> InputSource | None:
        """The installed host source, or None"""
        return self._input.source if self._input is not None else None

    @property
    def logger(self) -> TraceCallback | None:
        """The installed host trace callback, or None"""
        return self._logger.callback if self._logger is not None else None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def root_node(self) -> AstNode | None:
        """Root of the current tree, or None before the first successful parse"""
        if self._tree is None:
            return None
        return AstNode.wrap(self._tree.root_node, self)

    def _ensure_open(self) -> None:
        if self._closed:
            raise DocumentClosedError("Document is closed")

    # ============================================================
    # Configuration
    # ============================================================

    def set_language(self, language: Any) -> "Document":
        """
        Install a grammar.

        Args:
            language: tree_sitter.Language, a grammar capsule from
                ``tree_sitter_<lang>.language()``, or a registered language name

        Raises:
            InvalidLanguageError: Handle carries no usable grammar
            ArgumentTypeError: Handle is not a language object
        """
        self._ensure_open()
        resolved = self._resolve_language(language)
        try:
            self._parser.language = resolved
        except ValueError as e:
            raise InvalidLanguageError(f"Incompatible language: {e}") from e

        self._language = resolved
        self._needs_parse = True
        self._reusable = False
        logger.debug("language_set", language=getattr(resolved, "name", None))
        return self

    @staticmethod
    def _resolve_language(language: Any) -> Language:
        if language is None:
            raise InvalidLanguageError("Invalid language object (null)")
        if isinstance(language, Language):
            return language
        if isinstance(language, str):
            resolved = get_registry().get_language(language)
            if resolved is None:
                raise InvalidLanguageError(f"Language not supported: {language}", {"language": language})
            return resolved
        if type(language).__name__ == "PyCapsule":
            try:
                return Language(language)
            except (TypeError, ValueError) as e:
                raise InvalidLanguageError(f"Invalid language object: {e}") from e
        raise ArgumentTypeError("Invalid language object", {"type": type(language).__name__})

    def set_input(self, source: InputSource | None) -> "Document":
        """
        Install a pull source, or reset to empty input when source is falsy.

        The previous adapter is disposed only after the new one is installed.
        The current tree is untouched until the next ``parse()``, which
        reparses from scratch.

        Raises:
            ArgumentTypeError: source lacks callable ``seek`` and ``read``
        """
        self._ensure_open()
        reader = None
        if source is not None and source is not False:
            if not callable(getattr(source, "seek", None)):
                raise ArgumentTypeError("Input must implement seek(n)", {"type": type(source).__name__})
            if not callable(getattr(source, "read", None)):
                raise ArgumentTypeError("Input must implement read(n)", {"type": type(source).__name__})
            reader = InputReader(source, self.codec)

        previous, self._input = self._input, reader
        self._needs_parse = True
        self._reusable = False
        if previous is not None:
            previous.dispose()

        logger.debug("input_replaced", source=type(source).__name__ if reader else None)
        return self

    def set_logger(self, callback: TraceCallback | None) -> "Document":
        """
        Install a trace callback ``callback(name, params, category)``, or
        remove logging when callback is falsy.

        Raises:
            ArgumentTypeError: callback is neither callable nor falsy
        """
        self._ensure_open()
        if callback and not callable(callback):
            raise ArgumentTypeError(
                "Debug callback must either be a function or a falsy value",
                {"type": type(callback).__name__},
            )

        if self._logger is not None:
            self._logger.dispose()
            self._logger = None

        if callback:
            self._logger = TraceLogger(callback)
            self._parser.logger = self._logger
        else:
            self._parser.logger = None
        return self

    def set_debug_graphs(self, enabled: bool, file: IO[str] | None = None) -> "Document":
        """
        Toggle the engine's DOT graph output of each parse step.

        Args:
            enabled: Anything other than a real bool is ignored
            file: Destination with a file descriptor (stderr by default); the
                engine writes to its own duplicate, so the caller keeps ownership
        """
        self._ensure_open()
        if not isinstance(enabled, bool):
            return self
        if enabled:
            target = file or sys.stderr
            self._parser.print_dot_graphs(_EngineDescriptor(os.dup(target.fileno())))
        else:
            self._parser.print_dot_graphs(None)
        return self

    # ============================================================
    # Lifecycle
    # ============================================================

    def edit(self, descriptor: InputEdit | Mapping[str, Any]) -> "Document":
        """
        Record a text change made to the input since the last parse.

        Bumps the version right away: byte offsets after the edit point are
        no longer trustworthy even before the reparse.

        Args:
            descriptor: InputEdit, or a mapping with position/charsRemoved/charsInserted

        Raises:
            ArgumentTypeError: descriptor is malformed
        """
        self._ensure_open()
        edit = self._edit_from_host(descriptor)
        codec = self.codec

        start_byte = codec.to_internal(edit.position)
        old_end_byte = codec.to_internal(edit.old_end)
        new_end_byte = codec.to_internal(edit.new_end)

        if self._tree is not None:
            start_point, old_end_point, new_end_point = self._edit_points(edit)
            self._tree.edit(
                start_byte=start_byte,
                old_end_byte=old_end_byte,
                new_end_byte=new_end_byte,
                start_point=start_point,
                old_end_point=old_end_point,
                new_end_point=new_end_point,
            )

        self._version += 1
        self._needs_parse = True
        logger.debug(
            "document_edit",
            position=edit.position,
            chars_removed=edit.chars_removed,
            chars_inserted=edit.chars_inserted,
            version=self._version,
        )
        return self

    def _edit_from_host(self, descriptor: Any) -> InputEdit:
        if isinstance(descriptor, InputEdit):
            values = [descriptor.position, descriptor.chars_removed, descriptor.chars_inserted]
            positions = [descriptor.start_position, descriptor.old_end_position, descriptor.new_end_position]
        elif isinstance(descriptor, Mapping):
            values = [descriptor.get(snake, descriptor.get(camel, 0)) for snake, camel in EDIT_FIELDS]
            positions = [
                descriptor.get(snake, descriptor.get(camel))
                for snake, camel in (
                    ("start_position", "startPosition"),
                    ("old_end_position", "oldEndPosition"),
                    ("new_end_position", "newEndPosition"),
                )
            ]
        else:
            raise ArgumentTypeError("Edit must be an InputEdit or a mapping", {"type": type(descriptor).__name__})

        codec = self.codec
        position, removed, inserted = (
            codec.to_external(codec.index_from_host(value, name)) for value, (name, _) in zip(values, EDIT_FIELDS)
        )
        start_position, old_end_position, new_end_position = (
            codec.point_from_host(point) if point is not None else None for point in positions
        )
        return InputEdit(position, removed, inserted, start_position, old_end_position, new_end_position)

    def _edit_points(self, edit: InputEdit) -> tuple[tuple[int, int], tuple[int, int], tuple[int, int]]:
        """Row/byte-column points for an edit, derived from the input when not given"""
        codec = self.codec

        if edit.start_position is not None:
            start = codec.point_to_internal(edit.start_position)
        elif self._input is not None:
            start = tuple(self._input.point_at(edit.position))
        else:
            start = (0, codec.to_internal(edit.position))

        if edit.new_end_position is not None:
            new_end = codec.point_to_internal(edit.new_end_position)
        elif self._input is not None:
            new_end = tuple(self._input.point_at(edit.new_end))
        else:
            new_end = (start[0], start[1] + codec.to_internal(edit.chars_inserted))

        if edit.old_end_position is not None:
            old_end = codec.point_to_internal(edit.old_end_position)
        else:
            # The removed text is gone from the input; assume it held no newline
            old_end = (start[0], start[1] + codec.to_internal(edit.chars_removed))

        return start, old_end, new_end

    def parse(self) -> "Document":
        """
        Bring the tree up to date with the input.

        Reuses unaffected subtrees when only edits were recorded; reparses from
        scratch after ``invalidate()``, ``set_input()`` or ``set_language()``.
        Does nothing when the tree is already current.

        Raises:
            Exception: Whatever the host input source raised while being read;
                the partial tree is discarded
            DocumentClosedError: The document was closed
        """
        self._ensure_open()
        if self._language is None:
            logger.warning("document_parse_skipped", reason="no_language")
            return self
        if self._tree is not None and not self._needs_parse:
            return self

        old_tree = self._tree if self._reusable else None
        # The engine rejects an explicit old_tree=None
        reuse = {"old_tree": old_tree} if old_tree is not None else {}
        source = self._input if self._input is not None else b""
        if self._input is not None:
            self._input.rewind()

        with LogPerformance(logger, "document_parse", incremental=old_tree is not None, version=self._version):
            tree = self._parser.parse(source, encoding=self.codec.engine_encoding, **reuse)
            error = self._input.take_error() if self._input is not None else None
            if error is not None:
                raise error

        self._tree = tree
        self._version += 1
        self._needs_parse = False
        self._reusable = True
        return self

    def invalidate(self) -> "Document":
        """Force the next parse() to start from scratch. Bumps the version."""
        self._ensure_open()
        self._reusable = False
        self._needs_parse = True
        self._version += 1
        return self

    def close(self) -> None:
        """
        Release the tree and dispose the installed adapters. Idempotent.

        Every later call that would change the document raises
        DocumentClosedError; read-only properties keep answering.
        """
        if self._closed:
            return
        self._closed = True

        if self._input is not None:
            self._input.dispose()
            self._input = None
        if self._logger is not None:
            self._logger.dispose()
            self._logger = None
            self._parser.logger = None
        self._parser.print_dot_graphs(None)

        self._tree = None
        self._version += 1

    def __enter__(self) -> "Document":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False

    def __repr__(self) -> str:
        language = getattr(self._language, "name", None)
        return f"Document(language={language!r}, version={self._version}, parsed={self._tree is not None})"
