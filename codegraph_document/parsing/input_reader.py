"""
Input Adapter

Bridges a host pull source (``seek(offset)``, ``read(offset)``) to the read
callback the parsing engine streams text through. The host keeps ownership of
the text; the adapter only holds a reference to the source while installed.
"""

from typing import Any, Protocol, runtime_checkable

from codegraph_document.common.observability import get_logger
from codegraph_document.parsing.models import Point
from codegraph_document.parsing.position import PositionCodec

logger = get_logger(__name__)


@runtime_checkable
class InputSource(Protocol):
    """Host-supplied pull source, addressed in external units"""

    def seek(self, offset: int) -> None: ...

    def read(self, offset: int) -> str | bytes | None: ...


class InputReader:
    """
    Read callback handed to ``Parser.parse``.

    The engine calls the reader with a byte offset (and a point, which is
    ignored). Chunks may be any length; ``None``, ``""`` or ``b""`` ends the
    input. ``str`` chunks are encoded with the codec's text encoding, bytes
    chunks are passed through as-is.

    Host exceptions cannot cross the engine, so they are held until
    ``take_error`` is called after the parse returns.
    """

    def __init__(self, source: InputSource, codec: PositionCodec):
        self.source: InputSource | None = source
        self.codec = codec
        self._position: int | None = None
        self._error: BaseException | None = None
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __call__(self, byte_offset: int, _point: Any = None) -> bytes:
        if self.source is None or self._error is not None:
            return b""

        offset = self.codec.to_external(byte_offset)
        try:
            if offset != self._position:
                self.source.seek(offset)
            chunk = self.source.read(offset)
        except Exception as e:
            logger.warning("input_read_failed", offset=offset, error_type=type(e).__name__, error=str(e))
            self._error = e
            return b""

        if not chunk:
            self._position = offset
            return b""

        data = self.codec.encode(chunk) if isinstance(chunk, str) else bytes(chunk)
        self._position = offset + self.codec.to_external(len(data))
        return data

    def take_error(self) -> BaseException | None:
        """Return and clear the host error captured during the last parse"""
        error, self._error = self._error, None
        return error

    def rewind(self) -> None:
        """Forget the read position so the next engine read seeks first"""
        self._position = None

    def point_at(self, offset: int) -> Point:
        """
        Find the row and byte column of an external offset by scanning the source.

        Used to fill in the row/column part of an edit when the caller gives
        only offsets. Returns an engine point: the column is in bytes.
        """
        row = 0
        column = 0
        consumed = 0

        if self.source is None:
            return Point(0, 0)

        self.source.seek(0)
        self._position = 0
        while consumed < offset:
            chunk = self.source.read(consumed)
            if not chunk:
                break

            data = self.codec.encode(chunk) if isinstance(chunk, str) else bytes(chunk)
            data = data[: self.codec.to_internal(offset - consumed)]
            consumed += self.codec.to_external(len(data))

            text = self.codec.decode(data)
            newline = text.rfind("\n")
            if newline >= 0:
                row += text.count("\n")
                column = len(data) - len(self.codec.encode(text[: newline + 1]))
            else:
                column += len(data)

        self._position = None
        return Point(row, column)

    def dispose(self) -> None:
        """Release the host source. Safe to call once; later calls are ignored."""
        if self._disposed:
            return
        self._disposed = True
        logger.debug("input_disposed", source=type(self.source).__name__)
        self.source = None
        self._position = None

    def __repr__(self) -> str:
        state = "disposed" if self._disposed else type(self.source).__name__
        return f"InputReader({state}, {self.codec!r})"
