"""
Source Text

In-memory pull source for a Document. Serves fixed-size chunks of
engine-encoded bytes and keeps edits and their InputEdit in step.
"""

from pathlib import Path

from codegraph_document.parsing.models import InputEdit
from codegraph_document.parsing.position import PositionCodec


class SourceText:
    """
    Editable text exposing ``seek``/``read`` in external units.

    Attributes:
        codec: Unit width the offsets are expressed in
        chunk_size: External units returned per read
    """

    def __init__(self, content: str = "", codec: PositionCodec | None = None, chunk_size: int | None = None):
        if chunk_size is None:
            from codegraph_document.config import get_settings

            chunk_size = get_settings().source_chunk_size
        if chunk_size < 1:
            raise ValueError(f"chunk_size must be positive: {chunk_size}")

        self.codec = codec or PositionCodec()
        self.chunk_size = chunk_size
        self._data = self.codec.encode(content)
        self._cursor = 0
        self.seeks = 0
        self.reads = 0

    @classmethod
    def from_content(cls, content: str, codec: PositionCodec | None = None, chunk_size: int | None = None) -> "SourceText":
        return cls(content, codec=codec, chunk_size=chunk_size)

    @classmethod
    def from_file(
        cls,
        file_path: str | Path,
        encoding: str = "utf-8",
        codec: PositionCodec | None = None,
        chunk_size: int | None = None,
    ) -> "SourceText":
        """
        Load source text from disk.

        Args:
            file_path: Path to file
            encoding: File encoding
            codec: Unit width for offsets
            chunk_size: External units per read

        Returns:
            SourceText instance
        """
        content = Path(file_path).read_text(encoding=encoding)
        return cls(content, codec=codec, chunk_size=chunk_size)

    # ============================================================
    # InputSource protocol
    # ============================================================

    def seek(self, offset: int) -> None:
        self.seeks += 1
        self._cursor = self.codec.to_internal(offset)

    def read(self, offset: int) -> bytes:
        self.reads += 1
        start = self._cursor
        end = start + self.codec.to_internal(self.chunk_size)
        self._cursor = min(end, len(self._data))
        return self._data[start:end]

    # ============================================================
    # Content
    # ============================================================

    @property
    def content(self) -> str:
        return self.codec.decode(self._data)

    def __len__(self) -> int:
        """Length in external units"""
        return self.codec.to_external(len(self._data))

    def splice(self, position: int, chars_removed: int, text: str) -> InputEdit:
        """
        Replace a range of the text.

        Args:
            position: Start offset (external units)
            chars_removed: Units to remove
            text: Replacement text

        Returns:
            The InputEdit describing the change, ready for ``Document.edit``
        """
        if position < 0 or chars_removed < 0 or position + chars_removed > len(self):
            raise ValueError(f"Range out of bounds: {position}+{chars_removed} (length {len(self)})")

        inserted = self.codec.encode(text)
        start = self.codec.to_internal(position)
        end = self.codec.to_internal(position + chars_removed)
        self._data = self._data[:start] + inserted + self._data[end:]
        return InputEdit(
            position=position,
            chars_removed=chars_removed,
            chars_inserted=self.codec.to_external(len(inserted)),
        )

    def __repr__(self) -> str:
        return f"SourceText(length={len(self)}, chunk_size={self.chunk_size})"
