"""
Value types that cross the host boundary.
"""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Point:
    """
    Row/column location (immutable, zero-based).

    Attributes:
        row: Line number (0-indexed)
        column: Column in external units (0-indexed)
    """

    row: int
    column: int

    def __iter__(self):
        yield self.row
        yield self.column


@dataclass(frozen=True, slots=True)
class InputEdit:
    """
    A pending text modification, in external units.

    The optional positions let callers that already track rows and columns
    hand them over; otherwise the document derives them from its input.

    Attributes:
        position: Offset where the change starts
        chars_removed: Units removed from the old text
        chars_inserted: Units inserted into the new text
    """

    position: int
    chars_removed: int = 0
    chars_inserted: int = 0
    start_position: Point | None = None
    old_end_position: Point | None = None
    new_end_position: Point | None = None

    @property
    def old_end(self) -> int:
        """End offset of the replaced text"""
        return self.position + self.chars_removed

    @property
    def new_end(self) -> int:
        """End offset of the inserted text"""
        return self.position + self.chars_inserted
