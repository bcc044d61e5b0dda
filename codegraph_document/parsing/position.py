"""
Position Codec

Converts between the external text units callers see and the byte offsets the
parsing engine works in. The two are related by a fixed unit width::

    internal = external * unit_width
    external = internal // unit_width

Width 2 pairs with UTF-16 (little-endian) text, width 1 with UTF-8.
"""

from collections.abc import Mapping
from numbers import Real
from typing import Any

from codegraph_document.common.exceptions import ArgumentTypeError
from codegraph_document.parsing.models import Point

ENCODINGS = {
    1: ("utf8", "utf-8"),
    2: ("utf16", "utf-16-le"),
}


def _is_number(value: Any) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool)


class PositionCodec:
    """
    Stateless offset and point converter for one unit width.

    Thread-Safety: Safe (immutable after construction)
    """

    __slots__ = ("unit_width", "engine_encoding", "text_encoding")

    def __init__(self, unit_width: int | None = None):
        """
        Initialize codec.

        Args:
            unit_width: Bytes per external unit (settings default if None)
        """
        if unit_width is None:
            from codegraph_document.config import get_settings

            unit_width = get_settings().unit_width

        if unit_width not in ENCODINGS:
            raise ValueError(f"Unsupported unit width: {unit_width} (expected one of {sorted(ENCODINGS)})")

        self.unit_width = unit_width
        self.engine_encoding, self.text_encoding = ENCODINGS[unit_width]

    # ============================================================
    # Offsets
    # ============================================================

    def to_internal(self, external: int) -> int:
        return external * self.unit_width

    def to_external(self, internal: int) -> int:
        return internal // self.unit_width

    def index_from_host(self, value: Any, name: str = "Character index") -> int:
        """
        Validate a caller-supplied offset and convert it to bytes.

        Raises:
            ArgumentTypeError: If value is not a non-negative number
        """
        if not _is_number(value):
            raise ArgumentTypeError(f"{name} must be a number", {"value": repr(value)})
        if value < 0:
            raise ArgumentTypeError(f"{name} must not be negative", {"value": value})
        return self.to_internal(int(value))

    # ============================================================
    # Points
    # ============================================================

    def point_to_internal(self, point: Point) -> tuple[int, int]:
        return (point.row, self.to_internal(point.column))

    def point_to_external(self, point: Any) -> Point:
        """Convert an engine (row, byte column) pair into a host Point"""
        row, column = point
        return Point(row, self.to_external(column))

    def point_from_host(self, value: Any) -> Point:
        """
        Validate a caller-supplied point.

        Accepts Point, anything with numeric ``row``/``column`` attributes, or a
        mapping with ``row``/``column`` keys.

        Raises:
            ArgumentTypeError: If value is not a {row, column} object
        """
        if isinstance(value, Point):
            row, column = value.row, value.column
        elif isinstance(value, Mapping):
            row, column = value.get("row"), value.get("column")
        elif hasattr(value, "row") and hasattr(value, "column"):
            row, column = value.row, value.column
        else:
            raise ArgumentTypeError("Point must be a {row, column} object", {"value": repr(value)})

        if not _is_number(row) or not _is_number(column):
            raise ArgumentTypeError("Point row and column must be numbers", {"row": row, "column": column})
        if row < 0 or column < 0:
            raise ArgumentTypeError("Point row and column must not be negative", {"row": row, "column": column})
        return Point(int(row), int(column))

    # ============================================================
    # Text
    # ============================================================

    def encode(self, text: str) -> bytes:
        return text.encode(self.text_encoding, errors="surrogatepass")

    def decode(self, data: bytes) -> str:
        # A chunk may end inside a multi-byte UTF-8 sequence
        errors = "surrogatepass" if self.unit_width == 2 else "ignore"
        return bytes(data).decode(self.text_encoding, errors=errors)

    def unit_length(self, text: str) -> int:
        """Length of text in external units"""
        return self.to_external(len(self.encode(text)))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PositionCodec):
            return NotImplemented
        return self.unit_width == other.unit_width

    def __hash__(self) -> int:
        return hash(self.unit_width)

    def __repr__(self) -> str:
        return f"PositionCodec(unit_width={self.unit_width})"
