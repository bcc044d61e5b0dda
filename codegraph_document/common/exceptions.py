"""
Document Exception Hierarchy

Hard failures are reserved for programmer mistakes (wrong argument types,
wrong arity, unusable grammar handles). A stale node handle is not an error:
it degrades to ``None``.

Example:
    try:
        document.set_language(handle)
    except InvalidLanguageError as e:
        logger.warning("language_rejected", error=str(e))
"""

from typing import Any


class DocumentError(Exception):
    """Base exception for all document binding errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        """
        Initialize document error.

        Args:
            message: Human-readable error message
            details: Optional additional details for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} (details: {self.details})"
        return self.message


class ArgumentTypeError(DocumentError, TypeError):
    """A parameter has the wrong type (non-numeric offset, malformed point, bad input source)."""

    pass


class ArgumentArityError(DocumentError, TypeError):
    """A range query received neither one nor two arguments."""

    pass


class InvalidLanguageError(DocumentError, ValueError):
    """A language handle carries no usable grammar."""

    pass


class DocumentClosedError(DocumentError, RuntimeError):
    """A document was used after ``close()``."""

    pass
