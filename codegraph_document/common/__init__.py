"""
Cross-cutting concerns shared by every layer (errors, logging).
"""

from codegraph_document.common.exceptions import (
    ArgumentArityError,
    ArgumentTypeError,
    DocumentClosedError,
    DocumentError,
    InvalidLanguageError,
)
from codegraph_document.common.observability import LogPerformance, configure_logging, get_logger

__all__ = [
    "DocumentError",
    "ArgumentTypeError",
    "ArgumentArityError",
    "InvalidLanguageError",
    "DocumentClosedError",
    "configure_logging",
    "get_logger",
    "LogPerformance",
]
