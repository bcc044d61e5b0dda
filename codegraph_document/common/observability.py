"""
Structured Logging with structlog

Logging is configured lazily on the first ``get_logger`` call, using the
level and format from ``DocumentSettings``.
"""

import logging
import sys
import time
from typing import Any

import structlog

_INITIALIZED = False


def configure_logging(level: str | None = None, format: str | None = None) -> None:
    """
    Configure structlog on top of stdlib logging.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR); settings default if None
        format: "json" for machine-readable output, "console" for development
    """
    global _INITIALIZED

    if level is None or format is None:
        from codegraph_document.config import get_settings

        settings = get_settings()
        level = level or settings.log_level
        format = format or settings.log_format

    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
    )
    logging.getLogger("codegraph_document").setLevel(numeric_level)

    processors: list[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    _INITIALIZED = True


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """
    Get a structured logger instance.

    Args:
        name: Logger name (usually __name__ from calling module)

    Returns:
        Structured logger instance

    Example:
        ```python
        logger = get_logger(__name__)
        logger.debug("document_edit", position=3, chars_inserted=1)
        ```
    """
    if not _INITIALIZED:
        configure_logging()
    return structlog.get_logger(name)


def log_performance(
    logger: structlog.stdlib.BoundLogger,
    operation: str,
    duration_ms: float,
    **extra: Any,
) -> None:
    """
    Log the duration of an operation.

    Parsing happens on every keystroke in an editor, so normal timings go to
    DEBUG and only slow ones surface as warnings.
    """
    perf_data = {
        "operation": operation,
        "duration_ms": round(duration_ms, 2),
        **extra,
    }

    if duration_ms > 1000:
        perf_data["slow"] = True
        logger.warning("slow_operation", **perf_data)
    else:
        logger.debug("operation_complete", **perf_data)


class LogPerformance:
    """
    Context manager for automatic performance logging.

    Example:
        ```python
        with LogPerformance(logger, "document_parse", incremental=True):
            tree = parser.parse(read, old_tree)
        ```
    """

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger,
        operation: str,
        **extra: Any,
    ):
        self.logger = logger
        self.operation = operation
        self.extra = extra
        self.start_time = 0.0

    def __enter__(self):
        self.start_time = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, _exc_tb):
        duration_ms = (time.perf_counter() - self.start_time) * 1000

        if exc_type is not None:
            self.logger.error(
                f"{self.operation}_failed",
                error_type=exc_type.__name__,
                error_message=str(exc_val),
                duration_ms=round(duration_ms, 2),
                **self.extra,
            )
        else:
            log_performance(self.logger, self.operation, duration_ms, **self.extra)

        # Don't suppress exceptions
        return False
