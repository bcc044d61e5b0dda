"""
Logger Adapter

Forwards the engine's trace messages to a host callback as
``callback(name, params, category)``.

Engine messages look like ``"lex_internal state:3, row:0, column:4"``; the
first word is the event name and the rest are ``key:value`` pairs.
"""

from collections.abc import Callable
from typing import Any

from tree_sitter import LogType

from codegraph_document.common.observability import get_logger

logger = get_logger(__name__)

TraceCallback = Callable[[str, dict[str, str], str], Any]

CATEGORIES = {
    LogType.PARSE: "parse",
    LogType.LEX: "lex",
}


def parse_trace_message(message: str) -> tuple[str, dict[str, str]]:
    """
    Split an engine trace message into event name and parameters.

    Args:
        message: Raw engine message

    Returns:
        (name, params) where params maps keys to raw string values
    """
    name, sep, rest = message.partition(" ")
    params: dict[str, str] = {}
    if not sep:
        return name, params

    for pair in rest.split(", "):
        key, colon, value = pair.partition(":")
        if not colon:
            break
        params[key] = value
    return name, params


class TraceLogger:
    """
    Logger callback handed to ``Parser.logger``.

    Installing no callback at all is done by setting ``Parser.logger = None``,
    never by installing a reader that does nothing.
    """

    def __init__(self, callback: TraceCallback):
        self.callback: TraceCallback | None = callback
        self._disposed = False

    @property
    def disposed(self) -> bool:
        return self._disposed

    def __call__(self, log_type: LogType, message: str) -> None:
        if self.callback is None:
            return

        name, params = parse_trace_message(message)
        category = CATEGORIES.get(log_type, "parse")
        try:
            self.callback(name, params, category)
        except Exception:
            logger.exception("trace_callback_failed", trace_event=name, category=category)

    def dispose(self) -> None:
        if self._disposed:
            return
        self._disposed = True
        self.callback = None

    def __repr__(self) -> str:
        return f"TraceLogger({'disposed' if self._disposed else self.callback!r})"
