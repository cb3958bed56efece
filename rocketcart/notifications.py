"""
User-facing message sink.

A sink is any callable that accepts the message text; it may be a plain
function or a coroutine function (e.g. one that pushes a toast over a
websocket). Only the string is passed, never the exception.
"""

from collections import deque
from typing import Any, Awaitable, Callable, Union

from rocketcart.logging import get_logger, sanitize_for_logging

logger = get_logger(__name__)

MessageSink = Callable[[str], Union[None, Awaitable[Any]]]


class LoggingMessageSink:
    """Default sink: logs each message and keeps the most recent ones."""

    def __init__(self, history_size: int = 20) -> None:
        self.history: deque[str] = deque(maxlen=history_size)

    def __call__(self, message: str) -> None:
        logger.info(f"User message: {sanitize_for_logging(message)}")
        self.history.append(message)

    @property
    def last(self) -> str | None:
        return self.history[-1] if self.history else None


__all__ = ["MessageSink", "LoggingMessageSink"]
