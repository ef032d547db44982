"""Notification sinks for user-facing picker messages."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Protocol

logger = logging.getLogger(__name__)

DEBUG = logging.DEBUG
INFO = logging.INFO
WARN = logging.WARNING
ERROR = logging.ERROR

STATUS_MESSAGE_SECONDS = 3.0


class NotificationSink(Protocol):
    def emit(self, level: int, message: str) -> None: ...


class LoggingNotifier:
    """Forward notifications to the ``hueshift`` logger."""

    def __init__(self, target: logging.Logger | None = None) -> None:
        self._logger = target if target is not None else logger

    def emit(self, level: int, message: str) -> None:
        self._logger.log(level, message)


class StatusNotifier:
    """Keep the latest message for the status row until it expires.

    Every message is also logged, so a ``--log-file`` run keeps a transcript.
    """

    def __init__(
        self,
        duration: float = STATUS_MESSAGE_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.duration = duration
        self._clock = clock
        self.message = ""
        self.level = INFO
        self.until = 0.0
        self.history: list[tuple[int, str]] = []

    def emit(self, level: int, message: str) -> None:
        logger.log(level, message)
        self.message = message
        self.level = level
        self.until = self._clock() + self.duration
        self.history.append((level, message))
        del self.history[:-50]

    def current(self) -> str:
        """Return the live message, clearing it once expired."""
        if self.message and self._clock() >= self.until:
            self.message = ""
        return self.message

    def clear(self) -> None:
        self.message = ""
        self.until = 0.0
