"""Log, buffer and callback progress sinks."""

from __future__ import annotations

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class LogSink:
    """Forwards progress messages into :mod:`logging`."""

    def __init__(self, level: int = logging.INFO, logger_name: str = "entwine.progress") -> None:
        self._level = level
        self._logger = logging.getLogger(logger_name)

    @property
    def sink_name(self) -> str:
        return "log"

    def notify(self, message: str) -> None:
        self._logger.log(self._level, message)


class BufferSink:
    """Collects progress messages for later retrieval.

    Useful for front ends that poll for progress, and for tests.  Call
    :meth:`flush` to retrieve and clear pending messages.
    """

    def __init__(self) -> None:
        self._pending: list[str] = []

    @property
    def sink_name(self) -> str:
        return "buffer"

    def notify(self, message: str) -> None:
        self._pending.append(message)

    def flush(self) -> list[str]:
        """Return and clear all pending messages."""
        messages = list(self._pending)
        self._pending.clear()
        return messages

    @property
    def pending_count(self) -> int:
        return len(self._pending)


class CallbackSink:
    """Calls an arbitrary function with each progress message."""

    def __init__(self, callback: Callable[[str], object], name: str = "callback") -> None:
        self._callback = callback
        self._name = name

    @property
    def sink_name(self) -> str:
        return self._name

    def notify(self, message: str) -> None:
        self._callback(message)
