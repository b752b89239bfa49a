"""Progress sink protocol and the built-in sinks.

All sinks implement the ``ProgressSink`` protocol: a ``sink_name``
property and a ``notify(message)`` method.  The dispatcher calls
``notify`` on every registered sink for every progress message.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ProgressSink(Protocol):
    """Protocol that every progress sink must implement.

    Attributes
    ----------
    sink_name : str
        A unique human-readable identifier for this sink instance
        (e.g. ``"log"``, ``"console"``).
    """

    @property
    def sink_name(self) -> str:
        """Return the unique name of this sink."""
        ...

    def notify(self, message: str) -> None:
        """Receive one human-readable status message.

        Implementations may raise; the dispatcher logs the failure and
        carries on with the remaining sinks.
        """
        ...


from entwine.routing.sinks.basic import BufferSink, CallbackSink, LogSink  # noqa: E402
from entwine.routing.sinks.console import ConsoleSink  # noqa: E402

__all__ = ["ProgressSink", "BufferSink", "CallbackSink", "ConsoleSink", "LogSink"]
