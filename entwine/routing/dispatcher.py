"""ProgressDispatcher: fans status messages out to every registered sink.

Delivery is best effort.  A failing sink is logged and skipped; the
failure never reaches the operation that reported progress.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from entwine.routing.sinks import ProgressSink

logger = logging.getLogger(__name__)


class ProgressDispatcher:
    """Routes progress messages to ALL registered sinks.

    Usage
    -----
    >>> from entwine.routing.sinks import BufferSink
    >>> dispatcher = ProgressDispatcher()
    >>> buffer = BufferSink()
    >>> dispatcher.register_sink(buffer)
    >>> dispatcher.notify("Downloading Silk...")
    ['buffer']
    """

    def __init__(self, sinks: list[ProgressSink] | None = None) -> None:
        self._sinks: list[ProgressSink] = []
        for sink in sinks or []:
            self.register_sink(sink)

    # ------------------------------------------------------------------
    # Sink management
    # ------------------------------------------------------------------

    def register_sink(self, sink: ProgressSink) -> None:
        """Register a sink.  Registering the same instance twice is ignored."""
        if sink not in self._sinks:
            self._sinks.append(sink)
            logger.debug("Registered progress sink: %s", sink.sink_name)

    def unregister_sink(self, sink: ProgressSink) -> None:
        """Remove a previously registered sink."""
        try:
            self._sinks.remove(sink)
        except ValueError:
            pass

    @property
    def registered_sinks(self) -> list[ProgressSink]:
        """Return a copy of the registered sink list."""
        return list(self._sinks)

    # ------------------------------------------------------------------
    # Dispatch
    # ------------------------------------------------------------------

    def notify(self, message: str) -> list[str]:
        """Deliver *message* to every sink.

        Returns the names of the sinks that accepted it.  Never raises.
        """
        delivered: list[str] = []
        for sink in self._sinks:
            try:
                sink.notify(message)
                delivered.append(sink.sink_name)
            except Exception as exc:  # noqa: BLE001
                logger.warning("Progress sink %s dropped %r: %s", sink.sink_name, message, exc)
        return delivered
