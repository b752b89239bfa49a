"""Progress routing: one-way, best-effort status messages."""

from entwine.routing.dispatcher import ProgressDispatcher
from entwine.routing.sinks import BufferSink, CallbackSink, ConsoleSink, LogSink, ProgressSink

__all__ = [
    "ProgressDispatcher",
    "ProgressSink",
    "BufferSink",
    "CallbackSink",
    "ConsoleSink",
    "LogSink",
]
