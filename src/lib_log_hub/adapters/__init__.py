"""Adapters implementing the application ports."""

from __future__ import annotations

from .broadcast import AsyncSubscription, EventStream, StreamClosed, Subscription
from .console.rich_console import RichConsoleSink
from .memory import MemorySink

__all__ = [
    "AsyncSubscription",
    "EventStream",
    "MemorySink",
    "RichConsoleSink",
    "StreamClosed",
    "Subscription",
]
