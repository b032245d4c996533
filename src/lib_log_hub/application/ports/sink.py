"""Sink port describing durable or visible output destinations.

Purpose
-------
Define the abstraction for adapters that record accepted log events (console,
memory, host-provided writers), letting the application layer depend on a
narrow protocol.

System Role
-----------
The dispatcher calls :meth:`SinkPort.write` once per accepted event per sink
and :meth:`SinkPort.close` exactly once per sink when the runtime shuts down.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_hub.domain.events import LogEvent


@runtime_checkable
class SinkPort(Protocol):
    """Record a log event somewhere outside the dispatcher."""

    def write(self, event: LogEvent) -> None:
        """Persist or display ``event``; expected to be fast and non-blocking."""

    def close(self) -> None:
        """Release resources; calling it more than once must be harmless."""


__all__ = ["SinkPort"]
