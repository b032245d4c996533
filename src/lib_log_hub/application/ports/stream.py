"""Port describing the broadcast channel fed by the dispatcher."""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_hub.domain.events import LogEvent


@runtime_checkable
class BroadcastPort(Protocol):
    """Fire-and-forget fan-out of events to zero or more subscribers."""

    @property
    def closed(self) -> bool:
        """Return ``True`` once :meth:`close` has been called."""

    def publish(self, event: LogEvent) -> None:
        """Hand ``event`` to every subscriber without blocking."""

    def close(self) -> None:
        """End every subscription; idempotent."""


__all__ = ["BroadcastPort"]
