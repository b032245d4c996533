"""In-memory sink recording every event it receives."""

from __future__ import annotations

import threading

from lib_log_hub.application.ports.sink import SinkPort
from lib_log_hub.domain.events import LogEvent


class MemorySink(SinkPort):
    """Collect events in a list; useful for tests and embedding hosts.

    Examples
    --------
    >>> from lib_log_hub.domain.levels import LogLevel
    >>> sink = MemorySink()
    >>> sink.write(LogEvent.create(LogLevel.INFO, 'kept'))
    >>> sink.close()
    >>> sink.write(LogEvent.create(LogLevel.INFO, 'ignored'))
    >>> [event.message for event in sink.events]
    ['kept']
    """

    def __init__(self) -> None:
        self._events: list[LogEvent] = []
        self._lock = threading.Lock()
        self._closed = False
        self.close_calls = 0

    @property
    def events(self) -> tuple[LogEvent, ...]:
        with self._lock:
            return tuple(self._events)

    @property
    def messages(self) -> list[str]:
        return [event.message for event in self.events]

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, event: LogEvent) -> None:
        with self._lock:
            if self._closed:
                return
            self._events.append(event)

    def close(self) -> None:
        with self._lock:
            self.close_calls += 1
            self._closed = True

    def clear(self) -> None:
        with self._lock:
            self._events.clear()


__all__ = ["MemorySink"]
