"""Ring buffer storing the most recent log events.

Purpose
-------
Provide bounded in-memory retention for recent events so operators can
inspect state without relying on external sinks.

Contents
--------
* :class:`RingBuffer` with snapshot, window and predicate helpers.

System Role
-----------
Owned by the dispatcher runtime; the longest-lived holder of events while
they remain within capacity.
"""

from __future__ import annotations

import threading
from collections import deque
from collections.abc import Callable
from typing import Deque, Iterator

from .events import LogEvent


class RingBuffer:
    """Fixed-size, thread-safe buffer retaining the most recent :class:`LogEvent` objects.

    Every query returns a tuple snapshot, so later insertions never alter a
    result already handed to a caller.

    Examples
    --------
    >>> from lib_log_hub.domain.levels import LogLevel
    >>> ring = RingBuffer(capacity=2)
    >>> for text in ("a", "b", "c"):
    ...     ring.add(LogEvent.create(LogLevel.INFO, text))
    >>> [event.message for event in ring.all()]
    ['b', 'c']
    """

    def __init__(self, capacity: int) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self._capacity = capacity
        self._buffer: Deque[LogEvent] = deque(maxlen=capacity)
        self._lock = threading.Lock()

    @property
    def capacity(self) -> int:
        """Return the configured buffer size."""

        return self._capacity

    def add(self, event: LogEvent) -> None:
        """Append an event, evicting the oldest entry when full."""

        if self._capacity == 0:
            return
        with self._lock:
            self._buffer.append(event)

    def all(self) -> tuple[LogEvent, ...]:
        """Return every buffered event, oldest first."""

        with self._lock:
            return tuple(self._buffer)

    def recent(self, count: int) -> tuple[LogEvent, ...]:
        """Return the newest ``count`` events, oldest of that window first."""

        if count <= 0:
            return ()
        with self._lock:
            snapshot = tuple(self._buffer)
        return snapshot[-count:]

    def matching(self, predicate: Callable[[LogEvent], bool]) -> tuple[LogEvent, ...]:
        """Return the buffered events satisfying ``predicate`` in buffer order."""

        with self._lock:
            snapshot = tuple(self._buffer)
        return tuple(event for event in snapshot if predicate(event))

    def clear(self) -> None:
        """Remove all buffered events."""
        with self._lock:
            self._buffer.clear()

    @property
    def is_empty(self) -> bool:
        return len(self) == 0

    @property
    def is_full(self) -> bool:
        return len(self) >= self._capacity

    def __iter__(self) -> Iterator[LogEvent]:
        """Iterate over a snapshot of buffered events from oldest to newest."""
        return iter(self.all())

    def __len__(self) -> int:
        """Return the number of events currently stored."""
        with self._lock:
            return len(self._buffer)


__all__ = ["RingBuffer"]
