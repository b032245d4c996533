"""Wrapper enforcing the close-once / ignore-after-close sink lifecycle."""

from __future__ import annotations

import threading

from lib_log_hub.application.ports.sink import SinkPort
from lib_log_hub.domain.events import LogEvent


class SinkGuard(SinkPort):
    """Own one registered sink on behalf of a dispatcher runtime.

    Writes arriving after :meth:`close` are dropped instead of reaching the
    released sink, and the wrapped ``close`` runs at most once.
    """

    def __init__(self, sink: SinkPort) -> None:
        self._sink = sink
        self._closed = False
        self._lock = threading.Lock()

    @property
    def sink(self) -> SinkPort:
        return self._sink

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, event: LogEvent) -> None:
        if self._closed:
            return
        self._sink.write(event)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._sink.close()

    def __repr__(self) -> str:
        return f"SinkGuard({self._sink!r})"


__all__ = ["SinkGuard"]
