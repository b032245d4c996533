"""Runtime state container and the process-wide default dispatcher."""

from __future__ import annotations

from dataclasses import dataclass
from threading import RLock
from typing import TYPE_CHECKING

from lib_log_hub.adapters import EventStream
from lib_log_hub.application.use_cases import Listener, ProcessCallable, SinkGuard
from lib_log_hub.domain import LogFilter, LoggerConfig, RingBuffer

if TYPE_CHECKING:
    from ._dispatcher import Dispatcher


@dataclass(slots=True, frozen=True)
class LoggingRuntime:
    """Aggregate of live collaborators one ``log`` call works against.

    Registries are tuples; registering a listener, sink or filter produces a
    new runtime with a rebuilt ``process`` callable rather than mutating this
    one.
    """

    config: LoggerConfig
    release: bool
    filters: tuple[LogFilter, ...]
    ring_buffer: RingBuffer | None
    stream: EventStream
    listeners: tuple[Listener, ...]
    sinks: tuple[SinkGuard, ...]
    process: ProcessCallable


_DEFAULT: "Dispatcher | None" = None
_DEFAULT_LOCK = RLock()


def default_dispatcher() -> "Dispatcher":
    """Return the process-wide dispatcher, creating it on first access."""

    global _DEFAULT
    with _DEFAULT_LOCK:
        if _DEFAULT is None:
            from ._dispatcher import Dispatcher

            _DEFAULT = Dispatcher()
        return _DEFAULT


def clear_default() -> "Dispatcher | None":
    """Forget the process-wide dispatcher and return the previous instance."""

    global _DEFAULT
    with _DEFAULT_LOCK:
        previous, _DEFAULT = _DEFAULT, None
        return previous


def has_default() -> bool:
    """Return ``True`` when a process-wide dispatcher has been created."""

    with _DEFAULT_LOCK:
        return _DEFAULT is not None


__all__ = ["LoggingRuntime", "clear_default", "default_dispatcher", "has_default"]
