"""Dispatcher façade owning configuration, registries and the event pipeline.

Purpose
-------
Accept log calls from application code, run them through the process use case
and manage the lifecycle ``UNINITIALISED → ACTIVE ⇄ DISABLED → CLOSED``.

Contents
--------
* :class:`DispatcherState` – lifecycle states.
* :class:`Dispatcher` – constructible service object; the process-wide
  default lives in :mod:`lib_log_hub.runtime`.

System Role
-----------
Composition root for one runtime snapshot: it resolves configuration, builds
the ring buffer, stream and sink guards, freezes them into the process
callable, and swaps the snapshot atomically whenever a registry changes.
Application code is never interrupted by a fault inside this pipeline.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from enum import Enum
from typing import Any

from lib_log_hub.adapters import AsyncSubscription, EventStream, Subscription
from lib_log_hub.application.ports import ClockPort, IdProvider, SinkPort
from lib_log_hub.application.use_cases import (
    DiagnosticHook,
    Listener,
    SinkGuard,
    create_process_log_event,
    create_shutdown,
)
from lib_log_hub.application.use_cases._diagnostics import build_diagnostic_emitter, report_failure
from lib_log_hub.domain import LogEvent, LogFilter, LoggerConfig, LogLevel, RingBuffer, coerce_level

from ._factories import SequentialIdProvider, SystemClock, create_default_filters, create_default_sinks
from ._named import LoggingMethods, NamedLogger
from ._settings import resolve_config, resolve_enabled, resolve_release
from ._state import LoggingRuntime


class DispatcherState(Enum):
    """Lifecycle of a :class:`Dispatcher`."""

    UNINITIALISED = "uninitialised"
    ACTIVE = "active"
    DISABLED = "disabled"
    CLOSED = "closed"


class Dispatcher(LoggingMethods):
    """Route log events through filters, the ring buffer and every consumer.

    The first logging, registration or query call initialises the dispatcher
    with defaults when :meth:`init` was not called explicitly.

    Examples
    --------
    >>> from lib_log_hub.adapters import MemorySink
    >>> sink = MemorySink()
    >>> dispatcher = Dispatcher().init(LoggerConfig(buffer_size=3), sinks=[sink])
    >>> for index in range(1, 5):
    ...     dispatcher.info(f"m{index}")
    >>> [event.message for event in dispatcher.buffered_events()]
    ['m2', 'm3', 'm4']
    >>> dispatcher.shutdown()
    >>> sink.closed
    True
    """

    def __init__(
        self,
        *,
        clock: ClockPort | None = None,
        id_provider: IdProvider | None = None,
        diagnostic_hook: DiagnosticHook = None,
    ) -> None:
        self._clock: ClockPort = clock or SystemClock()
        self._id_provider: IdProvider = id_provider or SequentialIdProvider()
        self._diagnostic = diagnostic_hook
        self._emit = build_diagnostic_emitter(diagnostic_hook)
        self._lock = threading.RLock()
        self._runtime: LoggingRuntime | None = None
        self._state = DispatcherState.UNINITIALISED

    # lifecycle -----------------------------------------------------------

    def init(
        self,
        config: LoggerConfig | None = None,
        *,
        sinks: Iterable[SinkPort] | None = None,
        filters: Iterable[LogFilter] | None = None,
        release: bool | None = None,
    ) -> "Dispatcher":
        """(Re)initialise the dispatcher and return it.

        Parameters
        ----------
        config:
            Base configuration; ``LOG_HUB_*`` environment variables override it.
        sinks:
            Output sinks; defaults to a single :class:`RichConsoleSink`.
        filters:
            Filter chain; defaults to a threshold at ``config.min_level``.
        release:
            Treat the process as a release build. ``None`` consults
            ``LOG_HUB_RELEASE`` and then the interpreter's ``-O`` flag.

        Side Effects
        ------------
        A previous runtime is retired: its stream ends and its sinks are
        closed, except sinks passed again in ``sinks``. Events already in
        flight finish against the runtime they started with.

        Raises
        ------
        ValueError, TypeError
            When the configuration, a sink or a filter is invalid.
        """

        resolved = resolve_config(config)
        is_release = resolve_release(release)
        sink_list = list(sinks) if sinks is not None else create_default_sinks()
        filter_list = list(filters) if filters is not None else create_default_filters(resolved)
        for sink in sink_list:
            _check_sink(sink)
        if len({id(sink) for sink in sink_list}) != len(sink_list):
            raise ValueError("the same sink was passed more than once")
        for item in filter_list:
            _check_filter(item)

        runtime = self._assemble(
            config=resolved,
            release=is_release,
            filters=tuple(filter_list),
            ring_buffer=RingBuffer(resolved.buffer_size) if resolved.buffer_size > 0 else None,
            stream=EventStream(maxsize=resolved.stream_maxsize),
            listeners=(),
            sinks=tuple(SinkGuard(sink) for sink in sink_list),
        )
        enabled = resolve_enabled(resolved, is_release)
        with self._lock:
            previous, previous_state = self._runtime, self._state
            self._runtime = runtime
            self._state = DispatcherState.ACTIVE if enabled else DispatcherState.DISABLED
        if previous is not None and previous_state is not DispatcherState.CLOSED:
            carried = {id(sink) for sink in sink_list}
            keep = [guard for guard in previous.sinks if id(guard.sink) in carried]
            self._retire(previous, keep=keep)
        return self

    def shutdown(self) -> None:
        """Close the stream and sinks, drop listeners and buffer; idempotent."""

        with self._lock:
            if self._state is DispatcherState.CLOSED:
                return
            runtime = self._runtime
            self._state = DispatcherState.CLOSED
            if runtime is not None:
                self._runtime = self._rebuild(runtime, listeners=(), sinks=())
        if runtime is not None:
            self._retire(runtime)

    def set_enabled(self, enabled: bool) -> None:
        """Toggle delivery for subsequent calls; ignored once closed."""

        self._ensure_initialised()
        with self._lock:
            if self._state is DispatcherState.CLOSED:
                return
            self._state = DispatcherState.ACTIVE if enabled else DispatcherState.DISABLED

    @property
    def state(self) -> DispatcherState:
        return self._state

    @property
    def enabled(self) -> bool:
        self._ensure_initialised()
        return self._state is DispatcherState.ACTIVE

    @property
    def config(self) -> LoggerConfig:
        return self._require_runtime().config

    def __enter__(self) -> "Dispatcher":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()

    # logging -------------------------------------------------------------

    def log(
        self,
        level: LogLevel | str,
        message: str,
        *,
        logger_name: str | None = None,
        error: object | None = None,
        trace: str | None = None,
        tags: Iterable[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        """Dispatch one event; never raises.

        Disabled and closed dispatchers return immediately without building an
        event. Internal faults are reported through the ``lib_log_hub`` logger
        and the diagnostic hook.
        """

        if self._state is DispatcherState.DISABLED:
            return
        try:
            if self._state is DispatcherState.UNINITIALISED:
                self._ensure_initialised()
            runtime = self._runtime
            if runtime is None or self._state is not DispatcherState.ACTIVE:
                return
            runtime.process(
                coerce_level(level),
                message,
                logger_name=logger_name,
                error=error,
                trace=trace,
                tags=tags,
                metadata=metadata,
            )
        except Exception as exc:  # noqa: BLE001
            report_failure(
                self._emit,
                "dispatch_error",
                "Logging call failed internally; event dropped",
                exc,
                {"level": str(level), "logger": logger_name},
            )

    def named(self, name: str) -> NamedLogger:
        """Return a view that stamps events with ``name``."""

        return NamedLogger(name, self)

    # registries ----------------------------------------------------------

    def add_listener(self, listener: Listener) -> None:
        """Invoke ``listener`` synchronously for every accepted event."""

        if not callable(listener):
            raise TypeError("listener must be callable")
        self._update(lambda runtime: {"listeners": runtime.listeners + (listener,)})

    def remove_listener(self, listener: Listener) -> bool:
        """Remove the first registration of ``listener``; return whether one was found."""

        return self._remove("listeners", lambda item: item == listener)

    def clear_listeners(self) -> None:
        self._update(lambda runtime: {"listeners": ()})

    @property
    def listeners(self) -> tuple[Listener, ...]:
        runtime = self._current()
        return runtime.listeners if runtime is not None else ()

    def add_sink(self, sink: SinkPort) -> None:
        """Register ``sink``; it is closed when the dispatcher shuts down.

        Raises
        ------
        ValueError
            When ``sink`` is already registered.
        """

        _check_sink(sink)

        def with_sink(runtime: LoggingRuntime) -> dict[str, Any]:
            if any(guard.sink is sink for guard in runtime.sinks):
                raise ValueError(f"sink {sink!r} is already registered")
            return {"sinks": runtime.sinks + (SinkGuard(sink),)}

        self._update(with_sink)

    def remove_sink(self, sink: SinkPort) -> bool:
        """Unregister ``sink`` without closing it."""

        return self._remove("sinks", lambda guard: guard.sink is sink)

    @property
    def sinks(self) -> tuple[SinkPort, ...]:
        runtime = self._current()
        return tuple(guard.sink for guard in runtime.sinks) if runtime is not None else ()

    def add_filter(self, log_filter: LogFilter) -> None:
        _check_filter(log_filter)
        self._update(lambda runtime: {"filters": runtime.filters + (log_filter,)})

    def remove_filter(self, log_filter: LogFilter) -> bool:
        return self._remove("filters", lambda item: item is log_filter)

    @property
    def filters(self) -> tuple[LogFilter, ...]:
        runtime = self._current()
        return runtime.filters if runtime is not None else ()

    # stream --------------------------------------------------------------

    @property
    def stream(self) -> EventStream:
        """Broadcast channel of the current runtime."""

        return self._require_runtime().stream

    def subscribe(self, maxsize: int | None = None) -> Subscription:
        """Return a blocking pull subscription to the event stream."""

        return self.stream.subscribe(maxsize)

    def subscribe_async(self, maxsize: int | None = None) -> AsyncSubscription:
        """Return an ``async for`` subscription bound to the running loop."""

        return self.stream.subscribe_async(maxsize)

    # buffer --------------------------------------------------------------

    def buffered_events(self) -> tuple[LogEvent, ...]:
        """Return every retained event, oldest first."""

        ring = self._ring()
        return ring.all() if ring is not None else ()

    def recent_events(self, count: int) -> tuple[LogEvent, ...]:
        """Return the newest ``count`` retained events, oldest of them first."""

        ring = self._ring()
        return ring.recent(count) if ring is not None else ()

    def matching(self, predicate: Callable[[LogEvent], bool]) -> tuple[LogEvent, ...]:
        """Return retained events satisfying ``predicate``."""

        ring = self._ring()
        return ring.matching(predicate) if ring is not None else ()

    def clear_buffer(self) -> None:
        ring = self._ring()
        if ring is not None:
            ring.clear()

    # internals -----------------------------------------------------------

    def _ensure_initialised(self) -> None:
        if self._state is not DispatcherState.UNINITIALISED:
            return
        with self._lock:
            if self._state is DispatcherState.UNINITIALISED:
                self.init()

    def _current(self) -> LoggingRuntime | None:
        self._ensure_initialised()
        return self._runtime

    def _ring(self) -> RingBuffer | None:
        runtime = self._current()
        return runtime.ring_buffer if runtime is not None else None

    def _require_runtime(self) -> LoggingRuntime:
        self._ensure_initialised()
        runtime = self._runtime
        if runtime is None:
            raise RuntimeError("dispatcher was shut down before it was initialised; call init() first")
        return runtime

    def _update(self, changes: Callable[[LoggingRuntime], dict[str, Any]]) -> None:
        self._ensure_initialised()
        with self._lock:
            runtime = self._runtime
            if runtime is None or self._state is DispatcherState.CLOSED:
                raise RuntimeError("dispatcher is closed; call init() to start a fresh runtime")
            self._runtime = self._rebuild(runtime, **changes(runtime))

    def _remove(self, field: str, matches: Callable[[Any], bool]) -> bool:
        found = False

        def without_first(runtime: LoggingRuntime) -> dict[str, Any]:
            nonlocal found
            items = list(getattr(runtime, field))
            for index, item in enumerate(items):
                if matches(item):
                    del items[index]
                    found = True
                    break
            return {field: tuple(items)}

        self._update(without_first)
        return found

    def _assemble(
        self,
        *,
        config: LoggerConfig,
        release: bool,
        filters: tuple[LogFilter, ...],
        ring_buffer: RingBuffer | None,
        stream: EventStream,
        listeners: tuple[Listener, ...],
        sinks: tuple[SinkGuard, ...],
    ) -> LoggingRuntime:
        process = create_process_log_event(
            filters=filters,
            ring_buffer=ring_buffer,
            stream=stream,
            listeners=listeners,
            sinks=sinks,
            clock=self._clock,
            id_provider=self._id_provider,
            capture_traces=config.capture_traces,
            diagnostic=self._diagnostic,
        )
        return LoggingRuntime(
            config=config,
            release=release,
            filters=filters,
            ring_buffer=ring_buffer,
            stream=stream,
            listeners=listeners,
            sinks=sinks,
            process=process,
        )

    def _rebuild(self, runtime: LoggingRuntime, **changes: Any) -> LoggingRuntime:
        updated = replace(runtime, **changes)
        return self._assemble(
            config=updated.config,
            release=updated.release,
            filters=updated.filters,
            ring_buffer=updated.ring_buffer,
            stream=updated.stream,
            listeners=updated.listeners,
            sinks=updated.sinks,
        )

    def _retire(self, runtime: LoggingRuntime, *, keep: Iterable[SinkGuard] = ()) -> None:
        shutdown = create_shutdown(
            stream=runtime.stream,
            sinks=runtime.sinks,
            ring_buffer=runtime.ring_buffer,
            diagnostic=self._diagnostic,
        )
        shutdown(keep=tuple(keep))

    def __repr__(self) -> str:
        return f"Dispatcher(state={self._state.value})"


def _check_sink(sink: object) -> None:
    if not isinstance(sink, SinkPort):
        raise TypeError(f"sink must provide write(event) and close(), got {type(sink).__name__}")


def _check_filter(log_filter: object) -> None:
    if not isinstance(log_filter, LogFilter):
        raise TypeError(f"filter must provide should_log(event), got {type(log_filter).__name__}")


__all__ = ["Dispatcher", "DispatcherState"]
