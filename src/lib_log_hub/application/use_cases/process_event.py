"""Use case orchestrating the dispatch pipeline for a single log event.

Purpose
-------
Tie together event construction, filter evaluation, ring buffer retention and
fan-out to the broadcast stream, listeners and sinks.

Contents
--------
* :func:`create_process_log_event` factory returning the per-runtime callable.
* :func:`capture_trace` helper recording the caller's stack.

System Role
-----------
Application-layer orchestrator invoked by the
:class:`~lib_log_hub.runtime.Dispatcher` whenever its runtime snapshot is
(re)built. Every consumer step is isolated: a failing listener, sink or stream
only produces a diagnostic and the remaining consumers still run.
"""

from __future__ import annotations

import traceback
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lib_log_hub.application.ports import BroadcastPort, ClockPort, IdProvider, SinkPort
from lib_log_hub.domain import LogEvent, LogFilter, LogLevel, RingBuffer

from ._diagnostics import Emitter, build_diagnostic_emitter, report_failure
from ._types import DiagnosticHook, Listener, ProcessCallable, ProcessResult

_PACKAGE_ROOT = str(Path(__file__).resolve().parents[2])
_TRACE_LEVELS = frozenset({LogLevel.ERROR, LogLevel.FATAL})


def capture_trace() -> str:
    """Return the current call stack without the frames of this package."""

    frames = traceback.extract_stack()
    while frames and frames[-1].filename.startswith(_PACKAGE_ROOT):
        frames.pop()
    if not frames:
        frames = traceback.extract_stack()
    return "".join(traceback.format_list(frames))


def create_process_log_event(
    *,
    filters: Sequence[LogFilter],
    ring_buffer: RingBuffer | None,
    stream: BroadcastPort | None,
    listeners: Sequence[Listener],
    sinks: Sequence[SinkPort],
    clock: ClockPort,
    id_provider: IdProvider,
    capture_traces: bool = True,
    diagnostic: DiagnosticHook = None,
) -> ProcessCallable:
    """Build the orchestrator capturing the current dependency wiring.

    Why
    ---
    Registries change far less often than events are logged. Freezing the
    filters, listeners and sinks into a callable means each ``log`` call works
    against one consistent snapshot without taking a lock.

    Parameters
    ----------
    filters:
        Filter chain evaluated with AND semantics in order.
    ring_buffer:
        Buffer receiving accepted events; ``None`` disables retention.
    stream:
        Broadcast channel; skipped once closed.
    listeners:
        Synchronous callbacks in registration order.
    sinks:
        Output adapters implementing :class:`SinkPort` in registration order.
    clock:
        Provider of timezone-aware timestamps.
    id_provider:
        Callable returning unique event identifiers.
    capture_traces:
        Record the caller's stack for ``ERROR``/``FATAL`` events without an
        explicit trace.
    diagnostic:
        Optional callback notified about consumer failures.

    Returns
    -------
    ProcessCallable
        Function accepting ``level``, ``message`` and optional event fields,
        returning a diagnostic dictionary.

    Examples
    --------
    >>> from datetime import datetime, timezone
    >>> class FixedClock:
    ...     def now(self):
    ...         return datetime(2025, 9, 30, 12, 0, tzinfo=timezone.utc)
    >>> seen = []
    >>> ring = RingBuffer(capacity=10)
    >>> process = create_process_log_event(
    ...     filters=(),
    ...     ring_buffer=ring,
    ...     stream=None,
    ...     listeners=(seen.append,),
    ...     sinks=(),
    ...     clock=FixedClock(),
    ...     id_provider=lambda: 'event-1',
    ... )
    >>> result = process(LogLevel.INFO, 'hello', logger_name='svc.worker')
    >>> result['ok'] and result['event_id'] == 'event-1'
    True
    >>> len(ring), seen[0].logger_name
    (1, 'svc.worker')
    """

    toolkit = _PipelineToolkit(
        filters=tuple(filters),
        ring_buffer=ring_buffer,
        stream=stream,
        listeners=tuple(listeners),
        sinks=tuple(sinks),
        clock=clock,
        id_provider=id_provider,
        capture_traces=capture_traces,
        emit=build_diagnostic_emitter(diagnostic),
    )
    return _ProcessPipeline(toolkit)


@dataclass(frozen=True)
class _PipelineToolkit:
    filters: tuple[LogFilter, ...]
    ring_buffer: RingBuffer | None
    stream: BroadcastPort | None
    listeners: tuple[Listener, ...]
    sinks: tuple[SinkPort, ...]
    clock: ClockPort
    id_provider: IdProvider
    capture_traces: bool
    emit: Emitter


class _ProcessPipeline(ProcessCallable):
    def __init__(self, toolkit: _PipelineToolkit) -> None:
        self._toolkit = toolkit

    def __call__(
        self,
        level: LogLevel,
        message: str,
        *,
        logger_name: str | None = None,
        error: object | None = None,
        trace: str | None = None,
        tags: Iterable[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> ProcessResult:
        event = _craft_event(self._toolkit, level, message, logger_name, error, trace, tags, metadata)
        if not _filters_allow(self._toolkit, event):
            return {"ok": False, "reason": "filtered", "event_id": event.event_id}
        _remember_event(self._toolkit, event)
        failures = _publish_event(self._toolkit, event)
        failures += _notify_listeners(self._toolkit, event)
        failures += _write_sinks(self._toolkit, event)
        return {"ok": True, "event_id": event.event_id, "failures": failures}


def _craft_event(
    toolkit: _PipelineToolkit,
    level: LogLevel,
    message: str,
    logger_name: str | None,
    error: object | None,
    trace: str | None,
    tags: Iterable[str] | None,
    metadata: Mapping[str, Any] | None,
) -> LogEvent:
    if trace is None and toolkit.capture_traces and level in _TRACE_LEVELS:
        trace = capture_trace()
    return LogEvent(
        event_id=toolkit.id_provider(),
        timestamp=toolkit.clock.now(),
        level=level,
        message=message,
        logger_name=logger_name,
        error=error,
        trace=trace,
        tags=tags if tags is not None else (),
        metadata=metadata or {},
    )


def _filters_allow(toolkit: _PipelineToolkit, event: LogEvent) -> bool:
    for item in toolkit.filters:
        if not item.should_log(event):
            return False
    return True


def _remember_event(toolkit: _PipelineToolkit, event: LogEvent) -> None:
    if toolkit.ring_buffer is not None:
        toolkit.ring_buffer.add(event)


def _publish_event(toolkit: _PipelineToolkit, event: LogEvent) -> int:
    stream = toolkit.stream
    if stream is None or stream.closed:
        return 0
    try:
        stream.publish(event)
    except Exception as exc:  # noqa: BLE001
        report_failure(
            toolkit.emit,
            "stream_error",
            "Log stream rejected an event; continuing",
            exc,
            {"event_id": event.event_id},
        )
        return 1
    return 0


def _notify_listeners(toolkit: _PipelineToolkit, event: LogEvent) -> int:
    failures = 0
    for listener in toolkit.listeners:
        try:
            listener(event)
        except Exception as exc:  # noqa: BLE001
            failures += 1
            report_failure(
                toolkit.emit,
                "listener_error",
                "Log listener raised an exception; continuing",
                exc,
                {"event_id": event.event_id, "listener": repr(listener)},
            )
    return failures


def _write_sinks(toolkit: _PipelineToolkit, event: LogEvent) -> int:
    failures = 0
    for sink in toolkit.sinks:
        try:
            sink.write(event)
        except Exception as exc:  # noqa: BLE001
            failures += 1
            report_failure(
                toolkit.emit,
                "sink_error",
                "Log sink raised an exception; continuing",
                exc,
                {"event_id": event.event_id, "sink": repr(sink)},
            )
    return failures


__all__ = ["capture_trace", "create_process_log_event"]
