"""Application use cases: event processing and shutdown."""

from __future__ import annotations

from ._sink_guard import SinkGuard
from ._types import DiagnosticHook, Listener, ProcessCallable, ProcessResult
from .process_event import capture_trace, create_process_log_event
from .shutdown import create_shutdown

__all__ = [
    "DiagnosticHook",
    "Listener",
    "ProcessCallable",
    "ProcessResult",
    "SinkGuard",
    "capture_trace",
    "create_process_log_event",
    "create_shutdown",
]
