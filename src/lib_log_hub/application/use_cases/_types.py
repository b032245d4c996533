"""Shared type aliases for the application use cases."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from typing import Any, Protocol

from lib_log_hub.domain import LogEvent, LogLevel

ProcessResult = dict[str, Any]
"""Diagnostic payload returned by the process pipeline (``ok``, ``reason``, ``event_id``)."""

Listener = Callable[[LogEvent], None]
"""Synchronous callback invoked for every accepted event."""

DiagnosticHook = Callable[[str, dict[str, Any]], None] | None
"""Optional observer notified about internal faults and milestones."""


class ProcessCallable(Protocol):
    """Callable produced by :func:`create_process_log_event`."""

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
    ) -> ProcessResult: ...


__all__ = ["DiagnosticHook", "Listener", "ProcessCallable", "ProcessResult"]
