"""Concrete collaborators wired into a dispatcher runtime."""

from __future__ import annotations

from datetime import datetime, timezone

from lib_log_hub.adapters import RichConsoleSink
from lib_log_hub.application.ports import ClockPort, IdProvider, SinkPort
from lib_log_hub.domain import LogFilter, LoggerConfig, ThresholdFilter, next_event_id


class SystemClock(ClockPort):
    """Concrete clock port returning timezone-aware UTC timestamps."""

    def now(self) -> datetime:
        """Return the current UTC timestamp with timezone info."""
        return datetime.now(timezone.utc)


class SequentialIdProvider(IdProvider):
    """Generate ``<microseconds>_<counter>`` identifiers for log events."""

    def __call__(self) -> str:
        return next_event_id()


def create_default_sinks() -> list[SinkPort]:
    """Return the sinks used when the host configures none: a Rich console."""

    return [RichConsoleSink()]


def create_default_filters(config: LoggerConfig) -> list[LogFilter]:
    """Return the filter chain used when the host configures none."""

    return [ThresholdFilter(config.min_level)]


__all__ = [
    "SequentialIdProvider",
    "SystemClock",
    "create_default_filters",
    "create_default_sinks",
]
