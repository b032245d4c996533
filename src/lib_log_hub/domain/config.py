"""Configuration value object accepted by the dispatcher."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Any

from .levels import LogLevel, coerce_level


@dataclass(slots=True, frozen=True)
class LoggerConfig:
    """Settings applied when a dispatcher is (re)initialised.

    Attributes
    ----------
    min_level:
        Threshold of the default :class:`~lib_log_hub.domain.filters.ThresholdFilter`.
    buffer_size:
        Ring buffer capacity; ``0`` disables buffering entirely.
    enable_in_release:
        Keep logging enabled when the process runs as a release build.
    capture_traces:
        Capture the current stack for ``ERROR``/``FATAL`` events that carry no
        explicit trace.
    stream_maxsize:
        Backlog of each broadcast subscription before new events are dropped
        for that subscriber.
    """

    min_level: LogLevel = LogLevel.DEBUG
    buffer_size: int = 1000
    enable_in_release: bool = False
    capture_traces: bool = True
    stream_maxsize: int = 1024

    def __post_init__(self) -> None:
        object.__setattr__(self, "min_level", coerce_level(self.min_level))
        if self.buffer_size < 0:
            raise ValueError("buffer_size must not be negative")
        if self.stream_maxsize <= 0:
            raise ValueError("stream_maxsize must be positive")

    def replace(self, **changes: Any) -> "LoggerConfig":
        """Return a copy with ``changes`` applied."""

        return replace(self, **changes)

    @classmethod
    def development(cls) -> "LoggerConfig":
        """Verbose defaults: everything from ``TRACE`` up, large buffer."""

        return cls(min_level=LogLevel.TRACE, buffer_size=1000)

    @classmethod
    def production(cls) -> "LoggerConfig":
        """Quiet defaults: ``WARNING`` and above, small buffer."""

        return cls(min_level=LogLevel.WARNING, buffer_size=100)


__all__ = ["LoggerConfig"]
