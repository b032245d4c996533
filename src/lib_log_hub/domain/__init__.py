"""Domain entities and value objects used by the dispatch pipeline."""

from __future__ import annotations

from .config import LoggerConfig
from .events import LogEvent, MetadataValue, next_event_id
from .filters import CompositeFilter, LogFilter, NameFilter, PredicateFilter, ThresholdFilter
from .levels import LogLevel, coerce_level
from .ring_buffer import RingBuffer

__all__ = [
    "CompositeFilter",
    "LogEvent",
    "LogFilter",
    "LogLevel",
    "LoggerConfig",
    "MetadataValue",
    "NameFilter",
    "PredicateFilter",
    "RingBuffer",
    "ThresholdFilter",
    "coerce_level",
    "next_event_id",
]
