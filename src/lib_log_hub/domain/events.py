"""Domain event describing one logged occurrence.

Purpose
-------
Provide an immutable, serialisable representation of log events travelling
through the dispatch pipeline.

Contents
--------
* :class:`LogEvent` dataclass with helper methods.
* :data:`MetadataValue` type describing the values permitted in metadata.
* :func:`next_event_id` generating process-unique identifiers.
* Utility functions ``_ensure_aware`` and ``_freeze_metadata``.

System Role
-----------
Sits in the domain layer, ensuring the ring buffer, listeners, the broadcast
stream and sinks all observe the same frozen data object and keeping
serialisation logic centralised.
"""

from __future__ import annotations

import itertools
import json
import time
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Union

from .levels import LogLevel

MetadataValue = Union[str, int, float, bool, None, Mapping[str, "MetadataValue"], tuple["MetadataValue", ...]]
"""Values accepted in :attr:`LogEvent.metadata` after normalisation."""

_EMPTY_METADATA: Mapping[str, MetadataValue] = MappingProxyType({})
_ID_COUNTER = itertools.count()


def next_event_id() -> str:
    """Return ``<microseconds>_<counter>``, unique within the process.

    The counter breaks ties between events created within the same
    microsecond.

    Examples
    --------
    >>> first, second = next_event_id(), next_event_id()
    >>> first != second
    True
    """
    return f"{time.time_ns() // 1000}_{next(_ID_COUNTER)}"


def _ensure_aware(ts: datetime) -> datetime:
    """Validate that ``ts`` is timezone-aware and normalise to UTC."""
    if ts.tzinfo is None or ts.tzinfo.utcoffset(ts) is None:
        raise ValueError("timestamp must be timezone-aware")
    return ts.astimezone(timezone.utc)


def _freeze_value(value: Any) -> MetadataValue:
    if value is None or isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, Mapping):
        return _freeze_metadata(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        return tuple(_freeze_value(item) for item in value)
    return str(value)


def _freeze_metadata(metadata: Mapping[Any, Any] | None) -> Mapping[str, MetadataValue]:
    """Return a read-only deep copy of ``metadata`` restricted to :data:`MetadataValue`."""
    if not metadata:
        return _EMPTY_METADATA
    frozen: dict[str, MetadataValue] = {}
    for key, value in metadata.items():
        if not isinstance(key, str):
            raise TypeError(f"metadata keys must be strings, got {type(key).__name__}")
        frozen[key] = _freeze_value(value)
    return MappingProxyType(frozen)


def _thaw(value: MetadataValue) -> Any:
    if isinstance(value, Mapping):
        return {key: _thaw(item) for key, item in value.items()}
    if isinstance(value, tuple):
        return [_thaw(item) for item in value]
    return value


def _freeze_tags(tags: Iterable[str] | None) -> tuple[str, ...]:
    if not tags:
        return ()
    if isinstance(tags, str):
        raise TypeError("tags must be a sequence of strings, not a single string")
    frozen = tuple(tags)
    for tag in frozen:
        if not isinstance(tag, str):
            raise TypeError(f"tags must be strings, got {type(tag).__name__}")
    return frozen


@dataclass(slots=True, frozen=True)
class LogEvent:
    """Immutable log event transported through the dispatch pipeline.

    Attributes
    ----------
    event_id:
        Process-unique identifier, see :func:`next_event_id`.
    timestamp:
        Time of the event in timezone-aware UTC.
    level:
        :class:`LogLevel` severity associated with the event.
    message:
        Rendered message passed by the caller.
    logger_name:
        Name of the :class:`~lib_log_hub.runtime.NamedLogger` that produced
        the event; ``None`` for the root dispatcher.
    error:
        Optional error object attached by the caller.
    trace:
        Optional textual stack trace, supplied or auto-captured.
    tags:
        Ordered tags; duplicates are kept.
    metadata:
        Read-only mapping of caller-supplied key/value pairs.
    """

    event_id: str
    timestamp: datetime
    level: LogLevel
    message: str
    logger_name: str | None = None
    error: object | None = None
    trace: str | None = None
    tags: tuple[str, ...] = ()
    metadata: Mapping[str, MetadataValue] = field(default_factory=lambda: _EMPTY_METADATA)

    def __post_init__(self) -> None:
        if not self.event_id:
            raise ValueError("event_id must not be empty")
        if not isinstance(self.level, LogLevel):
            raise TypeError(f"level must be a LogLevel, got {type(self.level).__name__}")
        object.__setattr__(self, "timestamp", _ensure_aware(self.timestamp))
        object.__setattr__(self, "message", str(self.message))
        object.__setattr__(self, "tags", _freeze_tags(self.tags))
        object.__setattr__(self, "metadata", _freeze_metadata(self.metadata))

    def __hash__(self) -> int:
        return hash((self.event_id, self.timestamp, self.level, self.message, self.logger_name))

    def __str__(self) -> str:
        parts = [f"[{self.timestamp.isoformat()}] {self.level.name} "]
        if self.logger_name is not None:
            parts.append(f"[{self.logger_name}] ")
        parts.append(self.message)
        if self.error is not None:
            parts.append(f" | Error: {self.error}")
        if self.tags:
            parts.append(f" | Tags: {', '.join(self.tags)}")
        return "".join(parts)

    @classmethod
    def create(
        cls,
        level: LogLevel,
        message: str,
        *,
        logger_name: str | None = None,
        error: object | None = None,
        trace: str | None = None,
        tags: Iterable[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> "LogEvent":
        """Build an event stamped with a fresh identifier and the current time."""

        return cls(
            event_id=next_event_id(),
            timestamp=datetime.now(timezone.utc),
            level=level,
            message=message,
            logger_name=logger_name,
            error=error,
            trace=trace,
            tags=tags if tags is not None else (),
            metadata=metadata or _EMPTY_METADATA,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize the event to a dictionary with ISO8601 timestamps."""

        data: dict[str, Any] = {
            "event_id": self.event_id,
            "timestamp": self.timestamp.isoformat(),
            "level": self.level.severity,
            "message": self.message,
            "logger_name": self.logger_name,
            "tags": list(self.tags),
            "metadata": _thaw(self.metadata),
        }
        if self.error is not None:
            data["error"] = repr(self.error)
        if self.trace is not None:
            data["trace"] = self.trace
        return data

    def to_json(self) -> str:
        """Serialize the event to JSON with sorted keys for deterministic output."""

        return json.dumps(self.to_dict(), sort_keys=True)

    def replace(self, **changes: Any) -> "LogEvent":
        """Return a copied event with ``changes`` applied."""

        return replace(self, **changes)


__all__ = ["LogEvent", "MetadataValue", "next_event_id"]
