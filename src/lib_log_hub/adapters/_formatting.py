"""Utilities that normalise log events into template-friendly dictionaries.

Why
---
Console templates accept ``str.format`` placeholders. Producing the payload in
one place keeps the default layout and custom templates in sync.

Contents
--------
* :func:`build_format_payload` – generate placeholder values for a log event.
* :func:`format_clock` – ``HH:MM:SS.mmm`` rendering used by the console sink.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from lib_log_hub.domain.events import LogEvent


def format_clock(timestamp: datetime) -> str:
    """Return ``timestamp`` as ``HH:MM:SS.mmm``.

    Examples
    --------
    >>> from datetime import timezone
    >>> format_clock(datetime(2025, 9, 30, 7, 5, 3, 42000, tzinfo=timezone.utc))
    '07:05:03.042'
    """

    return f"{timestamp.hour:02d}:{timestamp.minute:02d}:{timestamp.second:02d}.{timestamp.microsecond // 1000:03d}"


def build_format_payload(event: LogEvent) -> dict[str, Any]:
    """Return the mapping of placeholders exposed to format templates."""

    metadata = dict(event.metadata)
    metadata_fields = ""
    if metadata:
        metadata_fields = " " + " ".join(f"{key}={value}" for key, value in sorted(metadata.items()))

    level_text = event.level.name

    return {
        "timestamp": event.timestamp.isoformat(),
        "clock": format_clock(event.timestamp),
        "YYYY": f"{event.timestamp.year:04d}",
        "MM": f"{event.timestamp.month:02d}",
        "DD": f"{event.timestamp.day:02d}",
        "hh": f"{event.timestamp.hour:02d}",
        "mm": f"{event.timestamp.minute:02d}",
        "ss": f"{event.timestamp.second:02d}",
        "level": level_text,
        "level_enum": event.level,
        "level_code": event.level.code,
        "level_icon": event.level.icon,
        "logger_name": event.logger_name or "",
        "event_id": event.event_id,
        "message": event.message,
        "error": "" if event.error is None else str(event.error),
        "tags": ", ".join(event.tags),
        "metadata": metadata,
        "metadata_fields": metadata_fields,
    }


__all__ = ["build_format_payload", "format_clock"]
