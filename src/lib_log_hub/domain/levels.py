"""Log level abstraction providing a totally ordered severity scale.

Purpose
-------
Offer a domain-specific representation of log severities that extends the
stdlib levels with ``TRACE`` and ``FATAL``, rich comparisons, icons and
helper conversions.

Contents
--------
* :class:`LogLevel` enum with conversion helpers and presentation metadata.
* ``_ICON_TABLE`` / ``_CODE_TABLE`` constants mapping levels to console glyphs
  and four-letter codes.

System Role
-----------
Used by filters to compare severities, by the dispatcher to decide when
traces are captured, and by sinks to present human-friendly labels.
"""

from __future__ import annotations

from enum import Enum


class LogLevel(Enum):
    """Enumerated logging levels ordered by increasing criticality."""

    TRACE = 5
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40
    FATAL = 50

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, LogLevel):
            return NotImplemented
        return self.value >= other.value

    def __str__(self) -> str:
        return self.name

    @property
    def severity(self) -> str:
        """Return the lowercase severity name for structured payloads."""

        return self.name.lower()

    @property
    def icon(self) -> str:
        """Return the unicode icon visualising the level on colored consoles."""

        return _ICON_TABLE[self]

    @property
    def code(self) -> str:
        """Return the fixed-width four-letter code used in compact layouts."""

        return _CODE_TABLE[self]

    def to_python_level(self) -> int:
        """Return the numeric :mod:`logging` level matching this severity."""

        return self.value

    @classmethod
    def from_name(cls, name: str) -> "LogLevel":
        """Resolve ``name`` case-insensitively, accepting common aliases.

        Examples
        --------
        >>> LogLevel.from_name("warn") is LogLevel.WARNING
        True
        >>> LogLevel.from_name("Critical") is LogLevel.FATAL
        True
        """
        normalized = name.strip().upper()
        normalized = _ALIASES.get(normalized, normalized)
        try:
            return cls[normalized]
        except KeyError as exc:
            raise ValueError(f"Unknown log level: {name!r}") from exc

    @classmethod
    def from_python_level(cls, level: int) -> "LogLevel":
        """Translate a stdlib logging level integer into :class:`LogLevel`."""
        return cls.from_numeric(level)

    @classmethod
    def from_numeric(cls, level: int) -> "LogLevel":
        """Return the :class:`LogLevel` corresponding to ``level``."""
        try:
            return cls(level)
        except ValueError as exc:
            raise ValueError(f"Unsupported log level numeric: {level}") from exc


_ALIASES = {
    "WARN": "WARNING",
    "CRITICAL": "FATAL",
    "ERR": "ERROR",
}

# Console glyphs displayed by the Rich sink per log level.
_ICON_TABLE = {
    LogLevel.TRACE: "·",
    LogLevel.DEBUG: "🐞",
    LogLevel.INFO: "ℹ",
    LogLevel.WARNING: "⚠",
    LogLevel.ERROR: "✖",
    LogLevel.FATAL: "☠",
}
_CODE_TABLE = {
    LogLevel.TRACE: "TRCE",
    LogLevel.DEBUG: "DEBG",
    LogLevel.INFO: "INFO",
    LogLevel.WARNING: "WARN",
    LogLevel.ERROR: "ERRO",
    LogLevel.FATAL: "FATL",
}


def coerce_level(level: str | int | LogLevel) -> LogLevel:
    """Normalise level inputs (name, number or enum) into :class:`LogLevel`.

    Examples
    --------
    >>> coerce_level("warning") is LogLevel.WARNING
    True
    >>> coerce_level(LogLevel.ERROR) is LogLevel.ERROR
    True
    """
    if isinstance(level, LogLevel):
        return level
    if isinstance(level, int):
        return LogLevel.from_numeric(level)
    return LogLevel.from_name(level)


__all__ = ["LogLevel", "coerce_level"]
