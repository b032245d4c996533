"""Predicates deciding whether a log event continues through the pipeline.

Purpose
-------
Model the filter chain as small, stateless value objects so the dispatcher can
evaluate them without locks and so malformed configuration fails when the
filter is built rather than while events are dispatched.

Contents
--------
* :class:`LogFilter` – runtime-checkable protocol (``should_log``).
* :class:`ThresholdFilter` – minimum-severity gate.
* :class:`NameFilter` – include/exclude by logger name (substring or regex).
* :class:`CompositeFilter` – ordered, short-circuiting AND of sub-filters.
* :class:`PredicateFilter` – adapter for ad-hoc callables.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from typing import Pattern, Protocol, runtime_checkable

from .events import LogEvent
from .levels import LogLevel, coerce_level


@runtime_checkable
class LogFilter(Protocol):
    """Decide whether ``event`` should be processed further."""

    def should_log(self, event: LogEvent) -> bool:
        """Return ``True`` when the event passes this filter."""


class ThresholdFilter(LogFilter):
    """Pass events whose level is at least ``min_level``.

    Examples
    --------
    >>> ThresholdFilter("warning").min_level is LogLevel.WARNING
    True
    """

    def __init__(self, min_level: LogLevel | str) -> None:
        self._min_level = coerce_level(min_level)

    @property
    def min_level(self) -> LogLevel:
        return self._min_level

    def should_log(self, event: LogEvent) -> bool:
        return event.level >= self._min_level

    def __repr__(self) -> str:
        return f"ThresholdFilter({self._min_level.name})"


class NameFilter(LogFilter):
    """Include or exclude events by the name of the emitting logger.

    A plain string pattern is matched as a substring; a compiled
    :class:`re.Pattern`, or a string with ``regex=True``, is matched with
    :meth:`re.Pattern.search`. Events without a logger name pass only when
    ``include`` is ``False``.
    """

    def __init__(self, pattern: str | Pattern[str], *, include: bool = True, regex: bool = False) -> None:
        if isinstance(pattern, re.Pattern):
            self._pattern: str | Pattern[str] = pattern
        elif regex:
            try:
                self._pattern = re.compile(pattern)
            except re.error as exc:
                raise ValueError(f"Invalid logger name pattern {pattern!r}: {exc}") from exc
        elif isinstance(pattern, str):
            self._pattern = pattern
        else:
            raise TypeError(f"pattern must be a string or compiled regex, got {type(pattern).__name__}")
        self._include = include

    @property
    def include(self) -> bool:
        return self._include

    def should_log(self, event: LogEvent) -> bool:
        name = event.logger_name
        if name is None:
            return not self._include
        if isinstance(self._pattern, str):
            matches = self._pattern in name
        else:
            matches = self._pattern.search(name) is not None
        return matches == self._include

    def __repr__(self) -> str:
        pattern = self._pattern if isinstance(self._pattern, str) else self._pattern.pattern
        return f"NameFilter({pattern!r}, include={self._include})"


class CompositeFilter(LogFilter):
    """Require every contained filter to pass, evaluated in order.

    Evaluation stops at the first rejecting filter. An empty composite passes
    everything.
    """

    def __init__(self, filters: Iterable[LogFilter] = ()) -> None:
        self._filters: tuple[LogFilter, ...] = tuple(filters)

    @property
    def filters(self) -> tuple[LogFilter, ...]:
        return self._filters

    def should_log(self, event: LogEvent) -> bool:
        return all(item.should_log(event) for item in self._filters)

    def __repr__(self) -> str:
        return f"CompositeFilter({list(self._filters)!r})"


class PredicateFilter(LogFilter):
    """Wrap a plain callable as a :class:`LogFilter`."""

    def __init__(self, predicate: Callable[[LogEvent], bool]) -> None:
        if not callable(predicate):
            raise TypeError("predicate must be callable")
        self._predicate = predicate

    def should_log(self, event: LogEvent) -> bool:
        return bool(self._predicate(event))


__all__ = [
    "CompositeFilter",
    "LogFilter",
    "NameFilter",
    "PredicateFilter",
    "ThresholdFilter",
]
