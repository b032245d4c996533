"""Severity helpers shared by the dispatcher and its named views."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from typing import TYPE_CHECKING, Any

from lib_log_hub.domain import LogLevel

if TYPE_CHECKING:
    from ._dispatcher import Dispatcher


class LoggingMethods(ABC):
    """Level-specific shortcuts delegating to :meth:`log`.

    Subclasses provide ``log(level, message, *, error, trace, tags, metadata)``.
    """

    @abstractmethod
    def log(
        self,
        level: LogLevel | str,
        message: str,
        *,
        error: object | None = None,
        trace: str | None = None,
        tags: Iterable[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        """Dispatch one event at ``level``."""

    def trace(
        self,
        message: str,
        *,
        error: object | None = None,
        trace: str | None = None,
        tags: Iterable[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        """Emit a ``TRACE`` message for fine-grained flow tracing."""
        self.log(LogLevel.TRACE, message, error=error, trace=trace, tags=tags, metadata=metadata)

    def debug(
        self,
        message: str,
        *,
        error: object | None = None,
        trace: str | None = None,
        tags: Iterable[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        """Emit a ``DEBUG`` message."""
        self.log(LogLevel.DEBUG, message, error=error, trace=trace, tags=tags, metadata=metadata)

    def info(
        self,
        message: str,
        *,
        error: object | None = None,
        trace: str | None = None,
        tags: Iterable[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        """Emit an ``INFO`` message."""
        self.log(LogLevel.INFO, message, error=error, trace=trace, tags=tags, metadata=metadata)

    def warning(
        self,
        message: str,
        *,
        error: object | None = None,
        trace: str | None = None,
        tags: Iterable[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        """Emit a ``WARNING`` message for notable but non-fatal conditions."""
        self.log(LogLevel.WARNING, message, error=error, trace=trace, tags=tags, metadata=metadata)

    def error(
        self,
        message: str,
        *,
        error: object | None = None,
        trace: str | None = None,
        tags: Iterable[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        """Emit an ``ERROR`` message; the stack is captured when configured."""
        self.log(LogLevel.ERROR, message, error=error, trace=trace, tags=tags, metadata=metadata)

    def fatal(
        self,
        message: str,
        *,
        error: object | None = None,
        trace: str | None = None,
        tags: Iterable[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        """Emit a ``FATAL`` message for unrecoverable failures."""
        self.log(LogLevel.FATAL, message, error=error, trace=trace, tags=tags, metadata=metadata)

    critical = fatal


class NamedLogger(LoggingMethods):
    """View of a :class:`Dispatcher` that stamps events with a logger name.

    The view holds no state of its own: filters, buffer, stream, listeners and
    sinks all belong to the dispatcher.
    """

    def __init__(self, name: str, dispatcher: "Dispatcher") -> None:
        if not isinstance(name, str) or not name:
            raise ValueError("logger name must be a non-empty string")
        self._name = name
        self._dispatcher = dispatcher

    @property
    def name(self) -> str:
        return self._name

    @property
    def dispatcher(self) -> "Dispatcher":
        return self._dispatcher

    def named(self, child: str) -> "NamedLogger":
        """Return a view named ``<name>.<child>`` on the same dispatcher."""
        return NamedLogger(f"{self._name}.{child}", self._dispatcher)

    def log(
        self,
        level: LogLevel | str,
        message: str,
        *,
        error: object | None = None,
        trace: str | None = None,
        tags: Iterable[str] | None = None,
        metadata: Mapping[str, Any] | None = None,
    ) -> None:
        self._dispatcher.log(
            level,
            message,
            logger_name=self._name,
            error=error,
            trace=trace,
            tags=tags,
            metadata=metadata,
        )

    def __repr__(self) -> str:
        return f"NamedLogger({self._name!r})"


__all__ = ["LoggingMethods", "NamedLogger"]
