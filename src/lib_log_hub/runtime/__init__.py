"""Runtime façade exposing the dispatcher and the process-wide default.

Purpose
-------
Give host applications one entry point (``init``, ``get``, ``shutdown``)
instead of importing the inner layers directly, while keeping
:class:`Dispatcher` constructible for hosts and tests that want an isolated
instance.

Contents
--------
* :class:`Dispatcher` / :class:`DispatcherState` – the façade and its lifecycle.
* :class:`NamedLogger` – name-stamping view.
* ``init`` / ``get_dispatcher`` / ``get`` / ``shutdown`` / ``reset`` – helpers
  operating on the process-wide default dispatcher.

System Role
-----------
Outer shell of the clean-architecture layering: it composes domain objects,
use cases and adapters, and hides them behind a small API.
"""

from __future__ import annotations

from collections.abc import Iterable

from lib_log_hub.application.ports import SinkPort
from lib_log_hub.domain import LogFilter, LoggerConfig

from ._dispatcher import Dispatcher, DispatcherState
from ._named import LoggingMethods, NamedLogger
from ._settings import resolve_config, resolve_enabled, resolve_release
from ._state import LoggingRuntime, clear_default, default_dispatcher, has_default


def init(
    config: LoggerConfig | None = None,
    *,
    sinks: Iterable[SinkPort] | None = None,
    filters: Iterable[LogFilter] | None = None,
    release: bool | None = None,
) -> Dispatcher:
    """(Re)initialise the process-wide dispatcher and return it.

    Accepts the same arguments as :meth:`Dispatcher.init`.
    """

    return default_dispatcher().init(config, sinks=sinks, filters=filters, release=release)


def get_dispatcher() -> Dispatcher:
    """Return the process-wide dispatcher, creating it lazily.

    After :func:`shutdown` the closed instance is returned until :func:`init`
    runs again.
    """

    return default_dispatcher()


def get(name: str | None = None) -> Dispatcher | NamedLogger:
    """Return the default dispatcher, or a :class:`NamedLogger` bound to it.

    Examples
    --------
    >>> reset()
    >>> get("Auth").name
    'Auth'
    >>> get() is get_dispatcher()
    True
    >>> reset()
    """

    dispatcher = default_dispatcher()
    if name is None:
        return dispatcher
    return dispatcher.named(name)


def shutdown() -> None:
    """Shut the default dispatcher down; idempotent and safe before ``init``."""

    if has_default():
        default_dispatcher().shutdown()


def reset() -> None:
    """Shut down and forget the default dispatcher so the next access starts fresh."""

    previous = clear_default()
    if previous is not None:
        previous.shutdown()


__all__ = [
    "Dispatcher",
    "DispatcherState",
    "LoggingMethods",
    "LoggingRuntime",
    "NamedLogger",
    "get",
    "get_dispatcher",
    "init",
    "reset",
    "resolve_config",
    "resolve_enabled",
    "resolve_release",
    "shutdown",
]
