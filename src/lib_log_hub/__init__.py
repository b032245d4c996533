"""Public package surface of the structured logging core.

Host applications import from here: the severity scale, event and filter
types, configuration, the sinks shipped with the package, and the dispatcher
façade with its process-wide default helpers.

Examples
--------
>>> import lib_log_hub as log
>>> sink = log.MemorySink()
>>> with log.Dispatcher().init(log.LoggerConfig(min_level="warning"), sinks=[sink]) as dispatcher:
...     dispatcher.info("i")
...     dispatcher.named("Auth").warning("w")
>>> [(event.logger_name, event.message) for event in sink.events]
[('Auth', 'w')]
"""

from __future__ import annotations

from .adapters import AsyncSubscription, EventStream, MemorySink, RichConsoleSink, StreamClosed, Subscription
from .application.ports import SinkPort
from .domain import (
    CompositeFilter,
    LogEvent,
    LogFilter,
    LoggerConfig,
    LogLevel,
    NameFilter,
    PredicateFilter,
    RingBuffer,
    ThresholdFilter,
)
from .runtime import Dispatcher, DispatcherState, NamedLogger, get, get_dispatcher, init, reset, shutdown

__all__ = [
    "AsyncSubscription",
    "CompositeFilter",
    "Dispatcher",
    "DispatcherState",
    "EventStream",
    "LogEvent",
    "LogFilter",
    "LogLevel",
    "LoggerConfig",
    "MemorySink",
    "NameFilter",
    "NamedLogger",
    "PredicateFilter",
    "RichConsoleSink",
    "RingBuffer",
    "SinkPort",
    "StreamClosed",
    "Subscription",
    "ThresholdFilter",
    "get",
    "get_dispatcher",
    "init",
    "reset",
    "shutdown",
]
