from __future__ import annotations

import threading
from typing import Any

import pytest

from lib_log_hub.adapters import MemorySink, RichConsoleSink
from lib_log_hub.domain import LogEvent, LoggerConfig, LogLevel, NameFilter, ThresholdFilter
from lib_log_hub.runtime import Dispatcher, DispatcherState, LoggingMethods, NamedLogger
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


class _OrderedSink:
    def __init__(self, name: str, order: list[str]) -> None:
        self.name = name
        self.order = order
        self.events: list[LogEvent] = []

    def write(self, event: LogEvent) -> None:
        self.events.append(event)

    def close(self) -> None:
        self.order.append(self.name)


def _dispatcher(config: LoggerConfig | None = None, **kwargs: Any) -> tuple[Dispatcher, MemorySink]:
    sink = MemorySink()
    dispatcher = Dispatcher(**kwargs).init(config or LoggerConfig(min_level=LogLevel.TRACE), sinks=[sink], release=False)
    return dispatcher, sink


def test_buffer_keeps_most_recent_events() -> None:
    """With capacity three only the last three messages are retained."""

    dispatcher, _ = _dispatcher(LoggerConfig(buffer_size=3))
    for index in range(1, 5):
        dispatcher.info(f"m{index}")
    assert [event.message for event in dispatcher.buffered_events()] == ["m2", "m3", "m4"]
    assert [event.message for event in dispatcher.recent_events(1)] == ["m4"]


def test_threshold_delivers_only_warning_and_above() -> None:
    """A WARNING threshold lets warnings and errors through."""

    dispatcher, sink = _dispatcher(LoggerConfig(min_level=LogLevel.WARNING))
    dispatcher.info("i")
    dispatcher.warning("w")
    dispatcher.error("e")
    assert sink.messages == ["w", "e"]
    assert [event.message for event in dispatcher.buffered_events()] == ["w", "e"]


def test_named_view_stamps_logger_name() -> None:
    """Named views tag events while the root dispatcher leaves the name empty."""

    dispatcher, sink = _dispatcher()
    auth = dispatcher.named("Auth")
    auth.info("login")
    dispatcher.info("root")
    assert isinstance(auth, NamedLogger)
    assert [(event.logger_name, event.message) for event in sink.events] == [("Auth", "login"), (None, "root")]


def test_named_view_children_and_validation() -> None:
    dispatcher, sink = _dispatcher()
    dispatcher.named("App").named("db").debug("query")
    assert sink.events[0].logger_name == "App.db"
    with pytest.raises(ValueError):
        dispatcher.named("")


def test_error_captures_trace_and_warning_does_not() -> None:
    dispatcher, sink = _dispatcher()
    dispatcher.error("boom", error=RuntimeError("x"))
    dispatcher.warning("careful")
    error_event, warning_event = sink.events
    assert error_event.trace and "test_error_captures_trace_and_warning_does_not" in error_event.trace
    assert warning_event.trace is None
    assert isinstance(error_event.error, RuntimeError)


def test_disabled_dispatcher_builds_no_event() -> None:
    """Disabled dispatchers return before an event id is even drawn."""

    ids: list[str] = []

    def counting_ids() -> str:
        ids.append("x")
        return f"evt-{len(ids)}"

    dispatcher, sink = _dispatcher(id_provider=counting_ids)
    dispatcher.set_enabled(False)
    dispatcher.fatal("suppressed")
    assert ids == [] and sink.events == ()
    assert dispatcher.state is DispatcherState.DISABLED and not dispatcher.enabled
    dispatcher.set_enabled(True)
    dispatcher.info("again")
    assert sink.messages == ["again"]


def test_failing_listener_does_not_stop_others() -> None:
    """An always-failing listener is reported for every event and nothing else breaks."""

    reports: list[str] = []
    dispatcher, sink = _dispatcher(diagnostic_hook=lambda name, payload: reports.append(name))
    seen: list[str] = []

    def broken(event: LogEvent) -> None:
        raise RuntimeError("always fails")

    dispatcher.add_listener(broken)
    dispatcher.add_listener(lambda event: seen.append(event.message))
    dispatcher.info("one")
    dispatcher.info("two")
    assert seen == ["one", "two"]
    assert sink.messages == ["one", "two"]
    assert reports == ["listener_error", "listener_error"]


def test_listener_registry_operations() -> None:
    dispatcher, _ = _dispatcher()
    seen: list[str] = []
    listener = seen.append
    dispatcher.add_listener(lambda event: seen.append(event.message))
    dispatcher.add_listener(listener)
    assert dispatcher.remove_listener(listener) is True
    assert dispatcher.remove_listener(listener) is False
    assert len(dispatcher.listeners) == 1
    dispatcher.clear_listeners()
    assert dispatcher.listeners == ()
    with pytest.raises(TypeError):
        dispatcher.add_listener("not callable")  # type: ignore[arg-type]


def test_sink_and_filter_registries() -> None:
    dispatcher, first = _dispatcher()
    second = MemorySink()
    dispatcher.add_sink(second)
    dispatcher.info("both")
    assert dispatcher.remove_sink(second) is True
    dispatcher.info("first only")
    assert second.messages == ["both"]
    assert not second.closed
    assert first.messages == ["both", "first only"]

    only_auth = NameFilter("Auth")
    dispatcher.add_filter(only_auth)
    dispatcher.info("dropped")
    dispatcher.named("Auth").info("kept")
    assert first.messages[-1] == "kept"
    assert dispatcher.remove_filter(only_auth) is True
    assert only_auth not in dispatcher.filters
    with pytest.raises(TypeError):
        dispatcher.add_sink(object())  # type: ignore[arg-type]
    with pytest.raises(TypeError):
        dispatcher.add_filter(object())  # type: ignore[arg-type]


def test_shutdown_closes_sinks_once_in_registration_order() -> None:
    """Shutdown is idempotent and drains the stream before ending it."""

    order: list[str] = []
    dispatcher = Dispatcher().init(sinks=[_OrderedSink("a", order), _OrderedSink("b", order)], release=False)
    subscription = dispatcher.subscribe()
    dispatcher.add_listener(lambda event: None)
    dispatcher.info("x")

    dispatcher.shutdown()
    dispatcher.shutdown()

    assert order == ["a", "b"]
    assert dispatcher.state is DispatcherState.CLOSED
    assert dispatcher.listeners == ()
    assert dispatcher.buffered_events() == ()
    assert [event.message for event in subscription] == ["x"]


def test_closed_dispatcher_ignores_logging_and_rejects_registration() -> None:
    dispatcher, sink = _dispatcher()
    dispatcher.shutdown()
    dispatcher.info("late")
    assert sink.events == ()
    assert dispatcher.state is DispatcherState.CLOSED
    with pytest.raises(RuntimeError):
        dispatcher.add_listener(lambda event: None)


def test_context_manager_shuts_down() -> None:
    sink = MemorySink()
    with Dispatcher().init(sinks=[sink], release=False) as dispatcher:
        dispatcher.info("inside")
    assert sink.closed
    assert dispatcher.state is DispatcherState.CLOSED


def test_reinit_retires_previous_sinks_but_keeps_carried_ones() -> None:
    """Reinitialising closes dropped sinks and ends old subscriptions."""

    carried, retired = MemorySink(), MemorySink()
    dispatcher = Dispatcher().init(sinks=[carried, retired], release=False)
    old_subscription = dispatcher.subscribe()

    dispatcher.init(LoggerConfig(buffer_size=5), sinks=[carried], release=False)
    dispatcher.info("after")

    assert retired.closed and not carried.closed
    assert carried.messages == ["after"]
    assert list(old_subscription) == []
    assert dispatcher.config.buffer_size == 5


def test_reinit_after_shutdown_starts_fresh() -> None:
    dispatcher, first = _dispatcher()
    dispatcher.shutdown()
    second = MemorySink()
    dispatcher.init(sinks=[second], release=False)
    dispatcher.info("fresh")
    assert dispatcher.state is DispatcherState.ACTIVE
    assert second.messages == ["fresh"]
    assert first.events == ()


def test_lazy_initialisation_uses_defaults(monkeypatch: pytest.MonkeyPatch, record_console: Any) -> None:
    monkeypatch.setattr("lib_log_hub.runtime._dispatcher.create_default_sinks", lambda: [RichConsoleSink(console=record_console)])
    dispatcher = Dispatcher()
    assert dispatcher.state is DispatcherState.UNINITIALISED
    dispatcher.info("lazy")
    assert dispatcher.state is DispatcherState.ACTIVE
    assert "lazy" in record_console.export_text()
    assert isinstance(dispatcher.filters[0], ThresholdFilter)
    assert dispatcher.filters[0].min_level is LogLevel.DEBUG


def test_release_build_disables_unless_opted_in() -> None:
    sink = MemorySink()
    dispatcher = Dispatcher().init(sinks=[sink], release=True)
    dispatcher.info("hidden")
    assert dispatcher.state is DispatcherState.DISABLED
    dispatcher.init(LoggerConfig(enable_in_release=True), sinks=[sink], release=True)
    dispatcher.info("shown")
    assert sink.messages == ["shown"]


def test_buffering_can_be_disabled() -> None:
    dispatcher, sink = _dispatcher(LoggerConfig(buffer_size=0))
    dispatcher.info("x")
    assert dispatcher.buffered_events() == ()
    assert dispatcher.recent_events(5) == ()
    assert dispatcher.matching(lambda event: True) == ()
    assert sink.messages == ["x"]


def test_matching_and_clear_buffer() -> None:
    dispatcher, _ = _dispatcher()
    dispatcher.info("a")
    dispatcher.error("b")
    assert [event.message for event in dispatcher.matching(lambda event: event.level >= LogLevel.ERROR)] == ["b"]
    dispatcher.clear_buffer()
    assert dispatcher.buffered_events() == ()


def test_string_levels_and_invalid_levels() -> None:
    reports: list[str] = []
    dispatcher, sink = _dispatcher(diagnostic_hook=lambda name, payload: reports.append(name))
    dispatcher.log("warn", "via name")
    dispatcher.log("nonsense", "never")
    assert sink.messages == ["via name"]
    assert reports == ["dispatch_error"]


def test_failing_sink_is_reported_and_log_never_raises() -> None:
    class Broken:
        def write(self, event: LogEvent) -> None:
            raise OSError("gone")

        def close(self) -> None:
            raise OSError("gone")

    reports: list[str] = []
    healthy = MemorySink()
    dispatcher = Dispatcher(diagnostic_hook=lambda name, payload: reports.append(name)).init(
        sinks=[Broken(), healthy], release=False
    )
    dispatcher.info("x")
    dispatcher.shutdown()
    assert healthy.messages == ["x"] and healthy.closed
    assert reports == ["sink_error", "sink_close_error"]


def test_concurrent_logging_keeps_per_thread_order() -> None:
    """Events from one thread keep their order in sinks and buffer."""

    dispatcher, sink = _dispatcher(LoggerConfig(buffer_size=2000))
    barrier = threading.Barrier(4)

    def produce(worker: int) -> None:
        barrier.wait()
        for index in range(200):
            dispatcher.info(f"{worker}:{index}")

    threads = [threading.Thread(target=produce, args=(worker,)) for worker in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(sink.events) == 800
    for source in (sink.events, dispatcher.buffered_events()):
        for worker in range(4):
            indices = [int(event.message.split(":")[1]) for event in source if event.message.startswith(f"{worker}:")]
            assert indices == list(range(200))


def test_registration_during_logging_is_safe() -> None:
    dispatcher, sink = _dispatcher()
    stop = threading.Event()

    def churn() -> None:
        while not stop.is_set():
            listener = lambda event: None  # noqa: E731
            dispatcher.add_listener(listener)
            dispatcher.remove_listener(listener)

    worker = threading.Thread(target=churn)
    worker.start()
    try:
        for index in range(300):
            dispatcher.info(str(index))
    finally:
        stop.set()
        worker.join()
    assert len(sink.events) == 300


def test_same_sink_cannot_be_registered_twice() -> None:
    """A sink object is written and closed once, so duplicate registration is refused."""

    dispatcher, sink = _dispatcher()
    with pytest.raises(ValueError, match="already registered"):
        dispatcher.add_sink(sink)
    with pytest.raises(ValueError, match="more than once"):
        Dispatcher().init(sinks=[sink, sink], release=False)

    dispatcher.info("once")
    dispatcher.shutdown()
    assert sink.messages == ["once"]
    assert sink.close_calls == 1


def test_logging_methods_require_a_log_implementation() -> None:
    """The level helpers are a mixin; a subclass without ``log`` cannot be built."""

    class Incomplete(LoggingMethods):
        pass

    with pytest.raises(TypeError):
        Incomplete()  # type: ignore[abstract]
