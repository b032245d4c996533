from __future__ import annotations

from lib_log_hub.adapters.memory import MemorySink
from lib_log_hub.application.ports import SinkPort
from lib_log_hub.domain import LogEvent, LogLevel
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def test_memory_sink_records_snapshots() -> None:
    sink = MemorySink()
    sink.write(LogEvent.create(LogLevel.INFO, "a"))
    snapshot = sink.events
    sink.write(LogEvent.create(LogLevel.INFO, "b"))
    assert [event.message for event in snapshot] == ["a"]
    assert sink.messages == ["a", "b"]
    sink.clear()
    assert sink.events == ()


def test_memory_sink_counts_close_calls_and_satisfies_port() -> None:
    sink = MemorySink()
    assert isinstance(sink, SinkPort)
    sink.close()
    sink.close()
    assert sink.closed
    assert sink.close_calls == 2
