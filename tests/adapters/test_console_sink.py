from __future__ import annotations

from datetime import datetime, timezone

from rich.console import Console

from lib_log_hub.adapters.console.rich_console import RichConsoleSink
from lib_log_hub.domain.events import LogEvent
from lib_log_hub.domain.levels import LogLevel
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def _event(**overrides: object) -> LogEvent:
    payload: dict[str, object] = {
        "event_id": "evt-1",
        "timestamp": datetime(2025, 9, 23, 12, 0, 1, 250000, tzinfo=timezone.utc),
        "level": LogLevel.WARNING,
        "message": "disk almost full",
        "logger_name": "Storage",
    }
    payload.update(overrides)
    return LogEvent(**payload)  # type: ignore[arg-type]


def test_renders_timestamp_level_name_and_message(record_console: Console) -> None:
    """The first line shows clock, padded level, logger name and message."""

    sink = RichConsoleSink(console=record_console)
    sink.write(_event())
    output = record_console.export_text()
    assert output.startswith("[12:00:01.250] WARNING [Storage] disk almost full")


def test_renders_detail_lines(record_console: Console) -> None:
    sink = RichConsoleSink(console=record_console)
    sink.write(
        _event(
            error=OSError("no space"),
            trace="line one\nline two",
            tags=("disk", "ops"),
            metadata={"free_mb": 12},
        )
    )
    lines = record_console.export_text().splitlines()
    assert "  Error: no space" in lines
    assert "    line one" in lines
    assert "  Tags: disk, ops" in lines
    assert "  Metadata: free_mb=12" in lines


def test_trace_is_truncated_to_ten_lines(record_console: Console) -> None:
    """Long traces are cut after ten lines to keep the console readable."""

    sink = RichConsoleSink(console=record_console)
    trace = "\n".join(f"frame {index}" for index in range(25))
    sink.write(_event(trace=trace))
    output = record_console.export_text()
    assert "frame 9" in output
    assert "frame 10" not in output


def test_root_events_have_no_name_column(record_console: Console) -> None:
    sink = RichConsoleSink(console=record_console, include_timestamp=False)
    sink.write(_event(logger_name=None, level=LogLevel.INFO, message="root"))
    assert record_console.export_text().startswith("INFO    root")


def test_format_template_overrides_layout(record_console: Console) -> None:
    sink = RichConsoleSink(console=record_console, format_template="{level_code}|{logger_name}|{message}")
    sink.write(_event())
    assert record_console.export_text().strip() == "WARN|Storage|disk almost full"


def test_style_overrides_and_no_color() -> None:
    sink = RichConsoleSink(console=Console(record=True), styles={"warning": "bold blue"})
    assert sink.render(_event()).spans[1].style == "bold blue"
    plain = RichConsoleSink(console=Console(record=True), no_color=True)
    assert all(not span.style for span in plain.render(_event()).spans)


def test_writes_after_close_are_ignored(record_console: Console) -> None:
    sink = RichConsoleSink(console=record_console)
    sink.close()
    sink.close()
    sink.write(_event())
    assert sink.closed
    assert record_console.export_text() == ""
