from __future__ import annotations

import re

import pytest

from lib_log_hub.domain.events import LogEvent
from lib_log_hub.domain.filters import CompositeFilter, LogFilter, NameFilter, PredicateFilter, ThresholdFilter
from lib_log_hub.domain.levels import LogLevel
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def _event(level: LogLevel = LogLevel.INFO, name: str | None = None) -> LogEvent:
    return LogEvent.create(level, "msg", logger_name=name)


def test_threshold_is_inclusive() -> None:
    gate = ThresholdFilter(LogLevel.WARNING)
    assert not gate.should_log(_event(LogLevel.INFO))
    assert gate.should_log(_event(LogLevel.WARNING))
    assert gate.should_log(_event(LogLevel.FATAL))


def test_threshold_rejects_unknown_level_names() -> None:
    with pytest.raises(ValueError):
        ThresholdFilter("loud")


def test_name_filter_substring_include_and_exclude() -> None:
    include = NameFilter("Auth")
    exclude = NameFilter("Auth", include=False)
    assert include.should_log(_event(name="App.Auth"))
    assert not include.should_log(_event(name="Billing"))
    assert not exclude.should_log(_event(name="App.Auth"))
    assert exclude.should_log(_event(name="Billing"))


def test_name_filter_with_regex() -> None:
    compiled = NameFilter(re.compile(r"^db\."))
    flagged = NameFilter(r"\.worker$", regex=True)
    assert compiled.should_log(_event(name="db.pool"))
    assert not compiled.should_log(_event(name="app.db.pool"))
    assert flagged.should_log(_event(name="queue.worker"))


def test_name_filter_without_logger_name() -> None:
    """Root events never match a name, so they pass only exclusion filters."""

    assert not NameFilter("Auth").should_log(_event())
    assert NameFilter("Auth", include=False).should_log(_event())


def test_invalid_regex_fails_at_construction() -> None:
    with pytest.raises(ValueError, match="Invalid logger name pattern"):
        NameFilter("(", regex=True)


def test_composite_is_and_and_short_circuits() -> None:
    """Later filters are not consulted once an earlier one rejects."""

    seen: list[str] = []

    def spy(event: LogEvent) -> bool:
        seen.append(event.message)
        return True

    composite = CompositeFilter([ThresholdFilter(LogLevel.ERROR), PredicateFilter(spy)])
    assert not composite.should_log(_event(LogLevel.INFO))
    assert seen == []
    assert composite.should_log(_event(LogLevel.ERROR))
    assert seen == ["msg"]


def test_empty_composite_passes_everything() -> None:
    assert CompositeFilter().should_log(_event(LogLevel.TRACE))


def test_filters_satisfy_the_protocol() -> None:
    class Duck:
        def should_log(self, event: LogEvent) -> bool:
            return True

    for candidate in (ThresholdFilter("info"), NameFilter("x"), CompositeFilter(), PredicateFilter(bool), Duck()):
        assert isinstance(candidate, LogFilter)
    assert not isinstance(object(), LogFilter)


def test_predicate_filter_requires_callable() -> None:
    with pytest.raises(TypeError):
        PredicateFilter("nope")  # type: ignore[arg-type]
