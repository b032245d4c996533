from __future__ import annotations

import pytest

from lib_log_hub.adapters import MemorySink
from lib_log_hub.domain import LoggerConfig, LogLevel
from lib_log_hub.runtime import Dispatcher, DispatcherState, resolve_config, resolve_enabled, resolve_release
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def test_environment_overrides_arguments() -> None:
    """``LOG_HUB_*`` variables win over the configuration passed to ``init``."""

    environ = {
        "LOG_HUB_MIN_LEVEL": "error",
        "LOG_HUB_BUFFER_SIZE": "7",
        "LOG_HUB_CAPTURE_TRACES": "off",
        "LOG_HUB_ENABLE_IN_RELEASE": "yes",
        "LOG_HUB_STREAM_MAXSIZE": "16",
    }
    resolved = resolve_config(LoggerConfig(min_level=LogLevel.DEBUG, buffer_size=100), environ)
    assert resolved == LoggerConfig(
        min_level=LogLevel.ERROR,
        buffer_size=7,
        enable_in_release=True,
        capture_traces=False,
        stream_maxsize=16,
    )


def test_blank_values_fall_back_to_arguments() -> None:
    config = LoggerConfig(buffer_size=3)
    assert resolve_config(config, {"LOG_HUB_BUFFER_SIZE": "  ", "LOG_HUB_MIN_LEVEL": ""}) == config


@pytest.mark.parametrize(
    "environ",
    [
        {"LOG_HUB_MIN_LEVEL": "loud"},
        {"LOG_HUB_BUFFER_SIZE": "many"},
        {"LOG_HUB_BUFFER_SIZE": "-1"},
        {"LOG_HUB_CAPTURE_TRACES": "maybe"},
    ],
)
def test_malformed_overrides_raise(environ: dict[str, str]) -> None:
    with pytest.raises(ValueError):
        resolve_config(None, environ)


def test_release_policy() -> None:
    """Release builds stay quiet unless the configuration opts in."""

    assert resolve_release(True, {}) is True
    assert resolve_release(None, {"LOG_HUB_RELEASE": "1"}) is True
    assert resolve_release(None, {}) is (not __debug__)
    assert resolve_enabled(LoggerConfig(), release=False) is True
    assert resolve_enabled(LoggerConfig(), release=True) is False
    assert resolve_enabled(LoggerConfig(enable_in_release=True), release=True) is True


def test_init_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_HUB_MIN_LEVEL", "warning")
    monkeypatch.setenv("LOG_HUB_RELEASE", "false")
    sink = MemorySink()
    dispatcher = Dispatcher().init(LoggerConfig(min_level=LogLevel.TRACE), sinks=[sink])
    dispatcher.info("hidden")
    dispatcher.warning("shown")
    assert dispatcher.config.min_level is LogLevel.WARNING
    assert sink.messages == ["shown"]


def test_init_with_release_environment_disables(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_HUB_RELEASE", "true")
    dispatcher = Dispatcher().init(sinks=[MemorySink()])
    assert dispatcher.state is DispatcherState.DISABLED


def test_malformed_environment_fails_init(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_HUB_BUFFER_SIZE", "lots")
    with pytest.raises(ValueError, match="LOG_HUB_BUFFER_SIZE"):
        Dispatcher().init(sinks=[])
