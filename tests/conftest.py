"""Shared pytest fixtures for the logging core test-suite."""

from __future__ import annotations

import os
from io import StringIO
from typing import Iterator

import pytest
from rich.console import Console

import lib_log_hub.runtime as runtime
from lib_log_hub import config as log_config

_ENV_VARS = (
    "LOG_HUB_MIN_LEVEL",
    "LOG_HUB_BUFFER_SIZE",
    "LOG_HUB_ENABLE_IN_RELEASE",
    "LOG_HUB_CAPTURE_TRACES",
    "LOG_HUB_STREAM_MAXSIZE",
    "LOG_HUB_RELEASE",
    log_config.DOTENV_ENV_VAR,
)


@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Strip ``LOG_HUB_*`` overrides and forget the default dispatcher around each test.

    Variables written straight into ``os.environ`` during a test (``.env``
    loading does that) are removed afterwards as well.
    """

    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    runtime.reset()
    yield
    runtime.reset()
    for name in _ENV_VARS:
        os.environ.pop(name, None)


@pytest.fixture
def record_console() -> Console:
    """Rich console writing into memory with recording enabled."""

    return Console(file=StringIO(), record=True, width=120, color_system=None)
