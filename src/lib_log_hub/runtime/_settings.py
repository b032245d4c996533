"""Configuration resolution: call arguments plus environment overrides.

Purpose
-------
Translate the ``LOG_HUB_*`` environment variables into a
:class:`~lib_log_hub.domain.LoggerConfig`, and decide once per
initialisation whether the process counts as a release build.

Contents
--------
* :func:`resolve_config` – merge overrides on top of a base config.
* :func:`resolve_release` – build-mode policy (``LOG_HUB_RELEASE`` or ``python -O``).
* :func:`resolve_enabled` – the initial enabled flag for a runtime.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from typing import Any

from lib_log_hub.domain import LoggerConfig, LogLevel

ENV_MIN_LEVEL = "LOG_HUB_MIN_LEVEL"
ENV_BUFFER_SIZE = "LOG_HUB_BUFFER_SIZE"
ENV_ENABLE_IN_RELEASE = "LOG_HUB_ENABLE_IN_RELEASE"
ENV_CAPTURE_TRACES = "LOG_HUB_CAPTURE_TRACES"
ENV_STREAM_MAXSIZE = "LOG_HUB_STREAM_MAXSIZE"
ENV_RELEASE = "LOG_HUB_RELEASE"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


def _env_bool(environ: Mapping[str, str], name: str, default: bool) -> bool:
    """Return the boolean value of an environment variable with fallback.

    Examples
    --------
    >>> _env_bool({'FLAG': 'on'}, 'FLAG', default=False)
    True
    >>> _env_bool({}, 'FLAG', default=True)
    True
    """
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    normalized = value.strip().lower()
    if normalized in _TRUTHY:
        return True
    if normalized in _FALSY:
        return False
    raise ValueError(f"{name} must be a boolean flag (1/0, true/false, yes/no, on/off), got {value!r}")


def _env_int(environ: Mapping[str, str], name: str, default: int) -> int:
    value = environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value.strip())
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def resolve_config(config: LoggerConfig | None = None, environ: Mapping[str, str] | None = None) -> LoggerConfig:
    """Return ``config`` (or the defaults) with environment overrides applied.

    Raises
    ------
    ValueError
        When an override cannot be parsed or produces an invalid config.
    """

    env = os.environ if environ is None else environ
    base = config if config is not None else LoggerConfig()
    changes: dict[str, Any] = {}
    raw_level = env.get(ENV_MIN_LEVEL)
    if raw_level and raw_level.strip():
        changes["min_level"] = LogLevel.from_name(raw_level)
    changes["buffer_size"] = _env_int(env, ENV_BUFFER_SIZE, base.buffer_size)
    changes["stream_maxsize"] = _env_int(env, ENV_STREAM_MAXSIZE, base.stream_maxsize)
    changes["enable_in_release"] = _env_bool(env, ENV_ENABLE_IN_RELEASE, base.enable_in_release)
    changes["capture_traces"] = _env_bool(env, ENV_CAPTURE_TRACES, base.capture_traces)
    return base.replace(**changes)


def resolve_release(release: bool | None = None, environ: Mapping[str, str] | None = None) -> bool:
    """Return whether the process runs as a release build.

    An explicit argument wins, then ``LOG_HUB_RELEASE``; otherwise the
    interpreter's optimisation mode decides (``python -O`` clears ``__debug__``).
    """

    if release is not None:
        return release
    env = os.environ if environ is None else environ
    return _env_bool(env, ENV_RELEASE, not __debug__)


def resolve_enabled(config: LoggerConfig, release: bool) -> bool:
    """Logging stays on outside release builds, or when the config opts in."""

    return not release or config.enable_in_release


__all__ = [
    "ENV_BUFFER_SIZE",
    "ENV_CAPTURE_TRACES",
    "ENV_ENABLE_IN_RELEASE",
    "ENV_MIN_LEVEL",
    "ENV_RELEASE",
    "ENV_STREAM_MAXSIZE",
    "resolve_config",
    "resolve_enabled",
    "resolve_release",
]
