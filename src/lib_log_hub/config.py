"""Optional ``.env`` loading for hosts and the CLI.

Purpose
-------
Let operators keep ``LOG_HUB_*`` overrides in a ``.env`` file next to their
project. Values already present in the process environment always win.

Contents
--------
* :data:`DOTENV_ENV_VAR` – environment toggle (``LOG_HUB_USE_DOTENV``).
* :func:`enable_dotenv` – load the nearest ``.env`` once per process.
* :func:`should_use_dotenv` – precedence between CLI flag and environment.
"""

from __future__ import annotations

import threading
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

DOTENV_ENV_VAR = "LOG_HUB_USE_DOTENV"

_TRUTHY = {"1", "true", "yes", "on"}

_LOCK = threading.Lock()
_LOADED_PATH: Path | None = None
_ATTEMPTED = False


def enable_dotenv(*, search_from: Path | None = None) -> Path | None:
    """Load the nearest ``.env`` file into ``os.environ`` and return its path.

    The search walks upwards from ``search_from`` (default: the current
    working directory). Existing environment variables are not overridden.
    Only the first call per process touches the filesystem; later calls
    return the cached result.
    """

    global _LOADED_PATH, _ATTEMPTED
    with _LOCK:
        if _ATTEMPTED:
            return _LOADED_PATH
        _ATTEMPTED = True
        if search_from is not None:
            candidate = _search_upwards(search_from.resolve())
        else:
            found = find_dotenv(usecwd=True)
            candidate = Path(found).resolve() if found else None
        if candidate is None:
            return None
        load_dotenv(dotenv_path=candidate, override=False)
        _LOADED_PATH = candidate
        return candidate


def _search_upwards(start: Path) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / ".env"
        if candidate.is_file():
            return candidate
    return None


def should_use_dotenv(*, explicit: bool | None = None, env_value: str | None = None) -> bool:
    """Decide whether ``.env`` loading is requested.

    An explicit CLI flag wins; otherwise a truthy ``LOG_HUB_USE_DOTENV`` value
    enables it.

    Examples
    --------
    >>> should_use_dotenv(explicit=False, env_value='1')
    False
    >>> should_use_dotenv(env_value='yes')
    True
    >>> should_use_dotenv()
    False
    """

    if explicit is not None:
        return explicit
    if env_value is None:
        return False
    return env_value.strip().lower() in _TRUTHY


def _reset_dotenv_state_for_testing() -> None:
    global _LOADED_PATH, _ATTEMPTED
    with _LOCK:
        _LOADED_PATH = None
        _ATTEMPTED = False


__all__ = ["DOTENV_ENV_VAR", "enable_dotenv", "should_use_dotenv"]
