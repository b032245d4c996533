"""Fallback reporting channel for faults inside the logging pipeline.

Faults raised by listeners, sinks or the stream must never reach the code that
logged the event. They are reported here instead: through the stdlib
:mod:`logging` logger of this package (Python's last-resort handler prints to
stderr when the host configured none) and through the optional diagnostic
hook supplied at initialisation.
"""

from __future__ import annotations

import contextlib
import logging
import sys
from collections.abc import Callable
from typing import Any

from ._types import DiagnosticHook

LOGGER = logging.getLogger("lib_log_hub")

Emitter = Callable[[str, dict[str, Any]], None]


def build_diagnostic_emitter(diagnostic: DiagnosticHook) -> Emitter:
    """Return a callable that forwards to ``diagnostic`` without ever raising."""

    def emit(name: str, payload: dict[str, Any]) -> None:
        if diagnostic is None:
            return
        try:
            diagnostic(name, payload)
        except Exception as exc:  # noqa: BLE001
            LOGGER.error("Diagnostic hook raised while reporting %s", name, exc_info=exc)

    return emit


def report_failure(emit: Emitter, name: str, message: str, exc: BaseException, payload: dict[str, Any]) -> None:
    """Log ``exc`` on the fallback channel and notify the diagnostic hook.

    Nothing escapes this function; when the logging machinery itself fails the
    report degrades to a bare write on ``sys.stderr``.
    """

    details = dict(payload)
    details["exception"] = repr(exc)
    try:
        LOGGER.error(message, exc_info=exc)
        emit(name, details)
    except Exception:  # noqa: BLE001
        with contextlib.suppress(Exception):
            sys.stderr.write(f"lib_log_hub internal error ({name}): {exc!r}\n")


__all__ = ["Emitter", "LOGGER", "build_diagnostic_emitter", "report_failure"]
