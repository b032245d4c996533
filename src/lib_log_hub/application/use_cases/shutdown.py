"""Shutdown orchestration for a dispatcher runtime.

Purpose
-------
Provide a unified teardown routine that ends the broadcast stream, releases
sinks in registration order, and drops buffered events.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Collection, Sequence

from lib_log_hub.application.ports import BroadcastPort, SinkPort
from lib_log_hub.domain import RingBuffer

from ._diagnostics import build_diagnostic_emitter, report_failure
from ._types import DiagnosticHook


def create_shutdown(
    *,
    stream: BroadcastPort | None,
    sinks: Sequence[SinkPort],
    ring_buffer: RingBuffer | None = None,
    diagnostic: DiagnosticHook = None,
) -> Callable[..., None]:
    """Return an idempotent callable performing the shutdown sequence.

    The returned callable accepts ``keep``: sinks listed there (compared by
    identity) are left open, which lets a reinitialised runtime carry them
    over.
    """

    emit = build_diagnostic_emitter(diagnostic)
    lock = threading.Lock()
    done = False

    def shutdown(*, keep: Collection[SinkPort] = ()) -> None:
        """Close the stream and sinks once, then clear the buffer."""
        nonlocal done
        with lock:
            if done:
                return
            done = True
        if stream is not None:
            try:
                stream.close()
            except Exception as exc:  # noqa: BLE001
                report_failure(emit, "stream_close_error", "Closing the log stream failed", exc, {})
        kept = {id(sink) for sink in keep}
        for sink in sinks:
            if id(sink) in kept:
                continue
            try:
                sink.close()
            except Exception as exc:  # noqa: BLE001
                report_failure(emit, "sink_close_error", "Closing a log sink failed; continuing", exc, {"sink": repr(sink)})
        if ring_buffer is not None:
            ring_buffer.clear()

    return shutdown


__all__ = ["create_shutdown"]
