"""Rich-powered console sink implementing :class:`SinkPort`.

Purpose
-------
Default human-facing sink: renders each accepted event on the terminal with a
level-coloured label followed by error, trace, tags and metadata lines.

Contents
--------
* :data:`_STYLE_MAP` - default level-to-style mapping.
* :class:`RichConsoleSink` - sink installed by the dispatcher when the host
  supplies none.

System Role
-----------
Terminal detection and colour downgrade are left to :class:`rich.console.Console`;
``force_color`` / ``no_color`` map onto its switches.
"""

from __future__ import annotations

import threading
from typing import Mapping

from rich.console import Console
from rich.text import Text

from lib_log_hub.application.ports.sink import SinkPort
from lib_log_hub.domain.events import LogEvent
from lib_log_hub.domain.levels import LogLevel

from .._formatting import build_format_payload, format_clock


#: Default Rich styles keyed by :class:`LogLevel` severity.
_STYLE_MAP: Mapping[LogLevel, str] = {
    LogLevel.TRACE: "bright_black",
    LogLevel.DEBUG: "cyan",
    LogLevel.INFO: "green",
    LogLevel.WARNING: "yellow",
    LogLevel.ERROR: "red",
    LogLevel.FATAL: "bold magenta",
}

_MAX_TRACE_LINES = 10


class RichConsoleSink(SinkPort):
    """Render log events using Rich formatting with style overrides."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
        styles: Mapping[LogLevel | str, str] | None = None,
        format_template: str | None = None,
        include_timestamp: bool = True,
        include_logger_name: bool = True,
    ) -> None:
        """Configure the sink with colour switches, style overrides and layout."""
        if console is not None:
            self._console = console
        else:
            self._console = Console(force_terminal=force_color or None, no_color=no_color, stderr=False)
        self._no_color = no_color
        merged = dict(_STYLE_MAP)
        for key, value in (styles or {}).items():
            level = LogLevel.from_name(key) if isinstance(key, str) else key
            merged[level] = value
        self._style_map = merged
        self._format_template = format_template
        self._include_timestamp = include_timestamp
        self._include_logger_name = include_logger_name
        self._closed = False
        self._lock = threading.Lock()

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, event: LogEvent) -> None:
        """Print ``event``; ignored once the sink is closed.

        Examples
        --------
        >>> from io import StringIO
        >>> console = Console(file=StringIO(), record=True)
        >>> sink = RichConsoleSink(console=console)
        >>> sink.write(LogEvent.create(LogLevel.INFO, 'msg', logger_name='svc'))
        >>> '[svc] msg' in console.export_text()
        True
        """
        if self._closed:
            return
        rendered = self.render(event)
        with self._lock:
            self._console.print(rendered, highlight=False, soft_wrap=True)

    def close(self) -> None:
        """Flush the console file once; later writes are dropped."""
        if self._closed:
            return
        self._closed = True
        flush = getattr(self._console.file, "flush", None)
        if flush is not None:
            flush()

    def render(self, event: LogEvent) -> Text:
        """Return the Rich :class:`Text` printed for ``event``."""
        if self._format_template is not None:
            return Text(self._format_template.format(**build_format_payload(event)), style=self._style_for(event.level))
        text = Text()
        if self._include_timestamp:
            text.append(f"[{format_clock(event.timestamp)}] ", style="" if self._no_color else "dim")
        text.append(f"{event.level.name:<7}", style=self._style_for(event.level))
        text.append(" ")
        if self._include_logger_name and event.logger_name is not None:
            text.append(f"[{event.logger_name}] ", style="" if self._no_color else "bold")
        text.append(event.message)
        for line in self._detail_lines(event):
            text.append("\n")
            text.append(line)
        return text

    def _style_for(self, level: LogLevel) -> str:
        if self._no_color:
            return ""
        return self._style_map.get(level, "")

    @staticmethod
    def _detail_lines(event: LogEvent) -> list[str]:
        lines: list[str] = []
        if event.error is not None:
            lines.append(f"  Error: {event.error}")
        if event.trace:
            trace_lines = [line for line in event.trace.splitlines() if line.strip()]
            lines.extend(f"    {line}" for line in trace_lines[:_MAX_TRACE_LINES])
        if event.tags:
            lines.append(f"  Tags: {', '.join(event.tags)}")
        if event.metadata:
            payload = build_format_payload(event)
            lines.append(f"  Metadata:{payload['metadata_fields']}")
        return lines


__all__ = ["RichConsoleSink"]
