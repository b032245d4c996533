"""Protocols the application layer depends on."""

from __future__ import annotations

from .sink import SinkPort
from .stream import BroadcastPort
from .time import ClockPort, IdProvider

__all__ = ["BroadcastPort", "ClockPort", "IdProvider", "SinkPort"]
