"""Ports for time and identifier generation."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol, runtime_checkable


@runtime_checkable
class ClockPort(Protocol):
    """Provide the current timestamp."""

    def now(self) -> datetime: ...


@runtime_checkable
class IdProvider(Protocol):
    """Generate unique identifiers for log events."""

    def __call__(self) -> str: ...


__all__ = ["ClockPort", "IdProvider"]
