from __future__ import annotations

from datetime import datetime, timezone
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...


class SystemClock:
    """UTC wall clock; stamps local messages and contact last-seen times."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
