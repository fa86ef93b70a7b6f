"""Clock abstraction for injectable time source."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Protocol


class Clock(Protocol):
    def now(self) -> datetime: ...
    def now_iso(self) -> str: ...


class SystemClock:
    """Default implementation: system clock, UTC unless a zone is given."""

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz or timezone.utc

    def now(self) -> datetime:
        return datetime.now(self._tz)

    def now_iso(self) -> str:
        return self.now().isoformat()
