"""Coarse relative-time rendering ("3 hours ago")."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo
from typing import Final, Union

from uuid_timestamp_sdk.core.clock import Clock, SystemClock
from uuid_timestamp_sdk.core.decoder import parse_instant
from uuid_timestamp_sdk.core.types import RelativeDuration, TimeUnit

SECONDS_PER_MINUTE: Final[int] = 60
SECONDS_PER_HOUR: Final[int] = 3600
SECONDS_PER_DAY: Final[int] = 86400

LESS_THAN_A_MINUTE: Final[str] = "Less than a minute ago"

ReferenceInstant = Union[datetime, int, float]

# Checked in order, first match wins.
_BUCKETS: list[tuple[TimeUnit, int]] = [
    (TimeUnit.DAY, SECONDS_PER_DAY),
    (TimeUnit.HOUR, SECONDS_PER_HOUR),
    (TimeUnit.MINUTE, SECONDS_PER_MINUTE),
]


def _to_seconds(value: ReferenceInstant, tz: tzinfo) -> float:
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=tz)
        return value.timestamp()
    return float(value)


def relative_duration(
    instant_seconds: ReferenceInstant, now_seconds: ReferenceInstant
) -> RelativeDuration:
    """Bucket the absolute distance between two instants.

    The distance is symmetric: an instant in the future is measured the same
    way as one in the past.
    """
    diff = int(abs(
        _to_seconds(now_seconds, timezone.utc)
        - _to_seconds(instant_seconds, timezone.utc)
    ))
    for unit, size in _BUCKETS:
        count = diff // size
        if count >= 1:
            return RelativeDuration(seconds=diff, unit=unit, count=count)
    return RelativeDuration(seconds=diff, unit=TimeUnit.SUB_MINUTE, count=0)


def render_relative(duration: RelativeDuration) -> str:
    if duration.unit == TimeUnit.SUB_MINUTE:
        return LESS_THAN_A_MINUTE
    noun = duration.unit.value if duration.count == 1 else f"{duration.unit.value}s"
    return f"{duration.count} {noun} ago"


def format_relative(
    instant: str, now: ReferenceInstant, tz: tzinfo | None = None
) -> str:
    """Render how long ago ``instant`` was, relative to ``now``.

    ``instant`` is a ``YYYY-MM-DDTHH:MM:SS`` string read in ``tz`` (UTC by
    default); a naive ``now`` is read in the same zone.

    Raises:
        MalformedInstantError: if ``instant`` cannot be parsed.
    """
    tz = tz or timezone.utc
    parsed = parse_instant(instant, tz)
    return render_relative(
        relative_duration(parsed.timestamp(), _to_seconds(now, tz))
    )


class RelativeTimeFormatter:
    """Formatter that reads "now" from an injected clock."""

    def __init__(self, clock: Clock | None = None, tz: tzinfo | None = None) -> None:
        self._clock = clock or SystemClock()
        self._tz = tz or timezone.utc

    def format(self, instant: str, now: ReferenceInstant | None = None) -> str:
        if now is None:
            now = self._clock.now()
        return format_relative(instant, now, self._tz)
