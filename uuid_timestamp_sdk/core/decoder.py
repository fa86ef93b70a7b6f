"""Timestamp extraction for version-1 UUIDs.

A v1 UUID stores a 60-bit count of 100-nanosecond ticks since the start of
the Gregorian calendar (1582-10-15T00:00:00Z), split across the first three
hyphen-separated groups in little-endian group order:

    time_low - time_mid - <version>time_high - ...

Decoding reassembles ``time_high ++ time_mid ++ time_low``, shifts the value
onto the Unix epoch, and renders whole seconds as ``YYYY-MM-DDTHH:MM:SS``.
"""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Final

from uuid_timestamp_sdk.core.errors import MalformedInstantError, MalformedUuidError
from uuid_timestamp_sdk.core.types import CandidateUuid, UuidTimeFields

# 100-ns ticks between 1582-10-15T00:00:00Z and 1970-01-01T00:00:00Z
UUID_EPOCH_OFFSET_TICKS: Final[int] = 122192928000000000
TICKS_PER_SECOND: Final[int] = 10_000_000

ISO_FORMAT: Final[str] = "%Y-%m-%dT%H:%M:%S"

_UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
_HEX32_RE = re.compile(r"[0-9a-fA-F]{32}")
_INSTANT_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}")


def _text_of(uuid: CandidateUuid | str) -> str:
    if isinstance(uuid, CandidateUuid):
        return uuid.text
    if not isinstance(uuid, str):
        raise MalformedUuidError(f"Expected UUID text, got {type(uuid).__name__}")
    return uuid


def extract_fields(uuid: CandidateUuid | str) -> UuidTimeFields:
    """Split a UUID into its timestamp fields.

    Raises:
        MalformedUuidError: if the UUID is not 32 hex digits without hyphens.
    """
    text = _text_of(uuid)
    hex_str = text.replace("-", "")
    if not _HEX32_RE.fullmatch(hex_str):
        raise MalformedUuidError(f"Not a 32-digit hex UUID: {text!r}")
    # hex_str[12] is the version nibble and is not part of the timestamp
    return UuidTimeFields(
        time_low=hex_str[0:8],
        time_mid=hex_str[8:12],
        time_high=hex_str[13:16],
    )


def gregorian_ticks(uuid: CandidateUuid | str) -> int:
    """Return the 60-bit tick count since the UUID epoch."""
    fields = extract_fields(uuid)
    try:
        return int(fields.hex_time_stamp, 16)
    except ValueError as e:
        raise MalformedUuidError(
            f"Invalid hex timestamp {fields.hex_time_stamp!r}"
        ) from e


def unix_seconds(uuid: CandidateUuid | str) -> int:
    """Whole seconds since the Unix epoch, floored toward negative infinity.

    UUIDs stamped before 1970 yield negative values; they are not rejected.
    """
    int_time = gregorian_ticks(uuid) - UUID_EPOCH_OFFSET_TICKS
    return int_time // TICKS_PER_SECOND


def format_iso8601(seconds: int, tz: tzinfo | None = None) -> str:
    """Render Unix seconds as ``YYYY-MM-DDTHH:MM:SS`` in ``tz`` (UTC default)."""
    dt = _UNIX_EPOCH + timedelta(seconds=seconds)
    if tz is not None:
        dt = dt.astimezone(tz)
    return dt.replace(tzinfo=None).isoformat(timespec="seconds")


def parse_instant(instant: str, tz: tzinfo | None = None) -> datetime:
    """Parse a formatted instant into an aware datetime in ``tz``.

    Raises:
        MalformedInstantError: if the string is not ``YYYY-MM-DDTHH:MM:SS``
            or names an impossible date.
    """
    if not isinstance(instant, str) or not _INSTANT_RE.fullmatch(instant):
        raise MalformedInstantError(f"Invalid instant: {instant!r}")
    try:
        dt = datetime.strptime(instant, ISO_FORMAT)
    except ValueError as e:
        raise MalformedInstantError(f"Invalid instant: {instant!r}: {e}") from e
    return dt.replace(tzinfo=tz or timezone.utc)


def parse_iso8601(instant: str, tz: tzinfo | None = None) -> int:
    """Inverse of :func:`format_iso8601`: back to Unix seconds."""
    delta = parse_instant(instant, tz) - _UNIX_EPOCH
    return delta.days * 86400 + delta.seconds


def decode(uuid: CandidateUuid | str, tz: tzinfo | None = None) -> str:
    """Decode a v1 UUID into its ``YYYY-MM-DDTHH:MM:SS`` creation instant."""
    return format_iso8601(unix_seconds(uuid), tz)


class TimestampDecoder:
    """Decoder bound to a display time zone."""

    def __init__(self, tz: tzinfo | None = None) -> None:
        self._tz = tz or timezone.utc

    @property
    def tz(self) -> tzinfo:
        return self._tz

    def fields(self, uuid: CandidateUuid | str) -> UuidTimeFields:
        return extract_fields(uuid)

    def to_datetime(self, uuid: CandidateUuid | str) -> datetime:
        return (_UNIX_EPOCH + timedelta(seconds=unix_seconds(uuid))).astimezone(
            self._tz
        )

    def decode(self, uuid: CandidateUuid | str) -> str:
        return decode(uuid, self._tz)
