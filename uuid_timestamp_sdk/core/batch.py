"""Matcher -> Decoder -> Formatter over a whole block of text."""

from __future__ import annotations

from datetime import datetime, timezone, tzinfo

from uuid_timestamp_sdk.core.decoder import decode
from uuid_timestamp_sdk.core.errors import UuidTimestampError
from uuid_timestamp_sdk.core.matcher import RegexUuidMatcher, UuidMatcher
from uuid_timestamp_sdk.core.relative import ReferenceInstant, format_relative
from uuid_timestamp_sdk.core.types import CandidateUuid, DecodeResult


def decode_candidate(
    candidate: CandidateUuid,
    now: ReferenceInstant | None = None,
    tz: tzinfo | None = None,
    time_ago: bool = True,
) -> DecodeResult:
    """Decode one candidate, capturing failure in the result instead of raising."""
    tz = tz or timezone.utc
    try:
        instant = decode(candidate, tz)
        relative = None
        if time_ago:
            relative = format_relative(
                instant, now if now is not None else datetime.now(tz), tz
            )
    except UuidTimestampError as e:
        return DecodeResult(candidate=candidate, error=str(e))
    return DecodeResult(candidate=candidate, instant=instant, relative=relative)


def decode_all(
    text: str,
    now: ReferenceInstant | None = None,
    tz: tzinfo | None = None,
    time_ago: bool = True,
    matcher: UuidMatcher | None = None,
    start: int = 0,
    end: int | None = None,
) -> list[DecodeResult]:
    """Decode every UUID in ``text[start:end]``.

    One failed candidate never stops the others; check ``DecodeResult.ok``.
    """
    matcher = matcher or RegexUuidMatcher()
    tz = tz or timezone.utc
    if time_ago and now is None:
        now = datetime.now(tz)
    return [
        decode_candidate(c, now=now, tz=tz, time_ago=time_ago)
        for c in matcher.find_all(text, start, end)
    ]
