"""Tests for core utilities: matcher, decoder, relative-time formatter, clock."""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone

import pytest

from uuid_timestamp_sdk.core.clock import SystemClock
from uuid_timestamp_sdk.core.decoder import (
    TimestampDecoder,
    decode,
    extract_fields,
    format_iso8601,
    gregorian_ticks,
    parse_instant,
    parse_iso8601,
    unix_seconds,
)
from uuid_timestamp_sdk.core.errors import MalformedInstantError, MalformedUuidError
from uuid_timestamp_sdk.core.matcher import RegexUuidMatcher, find_all
from uuid_timestamp_sdk.core.relative import (
    RelativeTimeFormatter,
    format_relative,
    relative_duration,
    render_relative,
)
from uuid_timestamp_sdk.core.types import CandidateUuid, TimeUnit

SAMPLE = "d2719bc0-95d4-11ed-9999-325096b39f47"
SAMPLE_INSTANT = "2023-01-16T19:34:41"
SAMPLE_SECONDS = 1673897681
SAMPLE_DT = datetime(2023, 1, 16, 19, 34, 41, tzinfo=timezone.utc)

ZERO_TICKS = "00000000-0000-1000-8000-000000000000"
MAX_TICKS = "ffffffff-ffff-1fff-bfff-ffffffffffff"


# ---- Matcher ----

def test_find_all_single():
    found = list(find_all(f"request id={SAMPLE} failed"))
    assert [c.text for c in found] == [SAMPLE]
    assert found[0].start == 11
    assert found[0].end == 11 + 36


def test_find_all_multiple_in_order():
    other = "1aa3bc56-61e3-11ed-b61d-9cb6d0b80000"
    text = f"{other}\n{SAMPLE}, {other}"
    assert [c.text for c in find_all(text)] == [other, SAMPLE, other]


def test_find_all_no_match():
    assert list(find_all("nothing to see here 1234-5678")) == []


def test_find_all_uppercase_not_matched():
    assert list(find_all(SAMPLE.upper())) == []


def test_find_all_v4_not_matched():
    assert list(find_all("9b2e4a1c-3f5d-4e6a-8b7c-1d2e3f4a5b6c")) == []


def test_find_all_bad_variant_not_matched():
    assert list(find_all("d2719bc0-95d4-11ed-c999-325096b39f47")) == []


def test_find_all_requires_word_boundary():
    assert list(find_all(f"x{SAMPLE}")) == []
    assert list(find_all(f"{SAMPLE}0")) == []
    assert [c.text for c in find_all(f"({SAMPLE})")] == [SAMPLE]


def test_find_all_is_lazy_and_restartable():
    text = f"{SAMPLE} {SAMPLE}"
    gen = find_all(text)
    assert next(gen).start == 0
    assert list(find_all(text)) == list(find_all(text))


def test_matcher_region_reports_full_text_offsets():
    text = f"{SAMPLE} and {SAMPLE}"
    found = list(RegexUuidMatcher().find_all(text, start=37))
    assert len(found) == 1
    assert found[0].start == 41


def test_matcher_region_edge_cutting_uuid():
    text = f"{SAMPLE}"
    assert list(RegexUuidMatcher().find_all(text, 0, 36)) == [
        CandidateUuid(SAMPLE, 0, 36)
    ]
    # region ending inside a longer word must not report a match
    assert list(RegexUuidMatcher().find_all(text + "ab", 0, 36)) == []


def test_matcher_find_at():
    text = f"id: {SAMPLE} done"
    matcher = RegexUuidMatcher()
    assert matcher.find_at(text, 4).text == SAMPLE
    assert matcher.find_at(text, 39).text == SAMPLE
    assert matcher.find_at(text, 40) is None
    assert matcher.find_at(text, 0) is None


# ---- Decoder ----

def test_extract_fields_skips_version_nibble():
    fields = extract_fields(SAMPLE)
    assert fields.time_low == "d2719bc0"
    assert fields.time_mid == "95d4"
    assert fields.time_high == "1ed"
    assert fields.hex_time_stamp == "1ed95d4d2719bc0"


def test_gregorian_ticks():
    assert gregorian_ticks(SAMPLE) == 0x1ED95D4D2719BC0


def test_decode_sample():
    assert unix_seconds(SAMPLE) == SAMPLE_SECONDS
    assert decode(SAMPLE) == SAMPLE_INSTANT


def test_decode_accepts_candidate():
    assert decode(CandidateUuid(SAMPLE, 5, 41)) == SAMPLE_INSTANT


def test_decode_second_known_value():
    assert decode("1aa3bc56-61e3-11ed-b61d-9cb6d0b80000") == "2022-11-11T17:05:55"


def test_decode_uuid_epoch():
    assert unix_seconds(ZERO_TICKS) == -12219292800
    assert decode(ZERO_TICKS) == "1582-10-15T00:00:00"


def test_decode_floors_toward_negative_infinity():
    one_tick = "00000001-0000-1000-8000-000000000000"
    assert unix_seconds(one_tick) == -12219292800
    assert decode(one_tick) == "1582-10-15T00:00:00"


def test_decode_max_timestamp():
    assert decode(MAX_TICKS) == "5236-03-31T21:21:00"


@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_decode_matches_stdlib_uuid_time(seed):
    generated = uuid.uuid1(node=0x325096B39F47 + seed, clock_seq=seed)
    expected = datetime(1582, 10, 15, tzinfo=timezone.utc) + timedelta(
        seconds=generated.time // 10_000_000
    )
    assert decode(str(generated)) == expected.strftime("%Y-%m-%dT%H:%M:%S")


def test_decode_with_fixed_offset():
    plus_one = timezone(timedelta(hours=1))
    minus_five = timezone(timedelta(hours=-5))
    assert decode(SAMPLE, plus_one) == "2023-01-16T20:34:41"
    assert decode(SAMPLE, minus_five) == "2023-01-16T14:34:41"


def test_decode_hyphen_free_and_uppercase_input():
    assert decode(SAMPLE.replace("-", "")) == SAMPLE_INSTANT
    assert decode(SAMPLE.upper()) == SAMPLE_INSTANT


@pytest.mark.parametrize(
    "bad",
    [
        "",
        "not-a-uuid",
        "d2719bc0-95d4-11ed-9999-325096b39f4",
        "d2719bc0-95d4-11ed-9999-325096b39f477",
        "g2719bc0-95d4-11ed-9999-325096b39f47",
        "d2719bc0_95d4_11ed_9999_325096b39f47",
        " d2719bc095d411ed9999325096b39f4",
    ],
)
def test_decode_malformed(bad):
    with pytest.raises(MalformedUuidError):
        decode(bad)


def test_decode_non_string():
    with pytest.raises(MalformedUuidError):
        decode(None)


def test_timestamp_decoder_bound_zone():
    dec = TimestampDecoder(timezone(timedelta(minutes=30)))
    assert dec.decode(SAMPLE) == "2023-01-16T20:04:41"
    assert dec.to_datetime(SAMPLE) == SAMPLE_DT
    assert dec.fields(SAMPLE).time_high == "1ed"


# ---- ISO-8601 round trip ----

@pytest.mark.parametrize("uuid_text", [SAMPLE, ZERO_TICKS, MAX_TICKS])
def test_iso_round_trip(uuid_text):
    seconds = unix_seconds(uuid_text)
    assert parse_iso8601(format_iso8601(seconds)) == seconds


def test_iso_round_trip_with_offset():
    tz = timezone(timedelta(hours=9))
    assert parse_iso8601(format_iso8601(SAMPLE_SECONDS, tz), tz) == SAMPLE_SECONDS


@pytest.mark.parametrize(
    "bad",
    [
        "2023-01-16 19:34:41",
        "2023-01-16T19:34:41Z",
        "2023-01-16T19:34:41.5",
        "2023-1-16T19:34:41",
        "2023-13-16T19:34:41",
        "2023-02-30T00:00:00",
        "",
    ],
)
def test_parse_instant_malformed(bad):
    with pytest.raises(MalformedInstantError):
        parse_instant(bad)


# ---- Relative time ----

def test_relative_90_seconds():
    assert format_relative(SAMPLE_INSTANT, SAMPLE_DT + timedelta(seconds=90)) == "1 minute ago"


def test_relative_59_seconds():
    now = SAMPLE_DT + timedelta(seconds=59)
    assert format_relative(SAMPLE_INSTANT, now) == "Less than a minute ago"


def test_relative_same_instant():
    assert format_relative(SAMPLE_INSTANT, SAMPLE_DT) == "Less than a minute ago"


def test_relative_days_take_priority():
    now = SAMPLE_DT + timedelta(hours=25)
    assert format_relative(SAMPLE_INSTANT, now) == "1 day ago"


def test_relative_plurals():
    assert format_relative(SAMPLE_INSTANT, SAMPLE_DT + timedelta(days=3)) == "3 days ago"
    assert format_relative(SAMPLE_INSTANT, SAMPLE_DT + timedelta(hours=2)) == "2 hours ago"
    assert format_relative(SAMPLE_INSTANT, SAMPLE_DT + timedelta(minutes=59, seconds=59)) == "59 minutes ago"
    assert format_relative(SAMPLE_INSTANT, SAMPLE_DT + timedelta(hours=1)) == "1 hour ago"


def test_relative_is_symmetric():
    past = format_relative(SAMPLE_INSTANT, SAMPLE_DT + timedelta(hours=3))
    future = format_relative(SAMPLE_INSTANT, SAMPLE_DT - timedelta(hours=3))
    assert past == future == "3 hours ago"


def test_relative_accepts_unix_seconds():
    assert format_relative(SAMPLE_INSTANT, SAMPLE_SECONDS + 7200) == "2 hours ago"


def test_relative_naive_now_uses_formatter_zone():
    tz = timezone(timedelta(hours=2))
    instant = decode(SAMPLE, tz)
    naive_now = datetime(2023, 1, 16, 21, 36, 41)
    assert format_relative(instant, naive_now, tz) == "2 minutes ago"


def test_relative_malformed_instant():
    with pytest.raises(MalformedInstantError):
        format_relative("yesterday", SAMPLE_DT)


def test_relative_duration_buckets():
    d = relative_duration(0, 86400 * 2 + 5)
    assert d.unit == TimeUnit.DAY
    assert d.count == 2
    assert d.seconds == 86400 * 2 + 5
    sub = relative_duration(100, 130)
    assert sub.unit == TimeUnit.SUB_MINUTE
    assert render_relative(sub) == "Less than a minute ago"


def test_relative_formatter_uses_clock():
    class _Clock:
        def now(self):
            return SAMPLE_DT + timedelta(minutes=5)

        def now_iso(self):
            return self.now().isoformat()

    fmt = RelativeTimeFormatter(clock=_Clock())
    assert fmt.format(SAMPLE_INSTANT) == "5 minutes ago"
    assert fmt.format(SAMPLE_INSTANT, now=SAMPLE_DT) == "Less than a minute ago"


# ---- Clock ----

def test_system_clock_is_aware_utc():
    clock = SystemClock()
    assert clock.now().utcoffset() == timedelta(0)
    assert clock.now_iso().endswith("+00:00")
