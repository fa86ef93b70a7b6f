"""Core data types for UUID timestamp decoding."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class TimeUnit(str, Enum):
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SUB_MINUTE = "sub_minute"


# ---------------------------------------------------------------------------
# Core data classes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class CandidateUuid:
    """A v1-shaped UUID found in text, with its offsets in that text."""

    text: str
    start: int = 0
    end: int = 0

    @property
    def span(self) -> tuple[int, int]:
        return (self.start, self.end)

    def __str__(self) -> str:
        return self.text


@dataclass(frozen=True)
class UuidTimeFields:
    time_low: str
    time_mid: str
    time_high: str  # version nibble already dropped

    @property
    def hex_time_stamp(self) -> str:
        return self.time_high + self.time_mid + self.time_low


@dataclass(frozen=True)
class RelativeDuration:
    seconds: int
    unit: TimeUnit
    count: int


@dataclass
class DecodeResult:
    candidate: CandidateUuid
    instant: str | None = None
    relative: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


# ---------------------------------------------------------------------------
# Host integration
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Annotation:
    start: int
    end: int
    uuid: str
    instant: str
    relative: str | None = None
    transient: bool = False

    @property
    def key(self) -> tuple[int, int]:
        return (self.start, self.end)

    @property
    def label(self) -> str:
        if self.relative:
            return f"{self.instant} ({self.relative})"
        return self.instant


@dataclass
class AnnotationDiff:
    added: list[Annotation] = field(default_factory=list)
    removed: list[Annotation] = field(default_factory=list)
    unchanged: list[Annotation] = field(default_factory=list)

    @property
    def changed(self) -> bool:
        return bool(self.added or self.removed)
