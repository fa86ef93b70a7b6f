"""Locate version-1 UUIDs in arbitrary text."""

from __future__ import annotations

import re
from typing import Iterator, Protocol

from uuid_timestamp_sdk.core.types import CandidateUuid

# Lowercase hex only: uppercase UUIDs are not matched.
UUID_V1_PATTERN = (
    r"\b[0-9a-f]{8}-[0-9a-f]{4}-1[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}\b"
)

_UUID_V1_RE = re.compile(UUID_V1_PATTERN)


class UuidMatcher(Protocol):
    def find_all(
        self, text: str, start: int = 0, end: int | None = None
    ) -> Iterator[CandidateUuid]: ...

    def find_at(self, text: str, position: int) -> CandidateUuid | None: ...


class RegexUuidMatcher:
    """Default matcher: non-overlapping regex scan, left to right."""

    def __init__(self, pattern: str = UUID_V1_PATTERN) -> None:
        self._re = re.compile(pattern)

    def find_all(
        self, text: str, start: int = 0, end: int | None = None
    ) -> Iterator[CandidateUuid]:
        """Yield candidates inside ``text[start:end]``.

        Offsets are reported relative to ``text``. Word boundaries are
        checked against the full text, so a UUID cut by the region edge
        is not reported.
        """
        end = len(text) if end is None else min(end, len(text))
        start = max(0, start)
        for m in self._re.finditer(text, start, end):
            if not _bounded(text, m.start(), m.end()):
                continue
            yield CandidateUuid(text=m.group(0), start=m.start(), end=m.end())

    def find_at(self, text: str, position: int) -> CandidateUuid | None:
        """Return the candidate covering ``position``, if any."""
        for candidate in self.find_all(text):
            if candidate.start <= position < candidate.end:
                return candidate
            if candidate.start > position:
                break
        return None


def _bounded(text: str, start: int, end: int) -> bool:
    # endpos counts as end of string for \b, so recheck against full text
    before = text[start - 1] if start > 0 else ""
    after = text[end] if end < len(text) else ""
    return not _is_word(before) and not _is_word(after)


def _is_word(ch: str) -> bool:
    return bool(ch) and (ch.isalnum() or ch == "_")


def find_all(text: str) -> Iterator[CandidateUuid]:
    """Lazily yield every version-1 UUID candidate in ``text``."""
    for m in _UUID_V1_RE.finditer(text):
        yield CandidateUuid(text=m.group(0), start=m.start(), end=m.end())
