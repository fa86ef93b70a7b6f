"""Shared test fixtures."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from uuid_timestamp_sdk.config import RescanConfig, RuntimeConfig, TransientConfig
from uuid_timestamp_sdk.observability.event_bus import InMemoryEventBus
from uuid_timestamp_sdk.store.memory import MemoryAnnotationStore

# d2719bc0-95d4-11ed-9999-325096b39f47 was minted at 2023-01-16T19:34:41Z
SAMPLE_UUID = "d2719bc0-95d4-11ed-9999-325096b39f47"
SAMPLE_INSTANT = "2023-01-16T19:34:41"
SAMPLE_NOW = datetime(2023, 1, 16, 22, 34, 41, tzinfo=timezone.utc)


class FixedClock:
    """Clock that returns a fixed instant."""

    def __init__(self, now: datetime = SAMPLE_NOW):
        self._now = now

    def now(self) -> datetime:
        return self._now

    def now_iso(self) -> str:
        return self._now.isoformat()


@pytest.fixture
def fixed_clock():
    return FixedClock()


@pytest.fixture
def annotation_store():
    return MemoryAnnotationStore()


@pytest.fixture
def event_bus():
    return InMemoryEventBus()


@pytest.fixture
def fast_config():
    return RuntimeConfig(
        transient=TransientConfig(display_seconds=0.02),
        rescan=RescanConfig(debounce_seconds=0.02),
    )
