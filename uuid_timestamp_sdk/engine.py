"""UuidTimeAnnotator: host-side bookkeeping of decoded UUID annotations.

The core (matcher, decoder, formatter) is stateless. This module owns the
mutable side a host editor needs: which spans of a document currently carry
an annotation, recomputing them when the text changes, and expiring the
short-lived annotation shown for a single UUID on request.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import datetime
from typing import AsyncIterator, Protocol

from uuid_timestamp_sdk.config import RuntimeConfig
from uuid_timestamp_sdk.core.clock import Clock, SystemClock
from uuid_timestamp_sdk.core.decoder import TimestampDecoder
from uuid_timestamp_sdk.core.errors import UuidTimestampError
from uuid_timestamp_sdk.core.matcher import RegexUuidMatcher, UuidMatcher
from uuid_timestamp_sdk.core.relative import RelativeTimeFormatter
from uuid_timestamp_sdk.core.types import Annotation, AnnotationDiff, CandidateUuid
from uuid_timestamp_sdk.observability.event_bus import (
    Event,
    EventBus,
    InMemoryEventBus,
)
from uuid_timestamp_sdk.store.base import AnnotationFilter, AnnotationStore
from uuid_timestamp_sdk.store.memory import MemoryAnnotationStore

logger = logging.getLogger(__name__)


class UuidTimeAnnotator(Protocol):
    async def annotate(
        self, document_id: str, text: str, start: int = 0, end: int | None = None
    ) -> AnnotationDiff: ...

    def schedule_rescan(
        self, document_id: str, text: str, start: int = 0, end: int | None = None
    ) -> asyncio.Task: ...

    async def show_at(
        self, document_id: str, text: str, position: int
    ) -> Annotation | None: ...

    async def clear(self, document_id: str) -> int: ...

    async def close(self) -> None: ...


class DefaultUuidTimeAnnotator:
    """Default annotator: rescan-and-diff over an AnnotationStore."""

    def __init__(
        self,
        store: AnnotationStore,
        *,
        config: RuntimeConfig | None = None,
        matcher: UuidMatcher | None = None,
        event_bus: EventBus | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._config = config or RuntimeConfig()
        self._matcher = matcher or RegexUuidMatcher()
        self._event_bus = event_bus or InMemoryEventBus()
        self._clock = clock or SystemClock()

        tz = self._config.display.tzinfo()
        self._decoder = TimestampDecoder(tz)
        self._formatter = RelativeTimeFormatter(clock=self._clock, tz=tz)

        # Per-document locks for serializing store access, dropped when idle
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}
        # Pending debounced rescans
        self._rescans: dict[str, asyncio.Task] = {}
        # At most one transient annotation per document
        self._transients: dict[str, Annotation] = {}
        self._expiries: dict[str, asyncio.Task] = {}

    @property
    def config(self) -> RuntimeConfig:
        return self._config

    @contextlib.asynccontextmanager
    async def _document_lock(self, document_id: str) -> AsyncIterator[None]:
        lock = self._locks.setdefault(document_id, asyncio.Lock())
        self._lock_users[document_id] = self._lock_users.get(document_id, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[document_id] -= 1
            if not self._lock_users[document_id]:
                del self._lock_users[document_id]
                del self._locks[document_id]

    async def _emit(self, event_type: str, document_id: str, **kwargs) -> None:
        event = Event(
            event_type=event_type,
            document_id=document_id,
            ts=self._clock.now_iso(),
            **kwargs,
        )
        await self._event_bus.emit(event)

    async def _build(
        self,
        document_id: str,
        candidate: CandidateUuid,
        now: datetime,
        transient: bool = False,
    ) -> Annotation | None:
        try:
            instant = self._decoder.decode(candidate)
            relative = None
            if self._config.display.time_ago_enabled:
                relative = self._formatter.format(instant, now)
        except UuidTimestampError as e:
            logger.warning("Skipping %s at %d: %s", candidate.text, candidate.start, e)
            await self._emit(
                "CandidateSkipped",
                document_id,
                start=candidate.start,
                end=candidate.end,
                uuid=candidate.text,
                payload={"error": str(e)},
            )
            return None
        return Annotation(
            start=candidate.start,
            end=candidate.end,
            uuid=candidate.text,
            instant=instant,
            relative=relative,
            transient=transient,
        )

    async def _put(self, document_id: str, annotation: Annotation) -> None:
        await self._store.put(document_id, annotation)
        await self._emit(
            "AnnotationAdded",
            document_id,
            start=annotation.start,
            end=annotation.end,
            uuid=annotation.uuid,
            payload={"label": annotation.label, "transient": annotation.transient},
        )

    async def _remove(self, document_id: str, annotation: Annotation) -> None:
        await self._store.remove(document_id, annotation.key)
        await self._emit(
            "AnnotationRemoved",
            document_id,
            start=annotation.start,
            end=annotation.end,
            uuid=annotation.uuid,
        )

    # --- Rescan ---

    async def annotate(
        self, document_id: str, text: str, start: int = 0, end: int | None = None
    ) -> AnnotationDiff:
        """Rescan ``text[start:end]`` and bring the stored annotations in line.

        Spans whose annotation is unchanged are left alone; stale spans are
        removed and new or changed ones inserted.
        """
        async with self._document_lock(document_id):
            now = self._clock.now()
            fresh: dict[tuple[int, int], Annotation] = {}
            for candidate in self._matcher.find_all(text, start, end):
                annotation = await self._build(document_id, candidate, now)
                if annotation is not None:
                    fresh[annotation.key] = annotation

            existing = await self._store.list(
                document_id,
                AnnotationFilter(start=start, end=end, transient=False),
            )
            diff = AnnotationDiff()
            for annotation in existing:
                if fresh.get(annotation.key) == annotation:
                    diff.unchanged.append(annotation)
                    del fresh[annotation.key]
                else:
                    await self._remove(document_id, annotation)
                    diff.removed.append(annotation)

            for annotation in fresh.values():
                await self._put(document_id, annotation)
                diff.added.append(annotation)

            logger.debug(
                "Rescanned %s: +%d -%d =%d",
                document_id,
                len(diff.added),
                len(diff.removed),
                len(diff.unchanged),
            )
            await self._emit(
                "Rescanned",
                document_id,
                start=start,
                end=end,
                payload={
                    "added": len(diff.added),
                    "removed": len(diff.removed),
                    "unchanged": len(diff.unchanged),
                },
            )
            return diff

    def schedule_rescan(
        self, document_id: str, text: str, start: int = 0, end: int | None = None
    ) -> asyncio.Task:
        """Debounced :meth:`annotate`; a newer call cancels a pending one."""
        pending = self._rescans.get(document_id)
        if pending is not None and not pending.done():
            pending.cancel()

        async def _run() -> AnnotationDiff:
            await asyncio.sleep(self._config.rescan.debounce_seconds)
            try:
                return await self.annotate(document_id, text, start, end)
            finally:
                if self._rescans.get(document_id) is asyncio.current_task():
                    del self._rescans[document_id]

        task = asyncio.ensure_future(_run())
        self._rescans[document_id] = task
        return task

    # --- Transient display ---

    async def show_at(
        self, document_id: str, text: str, position: int
    ) -> Annotation | None:
        """Show the UUID under ``position`` for ``display_seconds``.

        A later call supersedes an earlier transient annotation in the same
        document. Returns None when no UUID covers ``position``.
        """
        candidate = self._matcher.find_at(text, position)
        if candidate is None:
            return None

        async with self._document_lock(document_id):
            await self._drop_transient(document_id)
            annotation = await self._build(
                document_id, candidate, self._clock.now(), transient=True
            )
            if annotation is None:
                return None
            if await self._store.get(document_id, annotation.key) is not None:
                # A permanent annotation already covers this span
                return annotation
            await self._put(document_id, annotation)
            self._transients[document_id] = annotation

        self._expiries[document_id] = asyncio.ensure_future(
            self._expire(document_id, annotation)
        )
        return annotation

    async def _expire(self, document_id: str, annotation: Annotation) -> None:
        await asyncio.sleep(self._config.transient.display_seconds)
        async with self._document_lock(document_id):
            if self._transients.get(document_id) != annotation:
                return
            del self._transients[document_id]
            if self._expiries.get(document_id) is asyncio.current_task():
                del self._expiries[document_id]
            if await self._store.get(document_id, annotation.key) == annotation:
                await self._remove(document_id, annotation)
            await self._emit(
                "TransientExpired",
                document_id,
                start=annotation.start,
                end=annotation.end,
                uuid=annotation.uuid,
            )

    async def _drop_transient(self, document_id: str) -> None:
        # Caller holds the document lock
        expiry = self._expiries.pop(document_id, None)
        if expiry is not None and not expiry.done():
            expiry.cancel()
        previous = self._transients.pop(document_id, None)
        if previous is None:
            return
        if await self._store.get(document_id, previous.key) == previous:
            await self._remove(document_id, previous)

    # --- Lifecycle ---

    async def clear(self, document_id: str) -> int:
        """Remove every annotation of a document and cancel its timers."""
        pending = self._rescans.pop(document_id, None)
        if pending is not None and not pending.done():
            pending.cancel()
        async with self._document_lock(document_id):
            expiry = self._expiries.pop(document_id, None)
            if expiry is not None and not expiry.done():
                expiry.cancel()
            self._transients.pop(document_id, None)
            removed = await self._store.clear(document_id)
            await self._emit(
                "AnnotationsCleared",
                document_id,
                payload={"count": len(removed)},
            )
        logger.info("Cleared %d annotation(s) from %s", len(removed), document_id)
        return len(removed)

    async def close(self) -> None:
        tasks = [t for t in (*self._rescans.values(), *self._expiries.values())
                 if not t.done()]
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        self._rescans.clear()
        self._expiries.clear()
        self._transients.clear()


def create_annotator(
    config: RuntimeConfig | None = None,
    store: AnnotationStore | None = None,
    event_bus: EventBus | None = None,
    clock: Clock | None = None,
) -> DefaultUuidTimeAnnotator:
    """One-line factory to create an annotator with default components."""
    return DefaultUuidTimeAnnotator(
        store=store or MemoryAnnotationStore(),
        config=config,
        event_bus=event_bus,
        clock=clock,
    )
