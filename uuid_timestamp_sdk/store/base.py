"""AnnotationStore protocol and query filter types."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from uuid_timestamp_sdk.core.types import Annotation

SpanKey = tuple[int, int]


@dataclass
class AnnotationFilter:
    start: int | None = None
    end: int | None = None
    transient: bool | None = None
    limit: int | None = None

    def matches(self, annotation: Annotation) -> bool:
        if self.start is not None and annotation.start < self.start:
            return False
        if self.end is not None and annotation.end > self.end:
            return False
        if self.transient is not None and annotation.transient != self.transient:
            return False
        return True


class AnnotationStore(Protocol):
    async def put(self, document_id: str, annotation: Annotation) -> None: ...

    async def get(self, document_id: str, key: SpanKey) -> Annotation | None: ...

    async def remove(self, document_id: str, key: SpanKey) -> Annotation: ...

    async def list(
        self, document_id: str, filter: AnnotationFilter | None = None
    ) -> list[Annotation]: ...

    async def clear(self, document_id: str) -> list[Annotation]: ...

    async def documents(self) -> list[str]: ...
