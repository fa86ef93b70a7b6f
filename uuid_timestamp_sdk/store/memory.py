"""In-memory AnnotationStore implementation."""

from __future__ import annotations

from uuid_timestamp_sdk.core.errors import AnnotationNotFoundError
from uuid_timestamp_sdk.core.types import Annotation
from uuid_timestamp_sdk.store.base import AnnotationFilter, SpanKey


class MemoryAnnotationStore:
    """Thread-unsafe, in-memory store of displayed annotations per document."""

    def __init__(self) -> None:
        self._docs: dict[str, dict[SpanKey, Annotation]] = {}

    async def put(self, document_id: str, annotation: Annotation) -> None:
        self._docs.setdefault(document_id, {})[annotation.key] = annotation

    async def get(self, document_id: str, key: SpanKey) -> Annotation | None:
        return self._docs.get(document_id, {}).get(key)

    async def remove(self, document_id: str, key: SpanKey) -> Annotation:
        spans = self._docs.get(document_id)
        if not spans or key not in spans:
            raise AnnotationNotFoundError(
                f"No annotation at {key!r} in document {document_id!r}"
            )
        annotation = spans.pop(key)
        if not spans:
            del self._docs[document_id]
        return annotation

    async def list(
        self, document_id: str, filter: AnnotationFilter | None = None
    ) -> list[Annotation]:
        result = sorted(self._docs.get(document_id, {}).values(), key=lambda a: a.key)
        if filter:
            result = [a for a in result if filter.matches(a)]
            if filter.limit is not None:
                result = result[: filter.limit]
        return result

    async def clear(self, document_id: str) -> list[Annotation]:
        spans = self._docs.pop(document_id, {})
        return sorted(spans.values(), key=lambda a: a.key)

    async def documents(self) -> list[str]:
        return sorted(self._docs)
