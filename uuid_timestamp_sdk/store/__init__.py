"""Store module: per-document annotation bookkeeping."""

from uuid_timestamp_sdk.store.base import AnnotationFilter, AnnotationStore, SpanKey
from uuid_timestamp_sdk.store.memory import MemoryAnnotationStore

__all__ = ["AnnotationStore", "AnnotationFilter", "SpanKey", "MemoryAnnotationStore"]
