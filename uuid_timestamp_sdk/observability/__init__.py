"""Observability module: annotation lifecycle events."""

from uuid_timestamp_sdk.observability.event_bus import Event, EventBus, InMemoryEventBus

__all__ = ["Event", "EventBus", "InMemoryEventBus"]
