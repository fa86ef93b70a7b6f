"""Event bus for annotation lifecycle notifications.

Hosts subscribe by event type, by document, or to everything. The bus keeps
a bounded history so a long-lived editor session does not grow it forever.
"""

from __future__ import annotations

import inspect
from collections import deque
from dataclasses import dataclass, field
from typing import Any, Callable, Final, Protocol

DEFAULT_HISTORY_LIMIT: Final[int] = 1000


@dataclass
class Event:
    event_type: str
    document_id: str
    start: int | None = None
    end: int | None = None
    uuid: str | None = None
    ts: str = ""
    payload: dict[str, Any] = field(default_factory=dict)

    @property
    def span(self) -> tuple[int, int] | None:
        if self.start is None or self.end is None:
            return None
        return (self.start, self.end)


EventHandler = Callable[[Event], Any]


class EventBus(Protocol):
    async def emit(self, event: Event) -> None: ...
    def on(self, event_type: str, handler: EventHandler) -> None: ...
    def off(self, event_type: str, handler: EventHandler) -> None: ...
    def on_all(self, handler: EventHandler) -> None: ...


class InMemoryEventBus:
    """In-memory bus; handlers may be sync or async.

    Dispatch order: global handlers, then document handlers, then
    event-type handlers.
    """

    def __init__(self, history_limit: int | None = DEFAULT_HISTORY_LIMIT) -> None:
        self._by_type: dict[str, list[EventHandler]] = {}
        self._by_document: dict[str, list[EventHandler]] = {}
        self._global_handlers: list[EventHandler] = []
        self._history: deque[Event] = deque(maxlen=history_limit)

    async def emit(self, event: Event) -> None:
        self._history.append(event)
        handlers = [
            *self._global_handlers,
            *self._by_document.get(event.document_id, ()),
            *self._by_type.get(event.event_type, ()),
        ]
        for handler in handlers:
            result = handler(event)
            if inspect.isawaitable(result):
                await result

    def on(self, event_type: str, handler: EventHandler) -> None:
        self._by_type.setdefault(event_type, []).append(handler)

    def off(self, event_type: str, handler: EventHandler) -> None:
        _unsubscribe(self._by_type, event_type, handler)

    def on_all(self, handler: EventHandler) -> None:
        self._global_handlers.append(handler)

    def on_document(self, document_id: str, handler: EventHandler) -> None:
        self._by_document.setdefault(document_id, []).append(handler)

    def off_document(self, document_id: str, handler: EventHandler) -> None:
        _unsubscribe(self._by_document, document_id, handler)

    @property
    def history(self) -> list[Event]:
        return list(self._history)

    def of_type(self, event_type: str) -> list[Event]:
        return [e for e in self._history if e.event_type == event_type]

    def for_document(self, document_id: str) -> list[Event]:
        return [e for e in self._history if e.document_id == document_id]

    def clear_history(self) -> None:
        self._history.clear()


def _unsubscribe(
    table: dict[str, list[EventHandler]], key: str, handler: EventHandler
) -> None:
    handlers = table.get(key)
    if not handlers or handler not in handlers:
        return
    handlers.remove(handler)
    if not handlers:
        del table[key]
