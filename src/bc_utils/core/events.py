"""Thread-safe in-process pub/sub bus."""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Callable, Hashable
from typing import Any

EventHandler = Callable[[Any], None]


class EventBus:
    """Minimal event bus supporting background threads."""

    def __init__(self) -> None:
        self._subscribers: defaultdict[Hashable, list[EventHandler]] = defaultdict(list)
        self._lock = threading.RLock()

    def subscribe(self, topic: Hashable, handler: EventHandler) -> None:
        with self._lock:
            if handler not in self._subscribers[topic]:
                self._subscribers[topic].append(handler)

    def unsubscribe(self, topic: Hashable, handler: EventHandler) -> None:
        with self._lock:
            handlers = self._subscribers.get(topic)
            if handlers and handler in handlers:
                handlers.remove(handler)
                if not handlers:
                    del self._subscribers[topic]

    def has_subscribers(self, topic: Hashable) -> bool:
        with self._lock:
            return bool(self._subscribers.get(topic))

    def emit(self, topic: Hashable, payload: Any) -> None:
        with self._lock:
            handlers = list(self._subscribers.get(topic, ()))
        for handler in handlers:
            handler(payload)
