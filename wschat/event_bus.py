"""A small publish/subscribe bus that fans incoming text out to subscribers."""

from __future__ import annotations

import itertools
from collections.abc import Callable

Subscriber = Callable[[str], object]


class EventBus:
    """Delivers every published message to each connected subscriber."""

    def __init__(self) -> None:
        self._ids = itertools.count(1)
        self._subscribers: dict[int, Subscriber] = {}

    def subscribe(self, callback: Subscriber) -> int:
        """Register ``callback`` and return the handler id that identifies it."""
        handler_id = next(self._ids)
        self._subscribers[handler_id] = callback
        return handler_id

    def unsubscribe(self, handler_id: int) -> None:
        """Forget a subscriber; unknown ids are ignored."""
        self._subscribers.pop(handler_id, None)

    def publish(self, message: str) -> None:
        """Send ``message`` to every current subscriber."""
        for callback in list(self._subscribers.values()):
            callback(message)

    def subscriber_count(self) -> int:
        """Number of subscribers currently connected."""
        return len(self._subscribers)