"""Synchronous in-process event bus.

The completion ledger announces what happened (XP changed, a day was fully
completed) and the progression engine reacts. Handlers run inline, in
subscription order, before ``publish`` returns, so a single consumer call
leaves every subscriber's state updated.
"""

import logging
from collections.abc import Callable
from typing import Any, TypeVar

from pydantic import BaseModel


logger = logging.getLogger(__name__)

E = TypeVar("E", bound=BaseModel)

Handler = Callable[[Any], None]


class EventBus:
    """Registry of handlers keyed by event model type."""

    def __init__(self) -> None:
        """Initialize an empty bus."""
        self._handlers: dict[type[BaseModel], list[Handler]] = {}

    def subscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:
        """Register handler for events of exactly ``event_type``.

        Raises:
            ValueError: If the same handler is already subscribed to this event type
        """
        handlers = self._handlers.setdefault(event_type, [])
        if handler in handlers:
            msg = f"Handler {handler!r} is already subscribed to {event_type.__name__}"
            raise ValueError(msg)
        handlers.append(handler)

    def unsubscribe(self, event_type: type[E], handler: Callable[[E], None]) -> None:
        """Remove a handler. Unknown handlers are ignored."""
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)

    def publish(self, event: BaseModel) -> None:
        """Deliver event to every handler subscribed to its type."""
        handlers = self._handlers.get(type(event), [])
        logger.debug("Publishing %s to %d handler(s)", type(event).__name__, len(handlers))
        for handler in list(handlers):
            handler(event)

    def clear(self) -> None:
        """Remove all subscriptions."""
        self._handlers.clear()

    def subscriber_count(self, event_type: type[BaseModel]) -> int:
        return len(self._handlers.get(event_type, []))
