"""In-process event bus for registration domain events."""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from uuid import uuid4

from event_registrations.domain.events import DomainEvent, EventType

logger = logging.getLogger(__name__)

Handler = Callable[[DomainEvent], None]


@dataclass
class Subscription:
    """A handler subscribed to the bus."""

    id: str
    handler: Handler
    event_type: EventType | None = None  # None means all event types
    event_id: str | None = None  # None means all events

    @classmethod
    def create(
        cls,
        handler: Handler,
        event_type: EventType | None = None,
        event_id: str | None = None,
    ) -> Subscription:
        """Create a new subscription."""
        return cls(id=str(uuid4()), handler=handler, event_type=event_type, event_id=event_id)

    def matches(self, event: DomainEvent) -> bool:
        if self.event_type is not None and self.event_type != event.event_type:
            return False
        return self.event_id is None or self.event_id == event.event_id


@dataclass
class EventBus:
    """Synchronous publish/subscribe dispatcher.

    Handlers run in the publishing thread, in subscription order. A failing
    handler is logged and skipped; publishers never see its exception.
    """

    _subscriptions: dict[str, Subscription] = field(default_factory=dict)
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def subscribe(
        self,
        handler: Handler,
        event_type: EventType | None = None,
        event_id: str | None = None,
    ) -> Subscription:
        """Subscribe a handler to events.

        Args:
            handler: Callable receiving each matching event.
            event_type: Only deliver this type of event. None means all types.
            event_id: Only deliver events for this event id. None means all.

        Returns:
            Subscription, whose id can be passed to unsubscribe.
        """
        subscription = Subscription.create(handler, event_type, event_id)
        with self._lock:
            self._subscriptions[subscription.id] = subscription
        return subscription

    def unsubscribe(self, subscription_id: str) -> None:
        with self._lock:
            self._subscriptions.pop(subscription_id, None)

    def publish(self, event: DomainEvent) -> None:
        """Deliver an event to all matching subscribers."""
        with self._lock:
            subscriptions = [s for s in self._subscriptions.values() if s.matches(event)]

        logger.debug(
            "Publishing %s for registration %s to %d subscriber(s)",
            event.event_type.value,
            event.registration_id,
            len(subscriptions),
        )
        for subscription in subscriptions:
            try:
                subscription.handler(event)
            except Exception:
                logger.exception(
                    "Subscriber %s failed handling %s for registration %s",
                    subscription.id,
                    event.event_type.value,
                    event.registration_id,
                )

    @property
    def subscriber_count(self) -> int:
        """Get the number of active subscriptions."""
        return len(self._subscriptions)
