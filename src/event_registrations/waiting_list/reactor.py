"""Promotes from the waiting list when a confirmed registration is cancelled."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from event_registrations.domain.events import EventType, UserUnregistered
from event_registrations.domain.models import RegistrationState

if TYPE_CHECKING:
    from event_registrations.bus import EventBus, Subscription
    from event_registrations.domain.events import DomainEvent
    from event_registrations.domain.models import Registration
    from event_registrations.domain.repositories import ConfigRepository
    from event_registrations.waiting_list.manager import WaitingListManager

logger = logging.getLogger(__name__)


class PromoteOnCancellation:
    """Fills a freed seat from the waiting list.

    This is the only automatic promotion trigger. Cancelling a pending or
    waiting-list registration frees no seat and is ignored.
    """

    def __init__(self, configs: ConfigRepository, waiting_list: WaitingListManager) -> None:
        self.configs = configs
        self.waiting_list = waiting_list

    def subscribe(self, bus: EventBus) -> Subscription:
        """Register this reactor for cancellation events on ``bus``."""
        return bus.subscribe(self, event_type=EventType.USER_UNREGISTERED)

    def __call__(self, event: DomainEvent) -> None:
        if isinstance(event, UserUnregistered):
            self.handle(event)

    def handle(self, event: UserUnregistered) -> Registration | None:
        """React to a cancellation.

        Returns:
            The promoted registration, or None if nobody was promoted.
        """
        if event.previous_state is not RegistrationState.CONFIRMED:
            return None

        config = self.configs.find_by_event_or_default(event.event_id)
        if not config.waiting_list_enabled:
            logger.debug("Waiting list disabled for event %s, not promoting", event.event_id)
            return None

        return self.waiting_list.fill_open_seat(event.event_id, config.max_participants)
