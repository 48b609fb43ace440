"""Turns registration events into user and admin notices."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from event_registrations.domain.events import (
    ConfirmationSource,
    RegistrationConfirmed,
    RegistrationRejected,
    UserRegistered,
    UserUnregistered,
    WaitingListPromoted,
)
from event_registrations.domain.models import RegistrationState
from event_registrations.notifications.notifier import Notice, NoticeKind
from event_registrations.notifications.settings import NotificationSettings

if TYPE_CHECKING:
    from event_registrations.bus import EventBus, Subscription
    from event_registrations.domain.events import DomainEvent
    from event_registrations.domain.models import Registration
    from event_registrations.domain.repositories import (
        ConfigRepository,
        RegistrationRepository,
    )
    from event_registrations.notifications.notifier import Notifier

logger = logging.getLogger(__name__)


class RegistrationNotifier:
    """Bus subscriber that decides which notice each event produces.

    Routing:
        UserRegistered: "waiting_list_added" with the position when queued,
            otherwise "registered". Also an admin notice when the event's config
            has a notification address.
        RegistrationConfirmed: "confirmed", for admin confirmations only.
            Auto-confirmation is covered by "registered" and promotion by
            "promoted".
        WaitingListPromoted: "promoted".
        UserUnregistered: "cancelled".
        RegistrationRejected: "rejected".

    Notices are built from the registration as currently stored; events whose
    registration no longer exists are skipped.
    """

    def __init__(
        self,
        registrations: RegistrationRepository,
        configs: ConfigRepository,
        notifier: Notifier,
        settings: NotificationSettings | None = None,
    ) -> None:
        self.registrations = registrations
        self.configs = configs
        self.notifier = notifier
        self.settings = settings if settings is not None else NotificationSettings()

    def subscribe(self, bus: EventBus) -> Subscription:
        """Register for every event type on ``bus``."""
        return bus.subscribe(self)

    def __call__(self, event: DomainEvent) -> None:
        registration = self.registrations.get(event.registration_id)
        if registration is None:
            logger.warning(
                "Registration %s not found, skipping %s notice",
                event.registration_id,
                event.event_type.value,
            )
            return

        if isinstance(event, UserRegistered):
            self._on_registered(event, registration)
        elif isinstance(event, RegistrationConfirmed):
            if event.source is ConfirmationSource.ADMIN:
                self._send(
                    self.settings.send_confirmation_email, NoticeKind.CONFIRMED, registration
                )
        elif isinstance(event, WaitingListPromoted):
            self._send(self.settings.send_promotion_email, NoticeKind.PROMOTED, registration)
        elif isinstance(event, UserUnregistered):
            self._send(self.settings.send_cancellation_email, NoticeKind.CANCELLED, registration)
        elif isinstance(event, RegistrationRejected):
            self._send(self.settings.send_rejection_email, NoticeKind.REJECTED, registration)

    def _on_registered(self, event: UserRegistered, registration: Registration) -> None:
        if event.state is RegistrationState.WAITING_LIST:
            self._send(
                self.settings.send_waiting_list_email,
                NoticeKind.WAITING_LIST_ADDED,
                registration,
                position=event.position,
            )
        else:
            self._send(self.settings.send_registration_email, NoticeKind.REGISTERED, registration)

        config = self.configs.find_by_event_or_default(event.event_id)
        if config.notification_email:
            self.notifier.notify_admin(
                config.notification_email,
                Notice(NoticeKind.ADMIN_NEW_REGISTRATION, registration, event.position),
            )

    def _send(
        self,
        enabled: bool,
        kind: NoticeKind,
        registration: Registration,
        position: int | None = None,
    ) -> None:
        if not enabled:
            logger.debug("%s notices are switched off, skipping %s", kind.value, registration.id)
            return
        self.notifier.notify_user(Notice(kind, registration, position))
