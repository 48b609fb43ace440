"""Wiring of stores, services and the event bus."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from event_registrations.admission import RegistrationService
from event_registrations.bus import EventBus
from event_registrations.domain.defaults import DefaultPolicy
from event_registrations.locks import EventLocks
from event_registrations.notifications import (
    LoggingNotifier,
    NotificationSettings,
    RegistrationNotifier,
)
from event_registrations.queries import RegistrationQueryService
from event_registrations.store import ConfigStore, Database, RegistrationStore
from event_registrations.waiting_list import PromoteOnCancellation, WaitingListManager

if TYPE_CHECKING:
    from collections.abc import Callable

    from event_registrations.notifications import Notifier

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class RegistrationSystem:
    """A fully wired registration engine over one database."""

    database: Database
    bus: EventBus
    registrations: RegistrationStore
    configs: ConfigStore
    waiting_list: WaitingListManager
    service: RegistrationService
    queries: RegistrationQueryService
    reactor: PromoteOnCancellation
    notifications: RegistrationNotifier

    def close(self) -> None:
        """Close the database connection."""
        self.database.close()


def build_registration_system(
    db_path: str = "event_registrations.db",
    defaults: DefaultPolicy | None = None,
    bus: EventBus | None = None,
    clock: Callable[[], datetime] = _utcnow,
    notifier: Notifier | None = None,
    notification_settings: NotificationSettings | None = None,
) -> RegistrationSystem:
    """Create tables and wire every component.

    Args:
        db_path: SQLite file path, or ":memory:".
        defaults: Policy for events without stored config. Defaults to
            ``DefaultPolicy.from_env()``.
        bus: Event bus to publish on. A new one is created if omitted.
        clock: Returns the current time; shared by every component.
        notifier: Delivers user and admin notices. Defaults to a
            ``LoggingNotifier``.
        notification_settings: Which user notices to send. Defaults to
            ``NotificationSettings.from_env()``.

    Returns:
        The wired system, with the notifier and the cancellation reactor
        subscribed to the bus.
    """
    database = Database(db_path)
    database.create_tables()

    if defaults is None:
        defaults = DefaultPolicy.from_env()
    if bus is None:
        bus = EventBus()
    if notifier is None:
        notifier = LoggingNotifier()
    if notification_settings is None:
        notification_settings = NotificationSettings.from_env()

    locks = EventLocks()
    registrations = RegistrationStore(database)
    configs = ConfigStore(database, defaults)
    waiting_list = WaitingListManager(registrations, bus, locks=locks, clock=clock)
    service = RegistrationService(
        registrations, configs, waiting_list, bus, locks=locks, clock=clock
    )
    queries = RegistrationQueryService(registrations, configs, clock=clock)
    # Notices for a cancellation go out before those of the promotion it triggers
    notifications = RegistrationNotifier(registrations, configs, notifier, notification_settings)
    notifications.subscribe(bus)
    reactor = PromoteOnCancellation(configs, waiting_list)
    reactor.subscribe(bus)

    logger.info(
        "Registration system ready (db=%s, journal=%s)", db_path, database.journal_mode()
    )

    return RegistrationSystem(
        database=database,
        bus=bus,
        registrations=registrations,
        configs=configs,
        waiting_list=waiting_list,
        service=service,
        queries=queries,
        reactor=reactor,
        notifications=notifications,
    )
