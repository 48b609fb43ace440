"""Notices addressed to users and event admins, and the delivery interface."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from event_registrations.domain.models import Registration

logger = logging.getLogger(__name__)


class NoticeKind(StrEnum):
    """Kinds of notice sent about a registration."""

    REGISTERED = "registered"
    WAITING_LIST_ADDED = "waiting_list_added"
    PROMOTED = "promoted"
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    REJECTED = "rejected"
    ADMIN_NEW_REGISTRATION = "admin_new_registration"


@dataclass(frozen=True)
class Notice:
    """One message to deliver.

    Attributes:
        kind: What happened.
        registration: The registration as stored when the notice was built.
        position: Waiting-list position, for waiting-list notices.
    """

    kind: NoticeKind
    registration: Registration
    position: int | None = None

    @property
    def event_id(self) -> str:
        return self.registration.event_id

    @property
    def user_id(self) -> str:
        return self.registration.user_id


class Notifier(Protocol):
    """Delivers notices. Rendering and transport are up to the implementation."""

    def notify_user(self, notice: Notice) -> None:
        """Send a notice to the registration's user."""
        ...

    def notify_admin(self, address: str, notice: Notice) -> None:
        """Send a notice to an event admin at ``address``."""
        ...


class LoggingNotifier:
    """Notifier that only writes notices to the log."""

    def notify_user(self, notice: Notice) -> None:
        logger.info(
            "Notice %s for user %s on event %s (registration %s)",
            notice.kind.value,
            notice.user_id,
            notice.event_id,
            notice.registration.id,
        )

    def notify_admin(self, address: str, notice: Notice) -> None:
        logger.info(
            "Admin notice %s to %s for event %s (registration %s)",
            notice.kind.value,
            address,
            notice.event_id,
            notice.registration.id,
        )
