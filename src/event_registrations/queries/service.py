"""Read-only views over registrations."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import TYPE_CHECKING

from event_registrations.domain.models import RegistrationState
from event_registrations.queries.models import EventStatus

if TYPE_CHECKING:
    from collections.abc import Callable

    from event_registrations.domain.models import Registration
    from event_registrations.domain.repositories import (
        ConfigRepository,
        RegistrationRepository,
    )


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RegistrationQueryService:
    """Lists and counts for admin screens and user dashboards."""

    def __init__(
        self,
        registrations: RegistrationRepository,
        configs: ConfigRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.registrations = registrations
        self.configs = configs
        self.clock = clock

    def get_event_status(self, event_id: str) -> EventStatus:
        """Policy and live counts for an event."""
        config = self.configs.find_by_event_or_default(event_id)
        confirmed = self.registrations.count_confirmed(event_id)
        waiting = self.registrations.count_waiting_list(event_id)

        return EventStatus(
            event_id=event_id,
            is_open=config.is_open(self.clock()),
            registration_enabled=config.registration_enabled,
            max_participants=config.max_participants,
            waiting_list_enabled=config.waiting_list_enabled,
            max_waiting_list=config.max_waiting_list,
            requires_confirmation=config.requires_confirmation,
            requires_payment=config.requires_payment,
            confirmed_count=confirmed,
            waiting_list_count=waiting,
            available_spots=config.available_spots(confirmed),
        )

    def get_event_registrations(self, event_id: str) -> list[Registration]:
        """All registrations for an event, oldest first."""
        return self.registrations.list_by_event(event_id)

    def get_confirmed_registrations(self, event_id: str) -> list[Registration]:
        return self.registrations.list_by_event(event_id, RegistrationState.CONFIRMED)

    def get_waiting_list(self, event_id: str) -> list[Registration]:
        return self.registrations.waiting_list_ordered(event_id)

    def get_user_registrations(self, user_id: str) -> list[Registration]:
        """All of a user's registrations, most recent first."""
        return self.registrations.list_by_user(user_id)

    def get_user_active_registrations(self, user_id: str) -> list[Registration]:
        """A user's registrations that are not cancelled or rejected."""
        return [r for r in self.registrations.list_by_user(user_id) if not r.is_final]

    def count_confirmed(self, event_id: str) -> int:
        return self.registrations.count_confirmed(event_id)

    def count_waiting_list(self, event_id: str) -> int:
        return self.registrations.count_waiting_list(event_id)
