"""Per-event registration policy."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from event_registrations.domain.exceptions import ClosedReason


def _now(now: datetime | None) -> datetime:
    return now if now is not None else datetime.now(UTC)


@dataclass
class RegistrationConfig:
    """Registration policy for one event.

    All query methods take an optional ``now`` so callers (and tests) control the
    clock. Date boundaries are inclusive.

    Attributes:
        event_id: The event this policy applies to.
        registration_enabled: Master switch for new registrations.
        max_participants: Seat limit, None for unlimited. Zero closes registration.
        waiting_list_enabled: Whether full events queue new attempts.
        max_waiting_list: Waiting-list limit, None (or 0) for unlimited.
        opens_at: Registration opens at this instant.
        closes_at: Registration closes after this instant.
        cancellation_deadline: Users may cancel until this instant.
        requires_confirmation: Admitted registrations stay pending until confirmed.
        requires_payment: Informational only.
        members_only: Enforced outside this package.
        custom_fields: Form field descriptors, opaque to the engine.
        confirmation_message: Shown to users after registering.
        notification_email: Address for admin notifications.
    """

    event_id: str
    registration_enabled: bool = True
    max_participants: int | None = None
    waiting_list_enabled: bool = True
    max_waiting_list: int | None = None
    opens_at: datetime | None = None
    closes_at: datetime | None = None
    cancellation_deadline: datetime | None = None
    requires_confirmation: bool = False
    requires_payment: bool = False
    members_only: bool = False
    custom_fields: list[dict[str, Any]] = field(default_factory=list)
    confirmation_message: str | None = None
    notification_email: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def is_open(self, now: datetime | None = None) -> bool:
        """Check if registration is open based on the enabled flag and dates."""
        return self.closed_reason(now) is None

    def closed_reason(self, now: datetime | None = None) -> ClosedReason | None:
        """Return why registration is closed, or None if it is open.

        An event with zero seats admits nobody and counts as disabled.
        """
        now = _now(now)
        if not self.registration_enabled or self.max_participants == 0:
            return ClosedReason.DISABLED
        if self.opens_at is not None and now < self.opens_at:
            return ClosedReason.NOT_YET_OPEN
        if self.closes_at is not None and now > self.closes_at:
            return ClosedReason.ALREADY_CLOSED
        return None

    def has_participant_limit(self) -> bool:
        return self.max_participants is not None and self.max_participants > 0

    def has_waiting_list_limit(self) -> bool:
        return self.max_waiting_list is not None and self.max_waiting_list > 0

    def can_cancel(self, now: datetime | None = None) -> bool:
        """Check if cancellation is still allowed."""
        if self.cancellation_deadline is None:
            return True
        return _now(now) <= self.cancellation_deadline

    def available_spots(self, confirmed_count: int) -> int | None:
        """Seats left given the confirmed count, None when unlimited."""
        if self.max_participants is None:
            return None
        return max(0, self.max_participants - confirmed_count)
