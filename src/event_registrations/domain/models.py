"""Registration entity and its state machine."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any

from event_registrations.domain.exceptions import CannotCancelRegistrationError


class RegistrationState(StrEnum):
    """Registration lifecycle state."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    WAITING_LIST = "waiting_list"
    CANCELLED = "cancelled"
    REJECTED = "rejected"

    @property
    def label(self) -> str:
        """Human-readable label for the state."""
        return _STATE_LABELS[self]

    def is_active(self) -> bool:
        """Check if the registration holds a seat (confirmed)."""
        return self is RegistrationState.CONFIRMED

    def is_waiting(self) -> bool:
        """Check if the registration is pending or on the waiting list."""
        return self in (RegistrationState.PENDING, RegistrationState.WAITING_LIST)

    def is_final(self) -> bool:
        """Check if the registration can no longer be changed by the user."""
        return self in (RegistrationState.CANCELLED, RegistrationState.REJECTED)

    def can_be_cancelled(self) -> bool:
        return not self.is_final()

    def can_be_promoted(self) -> bool:
        return self is RegistrationState.WAITING_LIST

    @classmethod
    def options(cls) -> dict[str, str]:
        """Map of state value to label, for select fields."""
        return {state.value: state.label for state in cls}


_STATE_LABELS = {
    RegistrationState.PENDING: "Pending",
    RegistrationState.CONFIRMED: "Confirmed",
    RegistrationState.WAITING_LIST: "Waiting list",
    RegistrationState.CANCELLED: "Cancelled",
    RegistrationState.REJECTED: "Rejected",
}


def generate_registration_id() -> str:
    """Generate a new registration identifier."""
    return str(uuid.uuid4())


def utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class Registration:
    """One user's registration for one event.

    Instances are plain values: mutations only change this object and must be
    written back with the registration store's ``save``.

    Attributes:
        event_id: The event being registered for.
        user_id: The registering user.
        id: Registration identifier (UUID string).
        state: Current lifecycle state.
        position: 1-based waiting-list slot, set only while on the waiting list.
        form_data: Submitted registration form values.
        notes: Notes entered by the user.
        admin_notes: Notes entered by an administrator.
        confirmed_at: When the registration was last confirmed.
        cancelled_at: When the registration was cancelled.
        created_at: Set by the store.
        updated_at: Set by the store.
    """

    event_id: str
    user_id: str
    id: str = field(default_factory=generate_registration_id)
    state: RegistrationState = RegistrationState.PENDING
    position: int | None = None
    form_data: dict[str, Any] = field(default_factory=dict)
    notes: str | None = None
    admin_notes: str | None = None
    confirmed_at: datetime | None = None
    cancelled_at: datetime | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def confirm(self, now: datetime | None = None) -> None:
        """Confirm the registration and drop any waiting-list position."""
        self.state = RegistrationState.CONFIRMED
        self.confirmed_at = now or utcnow()
        self.position = None

    def move_to_waiting_list(self, position: int) -> None:
        self.state = RegistrationState.WAITING_LIST
        self.position = position

    def cancel(self, now: datetime | None = None) -> None:
        """Cancel the registration.

        Raises:
            CannotCancelRegistrationError: If already cancelled or rejected.
        """
        if self.state is RegistrationState.CANCELLED:
            raise CannotCancelRegistrationError.already_cancelled(self.id)
        if self.state is RegistrationState.REJECTED:
            raise CannotCancelRegistrationError.rejected(self.id)

        self.state = RegistrationState.CANCELLED
        self.cancelled_at = now or utcnow()
        self.position = None

    def reject(self) -> None:
        self.state = RegistrationState.REJECTED
        self.position = None

    def promote(self, now: datetime | None = None) -> bool:
        """Promote from the waiting list to confirmed.

        Returns:
            True if promoted, False if the registration was not on the waiting list.
        """
        if not self.state.can_be_promoted():
            return False
        self.confirm(now)
        return True

    def update_position(self, position: int) -> None:
        self.position = position

    def reactivate(
        self,
        state: RegistrationState,
        form_data: dict[str, Any] | None = None,
        notes: str | None = None,
    ) -> None:
        """Reuse a cancelled or rejected registration for a new attempt.

        Previous timestamps and position are cleared, and form data and notes are
        replaced by the newly submitted values.
        """
        self.state = state
        self.form_data = dict(form_data or {})
        self.notes = notes
        self.position = None
        self.confirmed_at = None
        self.cancelled_at = None

    @property
    def is_active(self) -> bool:
        return self.state.is_active()

    @property
    def is_on_waiting_list(self) -> bool:
        return self.state is RegistrationState.WAITING_LIST

    @property
    def is_final(self) -> bool:
        return self.state.is_final()
