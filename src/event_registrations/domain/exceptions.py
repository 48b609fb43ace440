"""Domain exceptions for event registrations.

These are expected outcomes surfaced to the caller, not internal faults. Each one
carries the identifiers needed to render a specific message.
"""

from __future__ import annotations

from enum import StrEnum


class RegistrationError(Exception):
    """Base exception for registration domain errors."""


class AlreadyRegisteredError(RegistrationError):
    """User already holds a non-final registration for the event."""

    def __init__(self, event_id: str, user_id: str) -> None:
        super().__init__(f"User {user_id} is already registered for event {event_id}")
        self.event_id = event_id
        self.user_id = user_id


class ClosedReason(StrEnum):
    """Why registration is closed."""

    DISABLED = "disabled"
    NOT_YET_OPEN = "not_yet_open"
    ALREADY_CLOSED = "already_closed"


class RegistrationClosedError(RegistrationError):
    """Registration for the event is not accepting attempts."""

    _messages = {
        ClosedReason.DISABLED: "Registration for event {event_id} is disabled",
        ClosedReason.NOT_YET_OPEN: "Registration for event {event_id} is not yet open",
        ClosedReason.ALREADY_CLOSED: "Registration for event {event_id} has closed",
    }

    def __init__(self, event_id: str, reason: ClosedReason) -> None:
        super().__init__(self._messages[reason].format(event_id=event_id))
        self.event_id = event_id
        self.reason = reason

    @classmethod
    def disabled(cls, event_id: str) -> RegistrationClosedError:
        return cls(event_id, ClosedReason.DISABLED)

    @classmethod
    def not_yet_open(cls, event_id: str) -> RegistrationClosedError:
        return cls(event_id, ClosedReason.NOT_YET_OPEN)

    @classmethod
    def already_closed(cls, event_id: str) -> RegistrationClosedError:
        return cls(event_id, ClosedReason.ALREADY_CLOSED)


class FullReason(StrEnum):
    """Which list is full."""

    NO_SPOTS = "no_spots"
    WAITING_LIST_FULL = "waiting_list_full"


class EventFullError(RegistrationError):
    """No seat and no waiting-list slot is available."""

    def __init__(self, event_id: str, reason: FullReason) -> None:
        if reason is FullReason.NO_SPOTS:
            message = f"Event {event_id} has no spots available"
        else:
            message = f"Event {event_id} waiting list is full"
        super().__init__(message)
        self.event_id = event_id
        self.reason = reason

    @classmethod
    def no_spots(cls, event_id: str) -> EventFullError:
        return cls(event_id, FullReason.NO_SPOTS)

    @classmethod
    def waiting_list_full(cls, event_id: str) -> EventFullError:
        return cls(event_id, FullReason.WAITING_LIST_FULL)


class RegistrationNotFoundError(RegistrationError):
    """Registration does not exist."""

    def __init__(
        self,
        message: str,
        registration_id: str | None = None,
        event_id: str | None = None,
        user_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.registration_id = registration_id
        self.event_id = event_id
        self.user_id = user_id

    @classmethod
    def with_id(cls, registration_id: str) -> RegistrationNotFoundError:
        return cls(
            f"Registration with id '{registration_id}' not found",
            registration_id=registration_id,
        )

    @classmethod
    def for_user_and_event(cls, user_id: str, event_id: str) -> RegistrationNotFoundError:
        return cls(
            f"Registration for user '{user_id}' and event '{event_id}' not found",
            event_id=event_id,
            user_id=user_id,
        )


class CancelReason(StrEnum):
    """Why a cancellation was refused."""

    ALREADY_CANCELLED = "already_cancelled"
    REJECTED = "rejected"
    DEADLINE_PASSED = "deadline_passed"


class CannotCancelRegistrationError(RegistrationError):
    """Registration cannot be cancelled."""

    def __init__(
        self,
        message: str,
        reason: CancelReason,
        registration_id: str | None = None,
        event_id: str | None = None,
    ) -> None:
        super().__init__(message)
        self.reason = reason
        self.registration_id = registration_id
        self.event_id = event_id

    @classmethod
    def already_cancelled(cls, registration_id: str) -> CannotCancelRegistrationError:
        return cls(
            f"Registration {registration_id} is already cancelled",
            CancelReason.ALREADY_CANCELLED,
            registration_id=registration_id,
        )

    @classmethod
    def rejected(cls, registration_id: str) -> CannotCancelRegistrationError:
        return cls(
            f"Registration {registration_id} has been rejected and cannot be cancelled",
            CancelReason.REJECTED,
            registration_id=registration_id,
        )

    @classmethod
    def deadline_passed(cls, event_id: str) -> CannotCancelRegistrationError:
        return cls(
            f"Cancellation deadline for event {event_id} has passed",
            CancelReason.DEADLINE_PASSED,
            event_id=event_id,
        )


class InvalidStateTransitionError(RegistrationError):
    """Administrative action is not allowed from the registration's current state."""

    def __init__(self, registration_id: str, current_state: str, action: str) -> None:
        super().__init__(
            f"Cannot {action} registration {registration_id} in state '{current_state}'"
        )
        self.registration_id = registration_id
        self.current_state = current_state
        self.action = action
