"""Domain - registration entity, state machine, policy, events and errors."""

from event_registrations.domain.config import RegistrationConfig
from event_registrations.domain.defaults import DefaultPolicy
from event_registrations.domain.events import (
    ConfirmationSource,
    DomainEvent,
    EventSink,
    EventType,
    RegistrationConfirmed,
    RegistrationRejected,
    UserRegistered,
    UserUnregistered,
    WaitingListPromoted,
)
from event_registrations.domain.exceptions import (
    AlreadyRegisteredError,
    CancelReason,
    CannotCancelRegistrationError,
    ClosedReason,
    EventFullError,
    FullReason,
    InvalidStateTransitionError,
    RegistrationClosedError,
    RegistrationError,
    RegistrationNotFoundError,
)
from event_registrations.domain.models import Registration, RegistrationState
from event_registrations.domain.repositories import ConfigRepository, RegistrationRepository

__all__ = [
    "AlreadyRegisteredError",
    "CancelReason",
    "CannotCancelRegistrationError",
    "ClosedReason",
    "ConfirmationSource",
    "ConfigRepository",
    "DefaultPolicy",
    "DomainEvent",
    "EventFullError",
    "EventSink",
    "EventType",
    "FullReason",
    "InvalidStateTransitionError",
    "Registration",
    "RegistrationClosedError",
    "RegistrationConfig",
    "RegistrationConfirmed",
    "RegistrationError",
    "RegistrationNotFoundError",
    "RegistrationRejected",
    "RegistrationRepository",
    "RegistrationState",
    "UserRegistered",
    "UserUnregistered",
    "WaitingListPromoted",
]
