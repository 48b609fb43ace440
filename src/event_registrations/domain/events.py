"""Domain events emitted after registration state changes are persisted."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum
from typing import Any, ClassVar, Protocol

from event_registrations.domain.models import RegistrationState


class EventType(StrEnum):
    """Types of domain events."""

    USER_REGISTERED = "user_registered"
    USER_UNREGISTERED = "user_unregistered"
    REGISTRATION_CONFIRMED = "registration_confirmed"
    REGISTRATION_REJECTED = "registration_rejected"
    WAITING_LIST_PROMOTED = "waiting_list_promoted"


class ConfirmationSource(StrEnum):
    """What turned a registration into a confirmed one."""

    ADMIN = "admin"
    REGISTRATION = "registration"  # auto-confirmed on registering
    PROMOTION = "promotion"  # promoted from the waiting list


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class DomainEvent:
    """Base for all registration events."""

    event_type: ClassVar[EventType]

    registration_id: str
    event_id: str
    user_id: str

    def to_dict(self) -> dict[str, Any]:
        """Serializable payload, with enum values and ISO timestamps."""
        data: dict[str, Any] = {"type": self.event_type.value}
        for name, value in self.__dict__.items():
            if isinstance(value, datetime):
                data[name] = value.isoformat()
            elif isinstance(value, StrEnum):
                data[name] = value.value
            else:
                data[name] = value
        return data


@dataclass(frozen=True)
class UserRegistered(DomainEvent):
    event_type: ClassVar[EventType] = EventType.USER_REGISTERED

    state: RegistrationState
    position: int | None = None
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class UserUnregistered(DomainEvent):
    """A registration was cancelled; ``previous_state`` drives promotion."""

    event_type: ClassVar[EventType] = EventType.USER_UNREGISTERED

    previous_state: RegistrationState
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class RegistrationConfirmed(DomainEvent):
    event_type: ClassVar[EventType] = EventType.REGISTRATION_CONFIRMED

    source: ConfirmationSource = ConfirmationSource.ADMIN
    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class RegistrationRejected(DomainEvent):
    event_type: ClassVar[EventType] = EventType.REGISTRATION_REJECTED

    occurred_at: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class WaitingListPromoted(DomainEvent):
    event_type: ClassVar[EventType] = EventType.WAITING_LIST_PROMOTED

    previous_position: int
    occurred_at: datetime = field(default_factory=_utcnow)


class EventSink(Protocol):
    """Receives domain events once the triggering change is persisted."""

    def publish(self, event: DomainEvent) -> None:
        """Deliver one event. Must not raise into the caller."""
        ...
