"""Pydantic models exchanged with callers of the registration services."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from event_registrations.domain.config import RegistrationConfig
from event_registrations.domain.models import Registration, RegistrationState

# Config models


class RegistrationConfigUpdate(BaseModel):
    """Full replacement of an event's registration policy."""

    event_id: str = Field(..., min_length=1, max_length=36)
    registration_enabled: bool = True
    max_participants: int | None = Field(default=None, ge=0)
    waiting_list_enabled: bool = True
    max_waiting_list: int | None = Field(default=None, ge=0)
    opens_at: datetime | None = None
    closes_at: datetime | None = None
    cancellation_deadline: datetime | None = None
    requires_confirmation: bool = False
    requires_payment: bool = False
    members_only: bool = False
    custom_fields: list[dict[str, Any]] = Field(default_factory=list)
    confirmation_message: str | None = None
    notification_email: str | None = Field(
        default=None, max_length=255, pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$"
    )

    @field_validator("opens_at", "closes_at", "cancellation_deadline", mode="after")
    @classmethod
    def _as_utc(cls, value: datetime | None) -> datetime | None:
        # Naive values are taken to be UTC, as the store does
        if value is None:
            return None
        if value.tzinfo is None:
            return value.replace(tzinfo=UTC)
        return value.astimezone(UTC)

    @model_validator(mode="after")
    def _check_window(self) -> RegistrationConfigUpdate:
        if self.opens_at and self.closes_at and self.closes_at < self.opens_at:
            raise ValueError("closes_at must not be before opens_at")
        return self

    def to_config(self) -> RegistrationConfig:
        return RegistrationConfig(**self.model_dump())


class RegistrationConfigResponse(BaseModel):
    """Response model for a registration config."""

    model_config = ConfigDict(from_attributes=True)

    event_id: str
    registration_enabled: bool
    max_participants: int | None
    waiting_list_enabled: bool
    max_waiting_list: int | None
    opens_at: datetime | None
    closes_at: datetime | None
    cancellation_deadline: datetime | None
    requires_confirmation: bool
    requires_payment: bool
    members_only: bool
    custom_fields: list[dict[str, Any]]
    confirmation_message: str | None
    notification_email: str | None


def config_to_response(config: RegistrationConfig) -> RegistrationConfigResponse:
    """Convert a RegistrationConfig to RegistrationConfigResponse."""
    return RegistrationConfigResponse.model_validate(config)


# Registration models


class RegistrationResponse(BaseModel):
    """Response model for a registration."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    event_id: str
    user_id: str
    state: RegistrationState
    state_label: str
    position: int | None
    form_data: dict[str, Any]
    notes: str | None
    admin_notes: str | None
    confirmed_at: datetime | None
    cancelled_at: datetime | None
    created_at: datetime | None
    updated_at: datetime | None


def registration_to_response(registration: Registration) -> RegistrationResponse:
    """Convert a Registration to RegistrationResponse."""
    return RegistrationResponse(
        id=registration.id,
        event_id=registration.event_id,
        user_id=registration.user_id,
        state=registration.state,
        state_label=registration.state.label,
        position=registration.position,
        form_data=registration.form_data,
        notes=registration.notes,
        admin_notes=registration.admin_notes,
        confirmed_at=registration.confirmed_at,
        cancelled_at=registration.cancelled_at,
        created_at=registration.created_at,
        updated_at=registration.updated_at,
    )


# Event status models


class EventStatusResponse(BaseModel):
    """Response model for an event's registration status."""

    model_config = ConfigDict(from_attributes=True)

    event_id: str
    is_open: bool
    registration_enabled: bool
    max_participants: int | None
    waiting_list_enabled: bool
    max_waiting_list: int | None
    requires_confirmation: bool
    requires_payment: bool
    confirmed_count: int
    waiting_list_count: int
    available_spots: int | None
    is_full: bool
