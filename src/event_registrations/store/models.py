"""SQLAlchemy models for the registration store."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import (
    JSON,
    Boolean,
    DateTime,
    Index,
    Integer,
    String,
    Text,
    TypeDecorator,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def utcnow() -> datetime:
    return datetime.now(UTC)


class UTCDateTime(TypeDecorator[datetime]):
    """Stores datetimes as UTC and returns them timezone-aware.

    Naive values are taken to be UTC already.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        if value.tzinfo is not None:
            value = value.astimezone(UTC)
        return value.replace(tzinfo=None)

    def process_result_value(self, value: datetime | None, dialect: Any) -> datetime | None:
        if value is None:
            return None
        return value.replace(tzinfo=UTC)


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class RegistrationRow(Base):
    """One registration per (event, user); reactivation reuses the row."""

    __tablename__ = "event_registrations"
    __table_args__ = (
        UniqueConstraint("event_id", "user_id", name="uq_registration_event_user"),
        UniqueConstraint("event_id", "position", name="uq_registration_event_position"),
        Index("ix_registration_event_state", "event_id", "state"),
        Index("ix_registration_user", "user_id"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    event_id: Mapped[str] = mapped_column(String(36), nullable=False)
    user_id: Mapped[str] = mapped_column(String(36), nullable=False)
    state: Mapped[str] = mapped_column(String(20), nullable=False)
    position: Mapped[int | None] = mapped_column(Integer, nullable=True)
    form_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    admin_notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    confirmed_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<RegistrationRow(id={self.id!r}, event_id={self.event_id!r}, "
            f"user_id={self.user_id!r}, state={self.state!r}, position={self.position!r})>"
        )


class RegistrationConfigRow(Base):
    """Registration policy, keyed by event id."""

    __tablename__ = "event_registration_configs"

    event_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    registration_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    max_participants: Mapped[int | None] = mapped_column(Integer, nullable=True)
    waiting_list_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    max_waiting_list: Mapped[int | None] = mapped_column(Integer, nullable=True)
    opens_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    closes_at: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    cancellation_deadline: Mapped[datetime | None] = mapped_column(UTCDateTime, nullable=True)
    requires_confirmation: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    requires_payment: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    members_only: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    custom_fields: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, default=list
    )
    confirmation_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    notification_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    created_at: Mapped[datetime] = mapped_column(UTCDateTime, nullable=False, default=utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow
    )

    def __repr__(self) -> str:
        return (
            f"<RegistrationConfigRow(event_id={self.event_id!r}, "
            f"max_participants={self.max_participants!r})>"
        )
