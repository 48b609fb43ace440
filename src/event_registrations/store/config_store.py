"""ConfigStore - SQLAlchemy persistence for per-event registration policy."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import select

from event_registrations.domain.config import RegistrationConfig
from event_registrations.domain.defaults import DefaultPolicy
from event_registrations.store.models import RegistrationConfigRow

if TYPE_CHECKING:
    from event_registrations.store.database import Database


def _to_entity(row: RegistrationConfigRow) -> RegistrationConfig:
    return RegistrationConfig(
        event_id=row.event_id,
        registration_enabled=row.registration_enabled,
        max_participants=row.max_participants,
        waiting_list_enabled=row.waiting_list_enabled,
        max_waiting_list=row.max_waiting_list,
        opens_at=row.opens_at,
        closes_at=row.closes_at,
        cancellation_deadline=row.cancellation_deadline,
        requires_confirmation=row.requires_confirmation,
        requires_payment=row.requires_payment,
        members_only=row.members_only,
        custom_fields=list(row.custom_fields or []),
        confirmation_message=row.confirmation_message,
        notification_email=row.notification_email,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class ConfigStore:
    """Per-event policy persistence with a default-policy fallback."""

    def __init__(self, db: Database, defaults: DefaultPolicy | None = None) -> None:
        """Initialize the store.

        Args:
            db: Database whose tables have been created.
            defaults: Policy for events without a stored config.
        """
        self._db = db
        self.defaults = defaults if defaults is not None else DefaultPolicy()

    def save(self, config: RegistrationConfig) -> RegistrationConfig:
        """Create or fully replace the config for ``config.event_id``."""
        session = self._db.get_session()
        try:
            row = session.get(RegistrationConfigRow, config.event_id)
            if row is None:
                row = RegistrationConfigRow(event_id=config.event_id)
                session.add(row)

            row.registration_enabled = config.registration_enabled
            row.max_participants = config.max_participants
            row.waiting_list_enabled = config.waiting_list_enabled
            row.max_waiting_list = config.max_waiting_list
            row.opens_at = config.opens_at
            row.closes_at = config.closes_at
            row.cancellation_deadline = config.cancellation_deadline
            row.requires_confirmation = config.requires_confirmation
            row.requires_payment = config.requires_payment
            row.members_only = config.members_only
            row.custom_fields = list(config.custom_fields)
            row.confirmation_message = config.confirmation_message
            row.notification_email = config.notification_email

            session.commit()
            session.refresh(row)
            return _to_entity(row)
        finally:
            session.close()

    def find_by_event(self, event_id: str) -> RegistrationConfig | None:
        session = self._db.get_session()
        try:
            row = session.get(RegistrationConfigRow, event_id)
            return _to_entity(row) if row is not None else None
        finally:
            session.close()

    def find_by_event_or_default(self, event_id: str) -> RegistrationConfig:
        """Stored config for the event, or the default policy applied to it."""
        config = self.find_by_event(event_id)
        if config is not None:
            return config
        return self.defaults.config_for(event_id)

    def delete(self, event_id: str) -> None:
        """Delete the config for an event. Missing configs are ignored."""
        session = self._db.get_session()
        try:
            row = session.get(RegistrationConfigRow, event_id)
            if row is not None:
                session.delete(row)
                session.commit()
        finally:
            session.close()

    def exists(self, event_id: str) -> bool:
        session = self._db.get_session()
        try:
            stmt = select(RegistrationConfigRow.event_id).where(
                RegistrationConfigRow.event_id == event_id
            )
            return session.execute(stmt).first() is not None
        finally:
            session.close()
