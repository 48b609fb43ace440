"""RegistrationStore - SQLAlchemy persistence for registrations."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from event_registrations.domain.exceptions import RegistrationNotFoundError
from event_registrations.domain.models import Registration, RegistrationState
from event_registrations.store.exceptions import (
    RegistrationExistsError,
    WaitingListPositionConflictError,
)
from event_registrations.store.models import RegistrationRow

if TYPE_CHECKING:
    from event_registrations.store.database import Database


def _to_entity(row: RegistrationRow) -> Registration:
    return Registration(
        id=row.id,
        event_id=row.event_id,
        user_id=row.user_id,
        state=RegistrationState(row.state),
        position=row.position,
        form_data=dict(row.form_data or {}),
        notes=row.notes,
        admin_notes=row.admin_notes,
        confirmed_at=row.confirmed_at,
        cancelled_at=row.cancelled_at,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class RegistrationStore:
    """Registration persistence.

    Every read returns fresh ``Registration`` values; nothing is tracked after the
    session closes, so changes only reach the database through ``save``.
    """

    def __init__(self, db: Database) -> None:
        """Initialize the store.

        Args:
            db: Database whose tables have been created.
        """
        self._db = db

    def save(self, registration: Registration) -> Registration:
        """Create or update a registration by id.

        Args:
            registration: The registration to write back wholesale.

        Returns:
            The stored registration, with store-owned timestamps filled in.

        Raises:
            RegistrationExistsError: If another row exists for the same event and user.
            WaitingListPositionConflictError: If the position is already taken.
        """
        session = self._db.get_session()
        try:
            row = session.get(RegistrationRow, registration.id)
            if row is None:
                row = RegistrationRow(
                    id=registration.id,
                    event_id=registration.event_id,
                    user_id=registration.user_id,
                )
                session.add(row)

            row.state = registration.state.value
            row.position = registration.position
            row.form_data = dict(registration.form_data)
            row.notes = registration.notes
            row.admin_notes = registration.admin_notes
            row.confirmed_at = registration.confirmed_at
            row.cancelled_at = registration.cancelled_at

            session.commit()
            session.refresh(row)
            return _to_entity(row)
        except IntegrityError as e:
            session.rollback()
            message = str(e)
            if "event_registrations.position" in message:
                raise WaitingListPositionConflictError(
                    f"Position {registration.position} is already taken "
                    f"for event '{registration.event_id}'"
                ) from e
            if "event_registrations.user_id" in message:
                raise RegistrationExistsError(
                    f"Registration for user '{registration.user_id}' "
                    f"and event '{registration.event_id}' already exists"
                ) from e
            raise
        finally:
            session.close()

    def get(self, registration_id: str) -> Registration | None:
        session = self._db.get_session()
        try:
            row = session.get(RegistrationRow, registration_id)
            return _to_entity(row) if row is not None else None
        finally:
            session.close()

    def get_or_fail(self, registration_id: str) -> Registration:
        """Get registration by id.

        Raises:
            RegistrationNotFoundError: If the registration doesn't exist.
        """
        registration = self.get(registration_id)
        if registration is None:
            raise RegistrationNotFoundError.with_id(registration_id)
        return registration

    def find_by_user_and_event(self, user_id: str, event_id: str) -> Registration | None:
        """Get the registration row for a user and event, in any state."""
        session = self._db.get_session()
        try:
            stmt = select(RegistrationRow).where(
                RegistrationRow.event_id == event_id,
                RegistrationRow.user_id == user_id,
            )
            row = session.execute(stmt).scalar_one_or_none()
            return _to_entity(row) if row is not None else None
        finally:
            session.close()

    def delete(self, registration_id: str) -> None:
        """Delete a registration.

        Raises:
            RegistrationNotFoundError: If the registration doesn't exist.
        """
        session = self._db.get_session()
        try:
            row = session.get(RegistrationRow, registration_id)
            if row is None:
                raise RegistrationNotFoundError.with_id(registration_id)
            session.delete(row)
            session.commit()
        finally:
            session.close()

    def list_by_event(
        self,
        event_id: str,
        state: RegistrationState | None = None,
    ) -> list[Registration]:
        """List registrations for an event, oldest first.

        Args:
            event_id: The event.
            state: Filter by state (optional).
        """
        session = self._db.get_session()
        try:
            stmt = select(RegistrationRow).where(RegistrationRow.event_id == event_id)
            if state is not None:
                stmt = stmt.where(RegistrationRow.state == state.value)
            stmt = stmt.order_by(RegistrationRow.created_at, RegistrationRow.id)
            return [_to_entity(row) for row in session.execute(stmt).scalars().all()]
        finally:
            session.close()

    def list_by_user(self, user_id: str) -> list[Registration]:
        """List a user's registrations, most recent first."""
        session = self._db.get_session()
        try:
            stmt = (
                select(RegistrationRow)
                .where(RegistrationRow.user_id == user_id)
                .order_by(RegistrationRow.created_at.desc())
            )
            return [_to_entity(row) for row in session.execute(stmt).scalars().all()]
        finally:
            session.close()

    def count_by_state(self, event_id: str, state: RegistrationState) -> int:
        session = self._db.get_session()
        try:
            stmt = select(func.count(RegistrationRow.id)).where(
                RegistrationRow.event_id == event_id,
                RegistrationRow.state == state.value,
            )
            return session.execute(stmt).scalar_one()
        finally:
            session.close()

    def count_confirmed(self, event_id: str) -> int:
        return self.count_by_state(event_id, RegistrationState.CONFIRMED)

    def count_waiting_list(self, event_id: str) -> int:
        return self.count_by_state(event_id, RegistrationState.WAITING_LIST)

    def next_waiting_list_position(self, event_id: str) -> int:
        """Highest waiting-list position for the event plus one (1 if empty)."""
        session = self._db.get_session()
        try:
            stmt = select(func.max(RegistrationRow.position)).where(
                RegistrationRow.event_id == event_id,
                RegistrationRow.state == RegistrationState.WAITING_LIST.value,
            )
            max_position = session.execute(stmt).scalar_one_or_none()
            return (max_position or 0) + 1
        finally:
            session.close()

    def first_in_waiting_list(self, event_id: str) -> Registration | None:
        """The waiting-list registration with the lowest position."""
        session = self._db.get_session()
        try:
            stmt = (
                select(RegistrationRow)
                .where(
                    RegistrationRow.event_id == event_id,
                    RegistrationRow.state == RegistrationState.WAITING_LIST.value,
                )
                .order_by(RegistrationRow.position)
                .limit(1)
            )
            row = session.execute(stmt).scalar_one_or_none()
            return _to_entity(row) if row is not None else None
        finally:
            session.close()

    def waiting_list_ordered(self, event_id: str) -> list[Registration]:
        """All waiting-list registrations for the event by position."""
        session = self._db.get_session()
        try:
            stmt = (
                select(RegistrationRow)
                .where(
                    RegistrationRow.event_id == event_id,
                    RegistrationRow.state == RegistrationState.WAITING_LIST.value,
                )
                .order_by(RegistrationRow.position)
            )
            return [_to_entity(row) for row in session.execute(stmt).scalars().all()]
        finally:
            session.close()
