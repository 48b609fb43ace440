"""Waiting List Manager - ordered queue of registrations per event."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from event_registrations.domain.events import (
    ConfirmationSource,
    RegistrationConfirmed,
    UserRegistered,
    WaitingListPromoted,
)
from event_registrations.domain.models import Registration, RegistrationState
from event_registrations.locks import EventLocks

if TYPE_CHECKING:
    from collections.abc import Callable

    from event_registrations.domain.events import DomainEvent, EventSink
    from event_registrations.domain.repositories import RegistrationRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(UTC)


class WaitingListManager:
    """Maintains a dense, 1-based FIFO queue of waiting-list registrations.

    Positions have no gaps once an operation returns: every removal from the
    queue (promotion, cancellation, rejection, admin confirmation) is followed by
    ``recalculate_positions``.
    """

    def __init__(
        self,
        registrations: RegistrationRepository,
        sink: EventSink,
        locks: EventLocks | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the manager.

        Args:
            registrations: Registration store.
            sink: Receives events after each change is persisted.
            locks: Per-event locks shared with the admission engine.
            clock: Returns the current time.
        """
        self.registrations = registrations
        self.sink = sink
        self.locks = locks if locks is not None else EventLocks()
        self.clock = clock

    def next_position(self, event_id: str) -> int:
        """Position a new waiting-list entry would get right now.

        Always ask at assignment time; the value moves as the queue compacts.
        """
        return self.registrations.next_waiting_list_position(event_id)

    def add_to_waiting_list(
        self,
        event_id: str,
        user_id: str,
        form_data: dict[str, Any] | None = None,
        notes: str | None = None,
        existing: Registration | None = None,
    ) -> Registration:
        """Append a registration to the end of the event's queue.

        Args:
            event_id: The event.
            user_id: The user joining the queue.
            form_data: Submitted form values.
            notes: User notes.
            existing: A cancelled or rejected registration to reactivate instead
                of creating a new one.

        Returns:
            The stored waiting-list registration.
        """
        with self.locks.hold(event_id):
            registration, events = self.enqueue(event_id, user_id, form_data, notes, existing)
        self._publish(events)
        return registration

    def enqueue(
        self,
        event_id: str,
        user_id: str,
        form_data: dict[str, Any] | None,
        notes: str | None,
        existing: Registration | None,
    ) -> tuple[Registration, list[DomainEvent]]:
        """Append to the queue and return the events instead of publishing them.

        Used by the admission engine, which publishes once its own lock is released.
        """
        with self.locks.hold(event_id):
            position = self.next_position(event_id)

            if existing is not None and existing.is_final:
                registration = existing
                registration.reactivate(RegistrationState.WAITING_LIST, form_data, notes)
                registration.update_position(position)
            else:
                registration = Registration(
                    event_id=event_id,
                    user_id=user_id,
                    state=RegistrationState.WAITING_LIST,
                    position=position,
                    form_data=dict(form_data or {}),
                    notes=notes,
                )

            registration = self.registrations.save(registration)

        logger.info(
            "User %s added to waiting list for event %s at position %d",
            user_id,
            event_id,
            position,
        )
        event = UserRegistered(
            registration_id=registration.id,
            event_id=registration.event_id,
            user_id=registration.user_id,
            state=registration.state,
            position=position,
        )
        return registration, [event]

    def promote_next(self, event_id: str) -> Registration | None:
        """Confirm the head of the queue and renumber the rest.

        Returns:
            The promoted registration, or None if the queue is empty.
        """
        with self.locks.hold(event_id):
            registration, events = self._promote_head(event_id)
        self._publish(events)
        return registration

    def fill_open_seat(self, event_id: str, max_participants: int | None) -> Registration | None:
        """Promote the head of the queue only if a seat is free.

        The confirmed count and the promotion happen under the same event lock,
        so two concurrent cancellations cannot both promote into one seat.

        Args:
            event_id: The event.
            max_participants: Seat limit, None for unlimited.

        Returns:
            The promoted registration, or None if the event is full or the queue empty.
        """
        with self.locks.hold(event_id):
            confirmed = self.registrations.count_confirmed(event_id)
            if max_participants is not None and confirmed >= max_participants:
                logger.debug(
                    "Event %s still full (%d/%d), not promoting",
                    event_id,
                    confirmed,
                    max_participants,
                )
                return None
            registration, events = self._promote_head(event_id)
        self._publish(events)
        return registration

    def _promote_head(self, event_id: str) -> tuple[Registration | None, list[DomainEvent]]:
        registration = self.registrations.first_in_waiting_list(event_id)
        if registration is None:
            logger.debug("Waiting list for event %s is empty, nothing to promote", event_id)
            return None, []

        previous_position = registration.position or 1
        registration.promote(self.clock())
        registration = self.registrations.save(registration)
        self.recalculate_positions(event_id)

        logger.info(
            "Promoted registration %s (user %s) from waiting list position %d for event %s",
            registration.id,
            registration.user_id,
            previous_position,
            event_id,
        )
        events: list[DomainEvent] = [
            WaitingListPromoted(
                registration_id=registration.id,
                event_id=registration.event_id,
                user_id=registration.user_id,
                previous_position=previous_position,
            ),
            RegistrationConfirmed(
                registration_id=registration.id,
                event_id=registration.event_id,
                user_id=registration.user_id,
                source=ConfirmationSource.PROMOTION,
            ),
        ]
        return registration, events

    def recalculate_positions(self, event_id: str) -> int:
        """Reassign positions 1..N in current queue order.

        Only rows whose position changes are written. Safe to call repeatedly.

        Returns:
            Number of registrations whose position changed.
        """
        changed = 0
        with self.locks.hold(event_id):
            waiting = self.registrations.waiting_list_ordered(event_id)
            for position, registration in enumerate(waiting, start=1):
                if registration.position != position:
                    registration.update_position(position)
                    self.registrations.save(registration)
                    changed += 1

        if changed:
            logger.debug("Renumbered %d waiting-list entries for event %s", changed, event_id)
        return changed

    def get_position(self, event_id: str, user_id: str) -> int | None:
        """The user's queue position, or None unless they are on the waiting list."""
        registration = self.registrations.find_by_user_and_event(user_id, event_id)
        if registration is None or not registration.is_on_waiting_list:
            return None
        return registration.position

    def get_waiting_list(self, event_id: str) -> list[Registration]:
        return self.registrations.waiting_list_ordered(event_id)

    def _publish(self, events: list[DomainEvent]) -> None:
        for event in events:
            self.sink.publish(event)
