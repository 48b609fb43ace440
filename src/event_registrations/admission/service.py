"""RegistrationService - admission decisions and administrative overrides."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from event_registrations.domain.events import (
    ConfirmationSource,
    RegistrationConfirmed,
    RegistrationRejected,
    UserRegistered,
    UserUnregistered,
)
from event_registrations.domain.exceptions import (
    AlreadyRegisteredError,
    CannotCancelRegistrationError,
    EventFullError,
    InvalidStateTransitionError,
    RegistrationClosedError,
    RegistrationNotFoundError,
)
from event_registrations.domain.models import Registration, RegistrationState
from event_registrations.locks import EventLocks
from event_registrations.logging import mask_form_data

if TYPE_CHECKING:
    from collections.abc import Callable

    from event_registrations.domain.config import RegistrationConfig
    from event_registrations.domain.events import DomainEvent, EventSink
    from event_registrations.domain.repositories import (
        ConfigRepository,
        RegistrationRepository,
    )
    from event_registrations.schemas import RegistrationConfigUpdate
    from event_registrations.waiting_list import WaitingListManager

logger = logging.getLogger(__name__)

# States an administrator may reject from
_REJECTABLE_STATES = (RegistrationState.PENDING, RegistrationState.WAITING_LIST)


class Route(Enum):
    """Where a new registration attempt is sent."""

    ADMIT = "admit"
    WAITING_LIST = "waiting_list"


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RegistrationService:
    """Decides and records registration outcomes for events.

    All mutating operations for one event run under that event's lock. Events are
    handed to the sink after the lock is released, in the order they happened.
    """

    def __init__(
        self,
        registrations: RegistrationRepository,
        configs: ConfigRepository,
        waiting_list: WaitingListManager,
        sink: EventSink,
        locks: EventLocks | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the service.

        Args:
            registrations: Registration store.
            configs: Config store with default-policy fallback.
            waiting_list: Manager for the per-event queue.
            sink: Receives domain events.
            locks: Per-event locks, shared with the waiting-list manager.
            clock: Returns the current time.
        """
        self.registrations = registrations
        self.configs = configs
        self.waiting_list = waiting_list
        self.sink = sink
        self.locks = locks if locks is not None else waiting_list.locks
        self.clock = clock

    # --- Registration ---

    def register(
        self,
        event_id: str,
        user_id: str,
        form_data: dict[str, Any] | None = None,
        notes: str | None = None,
    ) -> Registration:
        """Register a user for an event.

        Args:
            event_id: The event.
            user_id: The registering user.
            form_data: Submitted form values.
            notes: Optional user notes.

        Returns:
            The stored registration: confirmed, pending, or on the waiting list.

        Raises:
            AlreadyRegisteredError: If the user holds a non-final registration.
            RegistrationClosedError: If registration is disabled or outside its window.
            EventFullError: If no seat or waiting-list slot is available.
        """
        form_data = dict(form_data or {})
        with self.locks.hold(event_id):
            existing = self.registrations.find_by_user_and_event(user_id, event_id)
            if existing is not None and not existing.is_final:
                logger.info("User %s already registered for event %s", user_id, event_id)
                raise AlreadyRegisteredError(event_id, user_id)

            config = self.configs.find_by_event_or_default(event_id)
            self._ensure_open(config)

            route = self._route(config, self.registrations.count_confirmed(event_id))

            if route is Route.WAITING_LIST:
                waiting = self.registrations.count_waiting_list(event_id)
                if config.has_waiting_list_limit() and waiting >= config.max_waiting_list:
                    logger.info(
                        "Waiting list full for event %s (%d/%d)",
                        event_id,
                        waiting,
                        config.max_waiting_list,
                    )
                    raise EventFullError.waiting_list_full(event_id)
                registration, events = self.waiting_list.enqueue(
                    event_id, user_id, form_data, notes, existing
                )
            else:
                registration, events = self._admit(config, user_id, form_data, notes, existing)

        logger.debug(
            "Registration %s form data: %s", registration.id, mask_form_data(registration.form_data)
        )
        self._publish(events)
        return registration

    def _ensure_open(self, config: RegistrationConfig) -> None:
        reason = config.closed_reason(self.clock())
        if reason is not None:
            logger.info("Registration closed for event %s: %s", config.event_id, reason.value)
            raise RegistrationClosedError(config.event_id, reason)

    def _route(self, config: RegistrationConfig, confirmed: int) -> Route:
        if config.max_participants is None or confirmed < config.max_participants:
            logger.debug(
                "Admitting to event %s (%d confirmed, limit %s)",
                config.event_id,
                confirmed,
                config.max_participants,
            )
            return Route.ADMIT
        if config.waiting_list_enabled:
            logger.debug("Event %s is full, routing to waiting list", config.event_id)
            return Route.WAITING_LIST
        logger.info("Event %s is full and has no waiting list", config.event_id)
        raise EventFullError.no_spots(config.event_id)

    def _admit(
        self,
        config: RegistrationConfig,
        user_id: str,
        form_data: dict[str, Any],
        notes: str | None,
        existing: Registration | None,
    ) -> tuple[Registration, list[DomainEvent]]:
        if existing is not None and existing.is_final:
            registration = existing
            registration.reactivate(RegistrationState.PENDING, form_data, notes)
            logger.debug("Reactivating registration %s", registration.id)
        else:
            registration = Registration(
                event_id=config.event_id,
                user_id=user_id,
                state=RegistrationState.PENDING,
                form_data=form_data,
                notes=notes,
            )

        if not config.requires_confirmation:
            registration.confirm(self.clock())

        registration = self.registrations.save(registration)
        logger.info(
            "User %s registered for event %s as %s (registration %s)",
            user_id,
            config.event_id,
            registration.state.value,
            registration.id,
        )

        events: list[DomainEvent] = [
            UserRegistered(
                registration_id=registration.id,
                event_id=registration.event_id,
                user_id=registration.user_id,
                state=registration.state,
            )
        ]
        if registration.state is RegistrationState.CONFIRMED:
            events.append(self._confirmed_event(registration, ConfirmationSource.REGISTRATION))
        return registration, events

    # --- Cancellation ---

    def cancel(self, event_id: str, user_id: str) -> Registration:
        """Cancel a user's registration for an event.

        Returns:
            The cancelled registration.

        Raises:
            RegistrationNotFoundError: If the user has no registration for the event.
            CannotCancelRegistrationError: If the deadline passed or the
                registration is already cancelled or rejected.
        """
        with self.locks.hold(event_id):
            registration = self.registrations.find_by_user_and_event(user_id, event_id)
            if registration is None:
                raise RegistrationNotFoundError.for_user_and_event(user_id, event_id)

            config = self.configs.find_by_event_or_default(event_id)
            if not config.can_cancel(self.clock()):
                logger.info("Cancellation deadline passed for event %s", event_id)
                raise CannotCancelRegistrationError.deadline_passed(event_id)

            previous_state = registration.state
            registration.cancel(self.clock())
            registration = self.registrations.save(registration)

            if previous_state is RegistrationState.WAITING_LIST:
                self.waiting_list.recalculate_positions(event_id)

        logger.info(
            "User %s cancelled registration %s for event %s (was %s)",
            user_id,
            registration.id,
            event_id,
            previous_state.value,
        )
        self._publish(
            [
                UserUnregistered(
                    registration_id=registration.id,
                    event_id=registration.event_id,
                    user_id=registration.user_id,
                    previous_state=previous_state,
                )
            ]
        )
        return registration

    # --- Administrative overrides ---

    def confirm(self, registration_id: str) -> Registration:
        """Confirm a registration regardless of capacity.

        Raises:
            RegistrationNotFoundError: If the registration doesn't exist.
            InvalidStateTransitionError: If it is cancelled or rejected.
        """
        registration = self.registrations.get_or_fail(registration_id)
        with self.locks.hold(registration.event_id):
            registration = self.registrations.get_or_fail(registration_id)
            if registration.is_final:
                raise InvalidStateTransitionError(
                    registration_id, registration.state.value, "confirm"
                )

            was_waiting = registration.is_on_waiting_list
            registration.confirm(self.clock())
            registration = self.registrations.save(registration)
            if was_waiting:
                self.waiting_list.recalculate_positions(registration.event_id)

        logger.info("Registration %s confirmed by admin", registration_id)
        self._publish([self._confirmed_event(registration, ConfirmationSource.ADMIN)])
        return registration

    def reject(self, registration_id: str) -> Registration:
        """Reject a pending or waiting-list registration.

        Raises:
            RegistrationNotFoundError: If the registration doesn't exist.
            InvalidStateTransitionError: If it is not pending or on the waiting list.
        """
        registration = self.registrations.get_or_fail(registration_id)
        with self.locks.hold(registration.event_id):
            registration = self.registrations.get_or_fail(registration_id)
            if registration.state not in _REJECTABLE_STATES:
                raise InvalidStateTransitionError(
                    registration_id, registration.state.value, "reject"
                )

            was_waiting = registration.is_on_waiting_list
            registration.reject()
            registration = self.registrations.save(registration)
            if was_waiting:
                self.waiting_list.recalculate_positions(registration.event_id)

        logger.info("Registration %s rejected by admin", registration_id)
        self._publish(
            [
                RegistrationRejected(
                    registration_id=registration.id,
                    event_id=registration.event_id,
                    user_id=registration.user_id,
                )
            ]
        )
        return registration

    def move_to_waiting_list(self, registration_id: str) -> Registration:
        """Send a registration to the end of its event's waiting list.

        Raises:
            RegistrationNotFoundError: If the registration doesn't exist.
            InvalidStateTransitionError: If it is cancelled or rejected.
        """
        registration = self.registrations.get_or_fail(registration_id)
        event_id = registration.event_id
        with self.locks.hold(event_id):
            registration = self.registrations.get_or_fail(registration_id)
            if registration.is_final:
                raise InvalidStateTransitionError(
                    registration_id, registration.state.value, "move to waiting list"
                )

            was_waiting = registration.is_on_waiting_list
            registration.move_to_waiting_list(self.waiting_list.next_position(event_id))
            registration = self.registrations.save(registration)
            if was_waiting:
                self.waiting_list.recalculate_positions(event_id)
                registration = self.registrations.get_or_fail(registration_id)

        logger.info(
            "Registration %s moved to waiting list for event %s at position %s",
            registration_id,
            event_id,
            registration.position,
        )
        return registration

    def update_admin_notes(self, registration_id: str, admin_notes: str | None) -> Registration:
        """Replace the admin notes on a registration."""
        registration = self.registrations.get_or_fail(registration_id)
        with self.locks.hold(registration.event_id):
            registration = self.registrations.get_or_fail(registration_id)
            registration.admin_notes = admin_notes
            return self.registrations.save(registration)

    # --- Configuration ---

    def update_config(self, update: RegistrationConfigUpdate) -> RegistrationConfig:
        """Create or fully replace an event's registration policy."""
        with self.locks.hold(update.event_id):
            config = self.configs.save(update.to_config())
        logger.info(
            "Registration config updated for event %s (enabled=%s, max=%s, waiting_list=%s)",
            config.event_id,
            config.registration_enabled,
            config.max_participants,
            config.waiting_list_enabled,
        )
        return config

    # --- Lookups ---

    def get_user_registration(self, event_id: str, user_id: str) -> Registration | None:
        return self.registrations.find_by_user_and_event(user_id, event_id)

    def find(self, registration_id: str) -> Registration | None:
        return self.registrations.get(registration_id)

    # --- Helpers ---

    @staticmethod
    def _confirmed_event(
        registration: Registration, source: ConfirmationSource
    ) -> RegistrationConfirmed:
        return RegistrationConfirmed(
            registration_id=registration.id,
            event_id=registration.event_id,
            user_id=registration.user_id,
            source=source,
        )

    def _publish(self, events: list[DomainEvent]) -> None:
        for event in events:
            self.sink.publish(event)
