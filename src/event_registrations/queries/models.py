"""Data models for registration queries."""

from dataclasses import dataclass


@dataclass
class EventStatus:
    """Registration status of an event.

    Attributes:
        event_id: The event.
        is_open: Whether registration is currently open.
        registration_enabled: Policy master switch.
        max_participants: Seat limit, None for unlimited.
        waiting_list_enabled: Whether full events queue new attempts.
        max_waiting_list: Waiting-list limit, None for unlimited.
        requires_confirmation: Whether admitted registrations wait for an admin.
        requires_payment: Informational payment flag.
        confirmed_count: Confirmed registrations.
        waiting_list_count: Registrations on the waiting list.
        available_spots: Free seats, None for unlimited.
    """

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

    @property
    def is_full(self) -> bool:
        return self.available_spots == 0
