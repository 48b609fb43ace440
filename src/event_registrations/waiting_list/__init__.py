"""Waiting list - queue ordering, promotion and the cancellation reactor."""

from event_registrations.waiting_list.manager import WaitingListManager
from event_registrations.waiting_list.reactor import PromoteOnCancellation

__all__ = [
    "PromoteOnCancellation",
    "WaitingListManager",
]
