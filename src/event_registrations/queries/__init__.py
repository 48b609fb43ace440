"""Queries - read-only registration views."""

from event_registrations.queries.models import EventStatus
from event_registrations.queries.service import RegistrationQueryService

__all__ = [
    "EventStatus",
    "RegistrationQueryService",
]
