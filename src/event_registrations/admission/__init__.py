"""Admission - decides whether a registration attempt is admitted, queued or refused."""

from event_registrations.admission.service import RegistrationService, Route

__all__ = [
    "RegistrationService",
    "Route",
]
