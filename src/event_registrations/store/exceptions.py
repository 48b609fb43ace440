"""Custom exceptions for the registration store."""


class StoreError(Exception):
    """Base exception for store errors."""


class RegistrationExistsError(StoreError):
    """A row for this event and user already exists under another id."""


class WaitingListPositionConflictError(StoreError):
    """Another registration already holds this waiting-list position."""
