"""Store - SQLite persistence for registrations and per-event configuration."""

from event_registrations.store.config_store import ConfigStore
from event_registrations.store.database import Database
from event_registrations.store.exceptions import (
    RegistrationExistsError,
    StoreError,
    WaitingListPositionConflictError,
)
from event_registrations.store.registration_store import RegistrationStore

__all__ = [
    "ConfigStore",
    "Database",
    "RegistrationExistsError",
    "RegistrationStore",
    "StoreError",
    "WaitingListPositionConflictError",
]
