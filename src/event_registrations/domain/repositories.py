"""Storage interfaces the engine depends on."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from event_registrations.domain.config import RegistrationConfig
    from event_registrations.domain.models import Registration, RegistrationState


class RegistrationRepository(Protocol):
    """Interface for registration persistence."""

    def save(self, registration: Registration) -> Registration:
        """Create or update a registration by id; returns the stored value."""
        ...

    def get(self, registration_id: str) -> Registration | None: ...

    def get_or_fail(self, registration_id: str) -> Registration: ...

    def find_by_user_and_event(self, user_id: str, event_id: str) -> Registration | None: ...

    def delete(self, registration_id: str) -> None: ...

    def list_by_event(
        self, event_id: str, state: RegistrationState | None = None
    ) -> list[Registration]: ...

    def list_by_user(self, user_id: str) -> list[Registration]: ...

    def count_by_state(self, event_id: str, state: RegistrationState) -> int: ...

    def count_confirmed(self, event_id: str) -> int: ...

    def count_waiting_list(self, event_id: str) -> int: ...

    def next_waiting_list_position(self, event_id: str) -> int: ...

    def first_in_waiting_list(self, event_id: str) -> Registration | None: ...

    def waiting_list_ordered(self, event_id: str) -> list[Registration]: ...


class ConfigRepository(Protocol):
    """Interface for per-event policy persistence."""

    def save(self, config: RegistrationConfig) -> RegistrationConfig:
        """Create or fully replace the config for its event."""
        ...

    def find_by_event(self, event_id: str) -> RegistrationConfig | None: ...

    def find_by_event_or_default(self, event_id: str) -> RegistrationConfig: ...

    def delete(self, event_id: str) -> None: ...

    def exists(self, event_id: str) -> bool: ...
