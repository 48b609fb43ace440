"""Shared pytest fixtures and configuration."""

from datetime import UTC, datetime, timedelta

import pytest

from event_registrations.bootstrap import RegistrationSystem, build_registration_system
from event_registrations.domain import DefaultPolicy, DomainEvent


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


class FrozenClock:
    """Callable clock that only moves when told to."""

    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class EventRecorder:
    """Bus subscriber that keeps every event it receives."""

    def __init__(self) -> None:
        self.events: list[DomainEvent] = []

    def __call__(self, event: DomainEvent) -> None:
        self.events.append(event)

    @property
    def types(self) -> list[str]:
        return [event.event_type.value for event in self.events]

    def clear(self) -> None:
        self.events.clear()


@pytest.fixture
def clock() -> FrozenClock:
    """A clock fixed at 2026-03-01 12:00 UTC."""
    return FrozenClock(datetime(2026, 3, 1, 12, 0, tzinfo=UTC))


@pytest.fixture
def defaults() -> DefaultPolicy:
    """Open-by-default policy so tests only store configs they care about."""
    return DefaultPolicy(
        registration_enabled=True,
        waiting_list_enabled=True,
        requires_confirmation=False,
        max_participants=None,
        max_waiting_list=None,
    )


@pytest.fixture
def system(defaults: DefaultPolicy, clock: FrozenClock) -> RegistrationSystem:
    """A fully wired registration system over an in-memory database."""
    s = build_registration_system(":memory:", defaults=defaults, clock=clock)
    yield s
    s.close()


@pytest.fixture
def recorder(system: RegistrationSystem) -> EventRecorder:
    """Records every event published on the system's bus."""
    r = EventRecorder()
    system.bus.subscribe(r)
    return r
