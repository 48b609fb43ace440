"""Unit tests for RegistrationConfig and DefaultPolicy."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from event_registrations.domain import ClosedReason, DefaultPolicy, RegistrationConfig

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.mark.unit
class TestIsOpen:
    """Tests for RegistrationConfig.is_open and closed_reason."""

    def test_open_without_dates(self) -> None:
        """An enabled config without dates is open."""
        config = RegistrationConfig(event_id="event-1")

        assert config.is_open(NOW)
        assert config.closed_reason(NOW) is None

    def test_disabled(self) -> None:
        """The enabled flag closes registration."""
        config = RegistrationConfig(event_id="event-1", registration_enabled=False)

        assert not config.is_open(NOW)
        assert config.closed_reason(NOW) is ClosedReason.DISABLED

    def test_not_yet_open(self) -> None:
        """Before opens_at registration hasn't opened."""
        config = RegistrationConfig(event_id="event-1", opens_at=NOW + timedelta(seconds=1))

        assert config.closed_reason(NOW) is ClosedReason.NOT_YET_OPEN

    def test_already_closed(self) -> None:
        """After closes_at registration is closed."""
        config = RegistrationConfig(event_id="event-1", closes_at=NOW - timedelta(seconds=1))

        assert config.closed_reason(NOW) is ClosedReason.ALREADY_CLOSED

    def test_boundaries_are_inclusive(self) -> None:
        """opens_at and closes_at themselves are inside the window."""
        config = RegistrationConfig(event_id="event-1", opens_at=NOW, closes_at=NOW)

        assert config.is_open(NOW)

    def test_disabled_wins_over_dates(self) -> None:
        """Disabled is reported ahead of date reasons."""
        config = RegistrationConfig(
            event_id="event-1",
            registration_enabled=False,
            closes_at=NOW - timedelta(days=1),
        )

        assert config.closed_reason(NOW) is ClosedReason.DISABLED

    def test_zero_seats_is_disabled(self) -> None:
        """An event with no seats is closed even when enabled and in its window."""
        config = RegistrationConfig(event_id="event-1", max_participants=0)

        assert not config.is_open(NOW)
        assert config.closed_reason(NOW) is ClosedReason.DISABLED


@pytest.mark.unit
class TestLimits:
    """Tests for limit helpers."""

    @pytest.mark.parametrize(("limit", "expected"), [(None, False), (0, False), (10, True)])
    def test_has_participant_limit(self, limit: int | None, expected: bool) -> None:
        """Zero and None both mean no participant limit for the helper."""
        config = RegistrationConfig(event_id="event-1", max_participants=limit)

        assert config.has_participant_limit() is expected

    @pytest.mark.parametrize(("limit", "expected"), [(None, False), (0, False), (3, True)])
    def test_has_waiting_list_limit(self, limit: int | None, expected: bool) -> None:
        """Zero and None both mean an unlimited waiting list."""
        config = RegistrationConfig(event_id="event-1", max_waiting_list=limit)

        assert config.has_waiting_list_limit() is expected

    def test_available_spots(self) -> None:
        """Free seats never go below zero."""
        config = RegistrationConfig(event_id="event-1", max_participants=5)

        assert config.available_spots(3) == 2
        assert config.available_spots(7) == 0

    def test_available_spots_unlimited(self) -> None:
        """Unlimited events report no seat count."""
        config = RegistrationConfig(event_id="event-1")

        assert config.available_spots(100) is None


@pytest.mark.unit
class TestCanCancel:
    """Tests for RegistrationConfig.can_cancel."""

    def test_no_deadline(self) -> None:
        """Without a deadline cancelling is always allowed."""
        assert RegistrationConfig(event_id="event-1").can_cancel(NOW)

    def test_before_and_at_deadline(self) -> None:
        """Cancelling is allowed up to and at the deadline."""
        config = RegistrationConfig(event_id="event-1", cancellation_deadline=NOW)

        assert config.can_cancel(NOW - timedelta(hours=1))
        assert config.can_cancel(NOW)

    def test_after_deadline(self) -> None:
        """Cancelling after the deadline is refused."""
        config = RegistrationConfig(event_id="event-1", cancellation_deadline=NOW)

        assert not config.can_cancel(NOW + timedelta(seconds=1))


@pytest.mark.unit
class TestDefaultPolicy:
    """Tests for DefaultPolicy."""

    def test_defaults(self) -> None:
        """Default policy values."""
        policy = DefaultPolicy()

        assert policy.registration_enabled is False
        assert policy.waiting_list_enabled is True
        assert policy.requires_confirmation is True
        assert policy.max_participants == 15
        assert policy.max_waiting_list == 0

    def test_config_for(self) -> None:
        """The policy materializes as a config for a given event."""
        config = DefaultPolicy(registration_enabled=True, max_participants=4).config_for("e-9")

        assert config.event_id == "e-9"
        assert config.registration_enabled is True
        assert config.max_participants == 4
        assert config.requires_confirmation is True
        assert not config.has_waiting_list_limit()

    def test_from_mapping_coerces_strings(self) -> None:
        """String values are coerced and blanks mean unlimited."""
        policy = DefaultPolicy.from_mapping(
            {
                "registration_enabled": "true",
                "max_participants": "20",
                "max_waiting_list": "",
                "unrelated": "ignored",
            }
        )

        assert policy.registration_enabled is True
        assert policy.max_participants == 20
        assert policy.max_waiting_list is None

    def test_from_env(self) -> None:
        """The policy is read from prefixed environment variables."""
        policy = DefaultPolicy.from_env(
            {
                "EVENT_REGISTRATIONS_DEFAULT_REGISTRATION_ENABLED": "1",
                "EVENT_REGISTRATIONS_DEFAULT_REQUIRES_CONFIRMATION": "false",
                "EVENT_REGISTRATIONS_DEFAULT_MAX_PARTICIPANTS": "50",
                "PATH": "/usr/bin",
            }
        )

        assert policy.registration_enabled is True
        assert policy.requires_confirmation is False
        assert policy.max_participants == 50

    def test_from_env_empty_uses_defaults(self) -> None:
        """An empty environment gives the built-in defaults."""
        assert DefaultPolicy.from_env({}) == DefaultPolicy()

    def test_negative_limit_rejected(self) -> None:
        """Negative limits fail validation."""
        with pytest.raises(ValidationError):
            DefaultPolicy(max_participants=-1)

    def test_is_frozen(self) -> None:
        """The policy can't be changed after construction."""
        policy = DefaultPolicy()

        with pytest.raises(ValidationError):
            policy.max_participants = 3
