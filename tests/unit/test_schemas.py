"""Unit tests for request and response models."""

from datetime import UTC, datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from event_registrations.domain import Registration, RegistrationConfig, RegistrationState
from event_registrations.queries import EventStatus
from event_registrations.schemas import (
    EventStatusResponse,
    RegistrationConfigUpdate,
    config_to_response,
    registration_to_response,
)

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)


@pytest.mark.unit
class TestRegistrationConfigUpdate:
    """Tests for RegistrationConfigUpdate validation."""

    def test_minimal(self) -> None:
        """Only event_id is required."""
        update = RegistrationConfigUpdate(event_id="event-1")

        assert update.registration_enabled is True
        assert update.max_participants is None
        assert update.custom_fields == []

    def test_to_config(self) -> None:
        """All fields carry over to the domain config."""
        update = RegistrationConfigUpdate(
            event_id="event-1",
            max_participants=10,
            max_waiting_list=5,
            opens_at=NOW,
            closes_at=NOW + timedelta(days=7),
            custom_fields=[{"name": "shirt_size", "type": "select"}],
            notification_email="events@example.org",
        )

        config = update.to_config()

        assert isinstance(config, RegistrationConfig)
        assert config.max_participants == 10
        assert config.max_waiting_list == 5
        assert config.closes_at == NOW + timedelta(days=7)
        assert config.custom_fields == [{"name": "shirt_size", "type": "select"}]
        assert config.notification_email == "events@example.org"

    def test_negative_limits_rejected(self) -> None:
        """Negative limits fail validation."""
        with pytest.raises(ValidationError):
            RegistrationConfigUpdate(event_id="event-1", max_participants=-1)
        with pytest.raises(ValidationError):
            RegistrationConfigUpdate(event_id="event-1", max_waiting_list=-5)

    def test_zero_participants_allowed(self) -> None:
        """Zero seats is a valid limit."""
        update = RegistrationConfigUpdate(event_id="event-1", max_participants=0)

        assert update.max_participants == 0

    def test_closes_before_opens_rejected(self) -> None:
        """A window closing before it opens is invalid."""
        with pytest.raises(ValidationError, match="closes_at"):
            RegistrationConfigUpdate(
                event_id="event-1", opens_at=NOW, closes_at=NOW - timedelta(hours=1)
            )

    def test_mixed_naive_and_aware_window(self) -> None:
        """A naive bound is read as UTC and compared with an aware one."""
        update = RegistrationConfigUpdate(
            event_id="event-1",
            opens_at=datetime(2026, 3, 1, 12, 0),
            closes_at=NOW + timedelta(days=1),
        )

        assert update.opens_at == NOW
        assert update.opens_at.tzinfo is UTC
        assert update.closes_at.tzinfo is UTC

    def test_mixed_window_reversed_rejected(self) -> None:
        """A reversed naive/aware window is a validation error, not a TypeError."""
        with pytest.raises(ValidationError, match="closes_at"):
            RegistrationConfigUpdate(
                event_id="event-1",
                opens_at=datetime(2026, 3, 2),
                closes_at=NOW,
            )

    def test_aware_dates_converted_to_utc(self) -> None:
        """Offsets other than UTC are converted, keeping the instant."""
        plus_two = timezone(timedelta(hours=2))
        update = RegistrationConfigUpdate(
            event_id="event-1",
            cancellation_deadline=datetime(2026, 3, 1, 14, 0, tzinfo=plus_two),
        )

        assert update.cancellation_deadline == NOW
        assert update.cancellation_deadline.tzinfo is UTC

    def test_invalid_email_rejected(self) -> None:
        """The notification address must look like an email."""
        with pytest.raises(ValidationError):
            RegistrationConfigUpdate(event_id="event-1", notification_email="not-an-email")

    def test_empty_event_id_rejected(self) -> None:
        """An empty event id is invalid."""
        with pytest.raises(ValidationError):
            RegistrationConfigUpdate(event_id="")


@pytest.mark.unit
class TestResponses:
    """Tests for conversion helpers."""

    def test_registration_to_response(self) -> None:
        """Registrations convert with their state label."""
        registration = Registration(
            event_id="event-1",
            user_id="user-1",
            state=RegistrationState.WAITING_LIST,
            position=3,
            form_data={"size": "M"},
        )

        response = registration_to_response(registration)

        assert response.id == registration.id
        assert response.state is RegistrationState.WAITING_LIST
        assert response.state_label == "Waiting list"
        assert response.position == 3
        assert response.model_dump(mode="json")["state"] == "waiting_list"

    def test_config_to_response(self) -> None:
        """Configs convert to their response model."""
        config = RegistrationConfig(event_id="event-1", max_participants=20)

        response = config_to_response(config)

        assert response.event_id == "event-1"
        assert response.max_participants == 20
        assert response.waiting_list_enabled is True

    def test_event_status_response_includes_is_full(self) -> None:
        """The status response carries is_full."""
        status = EventStatus(
            event_id="event-1",
            is_open=True,
            registration_enabled=True,
            max_participants=2,
            waiting_list_enabled=True,
            max_waiting_list=None,
            requires_confirmation=False,
            requires_payment=False,
            confirmed_count=2,
            waiting_list_count=1,
            available_spots=0,
        )

        response = EventStatusResponse.model_validate(status)

        assert response.is_full is True
        assert response.waiting_list_count == 1
