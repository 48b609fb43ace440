"""Unit tests for NotificationSettings and LoggingNotifier."""

import logging

import pytest
from pydantic import ValidationError

from event_registrations.domain import Registration
from event_registrations.notifications import (
    LoggingNotifier,
    Notice,
    NoticeKind,
    NotificationSettings,
)


@pytest.mark.unit
class TestNotificationSettings:
    """Tests for NotificationSettings."""

    def test_everything_on_by_default(self) -> None:
        """Every user notice is sent unless switched off."""
        settings = NotificationSettings()

        assert all(getattr(settings, name) for name in NotificationSettings.model_fields)

    def test_from_env(self) -> None:
        """Switches are read from EVENT_REGISTRATIONS_SEND_* variables."""
        settings = NotificationSettings.from_env(
            {
                "EVENT_REGISTRATIONS_SEND_PROMOTION_EMAIL": "false",
                "EVENT_REGISTRATIONS_SEND_REJECTION_EMAIL": "0",
                "EVENT_REGISTRATIONS_DEFAULT_MAX_PARTICIPANTS": "3",
                "HOME": "/root",
            }
        )

        assert settings.send_promotion_email is False
        assert settings.send_rejection_email is False
        assert settings.send_cancellation_email is True

    def test_from_mapping_ignores_unknown_keys(self) -> None:
        """Unrelated settings keys are skipped."""
        settings = NotificationSettings.from_mapping(
            {"send_waiting_list_email": False, "mail_driver": "smtp"}
        )

        assert settings.send_waiting_list_email is False

    def test_invalid_flag_rejected(self) -> None:
        """Values that are not booleans fail validation."""
        with pytest.raises(ValidationError):
            NotificationSettings.from_mapping({"send_registration_email": "sometimes"})

    def test_is_frozen(self) -> None:
        """Settings can't be changed after construction."""
        settings = NotificationSettings()

        with pytest.raises(ValidationError):
            settings.send_registration_email = False  # type: ignore[misc]


@pytest.mark.unit
class TestLoggingNotifier:
    """Tests for the default LoggingNotifier."""

    def test_logs_user_and_admin_notices(self, caplog: pytest.LogCaptureFixture) -> None:
        """Both notice targets end up in the log with the notice kind."""
        registration = Registration(event_id="event-1", user_id="user-1")
        notifier = LoggingNotifier()

        with caplog.at_level(logging.INFO, logger="event_registrations.notifications"):
            notifier.notify_user(Notice(NoticeKind.PROMOTED, registration))
            notifier.notify_admin(
                "admin@example.org", Notice(NoticeKind.ADMIN_NEW_REGISTRATION, registration)
            )

        assert "Notice promoted for user user-1 on event event-1" in caplog.text
        assert "admin_new_registration to admin@example.org" in caplog.text
