"""Integration tests for RegistrationNotifier routing through the event bus."""

import pytest

from event_registrations.bootstrap import RegistrationSystem, build_registration_system
from event_registrations.domain import RegistrationRejected, RegistrationState
from event_registrations.notifications import Notice, NoticeKind, NotificationSettings
from event_registrations.schemas import RegistrationConfigUpdate


class RecordingNotifier:
    """Notifier that keeps every notice it is asked to deliver."""

    def __init__(self) -> None:
        self.user_notices: list[Notice] = []
        self.admin_notices: list[tuple[str, Notice]] = []

    def notify_user(self, notice: Notice) -> None:
        self.user_notices.append(notice)

    def notify_admin(self, address: str, notice: Notice) -> None:
        self.admin_notices.append((address, notice))

    @property
    def sent(self) -> list[tuple[str, str]]:
        return [(n.kind.value, n.user_id) for n in self.user_notices]


class BrokenNotifier:
    """Notifier whose transport is down."""

    def notify_user(self, notice: Notice) -> None:
        raise ConnectionError("smtp unreachable")

    def notify_admin(self, address: str, notice: Notice) -> None:
        raise ConnectionError("smtp unreachable")


@pytest.fixture
def notifier() -> RecordingNotifier:
    """Fresh recording notifier."""
    return RecordingNotifier()


def _build(defaults, clock, notifier, settings=None) -> RegistrationSystem:
    return build_registration_system(
        ":memory:",
        defaults=defaults,
        clock=clock,
        notifier=notifier,
        notification_settings=settings or NotificationSettings(),
    )


@pytest.fixture
def notified(defaults, clock, notifier) -> RegistrationSystem:
    """System whose notices go to a RecordingNotifier, all notices enabled."""
    s = _build(defaults, clock, notifier)
    yield s
    s.close()


def configure(system: RegistrationSystem, **values) -> None:
    system.service.update_config(RegistrationConfigUpdate(event_id="event-1", **values))


@pytest.mark.integration
class TestUserNotices:
    """Which notice a user gets for each registration outcome."""

    def test_auto_confirmed_registration(self, notified, notifier) -> None:
        """An auto-confirmed registration sends one registered notice, no confirmed one."""
        notified.service.register("event-1", "user-1")

        assert notifier.sent == [("registered", "user-1")]
        assert notifier.user_notices[0].registration.state is RegistrationState.CONFIRMED

    def test_admin_confirmation(self, notified, notifier) -> None:
        """Confirming a pending registration sends a confirmed notice."""
        configure(notified, requires_confirmation=True)
        registration = notified.service.register("event-1", "user-1")

        notified.service.confirm(registration.id)

        assert notifier.sent == [("registered", "user-1"), ("confirmed", "user-1")]

    def test_waiting_list_notice_carries_position(self, notified, notifier) -> None:
        """Joining the queue sends a waiting-list notice with the position."""
        configure(notified, max_participants=1)
        notified.service.register("event-1", "user-1")
        notified.service.register("event-1", "user-2")

        notice = notifier.user_notices[-1]
        assert notice.kind is NoticeKind.WAITING_LIST_ADDED
        assert notice.user_id == "user-2"
        assert notice.position == 1

    def test_cancellation_then_promotion(self, notified, notifier) -> None:
        """Cancelling a seat notifies the canceller, then the promoted user."""
        configure(notified, max_participants=1)
        notified.service.register("event-1", "user-1")
        notified.service.register("event-1", "user-2")
        notifier.user_notices.clear()

        notified.service.cancel("event-1", "user-1")

        assert notifier.sent == [("cancelled", "user-1"), ("promoted", "user-2")]

    def test_rejection(self, notified, notifier) -> None:
        """Rejecting a pending registration sends a rejected notice."""
        configure(notified, requires_confirmation=True)
        registration = notified.service.register("event-1", "user-1")

        notified.service.reject(registration.id)

        assert notifier.sent[-1] == ("rejected", "user-1")

    def test_manual_promotion(self, notified, notifier) -> None:
        """promote_next sends a promoted notice and nothing else."""
        notified.waiting_list.add_to_waiting_list("event-1", "user-1")
        notifier.user_notices.clear()

        notified.waiting_list.promote_next("event-1")

        assert notifier.sent == [("promoted", "user-1")]

    def test_missing_registration_skipped(self, notified, notifier) -> None:
        """Events for a registration that no longer exists send nothing."""
        notified.bus.publish(
            RegistrationRejected(registration_id="gone", event_id="event-1", user_id="user-1")
        )

        assert notifier.user_notices == []


@pytest.mark.integration
class TestAdminNotices:
    """Admin notices for new registrations."""

    def test_sent_to_notification_email(self, notified, notifier) -> None:
        """A new registration notifies the event's admin address."""
        configure(notified, notification_email="admin@example.org")

        notified.service.register("event-1", "user-1")

        [(address, notice)] = notifier.admin_notices
        assert address == "admin@example.org"
        assert notice.kind is NoticeKind.ADMIN_NEW_REGISTRATION
        assert notice.user_id == "user-1"

    def test_sent_for_waiting_list_registration(self, notified, notifier) -> None:
        """Queued registrations also reach the admin, with their position."""
        configure(notified, max_participants=1, notification_email="admin@example.org")
        notified.service.register("event-1", "user-1")
        notified.service.register("event-1", "user-2")

        assert [n.user_id for _, n in notifier.admin_notices] == ["user-1", "user-2"]
        assert notifier.admin_notices[-1][1].position == 1

    def test_not_sent_without_address(self, notified, notifier) -> None:
        """Events without a notification address send no admin notice."""
        notified.service.register("event-1", "user-1")

        assert notifier.admin_notices == []


@pytest.mark.integration
class TestNotificationSwitches:
    """NotificationSettings turning notices off."""

    def test_disabled_kind_not_sent(self, defaults, clock, notifier) -> None:
        """A switched-off notice is skipped while others still go out."""
        settings = NotificationSettings(send_cancellation_email=False)
        system = _build(defaults, clock, notifier, settings)

        system.service.register("event-1", "user-1")
        system.service.cancel("event-1", "user-1")
        system.close()

        assert notifier.sent == [("registered", "user-1")]

    def test_admin_notice_has_no_switch(self, defaults, clock, notifier) -> None:
        """Turning off user registration notices leaves the admin notice on."""
        settings = NotificationSettings(send_registration_email=False)
        system = _build(defaults, clock, notifier, settings)
        system.service.update_config(
            RegistrationConfigUpdate(event_id="event-1", notification_email="admin@example.org")
        )

        system.service.register("event-1", "user-1")
        system.close()

        assert notifier.user_notices == []
        assert len(notifier.admin_notices) == 1


@pytest.mark.integration
class TestNotifierFailure:
    """A failing notifier never affects registration outcomes."""

    def test_registration_stands_when_delivery_fails(self, defaults, clock) -> None:
        """Register and cancel succeed and promotion still happens."""
        system = _build(defaults, clock, BrokenNotifier())
        configure(system, max_participants=1)

        system.service.register("event-1", "user-1")
        system.service.register("event-1", "user-2")
        system.service.cancel("event-1", "user-1")

        promoted = system.service.get_user_registration("event-1", "user-2")
        system.close()
        assert promoted.state is RegistrationState.CONFIRMED
