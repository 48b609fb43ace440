"""Notifications - which notice each registration event sends, and to whom."""

from event_registrations.notifications.notifier import (
    LoggingNotifier,
    Notice,
    NoticeKind,
    Notifier,
)
from event_registrations.notifications.settings import NotificationSettings
from event_registrations.notifications.subscriber import RegistrationNotifier

__all__ = [
    "LoggingNotifier",
    "Notice",
    "NoticeKind",
    "NotificationSettings",
    "Notifier",
    "RegistrationNotifier",
]
