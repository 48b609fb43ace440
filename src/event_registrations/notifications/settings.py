"""Switches for each kind of user notice."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_PREFIX = "EVENT_REGISTRATIONS_"


class NotificationSettings(BaseModel):
    """Which user notices are sent. Everything is on by default.

    The admin notice for a new registration has no switch; it is sent whenever
    the event's config names a ``notification_email``.
    """

    model_config = ConfigDict(frozen=True)

    send_registration_email: bool = True
    send_confirmation_email: bool = True
    send_waiting_list_email: bool = True
    send_promotion_email: bool = True
    send_cancellation_email: bool = True
    send_rejection_email: bool = True

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> NotificationSettings:
        """Build from a key/value provider, ignoring unknown keys."""
        known = {key: values[key] for key in cls.model_fields if key in values}
        return cls.model_validate(known)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> NotificationSettings:
        """Build from ``EVENT_REGISTRATIONS_SEND_*_EMAIL`` environment variables.

        Args:
            environ: Environment mapping. Defaults to ``os.environ``.
        """
        if environ is None:
            environ = os.environ
        values = {
            key[len(ENV_PREFIX) :].lower(): value
            for key, value in environ.items()
            if key.startswith(ENV_PREFIX)
        }
        return cls.from_mapping(values)
