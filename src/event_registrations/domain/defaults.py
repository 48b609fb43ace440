"""Process-wide default registration policy."""

from __future__ import annotations

import os
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from event_registrations.domain.config import RegistrationConfig

if TYPE_CHECKING:
    from collections.abc import Mapping

ENV_PREFIX = "EVENT_REGISTRATIONS_DEFAULT_"


class DefaultPolicy(BaseModel):
    """Policy values used for events that have no stored configuration.

    Values may arrive as strings (environment, settings files), so the model
    coerces them. An empty string for a limit means "no limit".
    """

    model_config = ConfigDict(frozen=True)

    registration_enabled: bool = False
    waiting_list_enabled: bool = True
    requires_confirmation: bool = True
    max_participants: int | None = Field(default=15, ge=0)
    max_waiting_list: int | None = Field(default=0, ge=0)

    @field_validator("max_participants", "max_waiting_list", mode="before")
    @classmethod
    def _blank_is_unlimited(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> DefaultPolicy:
        """Build from a key/value provider, ignoring unknown keys."""
        known = {key: values[key] for key in cls.model_fields if key in values}
        return cls.model_validate(known)

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> DefaultPolicy:
        """Build from ``EVENT_REGISTRATIONS_DEFAULT_*`` environment variables.

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

    def config_for(self, event_id: str) -> RegistrationConfig:
        """Materialize the default policy as a config for one event."""
        return RegistrationConfig(
            event_id=event_id,
            registration_enabled=self.registration_enabled,
            max_participants=self.max_participants,
            waiting_list_enabled=self.waiting_list_enabled,
            max_waiting_list=self.max_waiting_list,
            requires_confirmation=self.requires_confirmation,
        )
