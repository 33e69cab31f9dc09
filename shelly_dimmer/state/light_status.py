"""Last known light status shared by the poller and the action dispatcher."""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_BRIGHTNESS = 0
MAX_BRIGHTNESS = 100


def round_half_up(value: float) -> int:
    """Round ``value`` to the nearest integer with halves rounded up."""

    return math.floor(value + 0.5)


def clamp_brightness(value: float) -> int:
    """Return ``value`` as an integer percentage within ``[0, 100]``."""

    return max(MIN_BRIGHTNESS, min(MAX_BRIGHTNESS, round_half_up(value)))


class LightStatusPayload(BaseModel):
    """Fields consumed from a ``Light.GetStatus`` response."""

    model_config = ConfigDict(extra="ignore")

    output: bool = False
    brightness: float = Field(default=0, allow_inf_nan=False)

    @field_validator("output", mode="before")
    @classmethod
    def _coerce_output(cls, value: Any) -> bool:
        """Treat any truthy value as on."""

        return bool(value)

    @field_validator("brightness", mode="before")
    @classmethod
    def _default_brightness(cls, value: Any) -> Any:
        """Map a missing or null brightness to zero."""

        return 0 if value is None else value


@dataclass(frozen=True, slots=True)
class LightStatus:
    """Power and brightness snapshot of the dimmer."""

    is_on: bool = False
    brightness: int = 0

    def __post_init__(self) -> None:
        """Keep brightness clamped to a whole percentage."""

        object.__setattr__(self, "is_on", bool(self.is_on))
        object.__setattr__(self, "brightness", clamp_brightness(self.brightness))

    @classmethod
    def from_payload(cls, payload: Any) -> LightStatus:
        """Build a status from a GetStatus JSON object.

        Raises ``pydantic.ValidationError`` (a ``ValueError``) when the payload
        is not an object or carries a non-numeric or non-finite brightness.
        """

        parsed = LightStatusPayload.model_validate(payload)
        return cls(is_on=parsed.output, brightness=parsed.brightness)


class LightStatusStore:
    """Holds the single light status of a session.

    All mutations happen on the event loop thread, so no lock is taken.
    Optimistic action updates and poll results race at the RPC await and
    whichever write lands last wins.
    """

    def __init__(self, initial: LightStatus | None = None) -> None:
        """Start from ``initial`` or the off/zero default."""

        self._status = initial or LightStatus()

    def get(self) -> LightStatus:
        """Return the current snapshot."""

        return self._status

    def set(self, status: LightStatus) -> None:
        """Replace the held status."""

        self._status = status

    def update(self, **changes: Any) -> LightStatus:
        """Apply ``changes`` to a copy of the status and store it."""

        self._status = replace(self._status, **changes)
        return self._status
