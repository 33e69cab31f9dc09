"""Light status models and store."""

from .light_status import (
    MAX_BRIGHTNESS,
    MIN_BRIGHTNESS,
    LightStatus,
    LightStatusPayload,
    LightStatusStore,
    clamp_brightness,
    round_half_up,
)

__all__ = [
    "MAX_BRIGHTNESS",
    "MIN_BRIGHTNESS",
    "LightStatus",
    "LightStatusPayload",
    "LightStatusStore",
    "clamp_brightness",
    "round_half_up",
]
