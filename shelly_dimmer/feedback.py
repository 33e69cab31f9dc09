"""Variables and button feedbacks derived from the light status."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .const import (
    FACET_BRIGHTNESS,
    FACET_POWER,
    FEEDBACK_BRIGHTNESS_LEVEL,
    FEEDBACK_LIGHT_IS_ON,
    VARIABLE_BRIGHTNESS,
    VARIABLE_BRIGHTNESS_BAR,
    VARIABLE_LIGHT_STATE,
)
from .host import FeedbackDefinition, FeedbackType, HostSurface, VariableDefinition
from .state import LightStatus, LightStatusStore, round_half_up

BAR_WIDTH = 12
BAR_START = "🔅"
BAR_END = "🔆"
BAR_FILLED = "━"
BAR_EMPTY = "─"
BAR_MARKER = "●"

_FACET_FEEDBACKS: dict[str, tuple[str, ...]] = {
    FACET_POWER: (FEEDBACK_LIGHT_IS_ON,),
    FACET_BRIGHTNESS: (FEEDBACK_BRIGHTNESS_LEVEL,),
}


def combine_rgb(red: int, green: int, blue: int) -> int:
    """Pack an RGB triple into the host's 24-bit colour integer."""

    return ((red & 0xFF) << 16) | ((green & 0xFF) << 8) | (blue & 0xFF)


WHITE = combine_rgb(255, 255, 255)
BLACK = combine_rgb(0, 0, 0)
AMBER = combine_rgb(255, 200, 0)
OFF_BACKGROUND = combine_rgb(40, 40, 40)


def light_state_text(status: LightStatus) -> str:
    """Return the ``ON``/``OFF`` label of ``status``."""

    return "ON" if status.is_on else "OFF"


def render_bar(percent: int) -> str:
    """Render a slider bar such as ``🔅━━━━━●───────🔆 45%``."""

    position = round_half_up(percent / 100 * BAR_WIDTH)
    filled = BAR_FILLED * position
    empty = BAR_EMPTY * (BAR_WIDTH - position)
    return f"{BAR_START}{filled}{BAR_MARKER}{empty}{BAR_END} {percent}%"


def brightness_background(percent: int) -> int:
    """Interpolate the button colour from dark red-green to bright green."""

    fraction = percent / 100
    return combine_rgb(
        round_half_up((1 - fraction) * 30), round_half_up(60 + fraction * 100), 0
    )


def brightness_style(status: LightStatus) -> dict[str, Any]:
    """Return the advanced feedback style for the brightness button."""

    if not status.is_on:
        return {"text": "OFF", "color": WHITE, "bgcolor": OFF_BACKGROUND}
    return {
        "text": f"{status.brightness}%",
        "color": WHITE,
        "bgcolor": brightness_background(status.brightness),
    }


def variable_values(status: LightStatus) -> dict[str, Any]:
    """Project the status onto the exposed variables."""

    return {
        VARIABLE_LIGHT_STATE: light_state_text(status),
        VARIABLE_BRIGHTNESS: status.brightness,
        VARIABLE_BRIGHTNESS_BAR: render_bar(status.brightness),
    }


def feedbacks_for(facets: Iterable[str]) -> tuple[str, ...]:
    """Return the feedback ids affected by ``facets``, in facet order."""

    feedback_ids: list[str] = []
    for facet in facets:
        for feedback_id in _FACET_FEEDBACKS.get(facet, ()):
            if feedback_id not in feedback_ids:
                feedback_ids.append(feedback_id)
    return tuple(feedback_ids)


class FeedbackProjector:
    """Push variables and feedback checks to the host after state changes."""

    def __init__(self, host: HostSurface, store: LightStatusStore) -> None:
        """Project ``store`` onto ``host``."""

        self._host = host
        self._store = store

    def variable_definitions(self) -> list[VariableDefinition]:
        """Return the variables registered with the host."""

        return [
            VariableDefinition(VARIABLE_LIGHT_STATE, "Light State (ON/OFF)"),
            VariableDefinition(VARIABLE_BRIGHTNESS, "Brightness (0–100)"),
            VariableDefinition(VARIABLE_BRIGHTNESS_BAR, "Brightness Bar"),
        ]

    def feedback_definitions(self) -> dict[str, FeedbackDefinition]:
        """Return the feedbacks registered with the host."""

        return {
            FEEDBACK_LIGHT_IS_ON: FeedbackDefinition(
                name="Light is ON",
                type=FeedbackType.BOOLEAN,
                callback=lambda: self._store.get().is_on,
                default_style={"bgcolor": AMBER, "color": BLACK},
            ),
            FEEDBACK_BRIGHTNESS_LEVEL: FeedbackDefinition(
                name="Brightness level (show on button)",
                type=FeedbackType.ADVANCED,
                callback=lambda: brightness_style(self._store.get()),
            ),
        }

    def update_variables(self) -> None:
        """Push the current variable values."""

        self._host.set_variable_values(variable_values(self._store.get()))

    def recompute(self, facets: Iterable[str]) -> None:
        """Refresh variables and re-check the feedbacks of ``facets``."""

        self.update_variables()
        feedback_ids = feedbacks_for(facets)
        if feedback_ids:
            self._host.check_feedbacks(*feedback_ids)
