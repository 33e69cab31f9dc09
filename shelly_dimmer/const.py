"""Constants for the Shelly dimmer integration."""

from __future__ import annotations

from datetime import timedelta
from typing import Final

DOMAIN: Final = "shelly_dimmer"

DEFAULT_HOST: Final = "192.168.1.100"
DEFAULT_PORT: Final = 80
DEFAULT_POLLING_INTERVAL: Final = 3000
MAX_POLLING_INTERVAL: Final = 60000
DEFAULT_STEP: Final = 10
DEFAULT_BRIGHTNESS: Final = 100

RPC_TIMEOUT: Final = timedelta(seconds=5)

METHOD_SET: Final = "Light.Set"
METHOD_TOGGLE: Final = "Light.Toggle"
METHOD_GET_STATUS: Final = "Light.GetStatus"

CONF_HOST: Final = "host"
CONF_PORT: Final = "port"
CONF_DEVICE_TYPE: Final = "deviceType"
CONF_POLLING_INTERVAL: Final = "pollingInterval"

ACTION_LIGHT_ON: Final = "light_on"
ACTION_LIGHT_OFF: Final = "light_off"
ACTION_LIGHT_TOGGLE: Final = "light_toggle"
ACTION_DIM_UP: Final = "dim_up"
ACTION_DIM_DOWN: Final = "dim_down"
ACTION_SET_BRIGHTNESS: Final = "set_brightness"

VARIABLE_LIGHT_STATE: Final = "light_state"
VARIABLE_BRIGHTNESS: Final = "brightness"
VARIABLE_BRIGHTNESS_BAR: Final = "brightness_bar"

FEEDBACK_LIGHT_IS_ON: Final = "light_is_on"
FEEDBACK_BRIGHTNESS_LEVEL: Final = "brightness_level"

FACET_POWER: Final = "power"
FACET_BRIGHTNESS: Final = "brightness"
ALL_FACETS: Final = (FACET_POWER, FACET_BRIGHTNESS)
