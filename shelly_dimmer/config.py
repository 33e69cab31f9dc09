"""Instance configuration for the Shelly dimmer integration."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import voluptuous as vol

from . import profiles
from .const import (
    CONF_DEVICE_TYPE,
    CONF_HOST,
    CONF_POLLING_INTERVAL,
    CONF_PORT,
    DEFAULT_HOST,
    DEFAULT_POLLING_INTERVAL,
    DEFAULT_PORT,
    MAX_POLLING_INTERVAL,
)
from .errors import ShellyConfigError
from .profiles import DEFAULT_MODEL, DeviceProfile

HOST_PATTERN = r"^[A-Za-z0-9_.]+$"

CONFIG_SCHEMA = vol.Schema(
    {
        vol.Optional(CONF_HOST, default=DEFAULT_HOST): vol.All(
            str, vol.Match(HOST_PATTERN)
        ),
        vol.Optional(CONF_PORT, default=DEFAULT_PORT): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=65535)
        ),
        # Unknown models are accepted and resolved to the default profile.
        vol.Optional(CONF_DEVICE_TYPE, default=DEFAULT_MODEL.value): vol.Any(
            None, str
        ),
        vol.Optional(CONF_POLLING_INTERVAL, default=DEFAULT_POLLING_INTERVAL): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=MAX_POLLING_INTERVAL)
        ),
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True, slots=True)
class ShellyConfig:
    """Validated, immutable instance configuration."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    device_type: str = DEFAULT_MODEL.value
    polling_interval: int = DEFAULT_POLLING_INTERVAL

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any] | None) -> ShellyConfig:
        """Validate a raw host configuration mapping."""

        try:
            data = CONFIG_SCHEMA(dict(payload or {}))
        except vol.Invalid as err:
            raise ShellyConfigError(f"Invalid configuration: {err}") from err
        return cls(
            host=data[CONF_HOST],
            port=data[CONF_PORT],
            device_type=data[CONF_DEVICE_TYPE] or DEFAULT_MODEL.value,
            polling_interval=data[CONF_POLLING_INTERVAL],
        )

    @property
    def profile(self) -> DeviceProfile:
        """Return the device profile selected by ``device_type``."""

        return profiles.resolve(self.device_type)

    def as_dict(self) -> dict[str, Any]:
        """Serialise back to the host configuration keys."""

        return {
            CONF_HOST: self.host,
            CONF_PORT: self.port,
            CONF_DEVICE_TYPE: self.device_type,
            CONF_POLLING_INTERVAL: self.polling_interval,
        }


def get_config_fields() -> list[dict[str, Any]]:
    """Return the configuration form rendered by the host."""

    return [
        {
            "type": "textinput",
            "id": CONF_HOST,
            "label": "IP Address",
            "width": 6,
            "default": DEFAULT_HOST,
            "regex": f"/{HOST_PATTERN}/",
        },
        {
            "type": "number",
            "id": CONF_PORT,
            "label": "Port",
            "width": 3,
            "default": DEFAULT_PORT,
            "min": 1,
            "max": 65535,
        },
        {
            "type": "dropdown",
            "id": CONF_DEVICE_TYPE,
            "label": "Shelly Model",
            "width": 6,
            "default": DEFAULT_MODEL.value,
            "choices": profiles.choices(),
        },
        {
            "type": "number",
            "id": CONF_POLLING_INTERVAL,
            "label": "Status polling interval (ms, 0 = disabled)",
            "width": 4,
            "default": DEFAULT_POLLING_INTERVAL,
            "min": 0,
            "max": MAX_POLLING_INTERVAL,
        },
    ]
