"""Shelly dimmer integration for button-automation control surfaces."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from .config import ShellyConfig, get_config_fields
from .const import DOMAIN
from .errors import (
    RpcHttpStatusError,
    RpcParseError,
    RpcTimeoutError,
    RpcTransportError,
    ShellyConfigError,
    ShellyError,
    ShellyRpcError,
)
from .host import HostSurface, InstanceStatus, LoggingHost
from .instance import ShellyDimmerInstance
from .state import LightStatus

__all__ = [
    "DOMAIN",
    "HostSurface",
    "InstanceStatus",
    "LightStatus",
    "LoggingHost",
    "RpcHttpStatusError",
    "RpcParseError",
    "RpcTimeoutError",
    "RpcTransportError",
    "ShellyConfig",
    "ShellyConfigError",
    "ShellyDimmerInstance",
    "ShellyError",
    "ShellyRpcError",
    "async_setup_entry",
    "async_unload_entry",
    "get_config_fields",
]


async def async_setup_entry(
    host: HostSurface, config: ShellyConfig | Mapping[str, Any], **kwargs: Any
) -> ShellyDimmerInstance:
    """Create and initialise an instance for ``config``."""

    instance = ShellyDimmerInstance(host, **kwargs)
    await instance.async_init(config)
    return instance


async def async_unload_entry(instance: ShellyDimmerInstance) -> bool:
    """Tear down an instance created by :func:`async_setup_entry`."""

    await instance.async_destroy()
    return True
