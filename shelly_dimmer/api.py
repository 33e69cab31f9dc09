"""RPC client for the Shelly Gen2+/Gen3 HTTP API.

Every call is a ``GET`` against ``http://<host>:<port><rpc_path>/<method>``
with the light id and the call parameters in the query string:

* ``Light.Set``       - ``on=true|false``, ``offset=<±step>``, ``brightness=<0-100>``
* ``Light.Toggle``    - no parameters beyond ``id``
* ``Light.GetStatus`` - no parameters beyond ``id``

Failures of any kind are logged, reported to the host as a connection
failure and re-raised as a :class:`~shelly_dimmer.errors.ShellyRpcError`.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from typing import Any

import httpx

from .config import ShellyConfig
from .const import RPC_TIMEOUT
from .errors import (
    RpcHttpStatusError,
    RpcParseError,
    RpcTimeoutError,
    RpcTransportError,
    ShellyRpcError,
)
from .host import HostSurface, InstanceStatus

_LOGGER = logging.getLogger(__name__)


def _create_http_client() -> httpx.AsyncClient:
    """Return an httpx async client bounded by the RPC timeout."""

    return httpx.AsyncClient(timeout=httpx.Timeout(RPC_TIMEOUT.total_seconds()))


def build_rpc_url(
    config: ShellyConfig, method: str, params: Mapping[str, str] | None = None
) -> httpx.URL:
    """Return the full request URL for ``method`` on the configured device."""

    profile = config.profile
    query = {"id": str(profile.light_id), **dict(params or {})}
    base = f"http://{config.host}:{config.port}{profile.rpc_path}/{method}"
    return httpx.URL(base, params=query)


class ShellyRpcClient:
    """Issue RPC calls against the configured dimmer."""

    def __init__(
        self,
        config: ShellyConfig,
        host: HostSurface,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """Bind the client to a configuration and the host status surface."""

        self._config = config
        self._host = host
        self._http_client = http_client
        self._owns_client = http_client is None

    @property
    def config(self) -> ShellyConfig:
        """Return the configuration requests are addressed with."""

        return self._config

    def update_config(self, config: ShellyConfig) -> None:
        """Swap the configuration used for subsequent calls."""

        self._config = config

    async def async_invoke(
        self, method: str, params: Mapping[str, str] | None = None
    ) -> Any:
        """Call ``method`` on the device and return the decoded JSON body."""

        try:
            url = self._build_url(method, params)
            return await self._async_request(method, url)
        except ShellyRpcError as err:
            _LOGGER.error("Shelly RPC error [%s]: %s (URL: %s)", method, err, err.url)
            self._host.update_status(InstanceStatus.CONNECTION_FAILURE, str(err))
            raise

    def _build_url(
        self, method: str, params: Mapping[str, str] | None
    ) -> httpx.URL:
        try:
            return build_rpc_url(self._config, method, params)
        except httpx.InvalidURL as err:
            config = self._config
            raise RpcTransportError(
                f"Invalid device address: {err}",
                method=method,
                url=f"http://{config.host}:{config.port}",
            ) from err

    async def _async_request(self, method: str, url: httpx.URL) -> Any:
        client = self._require_http_client()
        timeout = RPC_TIMEOUT.total_seconds()
        try:
            async with asyncio.timeout(timeout):
                response = await client.get(url, timeout=timeout)
        except (TimeoutError, httpx.TimeoutException) as err:
            raise RpcTimeoutError(
                f"Request timed out after {timeout:g}s", method=method, url=str(url)
            ) from err
        except (httpx.HTTPError, httpx.InvalidURL) as err:
            raise RpcTransportError(
                str(err) or type(err).__name__, method=method, url=str(url)
            ) from err

        if not response.is_success:
            raise RpcHttpStatusError(
                response.status_code, method=method, url=str(url)
            )
        try:
            return response.json()
        except ValueError as err:
            raise RpcParseError(
                f"Invalid JSON response: {err}", method=method, url=str(url)
            ) from err

    def _require_http_client(self) -> httpx.AsyncClient:
        if self._http_client is None:
            self._http_client = _create_http_client()
            self._owns_client = True
        return self._http_client

    async def aclose(self) -> None:
        """Close the HTTP client when this instance created it."""

        client = self._http_client
        if client is None or not self._owns_client:
            return
        self._http_client = None
        await client.aclose()
