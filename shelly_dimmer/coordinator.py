"""Periodic status polling for the Shelly dimmer."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Sequence
from typing import Any

from .const import ALL_FACETS, METHOD_GET_STATUS
from .errors import ShellyRpcError
from .host import HostSurface, InstanceStatus
from .state import LightStatus, LightStatusStore

_LOGGER = logging.getLogger(__name__)


class StatusPoller:
    """Fetch ``Light.GetStatus`` on a fixed interval and store the result.

    The schedule is a chain of ``loop.call_later`` handles; each tick runs
    the fetch in its own task so a slow device never delays the next tick.
    Stopping cancels the pending handle only. A fetch already in flight is
    bounded by the RPC timeout and is left to finish.
    """

    def __init__(
        self,
        *,
        rpc_client: Any,
        store: LightStatusStore,
        host: HostSurface,
        on_update: Callable[[Sequence[str]], None],
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        """Initialise the poller in the stopped state."""

        self._rpc_client = rpc_client
        self._store = store
        self._host = host
        self._on_update = on_update
        self._loop = loop
        self._interval: float | None = None
        self._refresh_handle: asyncio.TimerHandle | None = None
        self._pending_tasks: set[asyncio.Task[Any]] = set()

    @property
    def running(self) -> bool:
        """Return True while a tick is scheduled."""

        return self._refresh_handle is not None

    @property
    def interval_ms(self) -> int | None:
        """Return the active interval in milliseconds."""

        if self._interval is None:
            return None
        return round(self._interval * 1000)

    def start(self, interval_ms: int) -> None:
        """Schedule a status fetch every ``interval_ms`` milliseconds."""

        self.stop()
        if interval_ms <= 0:
            _LOGGER.debug("Status polling disabled")
            return
        self._interval = interval_ms / 1000
        self._refresh_handle = self._get_loop().call_later(self._interval, self._tick)
        _LOGGER.debug("Status polling every %s ms", interval_ms)

    def stop(self) -> None:
        """Cancel the scheduled ticks."""

        if self._refresh_handle is not None:
            self._refresh_handle.cancel()
            self._refresh_handle = None
        self._interval = None

    def restart(self, interval_ms: int) -> None:
        """Stop and start again with a new interval."""

        self.stop()
        self.start(interval_ms)

    def _tick(self) -> None:
        if self._interval is None:
            return
        task = self._get_loop().create_task(self.async_poll())
        self._pending_tasks.add(task)
        task.add_done_callback(self._pending_tasks.discard)
        self._refresh_handle = self._get_loop().call_later(self._interval, self._tick)

    async def async_poll(self) -> LightStatus | None:
        """Fetch the device status once and publish it.

        Returns the stored status, or ``None`` when the fetch failed.
        """

        try:
            payload = await self._rpc_client.async_invoke(METHOD_GET_STATUS)
        except ShellyRpcError as err:
            _LOGGER.debug("Status poll failed: %s", err)
            return None
        try:
            status = LightStatus.from_payload(payload)
        except ValueError as err:
            _LOGGER.warning(
                "Unexpected %s payload %r: %s", METHOD_GET_STATUS, payload, err
            )
            return None

        self._store.set(status)
        self._host.update_status(InstanceStatus.OK)
        self._on_update(ALL_FACETS)
        return status

    async def async_wait_idle(self) -> None:
        """Wait for fetches that are already in flight."""

        if self._pending_tasks:
            await asyncio.gather(*self._pending_tasks, return_exceptions=True)

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop
