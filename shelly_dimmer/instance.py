"""Instance lifecycle wiring the client, poller, dispatcher and projector."""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

import httpx

from .actions import ActionDispatcher
from .api import ShellyRpcClient
from .config import ShellyConfig
from .coordinator import StatusPoller
from .feedback import FeedbackProjector
from .host import HostSurface, InstanceStatus
from .state import LightStatus, LightStatusStore

_LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class ShellySession:
    """Mutable per-instance context shared by every component."""

    config: ShellyConfig
    store: LightStatusStore = field(default_factory=LightStatusStore)
    poller: StatusPoller | None = None


class ShellyDimmerInstance:
    """One configured dimmer exposed to the host."""

    def __init__(
        self,
        host: HostSurface,
        *,
        http_client: httpx.AsyncClient | None = None,
        rpc_client: Any | None = None,
    ) -> None:
        """Prepare an uninitialised instance.

        ``rpc_client`` replaces the HTTP client entirely and is meant for
        tests; ``http_client`` is handed to the default RPC client.
        """

        self._host = host
        self._http_client = http_client
        self._rpc_client: Any | None = rpc_client
        self.session: ShellySession | None = None
        self.dispatcher: ActionDispatcher | None = None
        self.projector: FeedbackProjector | None = None

    @property
    def status(self) -> LightStatus:
        """Return the last known light status."""

        return self._require_session().store.get()

    async def async_init(self, config: ShellyConfig | Mapping[str, Any]) -> None:
        """Validate ``config`` and bring the instance up."""

        config = _as_config(config)
        session = ShellySession(config=config)
        self.session = session
        if self._rpc_client is None:
            self._rpc_client = ShellyRpcClient(
                config, self._host, http_client=self._http_client
            )
        else:
            self._update_client_config(config)

        self.projector = FeedbackProjector(self._host, session.store)
        self.dispatcher = ActionDispatcher(
            rpc_client=self._rpc_client,
            store=session.store,
            on_update=self._handle_update,
        )
        session.poller = StatusPoller(
            rpc_client=self._rpc_client,
            store=session.store,
            host=self._host,
            on_update=self._handle_update,
        )
        _LOGGER.debug(
            "Initialising %s at %s:%s", config.profile.label, config.host, config.port
        )
        self._host.update_status(InstanceStatus.OK)
        self._register_definitions()
        session.poller.start(config.polling_interval)

    async def async_config_updated(
        self, config: ShellyConfig | Mapping[str, Any]
    ) -> None:
        """Apply a new configuration, restarting the poller."""

        session = self._require_session()
        config = _as_config(config)
        assert session.poller is not None
        session.poller.stop()
        session.config = config
        self._update_client_config(config)
        _LOGGER.debug("Reconfigured for %s:%s", config.host, config.port)
        self._host.update_status(InstanceStatus.OK)
        self._register_definitions()
        session.poller.start(config.polling_interval)

    async def async_destroy(self) -> None:
        """Stop polling and release network resources."""

        session = self.session
        if session is not None and session.poller is not None:
            session.poller.stop()
            await session.poller.async_wait_idle()
        close = getattr(self._rpc_client, "aclose", None)
        if callable(close):
            await close()

    async def async_refresh(self) -> LightStatus | None:
        """Fetch the device status immediately, outside the schedule."""

        session = self._require_session()
        assert session.poller is not None
        return await session.poller.async_poll()

    def _register_definitions(self) -> None:
        assert self.projector is not None and self.dispatcher is not None
        self._host.set_variable_definitions(self.projector.variable_definitions())
        self.projector.update_variables()
        self._host.set_action_definitions(self.dispatcher.action_definitions())
        self._host.set_feedback_definitions(self.projector.feedback_definitions())

    def _handle_update(self, facets: Sequence[str]) -> None:
        if self.projector is not None:
            self.projector.recompute(facets)

    def _update_client_config(self, config: ShellyConfig) -> None:
        update = getattr(self._rpc_client, "update_config", None)
        if callable(update):
            update(config)

    def _require_session(self) -> ShellySession:
        if self.session is None:
            raise RuntimeError("Instance has not been initialised")
        return self.session


def _as_config(config: ShellyConfig | Mapping[str, Any]) -> ShellyConfig:
    if isinstance(config, ShellyConfig):
        return config
    return ShellyConfig.from_dict(config)
