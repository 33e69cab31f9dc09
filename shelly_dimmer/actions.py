"""Button actions translating presses into RPC calls and optimistic updates."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from .const import (
    ACTION_DIM_DOWN,
    ACTION_DIM_UP,
    ACTION_LIGHT_OFF,
    ACTION_LIGHT_ON,
    ACTION_LIGHT_TOGGLE,
    ACTION_SET_BRIGHTNESS,
    DEFAULT_BRIGHTNESS,
    DEFAULT_STEP,
    FACET_BRIGHTNESS,
    FACET_POWER,
    METHOD_SET,
    METHOD_TOGGLE,
)
from .host import ActionDefinition, OptionDefinition
from .state import MAX_BRIGHTNESS, MIN_BRIGHTNESS, LightStatus, LightStatusStore

_LOGGER = logging.getLogger(__name__)

STEP_OPTION = OptionDefinition(
    id="step", label="Step (%)", default=DEFAULT_STEP, min=1, max=100
)
BRIGHTNESS_OPTION = OptionDefinition(
    id="brightness",
    label="Brightness (0–100)",
    default=DEFAULT_BRIGHTNESS,
    min=MIN_BRIGHTNESS,
    max=MAX_BRIGHTNESS,
)


def _bool_param(value: bool) -> str:
    return "true" if value else "false"


def _option(options: Mapping[str, Any] | None, option: OptionDefinition) -> int:
    """Read ``option`` from the invocation options, using its default when unset."""

    value = (options or {}).get(option.id)
    if value is None:
        return option.default
    return int(value)


class ActionDispatcher:
    """Run device commands and mirror their effect in the local status.

    Each command awaits the RPC call first. Only when it succeeds is the
    store updated and the projector asked to recompute; a failed call
    propagates its :class:`~shelly_dimmer.errors.ShellyRpcError` and leaves
    the status untouched.
    """

    def __init__(
        self,
        *,
        rpc_client: Any,
        store: LightStatusStore,
        on_update: Callable[[Sequence[str]], None],
    ) -> None:
        """Bind the dispatcher to the RPC client and the shared store."""

        self._rpc_client = rpc_client
        self._store = store
        self._on_update = on_update

    async def async_light_on(self) -> LightStatus:
        """Switch the light on."""

        await self._rpc_client.async_invoke(METHOD_SET, {"on": _bool_param(True)})
        return self._commit((FACET_POWER,), is_on=True)

    async def async_light_off(self) -> LightStatus:
        """Switch the light off."""

        await self._rpc_client.async_invoke(METHOD_SET, {"on": _bool_param(False)})
        return self._commit((FACET_POWER,), is_on=False)

    async def async_toggle(self) -> LightStatus:
        """Flip the power state."""

        await self._rpc_client.async_invoke(METHOD_TOGGLE, {})
        return self._commit((FACET_POWER,), is_on=not self._store.get().is_on)

    async def async_dim_up(self, step: int = DEFAULT_STEP) -> LightStatus:
        """Raise the brightness by ``step`` percent, capped at 100."""

        await self._rpc_client.async_invoke(METHOD_SET, {"offset": str(step)})
        brightness = min(MAX_BRIGHTNESS, self._store.get().brightness + step)
        return self._commit((FACET_BRIGHTNESS,), brightness=brightness)

    async def async_dim_down(self, step: int = DEFAULT_STEP) -> LightStatus:
        """Lower the brightness by ``step`` percent, floored at 0."""

        await self._rpc_client.async_invoke(METHOD_SET, {"offset": str(-step)})
        brightness = max(MIN_BRIGHTNESS, self._store.get().brightness - step)
        return self._commit((FACET_BRIGHTNESS,), brightness=brightness)

    async def async_set_brightness(
        self, brightness: int = DEFAULT_BRIGHTNESS
    ) -> LightStatus:
        """Set an absolute brightness; zero also switches the light off."""

        is_on = brightness > 0
        await self._rpc_client.async_invoke(
            METHOD_SET,
            {"brightness": str(brightness), "on": _bool_param(is_on)},
        )
        return self._commit(
            (FACET_POWER, FACET_BRIGHTNESS), brightness=brightness, is_on=is_on
        )

    def _commit(self, facets: Sequence[str], **changes: Any) -> LightStatus:
        status = self._store.update(**changes)
        _LOGGER.debug("Optimistic update %s -> %s", changes, status)
        self._on_update(facets)
        return status

    def action_definitions(self) -> dict[str, ActionDefinition]:
        """Return the actions registered with the host."""

        async def _light_on(_options: Mapping[str, Any]) -> None:
            await self.async_light_on()

        async def _light_off(_options: Mapping[str, Any]) -> None:
            await self.async_light_off()

        async def _toggle(_options: Mapping[str, Any]) -> None:
            await self.async_toggle()

        async def _dim_up(options: Mapping[str, Any]) -> None:
            await self.async_dim_up(_option(options, STEP_OPTION))

        async def _dim_down(options: Mapping[str, Any]) -> None:
            await self.async_dim_down(_option(options, STEP_OPTION))

        async def _set_brightness(options: Mapping[str, Any]) -> None:
            await self.async_set_brightness(_option(options, BRIGHTNESS_OPTION))

        return {
            ACTION_LIGHT_ON: ActionDefinition(name="Light – On", callback=_light_on),
            ACTION_LIGHT_OFF: ActionDefinition(
                name="Light – Off", callback=_light_off
            ),
            ACTION_LIGHT_TOGGLE: ActionDefinition(
                name="Light – Toggle", callback=_toggle
            ),
            ACTION_DIM_UP: ActionDefinition(
                name="Dim Up (step)", callback=_dim_up, options=(STEP_OPTION,)
            ),
            ACTION_DIM_DOWN: ActionDefinition(
                name="Dim Down (step)", callback=_dim_down, options=(STEP_OPTION,)
            ),
            ACTION_SET_BRIGHTNESS: ActionDefinition(
                name="Set Brightness (%)",
                callback=_set_brightness,
                options=(BRIGHTNESS_OPTION,),
            ),
        }
