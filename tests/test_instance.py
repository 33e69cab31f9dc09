"""End-to-end tests for the instance lifecycle against a simulated dimmer."""

from __future__ import annotations

import asyncio
from typing import Any

import httpx
import pytest

from shelly_dimmer import ShellyConfigError, async_setup_entry, async_unload_entry
from shelly_dimmer.errors import RpcHttpStatusError
from shelly_dimmer.feedback import BAR_FILLED
from shelly_dimmer.host import InstanceStatus
from shelly_dimmer.instance import ShellyDimmerInstance
from shelly_dimmer.state import LightStatus


class SimulatedDimmer:
    """Answer Light.* RPC calls the way a Shelly dimmer does."""

    def __init__(self, *, output: bool = False, brightness: int = 0) -> None:
        """Start with the given power state and brightness."""

        self.output = output
        self.brightness = brightness
        self.requests: list[httpx.Request] = []
        self.fail_with: int | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        """Handle one RPC request."""

        self.requests.append(request)
        if self.fail_with is not None:
            return httpx.Response(self.fail_with)
        method = request.url.path.rsplit("/", 1)[-1]
        params = request.url.params
        if method == "Light.Set":
            if "on" in params:
                self.output = params["on"] == "true"
            if "brightness" in params:
                self.brightness = int(params["brightness"])
            if "offset" in params:
                self.brightness = max(
                    0, min(100, self.brightness + int(params["offset"]))
                )
            return httpx.Response(200, json={"was_on": self.output})
        if method == "Light.Toggle":
            self.output = not self.output
            return httpx.Response(200, json={"was_on": not self.output})
        if method == "Light.GetStatus":
            return httpx.Response(
                200,
                json={
                    "id": 0,
                    "source": "http",
                    "output": self.output,
                    "brightness": self.brightness,
                },
            )
        return httpx.Response(404)

    @property
    def paths(self) -> list[str]:
        """Return the RPC paths requested so far."""

        return [request.url.path for request in self.requests]


def _config(**overrides: Any) -> dict[str, Any]:
    """Return a raw host configuration with polling disabled."""

    config = {
        "host": "192.168.1.50",
        "port": 80,
        "deviceType": "shelly-dali-dimmer-gen3",
        "pollingInterval": 0,
    }
    config.update(overrides)
    return config


async def _setup(host, device: SimulatedDimmer, **overrides: Any):
    """Create an instance wired to ``device`` through a mock transport."""

    http_client = httpx.AsyncClient(transport=httpx.MockTransport(device))
    instance = await async_setup_entry(
        host, _config(**overrides), http_client=http_client
    )
    return instance, http_client


@pytest.mark.asyncio
async def test_init_registers_definitions_and_initial_values(host) -> None:
    """Initialisation reports OK and publishes the default status."""

    device = SimulatedDimmer()
    instance, http_client = await _setup(host, device)

    assert host.statuses[0] == (InstanceStatus.OK, None)
    assert [d.variable_id for d in host.variable_definitions] == [
        "light_state",
        "brightness",
        "brightness_bar",
    ]
    assert set(host.actions) == {
        "light_on",
        "light_off",
        "light_toggle",
        "dim_up",
        "dim_down",
        "set_brightness",
    }
    assert set(host.feedbacks) == {"light_is_on", "brightness_level"}
    assert host.variable_values["light_state"] == "OFF"
    assert host.variable_values["brightness"] == 0
    assert device.requests == []

    await async_unload_entry(instance)
    await http_client.aclose()


@pytest.mark.asyncio
async def test_refresh_projects_device_status(host) -> None:
    """A 45% status becomes ON, 45 and a five unit bar."""

    device = SimulatedDimmer(output=True, brightness=45)
    instance, http_client = await _setup(host, device)

    status = await instance.async_refresh()

    assert status == LightStatus(is_on=True, brightness=45)
    assert host.variable_values["light_state"] == "ON"
    assert host.variable_values["brightness"] == 45
    assert host.variable_values["brightness_bar"].count(BAR_FILLED) == 5
    assert host.checked[-1] == ("light_is_on", "brightness_level")
    assert host.last_status == (InstanceStatus.OK, None)

    await async_unload_entry(instance)
    await http_client.aclose()


@pytest.mark.asyncio
async def test_actions_round_trip_through_the_device(host) -> None:
    """Host actions reach the device and update variables optimistically."""

    device = SimulatedDimmer()
    instance, http_client = await _setup(host, device)

    await host.actions["set_brightness"].callback({"brightness": 40})
    assert host.variable_values["brightness"] == 40
    assert host.variable_values["light_state"] == "ON"

    await host.actions["dim_up"].callback({"step": 15})
    await host.actions["light_toggle"].callback({})

    assert instance.status == LightStatus(is_on=False, brightness=55)
    assert (device.output, device.brightness) == (False, 55)
    assert device.paths == ["/rpc/Light.Set", "/rpc/Light.Set", "/rpc/Light.Toggle"]

    await async_unload_entry(instance)
    await http_client.aclose()


@pytest.mark.asyncio
async def test_device_errors_surface_and_recover(host) -> None:
    """Errors flag a connection failure; the next good poll restores OK."""

    device = SimulatedDimmer(output=True, brightness=30)
    instance, http_client = await _setup(host, device)
    device.fail_with = 503

    with pytest.raises(RpcHttpStatusError):
        await host.actions["light_off"].callback({})
    assert host.last_status == (InstanceStatus.CONNECTION_FAILURE, "HTTP 503")
    assert instance.status == LightStatus()

    device.fail_with = None
    await instance.async_refresh()

    assert host.last_status == (InstanceStatus.OK, None)
    assert instance.status == LightStatus(is_on=True, brightness=30)

    await async_unload_entry(instance)
    await http_client.aclose()


@pytest.mark.asyncio
async def test_unknown_model_addresses_default_profile(host) -> None:
    """An unrecognised model falls back to the default RPC path and id."""

    device = SimulatedDimmer()
    instance, http_client = await _setup(host, device, deviceType="foo")

    await host.actions["light_on"].callback({})

    [request] = device.requests
    assert request.url.path == "/rpc/Light.Set"
    assert request.url.params["id"] == "0"

    await async_unload_entry(instance)
    await http_client.aclose()


@pytest.mark.asyncio
async def test_polling_runs_and_stops_on_unload(host) -> None:
    """Configured polling fetches periodically until the instance unloads."""

    device = SimulatedDimmer(output=True, brightness=80)
    instance, http_client = await _setup(host, device, pollingInterval=10)

    await asyncio.sleep(0.1)
    await async_unload_entry(instance)
    polled = len(device.requests)
    await asyncio.sleep(0.05)

    assert polled >= 2
    assert len(device.requests) == polled
    assert set(device.paths) == {"/rpc/Light.GetStatus"}
    assert host.variable_values["brightness"] == 80

    await http_client.aclose()


@pytest.mark.asyncio
async def test_config_update_restarts_polling_with_new_target(host) -> None:
    """Reconfiguring stops the old schedule and polls the new device."""

    device = SimulatedDimmer(output=True, brightness=20)
    instance, http_client = await _setup(host, device, pollingInterval=10)
    await asyncio.sleep(0.05)

    await instance.async_config_updated(
        _config(host="192.168.1.51", pollingInterval=0)
    )
    await instance.session.poller.async_wait_idle()
    before = len(device.requests)
    await asyncio.sleep(0.05)

    assert len(device.requests) == before
    assert instance.session.config.host == "192.168.1.51"
    assert instance.session.poller.running is False

    await instance.async_config_updated(
        _config(host="192.168.1.51", pollingInterval=10)
    )
    await asyncio.sleep(0.05)

    assert {r.url.host for r in device.requests[before:]} == {"192.168.1.51"}
    assert len(device.requests) > before

    await async_unload_entry(instance)
    await http_client.aclose()


@pytest.mark.asyncio
async def test_invalid_config_is_rejected(host) -> None:
    """Bad configuration raises before anything is registered."""

    with pytest.raises(ShellyConfigError):
        await async_setup_entry(host, _config(port=0))

    assert host.actions == {}


def test_status_requires_initialisation(host) -> None:
    """Reading the status before init is an error."""

    with pytest.raises(RuntimeError):
        ShellyDimmerInstance(host).status
