"""Pytest configuration for the Shelly dimmer tests."""

from __future__ import annotations

import asyncio
import sys
from collections.abc import Mapping
from pathlib import Path
from typing import Any

import pytest

root_path = Path(__file__).resolve().parent.parent
if str(root_path) not in sys.path:
    sys.path.insert(0, str(root_path))

from shelly_dimmer.errors import RpcTransportError  # noqa: E402
from shelly_dimmer.host import (  # noqa: E402
    ActionDefinition,
    FeedbackDefinition,
    InstanceStatus,
    VariableDefinition,
)


class FakeHost:
    """Record every call the instance makes into the host surface."""

    def __init__(self) -> None:
        """Initialise empty call logs."""

        self.statuses: list[tuple[InstanceStatus, str | None]] = []
        self.variable_definitions: list[VariableDefinition] = []
        self.variable_values: dict[str, Any] = {}
        self.variable_pushes: list[dict[str, Any]] = []
        self.actions: dict[str, ActionDefinition] = {}
        self.feedbacks: dict[str, FeedbackDefinition] = {}
        self.checked: list[tuple[str, ...]] = []

    def update_status(
        self, status: InstanceStatus, message: str | None = None
    ) -> None:
        """Record a status report."""

        self.statuses.append((status, message))

    def set_variable_definitions(self, definitions: list[VariableDefinition]) -> None:
        """Record variable registrations."""

        self.variable_definitions = list(definitions)

    def set_variable_values(self, values: Mapping[str, Any]) -> None:
        """Record pushed variable values."""

        self.variable_pushes.append(dict(values))
        self.variable_values.update(values)

    def set_action_definitions(self, definitions: dict[str, ActionDefinition]) -> None:
        """Record action registrations."""

        self.actions = dict(definitions)

    def set_feedback_definitions(
        self, definitions: dict[str, FeedbackDefinition]
    ) -> None:
        """Record feedback registrations."""

        self.feedbacks = dict(definitions)

    def check_feedbacks(self, *feedback_ids: str) -> None:
        """Record feedback re-check requests."""

        self.checked.append(tuple(feedback_ids))

    @property
    def last_status(self) -> tuple[InstanceStatus, str | None] | None:
        """Return the most recent status report."""

        return self.statuses[-1] if self.statuses else None


@pytest.fixture
def host() -> FakeHost:
    """Return a fresh recording host."""

    return FakeHost()


def pytest_configure(config: pytest.Config) -> None:
    """Register markers used throughout the test suite."""

    config.addinivalue_line(
        "markers", "asyncio: mark coroutine tests to execute via asyncio loop"
    )


def pytest_pyfunc_call(pyfuncitem: pytest.Function) -> bool | None:
    """Execute coroutine tests within a dedicated event loop."""

    test_function = pyfuncitem.obj
    if not asyncio.iscoroutinefunction(test_function):
        return None

    funcargs = pyfuncitem.funcargs
    testargs = {
        name: funcargs[name] for name in pyfuncitem._fixtureinfo.argnames
    }
    loop = asyncio.new_event_loop()
    try:
        asyncio.set_event_loop(loop)
        loop.run_until_complete(test_function(**testargs))
    finally:
        asyncio.set_event_loop(None)
        loop.close()
    return True


class FakeRpcClient:
    """Stand-in for ShellyRpcClient returning canned results."""

    def __init__(self, *results: Any) -> None:
        """Queue ``results``; exceptions in the queue are raised instead."""

        self.results: list[Any] = list(results)
        self.calls: list[tuple[str, dict[str, str]]] = []
        self.default: Any = {}
        self.config: Any = None

    async def async_invoke(
        self, method: str, params: Mapping[str, str] | None = None
    ) -> Any:
        """Record the call and return the next queued result."""

        self.calls.append((method, dict(params or {})))
        await asyncio.sleep(0)
        result = self.results.pop(0) if self.results else self.default
        if isinstance(result, BaseException):
            raise result
        return result

    def update_config(self, config: Any) -> None:
        """Remember the latest configuration."""

        self.config = config


@pytest.fixture
def rpc_client() -> FakeRpcClient:
    """Return an RPC client double answering with empty objects."""

    return FakeRpcClient()


def transport_error(method: str = "Light.Set") -> RpcTransportError:
    """Return the error a refused connection produces."""

    return RpcTransportError(
        "Connection refused", method=method, url=f"http://192.0.2.1/rpc/{method}"
    )
