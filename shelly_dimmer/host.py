"""Capability surface of the button-automation host consumed by the instance."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

_LOGGER = logging.getLogger(__name__)


class InstanceStatus(str, Enum):
    """Connection status reported to the host."""

    OK = "ok"
    CONNECTION_FAILURE = "connection_failure"


class FeedbackType(str, Enum):
    """Kinds of feedback the host can evaluate."""

    BOOLEAN = "boolean"
    ADVANCED = "advanced"


@dataclass(frozen=True, slots=True)
class OptionDefinition:
    """Typed per-invocation option of an action."""

    id: str
    label: str
    default: int
    min: int
    max: int
    type: str = "number"


@dataclass(frozen=True, slots=True)
class ActionDefinition:
    """Action exposed as a button command."""

    name: str
    callback: Callable[[Mapping[str, Any]], Awaitable[None]]
    options: tuple[OptionDefinition, ...] = ()


@dataclass(frozen=True, slots=True)
class FeedbackDefinition:
    """Feedback evaluated by the host to style buttons."""

    name: str
    type: FeedbackType
    callback: Callable[[], Any]
    default_style: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True, slots=True)
class VariableDefinition:
    """Variable exposed to the host templating system."""

    variable_id: str
    name: str


class HostSurface(Protocol):
    """Host platform operations the instance calls into."""

    def update_status(
        self, status: InstanceStatus, message: str | None = None
    ) -> None:
        """Report the connection status of the instance."""

    def set_variable_definitions(self, definitions: list[VariableDefinition]) -> None:
        """Register the variables exposed by the instance."""

    def set_variable_values(self, values: Mapping[str, Any]) -> None:
        """Push new variable values."""

    def set_action_definitions(self, definitions: dict[str, ActionDefinition]) -> None:
        """Register the actions exposed by the instance."""

    def set_feedback_definitions(
        self, definitions: dict[str, FeedbackDefinition]
    ) -> None:
        """Register the feedbacks exposed by the instance."""

    def check_feedbacks(self, *feedback_ids: str) -> None:
        """Ask the host to re-evaluate the given feedbacks."""


class LoggingHost:
    """Standalone host that records registrations and logs every update."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        """Initialise empty registries."""

        self._logger = logger or _LOGGER
        self.status: InstanceStatus | None = None
        self.status_message: str | None = None
        self.variables: dict[str, VariableDefinition] = {}
        self.variable_values: dict[str, Any] = {}
        self.actions: dict[str, ActionDefinition] = {}
        self.feedbacks: dict[str, FeedbackDefinition] = {}

    def update_status(
        self, status: InstanceStatus, message: str | None = None
    ) -> None:
        """Record the status and log transitions."""

        if status != self.status or message != self.status_message:
            self._logger.info("Instance status: %s %s", status.value, message or "")
        self.status = status
        self.status_message = message

    def set_variable_definitions(self, definitions: list[VariableDefinition]) -> None:
        """Replace the registered variables."""

        self.variables = {
            definition.variable_id: definition for definition in definitions
        }

    def set_variable_values(self, values: Mapping[str, Any]) -> None:
        """Merge ``values`` into the current variable values."""

        self.variable_values.update(values)
        self._logger.debug("Variables: %s", dict(values))

    def set_action_definitions(self, definitions: dict[str, ActionDefinition]) -> None:
        """Replace the registered actions."""

        self.actions = dict(definitions)

    def set_feedback_definitions(
        self, definitions: dict[str, FeedbackDefinition]
    ) -> None:
        """Replace the registered feedbacks."""

        self.feedbacks = dict(definitions)

    def check_feedbacks(self, *feedback_ids: str) -> None:
        """Evaluate and log the given feedbacks."""

        for feedback_id in feedback_ids:
            definition = self.feedbacks.get(feedback_id)
            if definition is None:
                continue
            self._logger.debug(
                "Feedback %s -> %s", feedback_id, definition.callback()
            )

    async def async_run_action(
        self, action_id: str, options: Mapping[str, Any] | None = None
    ) -> None:
        """Invoke a registered action the way a button press would."""

        definition = self.actions.get(action_id)
        if definition is None:
            raise KeyError(action_id)
        await definition.callback(dict(options or {}))
