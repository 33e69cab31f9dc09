"""Command line helper to drive a Shelly dimmer without a host platform.

Examples::

    python -m shelly_dimmer --host 192.168.1.50 status
    python -m shelly_dimmer --host 192.168.1.50 dim-up --step 20
    python -m shelly_dimmer --host 192.168.1.50 --interval 1000 watch --duration 30
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from typing import Any

from . import profiles
from .const import (
    ACTION_DIM_DOWN,
    ACTION_DIM_UP,
    ACTION_LIGHT_OFF,
    ACTION_LIGHT_ON,
    ACTION_LIGHT_TOGGLE,
    ACTION_SET_BRIGHTNESS,
    CONF_DEVICE_TYPE,
    CONF_HOST,
    CONF_POLLING_INTERVAL,
    CONF_PORT,
    DEFAULT_BRIGHTNESS,
    DEFAULT_POLLING_INTERVAL,
    DEFAULT_PORT,
    DEFAULT_STEP,
)
from .errors import ShellyError
from .host import LoggingHost
from .instance import ShellyDimmerInstance

_COMMAND_ACTIONS = {
    "on": ACTION_LIGHT_ON,
    "off": ACTION_LIGHT_OFF,
    "toggle": ACTION_LIGHT_TOGGLE,
    "dim-up": ACTION_DIM_UP,
    "dim-down": ACTION_DIM_DOWN,
    "set": ACTION_SET_BRIGHTNESS,
}


def build_parser() -> argparse.ArgumentParser:
    """Return the argument parser for the CLI."""

    parser = argparse.ArgumentParser(
        prog="shelly_dimmer", description="Control a Shelly dimmer over HTTP RPC"
    )
    parser.add_argument("--host", required=True, help="Device IP address")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    parser.add_argument(
        "--model",
        default=profiles.DEFAULT_MODEL.value,
        choices=[choice["id"] for choice in profiles.choices()],
    )
    parser.add_argument(
        "--interval",
        type=int,
        default=DEFAULT_POLLING_INTERVAL,
        help="Polling interval in ms used by 'watch' (0 disables polling)",
    )
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")

    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("status", help="Fetch and print the current status")
    commands.add_parser("on", help="Turn the light on")
    commands.add_parser("off", help="Turn the light off")
    commands.add_parser("toggle", help="Toggle the light")
    for name in ("dim-up", "dim-down"):
        dim = commands.add_parser(name, help="Change the brightness by a step")
        dim.add_argument("--step", type=int, default=DEFAULT_STEP)
    set_parser = commands.add_parser("set", help="Set the brightness in percent")
    set_parser.add_argument(
        "brightness", type=int, nargs="?", default=DEFAULT_BRIGHTNESS
    )
    watch = commands.add_parser("watch", help="Poll the status and log changes")
    watch.add_argument("--duration", type=float, default=None, help="Seconds to run")
    return parser


def _action_options(args: argparse.Namespace) -> dict[str, Any]:
    options: dict[str, Any] = {}
    if getattr(args, "step", None) is not None:
        options["step"] = args.step
    if getattr(args, "brightness", None) is not None:
        options["brightness"] = args.brightness
    return options


async def async_main(args: argparse.Namespace) -> int:
    """Run ``args.command`` against the configured device."""

    host = LoggingHost()
    instance = ShellyDimmerInstance(host)
    config = {
        CONF_HOST: args.host,
        CONF_PORT: args.port,
        CONF_DEVICE_TYPE: args.model,
        CONF_POLLING_INTERVAL: args.interval if args.command == "watch" else 0,
    }
    try:
        await instance.async_init(config)
        if args.command == "watch":
            await instance.async_refresh()
            await asyncio.sleep(args.duration if args.duration is not None else 1e9)
        elif args.command == "status":
            if await instance.async_refresh() is None:
                return 1
        else:
            await host.async_run_action(
                _COMMAND_ACTIONS[args.command], _action_options(args)
            )
    except ShellyError as err:
        print(f"Error: {err}", file=sys.stderr)
        return 1
    finally:
        await instance.async_destroy()

    for key, value in host.variable_values.items():
        print(f"{key}: {value}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""

    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        return asyncio.run(async_main(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":  # pragma: no cover - CLI
    raise SystemExit(main())
