"""Command-line interface for xplane-udp."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from . import constants
from .adapters import TransportError, XPlaneUDPClient
from .config import ClientConfig, load_config
from .core import EncodingError
from .logging import configure_logging
from .monitor import DatarefMonitor

LOGGER = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="xplane-udp", description="Send control packets to X-Plane over UDP"
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("--host", help="X-Plane host (overrides config)")
    parser.add_argument(
        "--xp-port", type=int, help="X-Plane UDP port (overrides config)"
    )
    parser.add_argument(
        "--local-port", type=int, help="Local UDP port to bind (overrides config)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    command_parser = subparsers.add_parser("command", help="Trigger a command once")
    command_parser.add_argument("name", help="Command name, e.g. sim/operation/pause_on")

    set_parser = subparsers.add_parser("set", help="Write a dataref value")
    set_parser.add_argument("dataref")
    set_parser.add_argument("value", type=float)

    subscribe_parser = subparsers.add_parser(
        "subscribe", help="Request periodic updates for a dataref"
    )
    subscribe_parser.add_argument("dataref")
    subscribe_parser.add_argument(
        "--frequency", type=int, default=constants.DEFAULT_MONITOR_FREQUENCY
    )
    subscribe_parser.add_argument(
        "--reference-id", type=int, default=constants.DEFAULT_MONITOR_REFERENCE_ID
    )

    unsubscribe_parser = subparsers.add_parser(
        "unsubscribe", help="Cancel periodic updates for a dataref"
    )
    unsubscribe_parser.add_argument("dataref")
    unsubscribe_parser.add_argument("--reference-id", type=int, required=True)

    monitor_parser = subparsers.add_parser(
        "monitor", help="Subscribe to datarefs and log incoming datagrams"
    )
    monitor_parser.add_argument(
        "--dataref",
        action="append",
        dest="datarefs",
        help="Dataref to subscribe to (repeatable; replaces configured list)",
    )
    monitor_parser.add_argument("--frequency", type=int)
    monitor_parser.add_argument(
        "--count", type=int, help="Stop after this many datagrams"
    )

    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )

    return parser


def _apply_overrides(config: ClientConfig, args: argparse.Namespace) -> None:
    if args.host:
        config.xplane.host = args.host
        config.raw.set("xplane", "host", args.host)
    if args.xp_port is not None:
        config.xplane.xp_port = args.xp_port
        config.raw.set("xplane", "xp_port", str(args.xp_port))
    if args.local_port is not None:
        config.xplane.local_port = args.local_port
        config.raw.set("xplane", "local_port", str(args.local_port))


def _send_once(config: ClientConfig, args: argparse.Namespace) -> None:
    with XPlaneUDPClient.from_config(config.xplane) as client:
        if args.command == "command":
            client.command_once(args.name)
            LOGGER.info("Sent command %s", args.name)
        elif args.command == "set":
            client.set_dataref(args.dataref, args.value)
            LOGGER.info("Set %s = %s", args.dataref, args.value)
        elif args.command == "subscribe":
            client.subscribe_dataref(args.dataref, args.frequency, args.reference_id)
            LOGGER.info(
                "Subscribed to %s at %d Hz (reference %d)",
                args.dataref,
                args.frequency,
                args.reference_id,
            )
        elif args.command == "unsubscribe":
            client.unsubscribe_dataref(args.dataref, args.reference_id)
            LOGGER.info(
                "Unsubscribed from %s (reference %d)", args.dataref, args.reference_id
            )


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    _apply_overrides(config, args)

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n")
        for section in config.raw.sections():
            print(f"[{section}]")
            for key, value in config.raw[section].items():
                print(f"{key} = {value}")
            print()
        return 0

    if args.command == "monitor":
        if args.datarefs:
            config.monitor.datarefs = list(args.datarefs)
        if args.frequency is not None:
            config.monitor.frequency = max(0, args.frequency)
        try:
            DatarefMonitor.start(config, max_datagrams=args.count)
        except (EncodingError, TransportError) as exc:
            LOGGER.error("Monitor failed: %s", exc)
            return 1
        return 0

    if args.command in {"command", "set", "subscribe", "unsubscribe"}:
        configure_logging(config.logging)
        try:
            _send_once(config, args)
        except (EncodingError, TransportError) as exc:
            LOGGER.error("Send failed: %s", exc)
            return 1
        return 0

    LOGGER.error("Unknown command: %s", args.command)
    return 1


if __name__ == "__main__":
    sys.exit(main())
