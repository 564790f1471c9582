"""Command-line interface for hivelocity-ccm.

The commands answer the same questions the orchestrator asks, which makes
it easy to check how a node resolves against the live inventory.
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Optional

from . import constants
from .cloud import HivelocityCloud
from .config import ProviderConfig, load_config
from .core import Node
from .errors import CloudProviderError
from .logging import configure_logging

LOGGER = logging.getLogger(__name__)

_SECRET_KEYS = {"api_key"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=constants.APP_NAME,
        description="Resolve cluster nodes to Hivelocity bare-metal devices",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=Path,
        default=constants.DEFAULT_CONFIG_PATH,
        help=f"Path to configuration file (default: {constants.DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Override the configured log level (e.g. DEBUG)",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in (
        ("exists", "Report whether a device backs the node"),
        ("shutdown", "Report whether the node's device is powered off"),
        ("metadata", "Print the instance metadata for the node"),
    ):
        node_parser = subparsers.add_parser(name, help=help_text)
        node_parser.add_argument("--node-name", required=True, help="Node name")
        node_parser.add_argument(
            "--provider-id",
            default="",
            help=f"Provider id, e.g. {constants.PROVIDER_ID_PREFIX}14730",
        )

    subparsers.add_parser(
        "show-config", help="Print the resolved configuration and exit"
    )

    return parser


async def run_node_command(config: ProviderConfig, command: str, node: Node) -> object:
    async with HivelocityCloud.from_config(config) as cloud:
        instances = cloud.instances_v2()
        if command == "exists":
            return {"exists": await instances.instance_exists(node)}
        if command == "shutdown":
            return {"shutdown": await instances.instance_shutdown(node)}
        metadata = await instances.instance_metadata(node)
        return metadata.as_dict()


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_config(args.config)
    configure_logging(
        args.log_level or config.logging.level,
        log_path=config.logging.path,
        log_network=config.logging.log_network,
    )

    if args.command == "show-config":
        print(f"Configuration loaded from {config.path!s}\n")
        for section in config.raw.sections():
            print(f"[{section}]")
            for key, value in config.raw[section].items():
                if key in _SECRET_KEYS and value:
                    value = "********"
                print(f"{key} = {value}")
            print()
        return 0

    node = Node(name=args.node_name, provider_id=args.provider_id)
    try:
        result = asyncio.run(run_node_command(config, args.command, node))
    except CloudProviderError as exc:
        LOGGER.error("%s failed: %s", args.command, exc)
        return 1
    except asyncio.TimeoutError:
        LOGGER.error("%s failed: Hivelocity API timed out", args.command)
        return 1

    print(json.dumps(result, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
