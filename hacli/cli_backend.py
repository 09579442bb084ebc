"""Commands for the CLI backend container."""

from __future__ import annotations

import argparse
from typing import Callable

from hacli.client import CONTAINER_DOWNLOAD_TIMEOUT, SupervisorClient
from hacli.output import respond


def cli_info(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show information about the CLI backend."""
    return respond(lambda: client.get("cli", "info"), client.raw_json)


def cli_stats(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show the resource usage of the CLI backend."""
    return respond(lambda: client.get("cli", "stats"), client.raw_json)


def cli_update(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Update the CLI backend to the latest or a given version."""
    version = getattr(args, "version", "") or ""
    body = {"version": version} if version else None
    return respond(
        lambda: client.post("cli", "update", body=body, timeout=CONTAINER_DOWNLOAD_TIMEOUT),
        client.raw_json,
    )


def _show_help(parser: argparse.ArgumentParser) -> Callable[[SupervisorClient, argparse.Namespace], bool]:
    def handler(client: SupervisorClient, args: argparse.Namespace) -> bool:
        parser.print_help()
        return True
    return handler


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add the cli command and its subcommands."""
    cli = subparsers.add_parser(
        "cli", help="Get information, update or configure the Home Assistant cli backend",
    )
    cli.set_defaults(handler=_show_help(cli))
    commands = cli.add_subparsers(dest="cli_command")

    info = commands.add_parser(
        "info", aliases=["in", "inf"],
        help="Shows information about the internal Home Assistant CLI backend",
    )
    info.set_defaults(handler=cli_info)

    stats = commands.add_parser(
        "stats", aliases=["status", "stat"],
        help="Provides system usage stats of the Home Assistant CLI backend",
    )
    stats.set_defaults(handler=cli_stats)

    update = commands.add_parser(
        "update", aliases=["upgrade", "downgrade", "up", "down"],
        help="Updates the internal Home Assistant CLI backend",
    )
    update.add_argument("--version", default="", help="Version to update to")
    update.set_defaults(handler=cli_update)