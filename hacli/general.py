"""General system overview commands."""

from __future__ import annotations

import argparse

from hacli.client import SupervisorClient
from hacli.output import respond


def show_info(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show the general system information."""
    return respond(lambda: client.get("info", ""), client.raw_json)


def show_available_updates(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show the pending updates."""
    return respond(lambda: client.get("available_updates", ""), client.raw_json)


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add the info and available-updates commands."""
    info = subparsers.add_parser(
        "info", aliases=["in", "inf"],
        help="Provides a general Home Assistant information overview",
    )
    info.set_defaults(handler=show_info)

    updates = subparsers.add_parser(
        "available-updates", aliases=["updates", "available_updates"],
        help="Provides information about current pending updates",
    )
    updates.set_defaults(handler=show_available_updates)