"""Commands for the Job Manager."""

from __future__ import annotations

import argparse
from typing import Callable

from hacli.client import SupervisorClient
from hacli.output import respond


def jobs_info(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show general information about the Job Manager."""
    return respond(lambda: client.get("jobs", "info"), client.raw_json)


def _show_help(parser: argparse.ArgumentParser) -> Callable[[SupervisorClient, argparse.Namespace], bool]:
    def handler(client: SupervisorClient, args: argparse.Namespace) -> bool:
        parser.print_help()
        return True
    return handler


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add the jobs command and its subcommands."""
    jobs = subparsers.add_parser(
        "jobs", aliases=["job", "tasks", "task"],
        help="Get information and manage running jobs",
    )
    jobs.set_defaults(handler=_show_help(jobs))
    commands = jobs.add_subparsers(dest="jobs_command")

    info = commands.add_parser(
        "info", aliases=["in", "inf"],
        help="Provides information about the Home Assistant Job Manager",
    )
    info.set_defaults(handler=jobs_info)