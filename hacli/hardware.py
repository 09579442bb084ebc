"""Commands that describe the hardware of the system."""

from __future__ import annotations

import argparse
from typing import Callable

from hacli.client import SupervisorClient
from hacli.output import respond


def hardware_info(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show hardware information, such as serial ports."""
    return respond(lambda: client.get("hardware", "info"), client.raw_json)


def hardware_audio(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show the audio devices of the system."""
    return respond(lambda: client.get("hardware", "audio"), client.raw_json)


def _show_help(parser: argparse.ArgumentParser) -> Callable[[SupervisorClient, argparse.Namespace], bool]:
    def handler(client: SupervisorClient, args: argparse.Namespace) -> bool:
        parser.print_help()
        return True
    return handler


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add the hardware command and its subcommands."""
    hardware = subparsers.add_parser(
        "hardware", aliases=["hw"],
        help="Provides hardware information about your system",
    )
    hardware.set_defaults(handler=_show_help(hardware))
    commands = hardware.add_subparsers(dest="hardware_command")

    audio = commands.add_parser(
        "audio", aliases=["sounds", "snd", "au"],
        help="Provides information about audio devices on your system",
    )
    audio.set_defaults(handler=hardware_audio)

    info = commands.add_parser(
        "info", aliases=["in", "inf"],
        help="Provides hardware information about your system",
    )
    info.set_defaults(handler=hardware_info)