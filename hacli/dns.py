"""Commands for the internal DNS server."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Callable

from hacli.client import (
    CONTAINER_DOWNLOAD_TIMEOUT,
    CONTAINER_OPERATION_TIMEOUT,
    SupervisorClient,
)
from hacli.logs import add_logs_arguments, stream_logs
from hacli.output import respond

log = logging.getLogger(__name__)

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def _parse_bool(text: str) -> bool:
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {text!r}")


def _show_help(parser: argparse.ArgumentParser) -> Callable[[SupervisorClient, argparse.Namespace], bool]:
    def handler(client: SupervisorClient, args: argparse.Namespace) -> bool:
        parser.print_help()
        return True
    return handler


def dns_options_payload(args: argparse.Namespace) -> dict[str, Any]:
    """Return the body for setting DNS options; only options that were given appear."""
    options: dict[str, Any] = {}
    servers = getattr(args, "servers", None) or []
    log.debug("servers: %s", servers)
    if servers:
        options["servers"] = list(servers)
    fallback = getattr(args, "fallback", None)
    if fallback is not None:
        options["fallback"] = fallback
    return options


def dns_info(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show information about the DNS server."""
    return respond(lambda: client.get("dns", "info"), client.raw_json)


def dns_logs(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Print the log output of the DNS server."""
    return stream_logs(client, "dns", args)


def dns_options(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Set options of the DNS server."""
    body = dns_options_payload(args)
    return respond(lambda: client.post("dns", "options", body=body), client.raw_json)


def dns_reset(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Reset the DNS server configuration."""
    return respond(lambda: client.post("dns", "reset"), client.raw_json)


def dns_restart(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Restart the DNS server."""
    return respond(
        lambda: client.post("dns", "restart", timeout=CONTAINER_OPERATION_TIMEOUT),
        client.raw_json,
    )


def dns_stats(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show the resource usage of the DNS server."""
    return respond(lambda: client.get("dns", "stats"), client.raw_json)


def dns_update(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Update the DNS server to the latest or a given version."""
    version = getattr(args, "version", "") or ""
    body = {"version": version} if version else None
    return respond(
        lambda: client.post("dns", "update", body=body, timeout=CONTAINER_DOWNLOAD_TIMEOUT),
        client.raw_json,
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add the dns command and its subcommands."""
    dns = subparsers.add_parser(
        "dns", help="Get information, update or configure the Home Assistant DNS server",
    )
    dns.set_defaults(handler=_show_help(dns))
    commands = dns.add_subparsers(dest="dns_command")

    info = commands.add_parser(
        "info", aliases=["in", "inf"],
        help="Shows information about the internal Home Assistant DNS server",
    )
    info.set_defaults(handler=dns_info)

    logs = commands.add_parser(
        "logs", aliases=["log", "lg"],
        help="View the log output of the Home Assistant DNS server",
    )
    add_logs_arguments(logs)
    logs.set_defaults(handler=dns_logs)

    options = commands.add_parser(
        "options", aliases=["option", "opt", "opts", "op"],
        help="Allow to set options for the internal Home Assistant DNS server",
    )
    options.add_argument(
        "-r", "--servers", action="append", default=None,
        help="Upstream DNS servers to use. Use multiple times for multiple servers.",
    )
    options.add_argument(
        "--fallback", nargs="?", const=True, default=None, type=_parse_bool,
        help="Enable/Disable fallback DNS (Cloudflare DoT)",
    )
    options.set_defaults(handler=dns_options)

    reset = commands.add_parser(
        "reset", help="Resets the internal Home Assistant DNS server configuration",
    )
    reset.set_defaults(handler=dns_reset)

    restart = commands.add_parser(
        "restart", aliases=["reboot"],
        help="Restarts the internal Home Assistant DNS server",
    )
    restart.set_defaults(handler=dns_restart)

    stats = commands.add_parser(
        "stats", aliases=["status", "stat"],
        help="Provides system usage stats of the Home Assistant DNS server",
    )
    stats.set_defaults(handler=dns_stats)

    update = commands.add_parser(
        "update", aliases=["upgrade", "downgrade", "up", "down"],
        help="Updates the internal Home Assistant DNS server",
    )
    update.add_argument("--version", default="", help="Version to update to")
    update.set_defaults(handler=dns_update)