"""Commands that control the host system."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Callable, Mapping

from hacli.client import REBOOT_TIMEOUT, SupervisorClient
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


def boot_completions(data: Mapping[str, Any] | None, prefix: str = "") -> list[str]:
    """Return shell completions for boot IDs that start with the prefix, described by offset."""
    boots = (data or {}).get("boots")
    if not isinstance(boots, dict):
        return []
    return [
        f"{name}\tboot offset {offset}"
        for offset, name in boots.items()
        if isinstance(name, str) and (not prefix or name.startswith(prefix))
    ]


def _force_body(args: argparse.Namespace) -> dict[str, Any]:
    return {"force": True} if getattr(args, "force", False) else {}


def host_disks_usage(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show the usage of the default disk."""
    return respond(lambda: client.get("host", "disks/default/usage"), client.raw_json)


def host_info(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show information about the host system."""
    return respond(lambda: client.get("host", "info"), client.raw_json)


def host_logs(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Print the systemd journal of the host, optionally for one syslog identifier."""
    identifier = getattr(args, "identifier", "") or ""
    return stream_logs(client, "host", args, identifier=identifier)


def host_logs_boots(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show all boot IDs by offset."""
    return respond(lambda: client.get("host", "logs/boots"), client.raw_json)


def host_logs_identifiers(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show all syslog identifiers."""
    return respond(lambda: client.get("host", "logs/identifiers"), client.raw_json)


def host_options(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Set options of the host system."""
    hostname = getattr(args, "hostname", "") or ""
    body = {"hostname": hostname} if hostname else None
    return respond(lambda: client.post("host", "options", body=body), client.raw_json)


def host_reboot(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Reboot the host machine."""
    body = _force_body(args)
    return respond(
        lambda: client.post("host", "reboot", body=body, timeout=REBOOT_TIMEOUT),
        client.raw_json,
    )


def host_reload(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Reload the information held about the host."""
    return respond(lambda: client.post("host", "reload"), client.raw_json)


def host_shutdown(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Shut down the host machine."""
    body = _force_body(args)
    return respond(
        lambda: client.post("host", "shutdown", body=body, timeout=REBOOT_TIMEOUT),
        client.raw_json,
    )


def _add_force(parser: argparse.ArgumentParser, verb: str) -> None:
    parser.add_argument("-f", "--force", nargs="?", const=True, default=False,
                        type=_parse_bool,
                        help=f"Force {verb} during an offline db migration")


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add the host command and its subcommands."""
    host = subparsers.add_parser(
        "host", aliases=["ho"],
        help="Control the host/system that Home Assistant is running on",
    )
    host.set_defaults(handler=_show_help(host))
    commands = host.add_subparsers(dest="host_command")

    disks = commands.add_parser("disks", aliases=["disk"], help="Manage host disk operations")
    disks.set_defaults(handler=_show_help(disks))
    disk_commands = disks.add_subparsers(dest="disks_command")
    usage = disk_commands.add_parser("usage", aliases=["us", "use"],
                                     help="Get default disk usage information")
    usage.set_defaults(handler=host_disks_usage)

    info = commands.add_parser("info", aliases=["in", "inf"],
                               help="Provides information on the host system")
    info.set_defaults(handler=host_info)

    logs = commands.add_parser("logs", aliases=["log", "lg"],
                               help="View the log output of the host systemd journal logs")
    add_logs_arguments(logs)
    logs.add_argument("-t", "--identifier", default="",
                      help="Show entries with the specified syslog identifier")
    logs.set_defaults(handler=host_logs)
    log_commands = logs.add_subparsers(dest="logs_command")
    boots = log_commands.add_parser("boots", aliases=["list-boots", "lb"],
                                    help="Show all boot IDs by offset")
    boots.set_defaults(handler=host_logs_boots)
    identifiers = log_commands.add_parser(
        "identifiers", aliases=["ids", "list-identifiers", "li"],
        help="Show all syslog identifiers",
    )
    identifiers.set_defaults(handler=host_logs_identifiers)

    options = commands.add_parser("options", aliases=["option", "opt", "opts", "op"],
                                  help="Allow to set options on host system")
    options.add_argument("--hostname", default="", help="Hostname to set")
    options.set_defaults(handler=host_options)

    reboot = commands.add_parser("reboot", aliases=["restart", "rb"],
                                 help="Reboots the host machine")
    _add_force(reboot, "reboot")
    reboot.set_defaults(handler=host_reboot)

    reload_ = commands.add_parser("reload", aliases=["update", "refresh", "re"],
                                  help="Reload information from the host machine")
    reload_.set_defaults(handler=host_reload)

    shutdown = commands.add_parser("shutdown", aliases=["sh"],
                                   help="Shutdown the host machine")
    _add_force(shutdown, "shutdown")
    shutdown.set_defaults(handler=host_shutdown)