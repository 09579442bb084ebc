"""Commands that control the Home Assistant Core instance."""

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

_STRING_OPTIONS = ("image", "refresh_token", "audio_output", "audio_input")
_BOOL_OPTIONS = ("boot", "ssl", "watchdog", "backups_exclude_database", "duplicate_log_file")

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def _parse_bool(text: str) -> bool:
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {text!r}")


def _optional_bool(
    parser: argparse.ArgumentParser,
    *names: str,
    const: bool,
    default: bool | None,
    help_text: str,
    dest: str | None = None,
) -> None:
    """A flag that takes an optional =value; given alone it means const."""
    kwargs: dict[str, Any] = {}
    if dest is not None:
        kwargs["dest"] = dest
    parser.add_argument(*names, nargs="?", const=const, default=default,
                        type=_parse_bool, help=help_text, **kwargs)


def _show_help(parser: argparse.ArgumentParser) -> Callable[[SupervisorClient, argparse.Namespace], bool]:
    def handler(client: SupervisorClient, args: argparse.Namespace) -> bool:
        parser.print_help()
        return True
    return handler


def core_options_payload(args: argparse.Namespace) -> dict[str, Any]:
    """Return the body for setting Core options; only options that were given appear."""
    options: dict[str, Any] = {}
    for name in _STRING_OPTIONS:
        value = getattr(args, name, None)
        if value is not None:
            options[name] = value or None

    port = getattr(args, "port", None)
    if port:
        options["port"] = port

    for name in _BOOL_OPTIONS:
        value = getattr(args, name, None)
        if value is not None:
            options[name] = value
    return options


def lifecycle_payload(args: argparse.Namespace) -> dict[str, Any]:
    """Return the body for restart, rebuild and stop: safe mode and force when set."""
    options: dict[str, Any] = {}
    if getattr(args, "safe_mode", False):
        options["safe_mode"] = True
    if getattr(args, "force", False):
        options["force"] = True
    return options


def update_payload(args: argparse.Namespace) -> dict[str, Any]:
    """Return the body for an update: the version if given and the backup choice if made."""
    options: dict[str, Any] = {}
    version = getattr(args, "version", "") or ""
    if version:
        options["version"] = version
    backup = getattr(args, "backup", None)
    if backup is not None:
        options["backup"] = backup
    return options


def core_info(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show information about Home Assistant Core."""
    return respond(lambda: client.get("core", "info"), client.raw_json)


def core_check(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Validate the configuration stored on disk."""
    return respond(
        lambda: client.post("core", "check", timeout=CONTAINER_OPERATION_TIMEOUT),
        client.raw_json,
    )


def core_logs(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Print the log output of Home Assistant Core."""
    return stream_logs(client, "core", args)


def core_options(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Set options of the Core instance."""
    body = core_options_payload(args)
    return respond(lambda: client.post("core", "options", body=body), client.raw_json)


def core_rebuild(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Rebuild the Core instance."""
    body = lifecycle_payload(args)
    return respond(
        lambda: client.post("core", "rebuild", body=body, timeout=CONTAINER_OPERATION_TIMEOUT),
        client.raw_json,
    )


def core_restart(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Restart the Core instance."""
    body = lifecycle_payload(args)
    return respond(
        lambda: client.post("core", "restart", body=body, timeout=CONTAINER_OPERATION_TIMEOUT),
        client.raw_json,
    )


def core_start(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Start a stopped Core instance."""
    return respond(
        lambda: client.post("core", "start", timeout=CONTAINER_OPERATION_TIMEOUT),
        client.raw_json,
    )


def core_stats(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show the resource usage of Core."""
    return respond(lambda: client.get("core", "stats"), client.raw_json)


def core_stop(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Stop the Core instance."""
    body = {"force": True} if getattr(args, "force", False) else {}
    return respond(
        lambda: client.post("core", "stop", body=body, timeout=CONTAINER_OPERATION_TIMEOUT),
        client.raw_json,
    )


def core_update(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Update Core to the latest or a given version."""
    body = update_payload(args)
    if body:
        log.debug("Request body: %s", body)
    return respond(
        lambda: client.post("core", "update", body=body, timeout=CONTAINER_DOWNLOAD_TIMEOUT),
        client.raw_json,
    )


def _add_lifecycle_flags(parser: argparse.ArgumentParser, verb: str, safe_mode: bool) -> None:
    if safe_mode:
        _optional_bool(parser, "-s", "--safe-mode", const=True, default=False,
                       dest="safe_mode", help_text=f"{verb} Home Assistant in safe mode")
    _optional_bool(parser, "-f", "--force", const=True, default=False,
                   help_text=f"Force {verb.lower()} during an offline db migration")


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add the core command and its subcommands."""
    core = subparsers.add_parser(
        "core", aliases=["homeassistant", "home-assistant", "ha"],
        help="Provides control of the Home Assistant Core",
    )
    core.set_defaults(handler=_show_help(core))
    commands = core.add_subparsers(dest="core_command")

    check = commands.add_parser("check", aliases=["validate", "chk", "ch"],
                                help="Validates your Home Assistant Core configuration")
    check.set_defaults(handler=core_check)

    info = commands.add_parser("info", aliases=["in", "inf"],
                               help="Provides information about Home Assistant Core")
    info.set_defaults(handler=core_info)

    logs = commands.add_parser("logs", aliases=["log", "lg"],
                               help="View the log output of Home Assistant Core")
    add_logs_arguments(logs)
    logs.set_defaults(handler=core_logs)

    options = commands.add_parser("options", aliases=["option", "opt", "opts", "op"],
                                  help="Allow to set options on Home Assistant Core instance")
    _optional_bool(options, "--boot", const=True, default=None,
                   help_text="Start Core on boot")
    options.add_argument("--image", default=None, help="Optional image")
    options.add_argument("--port", type=int, default=None,
                         help="Port to access Home Assistant Core")
    _optional_bool(options, "--ssl", const=True, default=None, help_text="Use SSL")
    _optional_bool(options, "--watchdog", const=True, default=None, help_text="Use watchdog")
    options.add_argument("--refresh-token", "--refresh_token", dest="refresh_token",
                         default=None, help="Refresh token")
    options.add_argument("--audio-input", "--audio_input", dest="audio_input",
                         default=None, help="Profile name for audio input")
    options.add_argument("--audio-output", "--audio_output", dest="audio_output",
                         default=None, help="Profile name for audio output")
    _optional_bool(options, "--backups-exclude-database", "--backups_exclude_database",
                   const=False, default=None, dest="backups_exclude_database",
                   help_text="Backups exclude Home Assistant database file by default")
    _optional_bool(options, "--duplicate-log-file", "--duplicate_log_file",
                   const=False, default=None, dest="duplicate_log_file",
                   help_text="Duplicate logs to file alongside Systemd Journal")
    options.set_defaults(handler=core_options)

    rebuild = commands.add_parser("rebuild", aliases=["rb", "reinstall"],
                                  help="Rebuild the Home Assistant Core instance")
    _add_lifecycle_flags(rebuild, "Rebuild", safe_mode=True)
    rebuild.set_defaults(handler=core_rebuild)

    restart = commands.add_parser("restart", aliases=["reboot"],
                                  help="Restarts the Home Assistant Core")
    _add_lifecycle_flags(restart, "Restart", safe_mode=True)
    restart.set_defaults(handler=core_restart)

    start = commands.add_parser("start", aliases=["run", "st"],
                                help="Manually start Home Assistant Core")
    start.set_defaults(handler=core_start)

    stats = commands.add_parser("stats", aliases=["status", "stat"],
                                help="Provides system usage stats of Home Assistant Core")
    stats.set_defaults(handler=core_stats)

    stop = commands.add_parser("stop", help="Manually stop Home Assistant Core")
    _add_lifecycle_flags(stop, "Stop", safe_mode=False)
    stop.set_defaults(handler=core_stop)

    update = commands.add_parser("update", aliases=["upgrade", "downgrade", "up", "down"],
                                 help="Updates the Home Assistant Core")
    update.add_argument("--version", default="", help="Version to update to")
    _optional_bool(update, "--backup", const=True, default=None,
                   help_text="Create partial backup before update")
    update.set_defaults(handler=core_update)