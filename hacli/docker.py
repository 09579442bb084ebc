"""Commands for the host Docker backend and its registries."""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any, Callable, Mapping

from hacli.client import SupervisorClient, SupervisorError
from hacli.output import ask_for_confirmation, print_error, respond, show_json_response

log = logging.getLogger(__name__)

DEFAULT_STORAGE_DRIVER = "overlayfs"
MTU_MIN = 68
MTU_MAX = 65535

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


def mtu_option(value: int) -> int | None:
    """Return the MTU to send: None to reset for 0, the value when in range."""
    if value == 0:
        return None
    if value < MTU_MIN or value > MTU_MAX:
        raise ValueError(
            f"MTU value must be between {MTU_MIN} and {MTU_MAX}, or 0 to reset"
        )
    return value


def registry_completions(data: Mapping[str, Any] | None) -> list[str]:
    """Return shell completions for the hosts of configured registries."""
    registries = (data or {}).get("registries")
    if not isinstance(registries, dict):
        return []
    return list(registries)


def docker_info(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show information about the Docker backend."""
    return respond(lambda: client.get("docker", "info"), client.raw_json)


def _migration_prompt(driver: str) -> str:
    return (
        f'\nThis will schedule a Docker storage driver migration to "{driver}".\n'
        "Make sure to create a full Home Assistant backup before proceeding.\n"
        "\n"
        "Internet connectivity is required for re-download of all the container images\n"
        "and it is recommended to have at least 50% of free storage.\n"
        "\n"
        "Once confirmed, the migration will be applied on the next system reboot.\n"
        "Are you sure you want to proceed?"
    )


def docker_migrate_storage_driver(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Schedule a storage driver migration for the next reboot, after confirmation."""
    driver = getattr(args, "driver", None) or DEFAULT_STORAGE_DRIVER
    try:
        confirmed = ask_for_confirmation(_migration_prompt(driver), 0)
    except (EOFError, OSError) as exc:
        print("Aborted:", exc, file=sys.stderr)
        return False

    if not confirmed:
        print("Aborted.", file=sys.stderr)
        return False

    body = {"storage_driver": driver}
    return respond(
        lambda: client.post("docker", "migrate-storage-driver", body=body),
        client.raw_json,
    )


def docker_options(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Set options of the Docker backend."""
    options: dict[str, Any] = {}

    enable_ipv6 = getattr(args, "enable_ipv6", None)
    if enable_ipv6 is not None:
        options["enable_ipv6"] = enable_ipv6

    mtu = getattr(args, "mtu", None)
    if mtu is not None:
        try:
            options["mtu"] = mtu_option(mtu)
        except ValueError as exc:
            print_error(exc)
            return False

    try:
        response = client.post("docker", "options", body=options)
    except SupervisorError as exc:
        print_error(exc)
        return False

    if enable_ipv6 is not None:
        print("Note: System restart required to apply new IPv6 configuration.")
    if mtu is not None:
        print("Note: System restart required to apply new MTU configuration.")
    return show_json_response(response, client.raw_json)


def docker_registries(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show the configured private registries."""
    return respond(lambda: client.get("docker", "registries"), client.raw_json)


def docker_registries_add(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Add a login for a registry host."""
    credentials: dict[str, str] = {}
    for key in ("username", "password"):
        value = getattr(args, key, "") or ""
        if value:
            credentials[key] = value
    body = {args.host: credentials}
    log.debug("Request body: %s", body)
    return respond(lambda: client.post("docker", "registries", body=body), client.raw_json)


def docker_registries_delete(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Remove the login for a registry host."""
    return respond(
        lambda: client.delete("docker", "registries/{host}", path_params={"host": args.host}),
        client.raw_json,
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add the docker command and its subcommands."""
    docker = subparsers.add_parser(
        "docker", aliases=["do"],
        help="Docker backend specific for info and OCI configuration",
    )
    docker.set_defaults(handler=_show_help(docker))
    commands = docker.add_subparsers(dest="docker_command")

    info = commands.add_parser("info", aliases=["in", "inf"],
                               help="Shows information about the host docker backend")
    info.set_defaults(handler=docker_info)

    migrate = commands.add_parser("migrate-storage-driver",
                                  help="Migrate Docker storage driver")
    migrate.add_argument("driver", nargs="?", default=DEFAULT_STORAGE_DRIVER)
    migrate.set_defaults(handler=docker_migrate_storage_driver)

    options = commands.add_parser(
        "options", aliases=["option", "opt", "opts", "op"],
        help="Allows you to set options on the host docker backend",
    )
    options.add_argument("--enable-ipv6", "--enable_ipv6", dest="enable_ipv6",
                         nargs="?", const=True, default=None, type=_parse_bool,
                         help="Enable IPv6")
    options.add_argument("--mtu", type=int, default=None,
                         help="Set Docker MTU (68-65535, 0 to reset)")
    options.set_defaults(handler=docker_options)

    registries = commands.add_parser("registries", aliases=["reg", "re"],
                                     help="Manage private OCI docker registry")
    registries.set_defaults(handler=docker_registries)
    registry_commands = registries.add_subparsers(dest="registries_command")

    add = registry_commands.add_parser(
        "add", aliases=["set", "new"],
        help="Add new docker registry login for specific host",
    )
    add.add_argument("host")
    add.add_argument("-u", "--username", default="", help="Username for OCI auth")
    add.add_argument("-p", "--password", default="", help="Password for OCI auth")
    add.set_defaults(handler=docker_registries_add)

    delete = registry_commands.add_parser(
        "delete", aliases=["del", "remove"],
        help="Delete docker registry login for specific host",
    )
    delete.add_argument("host")
    delete.set_defaults(handler=docker_registries_delete)