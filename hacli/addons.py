"""Commands that install, control and inspect add-ons."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Mapping

from hacli.client import (
    CONTAINER_DOWNLOAD_TIMEOUT,
    CONTAINER_OPERATION_TIMEOUT,
    SupervisorClient,
    SupervisorError,
)
from hacli.logs import add_logs_arguments, stream_logs
from hacli.output import print_error, respond

log = logging.getLogger(__name__)

_SKIP_WHEN = {
    "rebuild": ("build", False),
    "start": ("state", "started"),
    "stop": ("state", "stopped"),
    "update": ("update_available", False),
}


def _skipped(addon: Mapping[str, Any], command_name: str) -> bool:
    rule = _SKIP_WHEN.get(command_name)
    if rule is None:
        return False
    key, value = rule
    current = addon.get(key)
    return type(current) is type(value) and current == value


def addon_completions(data: Mapping[str, Any] | None, command_name: str = "") -> list[str]:
    """Return shell completions for add-on slugs, with name and URL as description.

    Add-ons that the given command makes no sense for are left out.
    """
    addons = (data or {}).get("addons")
    if not isinstance(addons, list):
        return []

    completions = []
    for addon in addons:
        if not isinstance(addon, dict):
            continue
        slug = addon.get("slug")
        if not isinstance(slug, str) or _skipped(addon, command_name):
            continue
        details = [
            value for value in (addon.get("name"), addon.get("url"))
            if isinstance(value, str) and value
        ]
        completions.append(f"{slug}\t{', '.join(details)}" if details else slug)
    return completions


def list_addons(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show all add-ons."""
    log.debug("addons")
    return respond(lambda: client.get("addons", ""), client.raw_json)


def addon_changelog(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Print the changelog of an add-on as plain text."""
    try:
        response = client.request(
            "GET", "addons", "{slug}/changelog",
            path_params={"slug": args.slug},
            headers={"Accept": "text/plain"},
        )
    except SupervisorError as exc:
        print_error(exc)
        return False

    try:
        if response.status_code not in (200, 400):
            log.error("unexpected server response")
            print_error("unexpected server response")
            return False
        print(response.text)
        return True
    finally:
        response.close()


def addon_info(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show information about one add-on, this one when no slug is given."""
    slug = args.slug or "self"
    return respond(
        lambda: client.get("addons", "{slug}/info", path_params={"slug": slug}),
        client.raw_json,
    )


def addon_install(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Install an add-on."""
    return respond(
        lambda: client.post(
            "addons", "{slug}/install",
            timeout=CONTAINER_DOWNLOAD_TIMEOUT, path_params={"slug": args.slug},
        ),
        client.raw_json,
    )


def addon_logs(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Print the log output of an add-on."""
    return stream_logs(client, "addons/{slug}", args, path_params={"slug": args.slug})


def addon_rebuild(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Rebuild a locally built add-on."""
    body = {"force": True} if args.force else None
    return respond(
        lambda: client.post(
            "addons", "{slug}/rebuild", body=body,
            timeout=CONTAINER_OPERATION_TIMEOUT, path_params={"slug": args.slug},
        ),
        client.raw_json,
    )


def addon_restart(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Restart an add-on."""
    return respond(
        lambda: client.post(
            "addons", "{slug}/restart",
            timeout=CONTAINER_OPERATION_TIMEOUT, path_params={"slug": args.slug},
        ),
        client.raw_json,
    )


def addon_start(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Start a stopped add-on."""
    return respond(
        lambda: client.post("addons", "{slug}/start", path_params={"slug": args.slug}),
        client.raw_json,
    )


def addon_stats(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show the resource usage of an add-on."""
    return respond(
        lambda: client.get("addons", "{slug}/stats", path_params={"slug": args.slug}),
        client.raw_json,
    )


def addon_stop(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Stop a running add-on."""
    return respond(
        lambda: client.post(
            "addons", "{slug}/stop",
            timeout=CONTAINER_OPERATION_TIMEOUT, path_params={"slug": args.slug},
        ),
        client.raw_json,
    )


def addon_uninstall(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Uninstall an add-on, optionally removing its configuration folder."""
    body = {"remove_config": True} if args.remove_config else None
    return respond(
        lambda: client.post(
            "addons", "{slug}/uninstall", body=body,
            timeout=CONTAINER_OPERATION_TIMEOUT, path_params={"slug": args.slug},
        ),
        client.raw_json,
    )


def addon_update(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Update an add-on to its latest version."""
    body = {"backup": args.backup} if args.backup is not None else None
    if body:
        log.debug("Request body: %s", body)
    return respond(
        lambda: client.post(
            "addons", "{slug}/update", body=body,
            timeout=CONTAINER_DOWNLOAD_TIMEOUT, path_params={"slug": args.slug},
        ),
        client.raw_json,
    )


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add the addons command and its subcommands."""
    addons = subparsers.add_parser(
        "addons", aliases=["addon", "add-on", "add-ons", "ad"],
        help="Install, update, remove and configure Home Assistant add-ons",
    )
    addons.set_defaults(handler=list_addons)
    commands = addons.add_subparsers(dest="addons_command")

    def slug_command(name, aliases, help_text, handler, optional=False):
        parser = commands.add_parser(name, aliases=aliases, help=help_text)
        if optional:
            parser.add_argument("slug", nargs="?", default=None)
        else:
            parser.add_argument("slug")
        parser.set_defaults(handler=handler)
        return parser

    slug_command("changelog", ["cl", "ch"],
                 "Show changelog of a Home Assistant add-on", addon_changelog)
    slug_command("info", ["in"],
                 "Show information about available Home Assistant add-ons",
                 addon_info, optional=True)
    slug_command("install", ["i", "inst"],
                 "Installs a Home Assistant add-on", addon_install)

    logs = slug_command("logs", ["log", "lg"],
                        "View the log output of a running Home Assistant add-on", addon_logs)
    add_logs_arguments(logs)

    rebuild = slug_command("rebuild", ["rb", "reinstall"],
                           "Rebuild a locally built Home Assistant add-on", addon_rebuild)
    rebuild.add_argument(
        "--force", action="store_true",
        help="Force rebuild of the add-on even if pre-built images are provided",
    )

    slug_command("restart", ["reboot"], "Restarts a Home Assistant add-on", addon_restart)
    slug_command("start", ["run", "st"],
                 "Manually start a stopped Home Assistant add-on", addon_start)
    slug_command("stats", ["status", "stat"],
                 "Provides system usage stats of a Home Assistant add-on", addon_stats)
    slug_command("stop", ["halt", "shutdown", "quit"],
                 "Manually stop a running Home Assistant add-on", addon_stop)

    uninstall = slug_command(
        "uninstall", ["remove", "delete", "del", "rem", "un", "uninst"],
        "Uninstalls a Home Assistant add-on", addon_uninstall,
    )
    uninstall.add_argument(
        "--remove-config", action=argparse.BooleanOptionalAction, default=False,
        help="Delete addon's config folder (if used)",
    )

    update = slug_command("update", ["upgrade", "up"],
                          "Upgrades a Home Assistant add-on to the latest version", addon_update)
    update.add_argument(
        "--backup", action=argparse.BooleanOptionalAction, default=None,
        help="Create partial backup before update",
    )