"""Commands that create, restore and manage backups."""

from __future__ import annotations

import argparse
import logging
from typing import Any, Mapping

from hacli.client import BACKUP_TIMEOUT, SupervisorClient
from hacli.output import respond

log = logging.getLogger(__name__)

BACKUP_FOLDERS = ("addons", "media", "share", "ssl")
LOCAL_LOCATION = ".local"
LOCAL_LOCATION_COMPLETION = ".local\tLocal storage, /backups"

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})


def _parse_bool(text: str) -> bool:
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {text!r}")


def _add_optional_bool(
    parser: argparse.ArgumentParser, name: str, const: bool, help_text: str
) -> None:
    """A flag that takes an optional =value; left unset it stays None."""
    parser.add_argument(name, nargs="?", const=const, default=None,
                        type=_parse_bool, help=help_text)


def _details(entry: Mapping[str, Any], keys: tuple[str, ...]) -> list[str]:
    return [
        value for value in (entry.get(key) for key in keys)
        if isinstance(value, str) and value
    ]


def _with_details(value: str, details: list[str]) -> str:
    return f"{value}\t{', '.join(details)}" if details else value


def backup_completions(data: Mapping[str, Any] | None) -> list[str]:
    """Return shell completions for backup slugs, described by name, date and type."""
    backups = (data or {}).get("backups")
    if not isinstance(backups, list):
        return []
    completions = []
    for backup in backups:
        if not isinstance(backup, dict):
            continue
        slug = backup.get("slug")
        if not isinstance(slug, str):
            continue
        completions.append(_with_details(slug, _details(backup, ("name", "date", "type"))))
    return completions


def location_completions(data: Mapping[str, Any] | None) -> list[str]:
    """Return shell completions for backup locations: local storage and active backup mounts."""
    completions = [LOCAL_LOCATION_COMPLETION]
    mounts = (data or {}).get("mounts")
    if not isinstance(mounts, list):
        return completions
    for mount in mounts:
        if not isinstance(mount, dict):
            continue
        if mount.get("usage") != "backup" or mount.get("state") != "active":
            continue
        name = mount.get("name")
        if not isinstance(name, str):
            continue
        completions.append(_with_details(name, _details(mount, ("server", "share", "path"))))
    return completions


def new_backup_request(args: argparse.Namespace) -> tuple[str, dict[str, Any]]:
    """Return the command and body for creating a backup."""
    command = "new/full"
    options: dict[str, Any] = {}

    if getattr(args, "name", ""):
        options["name"] = args.name
    if getattr(args, "password", ""):
        options["password"] = args.password

    addons = getattr(args, "addons", None) or []
    log.debug("addons: %s", addons)
    if addons:
        options["addons"] = list(addons)
        command = "new/partial"

    folders = getattr(args, "folders", None) or []
    log.debug("folders: %s", folders)
    if folders:
        options["folders"] = list(folders)
        command = "new/partial"

    if getattr(args, "uncompressed", None) is not None:
        options["compressed"] = False

    location = getattr(args, "location", None) or []
    if location:
        options["location"] = list(location)

    if getattr(args, "filename", ""):
        options["filename"] = args.filename

    exclude_db = getattr(args, "homeassistant_exclude_database", None)
    if exclude_db is not None:
        options["homeassistant_exclude_database"] = exclude_db

    return command, options


def restore_request(args: argparse.Namespace) -> tuple[str, dict[str, Any]]:
    """Return the command and body for restoring a backup."""
    command = "restore/full"
    options: dict[str, Any] = {}

    if getattr(args, "password", ""):
        options["password"] = args.password

    homeassistant = getattr(args, "homeassistant", None)
    if homeassistant is not None:
        options["homeassistant"] = homeassistant
        command = "restore/partial"

    addons = getattr(args, "addons", None) or []
    if addons:
        options["addons"] = list(addons)
        command = "restore/partial"

    folders = getattr(args, "folders", None) or []
    if folders:
        options["folders"] = list(folders)
        command = "restore/partial"

    location = getattr(args, "location", None)
    if location is not None:
        options["location"] = location

    return command, options


def show_backups(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show the backup overview."""
    return respond(lambda: client.get("backups", "info"), client.raw_json)


def backup_info(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Show information about one backup."""
    return respond(
        lambda: client.get("backups", "{slug}/info", path_params={"slug": args.slug}),
        client.raw_json,
    )


def backup_new(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Create a full or partial backup."""
    command, options = new_backup_request(args)
    return respond(
        lambda: client.post("backups", command, body=options, timeout=BACKUP_TIMEOUT),
        client.raw_json,
    )


def backup_freeze(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Prepare the system for an external backup."""
    timeout = getattr(args, "timeout", None)
    body = {"timeout": timeout} if timeout else None
    return respond(lambda: client.post("backups", "freeze", body=body), client.raw_json)


def backup_thaw(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """End a freeze after an external backup."""
    return respond(lambda: client.post("backups", "thaw"), client.raw_json)


def backup_reload(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Re-read the backup files on disk."""
    return respond(lambda: client.post("backups", "reload"), client.raw_json)


def backup_remove(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Delete a backup, from all locations or the given ones."""
    location = getattr(args, "location", None) or []
    body = {"location": list(location)} if location else None
    if body:
        log.debug("Request body: %s", body)
    return respond(
        lambda: client.delete("backups", "{slug}", body=body, path_params={"slug": args.slug}),
        client.raw_json,
    )


def backup_restore(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Restore a backup, fully or in part."""
    command, options = restore_request(args)
    if options:
        log.debug("Request body: %s", options)
    return respond(
        lambda: client.post(
            "backups/{slug}", command, body=options,
            timeout=BACKUP_TIMEOUT, path_params={"slug": args.slug},
        ),
        client.raw_json,
    )


def backup_options(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Set options of the backup manager."""
    days = getattr(args, "days_until_stale", None)
    body = {"days_until_stale": days} if days else None
    return respond(lambda: client.post("backups", "options", body=body), client.raw_json)


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add the backups command and its subcommands."""
    backups = subparsers.add_parser(
        "backups",
        aliases=["backup", "back", "bk", "snapshots", "snapshot", "snap", "shot", "sn"],
        help="Create, restore and remove backups",
    )
    backups.set_defaults(handler=show_backups)
    commands = backups.add_subparsers(dest="backups_command")

    freeze = commands.add_parser("freeze", aliases=["frz"],
                                 help="Freeze supervisor for external backup")
    freeze.add_argument("--timeout", type=int, default=None,
                        help="Seconds before freeze times out and thaw begins")
    freeze.set_defaults(handler=backup_freeze)

    info = commands.add_parser(
        "info", aliases=["in", "inf"],
        help="Provides information about the current available backups",
    )
    info.add_argument("slug")
    info.set_defaults(handler=backup_info)

    new = commands.add_parser("new", aliases=["create", "backup"],
                              help="Create a new Home Assistant backup")
    new.add_argument("--name", default="", help="Name of the backup")
    new.add_argument("--password", default="", help="Password")
    _add_optional_bool(new, "--uncompressed", False, "Use Uncompressed archives")
    new.add_argument("-a", "--addons", action="append", default=None,
                     help="addons to backup, triggers a partial backup")
    new.add_argument("-f", "--folders", action="append", default=None,
                     help="folders to backup, triggers a partial backup")
    new.add_argument("-l", "--location", action="append", nargs="?",
                     const=LOCAL_LOCATION, default=None,
                     help="where to put backup file (backup mount or local), "
                          "use multiple times for multiple locations.")
    _add_optional_bool(new, "--homeassistant-exclude-database", False,
                       "Exclude the Home Assistant database file from backup")
    new.add_argument("--filename", default="", help="name to use for backup file")
    new.set_defaults(handler=backup_new)

    options = commands.add_parser("options", aliases=["option", "opt", "opts", "op"],
                                  help="Allow to set options on backup manager")
    options.add_argument("--days-until-stale", "--days_until_stale",
                         dest="days_until_stale", type=int, default=None,
                         help="Days until backup considered stale")
    options.set_defaults(handler=backup_options)

    reload_ = commands.add_parser(
        "reload", aliases=["refresh", "re"],
        help="Reload the files on disk to check for new or removed backups",
    )
    reload_.set_defaults(handler=backup_reload)

    remove = commands.add_parser("remove", aliases=["delete", "del", "rem", "rm"],
                                 help="Deletes a backup from disk")
    remove.add_argument("slug")
    remove.add_argument("-l", "--location", action="append", nargs="?",
                        const=LOCAL_LOCATION, default=None,
                        help="location(s) to remove backup from (instead of all), "
                             "use multiple times for multiple locations.")
    remove.set_defaults(handler=backup_remove)

    restore = commands.add_parser("restore", help="Restores a Home Assistant backup")
    restore.add_argument("slug")
    restore.add_argument("--password", default="", help="Password")
    _add_optional_bool(restore, "--homeassistant", True,
                       "Restore homeassistant (default true), "
                       "triggers a partial backup when set to false")
    restore.add_argument("-a", "--addons", action="append", default=None,
                         help="addons to restore, triggers a partial backup")
    restore.add_argument("-f", "--folders", action="append", default=None,
                         help="folders to restore, triggers a partial backup")
    restore.add_argument("-l", "--location", nargs="?", const=LOCAL_LOCATION, default=None,
                         help="where to put backup file (backup mount or local)")
    restore.set_defaults(handler=backup_restore)

    thaw = commands.add_parser("thaw", aliases=["th"],
                               help="Thaw supervisor after an external backup")
    thaw.set_defaults(handler=backup_thaw)