"""Shared handling of the log commands."""

from __future__ import annotations

import argparse
from typing import Any, Mapping

from hacli.client import SupervisorClient, SupervisorError
from hacli.output import print_error, stream_text_response

_UINT32_MAX = 0xFFFFFFFF


def _uint32(text: str) -> int:
    try:
        value = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid number: {text!r}") from None
    if not 0 <= value <= _UINT32_MAX:
        raise argparse.ArgumentTypeError(f"must be between 0 and {_UINT32_MAX}")
    return value


def add_logs_arguments(parser: argparse.ArgumentParser) -> None:
    """Add the options every log command takes."""
    parser.add_argument("-f", "--follow", action=argparse.BooleanOptionalAction,
                        default=False, help="Continuously print new log entries")
    parser.add_argument("-n", "--lines", type=_uint32, default=0,
                        help="Number of log entries to show")
    parser.add_argument("-b", "--boot", default="", help="Logs of particular boot ID")
    parser.add_argument("-v", "--verbose", action=argparse.BooleanOptionalAction,
                        default=False, help="Return logs in verbose format")


def build_logs_path(boot: str = "", follow: bool = False, identifier: str = "") -> str:
    """Return the logs command path, with {boot} and {identifier} placeholders."""
    command = "logs"
    if boot:
        command += "/boots/{boot}"
    if identifier:
        command += "/identifiers/{identifier}"
    if follow:
        command += "/follow"
    return command


def build_logs_headers(verbose: bool = False, lines: int = 0) -> dict[str, str]:
    """Return the headers that select the log format and how many entries to show."""
    headers = {"Accept": "text/x-log" if verbose else "text/plain"}
    if lines > 0:
        headers["Range"] = f"entries=:{-(lines - 1)}:"
    return headers


def stream_logs(
    client: SupervisorClient,
    section: str,
    args: argparse.Namespace,
    path_params: Mapping[str, Any] | None = None,
    identifier: str = "",
) -> bool:
    """Fetch the logs of a section and copy them to stdout."""
    boot = getattr(args, "boot", "") or ""
    command = build_logs_path(boot, getattr(args, "follow", False), identifier)
    params = {"boot": boot, "identifier": identifier, **(path_params or {})}
    headers = build_logs_headers(getattr(args, "verbose", False), getattr(args, "lines", 0))
    try:
        response = client.request(
            "GET", section, command, timeout=0,
            path_params=params, headers=headers, stream=True,
        )
    except SupervisorError as exc:
        print_error(exc)
        return False
    return stream_text_response(response)