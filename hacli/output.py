"""Presenting Supervisor answers and asking the user for input."""

from __future__ import annotations

import codecs
import getpass
import json
import re
import sys
from typing import Callable

import requests
import yaml

from hacli.client import Response, SupervisorError

_INTEGER = re.compile(r"[+-]?[0-9]+")


def print_error(message: object) -> None:
    """Print an error message on stderr, in colour on a terminal."""
    text = str(message)
    stream = sys.stderr
    try:
        coloured = stream.isatty()
    except (AttributeError, ValueError):
        coloured = False
    if coloured:
        print("\033[1;31mError:\033[0m", text, file=stream)
    else:
        print("Error:", text, file=stream)


def _to_yaml(data: object) -> str:
    return yaml.safe_dump(data, default_flow_style=False, sort_keys=True, allow_unicode=True)


def show_json_response(response: requests.Response, raw_json: bool = False) -> bool:
    """Print a JSON answer for people to read; return whether it reports success."""
    if raw_json:
        try:
            sys.stdout.write(response.content.decode("utf-8", errors="replace"))
        finally:
            response.close()
        return True

    data = Response.from_http(response)
    if data.result == "ok":
        if data.data:
            try:
                text = _to_yaml(json.loads(json.dumps(data.data)))
            except (TypeError, ValueError, yaml.YAMLError) as exc:
                print_error(exc)
                return False
            sys.stdout.write(text)
        else:
            print("Command completed successfully.")
        return True
    if data.result == "error":
        print_error(data.message)
        return False

    envelope: dict[str, object] = {"result": data.result}
    if data.message:
        envelope["message"] = data.message
    if data.data:
        envelope["data"] = data.data
    sys.stdout.write(_to_yaml(envelope))
    return False


def stream_text_response(response: requests.Response) -> bool:
    """Copy a text body to stdout as it arrives; return False if reading fails."""
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    try:
        for chunk in response.iter_content(4096):
            sys.stdout.write(decoder.decode(chunk))
            sys.stdout.flush()
        sys.stdout.write(decoder.decode(b"", final=True))
    except (requests.RequestException, OSError) as exc:
        print(exc)
        return False
    finally:
        response.close()
    return True


def respond(action: Callable[[], requests.Response], raw_json: bool = False) -> bool:
    """Run an API call and show its answer; return whether the command succeeded."""
    try:
        response = action()
    except SupervisorError as exc:
        print_error(exc)
        return False
    return show_json_response(response, raw_json)


def _read_line() -> str:
    line = sys.stdin.readline()
    if not line:
        print()
        raise EOFError("end of input")
    return line


def ask_for_confirmation(prompt: str, tries: int = 0) -> bool:
    """Ask until the user types yes or an answer starting with n."""
    if tries <= 0:
        tries = 2
    for _ in range(tries):
        print(f"{prompt} [enter YES to confirm] ", end="", flush=True)
        answer = _read_line().strip().lower()
        if answer == "yes":
            return True
        if answer.startswith("n"):
            return False
    return False


def read_integer(prompt: str, tries: int, minimum: int, maximum: int) -> int:
    """Ask for a whole number between minimum and maximum."""
    if tries <= 0:
        tries = 2
    for _ in range(tries):
        print(f"{prompt} [{minimum}-{maximum}]: ", end="", flush=True)
        answer = _read_line().strip()
        if not answer:
            continue
        if _INTEGER.fullmatch(answer) and minimum <= int(answer) <= maximum:
            return int(answer)
        print(f"Invalid value. Must be between {minimum} and {maximum}.")
    raise ValueError("maximum tries exceeded")


def read_password(repeat: bool = False) -> str:
    """Read a password without echo, optionally asking for it twice."""
    first = getpass.getpass("Password: ")
    if repeat:
        second = getpass.getpass("Password (again): ")
        if first != second:
            raise ValueError("passwords do not match")
    return first