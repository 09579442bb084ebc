"""The welcome banner with network and URL information."""

from __future__ import annotations

import argparse
import time
from typing import Any

from hacli.client import Response, SupervisorClient, SupervisorError
from hacli.output import print_error

HA_BANNER = r"""
       ▄██▄           _   _                                    
     ▄██████▄        | | | | ___  _ __ ___   ___               
   ▄████▀▀████▄      | |_| |/ _ \| '_ ` _ \ / _ \              
 ▄█████    █████▄    |  _  | (_) | | | | | |  __/              
▄██████▄  ▄██████▄   |_| |_|\___/|_| |_| |_|\___|          _   
████████  ██▀  ▀██      / \   ___ ___(_)___| |_ __ _ _ __ | |_ 
███▀▀███  ██   ▄██     / _ \ / __/ __| / __| __/ _` | '_ \| __|
██    ██  ▀ ▄█████    / ___ \\__ \__ \ \__ \ || (_| | | | | |_ 
███▄▄ ▀█  ▄███████   /_/   \_\___/___/_|___/\__\__,_|_| |_|\__|
▀█████▄   ███████▀

Welcome to the Home Assistant command line interface.
"""

OBSERVER_PORT = 4357


def supervisor_get(client: SupervisorClient, section: str, command: str) -> dict[str, Any] | None:
    """Return the data of a successful call, None if it is empty."""
    data = Response.from_http(client.get(section, command))
    if data.result != "ok":
        raise SupervisorError(f"error returned from Supervisor: {data.message}")
    return data.data or None


def format_addresses(addresses: list[Any]) -> str:
    """Join addresses into one comma separated line."""
    return ", ".join(str(address) for address in addresses)


def _has_interfaces(netinfo: dict[str, Any] | None) -> bool:
    interfaces = (netinfo or {}).get("interfaces")
    return isinstance(interfaces, list) and bool(interfaces)


def wait_for_supervisor(
    client: SupervisorClient, attempts: int = 180, delay: float = 1.0
) -> dict[str, Any] | None:
    """Poll the network info until interfaces appear; None if they never do."""
    for attempt in range(attempts):
        try:
            netinfo = supervisor_get(client, "network", "info")
        except SupervisorError:
            netinfo = None
        if _has_interfaces(netinfo):
            print("Home Assistant Supervisor is running!")
            return netinfo
        if attempt == 0:
            print("Waiting for Supervisor to start...")
        time.sleep(delay)
    return None


def _address_list(info: Any) -> list[Any]:
    if not isinstance(info, dict):
        return []
    addresses = info.get("address")
    return addresses if isinstance(addresses, list) else []


def network_lines(netinfo: dict[str, Any] | None) -> list[str]:
    """Describe the IPv4 and IPv6 addresses of every interface."""
    netinfo = netinfo or {}
    if "interfaces" not in netinfo:
        return ["  (No networking information)"]

    lines = []
    for interface in netinfo.get("interfaces") or []:
        if not isinstance(interface, dict):
            continue
        name = interface.get("interface")
        title_ipv4 = f"IPv4 addresses for {name}:"
        title_ipv6 = f"IPv6 addresses for {name}:"

        ipv4 = _address_list(interface.get("ipv4"))
        if ipv4:
            lines.append(f"  {title_ipv4:<25} {format_addresses(ipv4)}")
        else:
            lines.append(f"  {title_ipv4:<25} (No address)")

        ipv6 = _address_list(interface.get("ipv6"))
        if ipv6:
            lines.append(f"  {title_ipv6:<25} {format_addresses(ipv6)}")
    return lines


def url_lines(hostinfo: dict[str, Any], coreinfo: dict[str, Any]) -> list[str]:
    """Describe the versions and the URLs to reach the system."""
    protocol = "https" if coreinfo.get("ssl") == "true" else "http"
    port = coreinfo.get("port")
    port = int(port) if isinstance(port, (int, float)) and not isinstance(port, bool) else 0
    hostname = hostinfo.get("hostname")
    return [
        f"  {'OS Version:':<25} {hostinfo.get('operating_system')}",
        f"  {'Home Assistant Core:':<25} {coreinfo.get('version')}",
        "",
        f"  {'Home Assistant URL:':<25} {protocol}://{hostname}.local:{port}",
        f"  {'Observer URL:':<25} http://{hostname}.local:{OBSERVER_PORT}",
        "",
        "System is ready! Use browser or app to configure.",
    ]


def show_banner(client: SupervisorClient, args: argparse.Namespace) -> bool:
    """Print the banner and, once the Supervisor is up, system information."""
    print(HA_BANNER, end="")
    print()

    netinfo = None
    if not getattr(args, "no_wait", False):
        netinfo = wait_for_supervisor(client)
        if netinfo is None:
            print("Supervisor is taking longer than expected to start. "
                  "Use 'ha supervisor logs' to check logs.")
            return True

    print("System information:")
    if netinfo is None:
        try:
            netinfo = supervisor_get(client, "network", "info")
        except SupervisorError as exc:
            print(f"  Network information unavailable: {exc}")
            return False

    for line in network_lines(netinfo):
        print(line)
    print()

    try:
        hostinfo = supervisor_get(client, "host", "info")
        if hostinfo is None:
            return True
        coreinfo = supervisor_get(client, "core", "info")
        if coreinfo is None:
            return True
    except SupervisorError as exc:
        print_error(exc)
        return False

    for line in url_lines(hostinfo, coreinfo):
        print(line)
    return True


def register(subparsers: argparse._SubParsersAction) -> None:
    """Add the banner command."""
    parser = subparsers.add_parser(
        "banner", aliases=["ba"],
        help="Prints the CLI Home Assistant banner along with some useful information",
    )
    parser.add_argument("--no-wait", action="store_true",
                        help="Don't wait until Supervisor is started")
    parser.set_defaults(handler=show_banner)