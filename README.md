# hacli

`hacli` is a library for managing a Home Assistant system through the
Supervisor API. It holds an HTTP client for the API, helpers that print the
Supervisor's answers for people to read, and `argparse` subcommands for Home
Assistant Core, add-ons, backups, the host system, the internal DNS server,
the Docker backend, hardware, the Job Manager and the CLI backend container.

## Installation

```
pip install .
```

## The client

`hacli.client.SupervisorClient` talks to the API:

```python
from hacli.client import SupervisorClient, SupervisorError

client = SupervisorClient(endpoint="supervisor", api_token="token")
try:
    response = client.get("core", "info")
except SupervisorError as exc:
    print(exc)
```

- `get`, `post` and `delete` send a request and pass the answer through
  `check_response`, which raises `SupervisorError` for status codes the
  Supervisor does not answer with (and for 502, or 401/403/200/400/404/503
  without a JSON body).
- `request` sends a request without checking the answer; log commands use it
  to stream text.
- `url` builds the URL with `url_helper` and fills in `{name}` placeholders
  from `path_params`. An endpoint without a scheme gets `http://`.
- `Response.from_http` decodes the `result` / `message` / `data` envelope.

Timeouts are in seconds; a timeout of 0 or `None` waits forever. The module
defines `DEFAULT_TIMEOUT`, `CONTAINER_OPERATION_TIMEOUT`,
`CONTAINER_DOWNLOAD_TIMEOUT`, `BACKUP_TIMEOUT` and `REBOOT_TIMEOUT`.

## Output and prompts

`hacli.output` has:

- `show_json_response` prints the `data` of a successful answer as YAML, or
  "Command completed successfully." when there is none, and prints
  `Error: <message>` on stderr for an error answer. With `raw_json=True` the
  body is printed as it came.
- `respond` runs a call and shows its answer, returning whether it succeeded.
- `stream_text_response` copies a text body to stdout as it arrives.
- `print_error`, `ask_for_confirmation`, `read_integer` and `read_password`.

## Commands

Each of the modules `hacli.general`, `hacli.banner`, `hacli.addons`,
`hacli.backups`, `hacli.core`, `hacli.dns`, `hacli.docker`, `hacli.host`,
`hacli.hardware`, `hacli.jobs` and `hacli.cli_backend` has a
`register(subparsers)` function that adds its commands to an `argparse`
parser. Every command sets a `handler` default that takes the client and the
parsed arguments and returns whether it succeeded:

```python
import argparse

from hacli import addons, backups, core, general
from hacli.client import SupervisorClient

parser = argparse.ArgumentParser(prog="ha")
subparsers = parser.add_subparsers()
for module in (general, addons, backups, core):
    module.register(subparsers)

args = parser.parse_args(["core", "info"])
client = SupervisorClient(endpoint="supervisor", api_token="token")
succeeded = args.handler(client, args)
```

Among the commands registered this way are `info`, `available-updates`,
`banner`, `core check|info|logs|options|rebuild|restart|start|stats|stop|update`,
`addons changelog|info|install|logs|rebuild|restart|start|stats|stop|uninstall|update`,
`backups freeze|info|new|options|reload|remove|restore|thaw`,
`host disks usage|info|logs|options|reboot|reload|shutdown`,
`dns info|logs|options|reset|restart|stats|update`,
`docker info|migrate-storage-driver|options|registries`,
`hardware info|audio`, `jobs info` and `cli info|stats|update`.

### Log commands

`hacli.logs.add_logs_arguments` gives every `logs` command the same options:

- `-f` / `--follow` keeps printing new entries as they arrive.
- `-n` / `--lines` limits the output to the last N entries.
- `-b` / `--boot` shows the logs of a particular boot.
- `-v` / `--verbose` returns the logs in verbose format.

The host logs command also takes `-t` / `--identifier` for a syslog identifier.

### Completion helpers

`addons.addon_completions`, `backups.backup_completions`,
`backups.location_completions`, `docker.registry_completions` and
`host.boot_completions` turn the `data` of a Supervisor answer into shell
completion candidates, each a value optionally followed by a tab and a
description.

## What it does not do

- It installs no command-line program; a program has to build the parser
  and call the handlers as shown above.
- It has no commands for managing Home Assistant user accounts, audio
  devices, or the Supervisor itself.
- It does not warn about deprecated command aliases such as `snapshots`.

## Development

```
pip install -e ".[test]"
pytest
```