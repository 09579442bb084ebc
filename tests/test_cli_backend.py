import argparse
import json

import pytest
import responses

from hacli import cli_backend
from hacli.client import SupervisorClient

OK = {"result": "ok", "data": {}}


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client():
    return SupervisorClient(endpoint="supervisor", api_token="token")


def parse(argv):
    parser = argparse.ArgumentParser()
    sub = parser.add_subparsers(dest="command")
    cli_backend.register(sub)
    return parser.parse_args(argv)


def test_info_shows_data(mocked, client, capsys):
    mocked.add(responses.GET, "http://supervisor/cli/info",
               json={"result": "ok", "data": {"version": "2024.1.0"}})
    args = parse(["cli", "inf"])
    assert args.handler(client, args) is True
    assert "version: 2024.1.0" in capsys.readouterr().out


def test_stats_alias(mocked, client):
    mocked.add(responses.GET, "http://supervisor/cli/stats", json=OK)
    args = parse(["cli", "status"])
    assert args.handler is cli_backend.cli_stats
    assert args.handler(client, args) is True


@pytest.mark.parametrize("argv, expected", [
    (["cli", "update", "--version", "5"], {"version": "5"}),
    (["cli", "down"], None),
])
def test_update_body(mocked, client, argv, expected):
    mocked.add(responses.POST, "http://supervisor/cli/update", json=OK)
    args = parse(argv)
    assert args.handler(client, args) is True
    body = mocked.calls[0].request.body
    assert (json.loads(body) if body else None) == expected


def test_update_failure_is_reported(mocked, client, capsys):
    mocked.add(responses.POST, "http://supervisor/cli/update",
               json={"result": "error", "message": "no such version"}, status=400)
    args = parse(["cli", "update", "--version", "0"])
    assert args.handler(client, args) is False
    assert "no such version" in capsys.readouterr().err


def test_unexpected_status_fails(mocked, client, capsys):
    mocked.add(responses.GET, "http://supervisor/cli/info", body="", status=500)
    args = parse(["cli", "info"])
    assert args.handler(client, args) is False
    assert "unexpected server response (status: 500)" in capsys.readouterr().err


def test_bare_cli_prints_help(client, capsys):
    args = parse(["cli"])
    assert args.handler(client, args) is True
    out = capsys.readouterr().out
    assert "info" in out and "update" in out