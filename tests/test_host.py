import argparse
import json

import pytest
import responses

from hacli import host
from hacli.client import SupervisorClient

OK = {"result": "ok", "data": {}}


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


def _parse(argv):
    parser = argparse.ArgumentParser()
    sub = parser.add_subparsers(dest="command")
    host.register(sub)
    return parser.parse_args(argv)


def test_boot_completions_all():
    data = {"boots": {"0": "abc", "-1": "def"}}
    result = host.boot_completions(data, "")
    assert sorted(result) == ["abc\tboot offset 0", "def\tboot offset -1"]


def test_boot_completions_prefix_filters():
    data = {"boots": {"0": "abc", "-1": "def"}}
    assert host.boot_completions(data, "de") == ["def\tboot offset -1"]


def test_boot_completions_missing_data():
    assert host.boot_completions(None) == []
    assert host.boot_completions({"boots": []}) == []


@pytest.mark.parametrize(
    "argv, handler",
    [
        (["host", "info"], host.host_info),
        (["ho", "inf"], host.host_info),
        (["host", "disks", "usage"], host.host_disks_usage),
        (["host", "logs"], host.host_logs),
        (["host", "logs", "boots"], host.host_logs_boots),
        (["host", "logs", "ids"], host.host_logs_identifiers),
        (["host", "rb"], host.host_reboot),
        (["host", "sh"], host.host_shutdown),
        (["host", "update"], host.host_reload),
    ],
)
def test_parser_handlers(argv, handler):
    assert _parse(argv).handler is handler


def test_force_flag_forms():
    parser = argparse.ArgumentParser()
    host.register(parser.add_subparsers(dest="command"))
    assert parser.parse_args(["host", "reboot", "-f"]).force is True
    assert parser.parse_args(["host", "reboot"]).force is False
    assert parser.parse_args(["host", "reboot", "--force=false"]).force is False


def test_host_info(mocked, capsys):
    mocked.add(responses.GET, "http://supervisor/host/info", json=OK)
    assert host.host_info(SupervisorClient("supervisor"), _parse(["host", "info"])) is True
    assert "Command completed successfully." in capsys.readouterr().out


def test_host_options_sends_hostname(mocked):
    mocked.add(responses.POST, "http://supervisor/host/options", json=OK)
    args = _parse(["host", "options", "--hostname", "homeassistant.local"])
    assert host.host_options(SupervisorClient("supervisor"), args) is True
    assert json.loads(mocked.calls[0].request.body) == {"hostname": "homeassistant.local"}


def test_host_reboot_force_body(mocked):
    mocked.add(responses.POST, "http://supervisor/host/reboot", json=OK)
    args = _parse(["host", "reboot", "--force"])
    assert host.host_reboot(SupervisorClient("supervisor"), args) is True
    assert json.loads(mocked.calls[0].request.body) == {"force": True}


def test_host_shutdown_error_result(mocked):
    mocked.add(
        responses.POST, "http://supervisor/host/shutdown",
        json={"result": "error", "message": "busy"}, status=400,
    )
    args = _parse(["host", "shutdown"])
    assert host.host_shutdown(SupervisorClient("supervisor"), args) is False


def test_host_reload_bad_gateway(mocked):
    mocked.add(responses.POST, "http://supervisor/host/reload", status=502)
    assert host.host_reload(SupervisorClient("supervisor"), _parse(["host", "reload"])) is False


def test_host_logs_identifier_and_follow(mocked, capsys):
    mocked.add(
        responses.GET, "http://supervisor/host/logs/identifiers/sshd/follow",
        body="line one\n", content_type="text/plain",
    )
    args = _parse(["host", "logs", "-t", "sshd", "--follow"])
    assert host.host_logs(SupervisorClient("supervisor"), args) is True
    assert "line one" in capsys.readouterr().out
    assert mocked.calls[0].request.headers["Accept"] == "text/plain"