import argparse
import io
import json

import pytest
import responses

from hacli import docker
from hacli.client import SupervisorClient


@pytest.fixture
def mocked():
    with responses.RequestsMock() as rsps:
        yield rsps


@pytest.fixture
def client():
    return SupervisorClient(endpoint="supervisor")


def _parse(argv):
    parser = argparse.ArgumentParser()
    sub = parser.add_subparsers(dest="command")
    docker.register(sub)
    return parser.parse_args(argv)


def test_mtu_zero_resets():
    assert docker.mtu_option(0) is None


@pytest.mark.parametrize("value", [68, 1450, 65535])
def test_mtu_in_range_kept(value):
    assert docker.mtu_option(value) == value


@pytest.mark.parametrize("value", [1, 67, 65536, -5])
def test_mtu_out_of_range_rejected(value):
    with pytest.raises(ValueError, match="between 68 and 65535"):
        docker.mtu_option(value)


def test_registry_completions_lists_hosts():
    data = {"registries": {"my-docker.example.com": {"username": "test"}}}
    assert docker.registry_completions(data) == ["my-docker.example.com"]


def test_registry_completions_without_registries():
    assert docker.registry_completions(None) == []
    assert docker.registry_completions({"registries": []}) == []


def test_options_invalid_mtu_sends_nothing(mocked, client, capsys):
    args = _parse(["docker", "options", "--mtu", "10"])
    assert docker.docker_options(client, args) is False
    assert len(mocked.calls) == 0
    assert "MTU value must be between" in capsys.readouterr().err


def test_options_ipv6_posts_and_notes(mocked, client, capsys):
    mocked.add(responses.POST, "http://supervisor/docker/options",
               json={"result": "ok", "data": {}})
    args = _parse(["docker", "options", "--enable_ipv6=true"])
    assert docker.docker_options(client, args) is True
    assert json.loads(mocked.calls[0].request.body) == {"enable_ipv6": True}
    out = capsys.readouterr().out
    assert "Note: System restart required to apply new IPv6 configuration." in out
    assert "MTU" not in out


def test_options_mtu_zero_sends_null(mocked, client, capsys):
    mocked.add(responses.POST, "http://supervisor/docker/options",
               json={"result": "ok", "data": {}})
    args = _parse(["docker", "options", "--mtu", "0"])
    assert docker.docker_options(client, args) is True
    assert json.loads(mocked.calls[0].request.body) == {"mtu": None}
    assert "new MTU configuration" in capsys.readouterr().out


def test_migrate_confirmed_posts_default_driver(mocked, client, monkeypatch):
    mocked.add(responses.POST, "http://supervisor/docker/migrate-storage-driver",
               json={"result": "ok", "data": {}})
    monkeypatch.setattr("sys.stdin", io.StringIO("yes\n"))
    args = _parse(["docker", "migrate-storage-driver"])
    assert docker.docker_migrate_storage_driver(client, args) is True
    assert json.loads(mocked.calls[0].request.body) == {"storage_driver": "overlayfs"}


def test_migrate_declined(mocked, client, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("no\n"))
    args = _parse(["docker", "migrate-storage-driver", "overlayfs"])
    assert docker.docker_migrate_storage_driver(client, args) is False
    assert len(mocked.calls) == 0
    assert "Aborted." in capsys.readouterr().err


def test_migrate_end_of_input(mocked, client, monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO(""))
    args = _parse(["docker", "migrate-storage-driver"])
    assert docker.docker_migrate_storage_driver(client, args) is False
    assert "Aborted:" in capsys.readouterr().err


def test_registries_add_body(mocked, client):
    mocked.add(responses.POST, "http://supervisor/docker/registries",
               json={"result": "ok", "data": {}})
    args = _parse(["docker", "registries", "add", "my-docker.example.com",
                   "--username", "test", "--password", "password"])
    assert docker.docker_registries_add(client, args) is True
    assert json.loads(mocked.calls[0].request.body) == {
        "my-docker.example.com": {"username": "test", "password": "password"}
    }


def test_registries_delete_url(mocked, client):
    mocked.add(responses.DELETE, "http://supervisor/docker/registries/my-docker.example.com",
               json={"result": "ok", "data": {}})
    args = _parse(["docker", "registries", "delete", "my-docker.example.com"])
    assert docker.docker_registries_delete(client, args) is True
    assert mocked.calls[0].request.method == "DELETE"


def test_registries_handler_and_info(mocked, client, capsys):
    mocked.add(responses.GET, "http://supervisor/docker/registries",
               json={"result": "ok", "data": {"registries": {}}})
    args = _parse(["docker", "reg"])
    assert args.handler is docker.docker_registries
    assert docker.docker_registries(client, args) is True
    assert "registries" in capsys.readouterr().out


def test_docker_info_error(mocked, client, capsys):
    mocked.add(responses.GET, "http://supervisor/docker/info", status=400,
               json={"result": "error", "message": "broken"})
    assert docker.docker_info(client, _parse(["docker", "info"])) is False
    assert "broken" in capsys.readouterr().err