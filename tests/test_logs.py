import argparse

import pytest
import responses

from hacli.client import SupervisorClient
from hacli.logs import add_logs_arguments, build_logs_headers, build_logs_path, stream_logs


def _parser():
    parser = argparse.ArgumentParser()
    add_logs_arguments(parser)
    return parser


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_arguments_defaults():
    args = _parser().parse_args([])
    assert (args.follow, args.lines, args.boot, args.verbose) == (False, 0, "", False)


def test_arguments_given():
    args = _parser().parse_args(["-f", "-n", "10", "-b", "abc", "-v"])
    assert (args.follow, args.lines, args.boot, args.verbose) == (True, 10, "abc", True)


def test_no_follow():
    assert _parser().parse_args(["--follow", "--no-follow"]).follow is False


@pytest.mark.parametrize("value", ["-1", "x", "4294967296"])
def test_bad_lines(value):
    with pytest.raises(SystemExit):
        _parser().parse_args(["--lines", value])


def test_path_plain():
    assert build_logs_path() == "logs"


def test_path_boot_and_follow():
    assert build_logs_path("abc", True) == "logs/boots/{boot}/follow"


def test_path_identifier_before_follow():
    path = build_logs_path("", True, "kernel")
    assert path.endswith("/follow")
    assert path.index("/identifiers/{identifier}") < path.index("/follow")


def test_headers_default():
    assert build_logs_headers() == {"Accept": "text/plain"}


def test_headers_verbose():
    assert build_logs_headers(verbose=True)["Accept"] == "text/x-log"


def test_headers_lines():
    assert build_logs_headers(lines=1)["Range"] == "entries=:0:"
    assert build_logs_headers(lines=100)["Range"] == "entries=:-99:"


def test_stream_logs(mocked, capsys):
    mocked.add(responses.GET, "http://supervisor/core/logs/follow",
               body="line one\n", content_type="text/plain")
    args = _parser().parse_args(["--follow", "--lines", "1"])
    assert stream_logs(SupervisorClient(), "core", args) is True
    assert capsys.readouterr().out == "line one\n"
    sent = mocked.calls[0].request.headers
    assert sent["Accept"] == "text/plain"
    assert sent["Range"] == "entries=:0:"


def test_stream_logs_path_params(mocked, capsys):
    mocked.add(responses.GET, "http://supervisor/addons/core_ssh/logs/boots/-1",
               body="ssh\n", content_type="text/plain")
    args = _parser().parse_args(["--boot", "-1"])
    assert stream_logs(SupervisorClient(), "addons/{slug}", args, {"slug": "core_ssh"})
    assert capsys.readouterr().out == "ssh\n"


def test_stream_logs_connection_error(capsys):
    args = _parser().parse_args([])
    with responses.RequestsMock():
        assert stream_logs(SupervisorClient(), "core", args) is False
    assert "Error:" in capsys.readouterr().err