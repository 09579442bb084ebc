import json

import pytest
import responses

from hacli.client import (
    Response,
    SupervisorClient,
    SupervisorError,
    check_response,
    is_json_type,
    url_helper,
)


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


@pytest.fixture
def client():
    return SupervisorClient(endpoint="supervisor", api_token="token")


@pytest.mark.parametrize(
    "base, section, command, expected",
    [
        ("supervisor", "section", "command", "http://supervisor/section/command"),
        ("supervisor:80", "section", "command", "http://supervisor:80/section/command"),
        (
            "supervisor.example.org:8080",
            "section",
            "command",
            "http://supervisor.example.org:8080/section/command",
        ),
        ("https://supervisor", "section", "command", "https://supervisor/section/command"),
        (
            "https://supervisor:8080",
            "section",
            "command",
            "https://supervisor:8080/section/command",
        ),
        ("supervisor", "section", "", "http://supervisor/section"),
        ("supervisor", "section/../othersection", "", "http://supervisor/othersection"),
        ("supervisor/api/", "section", "command", "http://supervisor/api/section/command"),
        (
            "supervisor/api/",
            "section",
            "{slug}/command",
            "http://supervisor/api/section/{slug}/command",
        ),
    ],
)
def test_url_helper(base, section, command, expected):
    assert url_helper(base, section, command) == expected


def test_url_helper_rejects_bad_port():
    with pytest.raises(SupervisorError):
        url_helper("supervisor:notaport", "section", "command")


@pytest.mark.parametrize(
    "content_type, expected",
    [
        ("application/json", True),
        ("application/json; charset=utf-8", True),
        ("APPLICATION/JSON", True),
        ("application/problem+json", True),
        ("text/plain", False),
        ("", False),
    ],
)
def test_is_json_type(content_type, expected):
    assert is_json_type(content_type) is expected


def test_url_fills_path_params(client):
    url = client.url("addons", "{slug}/info", {"slug": "core_ssh"})
    assert url == "http://supervisor/addons/core_ssh/info"


def test_get_sends_token_and_accept(mocked, client):
    mocked.add(responses.GET, "http://supervisor/core/info",
               json={"result": "ok", "data": {"version": "1"}})
    response = client.get("core", "info")
    assert response.status_code == 200
    sent = mocked.calls[0].request.headers
    assert sent["Authorization"] == "Bearer token"
    assert sent["Accept"] == "application/json"


def test_no_token_sends_no_authorization(mocked):
    mocked.add(responses.GET, "http://supervisor/info", json={"result": "ok"})
    response = SupervisorClient().get("info")
    assert response.status_code == 200
    assert "Authorization" not in mocked.calls[0].request.headers


def test_post_sends_body(mocked, client):
    mocked.add(responses.POST, "http://supervisor/core/update", json={"result": "ok"})
    response = client.post("core", "update", {"version": "2024.1.0"})
    assert response.status_code == 200
    assert json.loads(mocked.calls[0].request.body) == {"version": "2024.1.0"}


def test_post_without_body_sends_nothing(mocked, client):
    mocked.add(responses.POST, "http://supervisor/core/restart", json={"result": "ok"})
    response = client.post("core", "restart", {})
    assert Response.from_http(response).result == "ok"
    assert mocked.calls[0].request.body is None


def test_delete_with_path_params(mocked, client):
    mocked.add(responses.DELETE, "http://supervisor/backups/abc123", json={"result": "ok"})
    response = client.delete("backups", "{slug}", {"location": [".local"]}, {"slug": "abc123"})
    assert response.status_code == 200
    assert json.loads(mocked.calls[0].request.body) == {"location": [".local"]}


def test_connection_error_becomes_supervisor_error(client):
    with responses.RequestsMock():
        with pytest.raises(SupervisorError):
            client.get("core", "info")


def test_bad_request_with_json_passes(mocked, client):
    mocked.add(responses.GET, "http://supervisor/core/info", status=400,
               json={"result": "error", "message": "bad"})
    response = client.get("core", "info")
    parsed = Response.from_http(response)
    assert (parsed.result, parsed.message) == ("error", "bad")


@pytest.mark.parametrize(
    "status, content_type, message",
    [
        (200, "text/plain", "unexpected non-JSON response (status: 200)"),
        (404, "text/html", "unexpected non-JSON response (status: 404)"),
        (401, "text/plain", "unauthorized: missing or invalid API token"),
        (403, "text/plain", "forbidden: insufficient permissions or invalid token"),
        (502, "application/json", "bad gateway: core proxy or ingress service failure"),
        (500, "application/json", "unexpected server response (status: 500)"),
    ],
)
def test_check_response_errors(mocked, client, status, content_type, message):
    mocked.add(responses.GET, "http://supervisor/core/info", status=status,
               body="{}", content_type=content_type)
    with pytest.raises(SupervisorError) as excinfo:
        client.get("core", "info")
    assert str(excinfo.value) == message


@pytest.mark.parametrize("status", [401, 403])
def test_check_response_json_auth_errors_pass(mocked, client, status):
    mocked.add(responses.GET, "http://supervisor/core/info", status=status,
               json={"result": "error", "message": "denied"})
    response = client.request("GET", "core", "info")
    assert check_response(response) is response


def test_response_from_http_non_json(mocked, client):
    mocked.add(responses.GET, "http://supervisor/x", body="not json",
               content_type="application/json")
    parsed = Response.from_http(client.request("GET", "x"))
    assert parsed == Response()