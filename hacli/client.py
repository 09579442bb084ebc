"""HTTP access to the Home Assistant Supervisor API."""

from __future__ import annotations

import logging
import posixpath
import re
from dataclasses import dataclass, field
from typing import Any, Mapping
from urllib.parse import quote, unquote, urlsplit, urlunsplit

import requests

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
CONTAINER_OPERATION_TIMEOUT = 10 * 60.0
CONTAINER_DOWNLOAD_TIMEOUT = 60 * 60.0
OS_DOWNLOAD_TIMEOUT = 60 * 60.0
BACKUP_TIMEOUT = 3 * 60 * 60.0
REBOOT_TIMEOUT = 90.0

_JSON_TYPE = re.compile(r"(application|text)/(.*json.*)(;|$)", re.IGNORECASE)
_PATH_SAFE = "!$&'()*+,;=:@"
_JSON_STATUSES = frozenset({200, 400, 404, 503})


class SupervisorError(Exception):
    """Raised when the Supervisor cannot be reached or answers unexpectedly."""


@dataclass
class Response:
    """The standard JSON envelope returned by the Supervisor."""

    result: str = ""
    message: str = ""
    data: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_http(cls, http_response: requests.Response) -> "Response":
        """Decode the envelope from an HTTP response; an unreadable body gives an empty one."""
        try:
            payload = http_response.json()
        except ValueError:
            return cls()
        if not isinstance(payload, dict):
            return cls()
        result = payload.get("result")
        message = payload.get("message")
        data = payload.get("data")
        return cls(
            result=result if isinstance(result, str) else "",
            message=message if isinstance(message, str) else "",
            data=data if isinstance(data, dict) else {},
        )


def _clean_path(path: str) -> str:
    cleaned = posixpath.normpath(path) if path else "."
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def url_helper(base: str, section: str, command: str = "") -> str:
    """Build the URL of an API call from the endpoint, a section and a command."""
    scheme = "" if "://" in base else "http://"
    uri = f"{scheme}{base}/{section}/{command}"
    log.debug("[GenerateURI] base=%s section=%s command=%s", base, section, command)

    parts = urlsplit(uri)
    try:
        parts.port
    except ValueError as exc:
        raise SupervisorError(f"invalid endpoint URL {uri!r}: {exc}") from exc

    result = unquote(urlunsplit(parts._replace(path=_clean_path(parts.path))))
    log.debug("[GenerateURI] Result uri=%s url=%s", uri, result)
    return result


def is_json_type(content_type: str) -> bool:
    """Tell whether a Content-Type header names a JSON body."""
    return bool(_JSON_TYPE.search(content_type or ""))


def _fail(response: requests.Response, message: str) -> None:
    response.close()
    raise SupervisorError(message)


def check_response(response: requests.Response) -> requests.Response:
    """Accept the status codes the Supervisor answers with, raise on anything else."""
    status = response.status_code
    is_json = is_json_type(response.headers.get("Content-Type", ""))

    if status in _JSON_STATUSES:
        if not is_json:
            _fail(response, f"unexpected non-JSON response (status: {status})")
    elif status == 401:
        if not is_json:
            _fail(response, "unauthorized: missing or invalid API token")
    elif status == 403:
        if not is_json:
            _fail(response, "forbidden: insufficient permissions or invalid token")
    elif status == 502:
        _fail(response, "bad gateway: core proxy or ingress service failure")
    else:
        _fail(response, f"unexpected server response (status: {status})")
    return response


class SupervisorClient:
    """A connection to the Supervisor API."""

    def __init__(
        self,
        endpoint: str = "supervisor",
        api_token: str = "",
        raw_json: bool = False,
        session: requests.Session | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.api_token = api_token
        self.raw_json = raw_json
        self.session = session if session is not None else requests.Session()

    def url(
        self,
        section: str,
        command: str = "",
        path_params: Mapping[str, Any] | None = None,
    ) -> str:
        """Return the URL for a call, with {name} placeholders filled in."""
        url = url_helper(self.endpoint, section, command)
        for key, value in (path_params or {}).items():
            url = url.replace("{" + key + "}", quote(str(value), safe=_PATH_SAFE))
        return url

    def request(
        self,
        method: str,
        section: str,
        command: str = "",
        body: Mapping[str, Any] | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        path_params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        stream: bool = False,
    ) -> requests.Response:
        """Send a request and return the HTTP response without checking it.

        A timeout of 0 or None waits forever.
        """
        url = self.url(section, command, path_params)
        merged = {"Accept": "application/json"}
        if self.api_token:
            merged["Authorization"] = f"Bearer {self.api_token}"
        merged.update(headers or {})

        if body:
            log.debug("Request body: %s", body)

        try:
            response = self.session.request(
                method,
                url,
                json=dict(body) if body else None,
                headers=merged,
                timeout=timeout or None,
                stream=stream,
            )
        except requests.RequestException as exc:
            raise SupervisorError(str(exc)) from exc

        log.debug(
            "Response status=%s headers=%s", response.status_code, dict(response.headers)
        )
        return response

    def get(
        self,
        section: str,
        command: str = "",
        timeout: float | None = DEFAULT_TIMEOUT,
        path_params: Mapping[str, Any] | None = None,
    ) -> requests.Response:
        """GET a JSON endpoint and check the answer."""
        response = self.request(
            "GET", section, command, timeout=timeout,
            path_params=path_params, stream=self.raw_json,
        )
        return check_response(response)

    def post(
        self,
        section: str,
        command: str = "",
        body: Mapping[str, Any] | None = None,
        timeout: float | None = DEFAULT_TIMEOUT,
        path_params: Mapping[str, Any] | None = None,
    ) -> requests.Response:
        """POST to a JSON endpoint, with an optional body, and check the answer."""
        response = self.request(
            "POST", section, command, body=body, timeout=timeout,
            path_params=path_params, stream=self.raw_json,
        )
        return check_response(response)

    def delete(
        self,
        section: str,
        command: str = "",
        body: Mapping[str, Any] | None = None,
        path_params: Mapping[str, Any] | None = None,
    ) -> requests.Response:
        """DELETE on a JSON endpoint and check the answer."""
        response = self.request(
            "DELETE", section, command, body=body,
            path_params=path_params, stream=self.raw_json,
        )
        return check_response(response)