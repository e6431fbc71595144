"""HTTP transport for the Codefresh API and helpers shared by the resource modules."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Iterable, Mapping
from urllib.parse import quote_plus

import requests

DEFAULT_TOKEN_HEADER = "Authorization"
_CONTENT_TYPE = "application/json; charset=utf-8"


class ApiError(Exception):
    """A request failed or the API answered with an unexpected status."""

    def __init__(self, message: str, status: int | None = None, body: bytes = b"") -> None:
        super().__init__(message)
        self.status = status
        self.body = body


class Transport:
    """Sends authenticated JSON requests to a Codefresh API host."""

    def __init__(self, host: str, token: str, token_header: str = DEFAULT_TOKEN_HEADER) -> None:
        self.host = host
        self.token = token
        self.token_header = token_header or DEFAULT_TOKEN_HEADER
        self.session = requests.Session()

    def _url(self, path: str, query: Mapping[str, str] | None) -> str:
        url = f"{self.host}{path}"
        if query is not None:
            url += to_query_string(query)
        return url

    def _send(
        self,
        method: str,
        url: str,
        headers: dict[str, str],
        body: bytes | None,
        accepted: Iterable[int],
    ) -> bytes:
        try:
            response = self.session.request(method, url, data=body or b"", headers=headers)
        except requests.RequestException as exc:
            raise ApiError(str(exc)) from exc
        content = response.content
        if response.status_code not in accepted:
            text = content.decode("utf-8", errors="replace")
            raise ApiError(
                f"{response.status_code} {response.reason}, {text}",
                status=response.status_code,
                body=content,
            )
        return content

    def request(
        self,
        method: str,
        path: str,
        body: bytes | None = None,
        query: Mapping[str, str] | None = None,
    ) -> bytes:
        """Send a request with the client token; return the response body."""
        headers = {
            self.token_header or DEFAULT_TOKEN_HEADER: self.token,
            "Content-Type": _CONTENT_TYPE,
        }
        return self._send(method, self._url(path, query), headers, body, (200, 201))

    def request_with_access_token(
        self,
        method: str,
        path: str,
        access_token: str,
        body: bytes | None = None,
        query: Mapping[str, str] | None = None,
    ) -> bytes:
        """Send a request authenticated by an ``x-access-token`` header."""
        headers = {"x-access-token": access_token, "Content-Type": _CONTENT_TYPE}
        return self._send(method, self._url(path, query), headers, body, (200,))


def to_query_string(query: Mapping[str, str]) -> str:
    """Render query parameters as ``?k=v&...`` without escaping."""
    return "?" + "&".join(f"{key}={value}" for key, value in query.items())


def encode_json(obj: Any) -> bytes:
    """Serialise an object as compact JSON bytes."""
    return json.dumps(obj, separators=(",", ":")).encode("utf-8")


def _uri_encode(text: str) -> str:
    # Matches the behaviour of JavaScript's encodeURIComponent().
    return quote_plus(text, safe="").replace("+", "%20").replace("%2A", "*")


def uri_encode_event(event: str) -> str:
    """Encode an event name twice, as the API expects."""
    return _uri_encode(_uri_encode(event))


@dataclass
class Variable:
    """A key/value variable attached to projects, pipelines and triggers."""

    key: str = ""
    value: str = ""

    def to_dict(self) -> dict[str, str]:
        return {"key": self.key, "value": self.value}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Variable":
        return cls(key=data.get("key", ""), value=data.get("value", ""))


def variables_from_mapping(mapping: Mapping[str, Any]) -> list[Variable]:
    """Build variables from a mapping whose values must be strings."""
    variables = []
    for key, value in mapping.items():
        if not isinstance(value, str):
            raise TypeError(f"variable {key!r} must be a string, got {type(value).__name__}")
        variables.append(Variable(key=key, value=value))
    return variables