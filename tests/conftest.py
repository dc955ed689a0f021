"""Shared fixtures for restpoint tests.

Requests go through a real HttpxTransport whose httpx client is wired to an
``httpx.MockTransport``, so every request is recorded and no network is
touched.
"""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from restpoint import Client, HttpxTransport

HOST = "http://api.example.com/v1"


# ---------------------------------------------------------------------------
# Mock API: queued replies plus a record of every request
# ---------------------------------------------------------------------------

class MockAPI:
    """Replies with queued responses and records the requests it received."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self._replies: list[Callable[[httpx.Request], httpx.Response]] = []

    def reply(self, status_code: int = 200, json_body: Any = None, **kwargs: Any) -> None:
        """Queue a response for the next request."""
        if json_body is not None:
            kwargs["json"] = json_body
        self._replies.append(lambda request: httpx.Response(status_code, **kwargs))

    def fail(self, exc_type: type[httpx.HTTPError] = httpx.ConnectError, message: str = "boom") -> None:
        """Make the next request fail before any response arrives."""
        def raise_error(request: httpx.Request) -> httpx.Response:
            raise exc_type(message, request=request)

        self._replies.append(raise_error)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._replies:
            return httpx.Response(500, json={"error": "no reply queued"})
        return self._replies.pop(0)(request)

    @property
    def last(self) -> httpx.Request:
        assert self.requests, "no request was sent"
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content) if self.last.content else None


@pytest.fixture
def api() -> MockAPI:
    return MockAPI()


# ---------------------------------------------------------------------------
# Clients wired to the mock API
# ---------------------------------------------------------------------------

@pytest.fixture
def make_client(api: MockAPI) -> Callable[..., Client]:
    """Return a factory building clients with the given hooks.

    Usage::

        client = make_client(before_success=lambda body: body["data"])
    """
    def _make(**kwargs: Any) -> Client:
        transport = HttpxTransport(
            client=httpx.AsyncClient(transport=httpx.MockTransport(api.handler))
        )
        return Client(HOST, transport=transport, **kwargs)

    return _make


@pytest.fixture
def client(make_client) -> Client:
    return make_client()
