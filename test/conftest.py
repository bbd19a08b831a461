# Author: PB
# Date: 2026-10-19
# License: (c) HRDAG, 2026, GPL-2 or newer
#
# ---
# test/conftest.py

"""Shared fixtures: a fake FairOS server behind httpx.MockTransport."""

import json

import httpx
import pytest

from fairos.client import Client

BASE_URL = "http://fairos.test/v1"


class FakeServer:
    """Canned responses keyed by (method, path), recording every request."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, json=None, status=200, headers=None, content=None):
        self.routes[(method, path)] = (status, json, headers, content)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v1")
        route = self.routes.get((request.method, path))
        if route is None:
            return httpx.Response(404, json={"message": f"no route {path}", "code": 404})
        status, body, headers, content = route
        if content is not None:
            return httpx.Response(status, content=content, headers=headers)
        if body is None:
            body = {"message": "ok", "code": status}
        return httpx.Response(status, json=body, headers=headers)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> dict:
        return json.loads(self.last.content)


@pytest.fixture
def server():
    return FakeServer()


@pytest.fixture
def client(server):
    return Client(BASE_URL, transport=httpx.MockTransport(server.handler))


@pytest.fixture
def alice(client):
    """A client holding a session cookie for user 'alice'."""
    client.transport.set_cookie("alice", "cookie-alice")
    return client
