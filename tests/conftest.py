"""Shared fixtures: a GraphTransport wired to an in-memory fake Graph."""

import httpx
import pytest

from graph_commands.transport import GraphTransport

BASE = "https://graph.test/v1.0"


class FakeGraph:
    """Routes requests by (method, path) and records every request it sees.

    Unrouted requests get a Graph-style 404.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, status=200, json=None, text=None):
        if not path.startswith("http"):
            path = BASE + path
        self.routes[(method, httpx.URL(path).path)] = (status, json, text)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"error": {"code": "ResourceNotFound", "message": "Not found"}})
        status, json, text = route
        if text is not None:
            return httpx.Response(status, text=text, headers={"content-type": "text/html"})
        if json is None:
            return httpx.Response(status)
        return httpx.Response(status, json=json)

    def methods(self):
        return [r.method for r in self.requests]

    def paths(self):
        return [r.url.path.removeprefix("/v1.0") for r in self.requests]


@pytest.fixture
def fake_graph():
    return FakeGraph()


@pytest.fixture
def transport(fake_graph):
    client = httpx.Client(transport=httpx.MockTransport(fake_graph.handler))
    with GraphTransport(client=client, get_headers=lambda: {"Authorization": "Bearer test"}, base_url=BASE) as t:
        yield t
