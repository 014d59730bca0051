"""
Shared test fixtures and helpers for the Switchyard test suite.
"""

from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from switchyard import GET, POST, Controller, HTTPResponse, NotFoundFault
from switchyard.server import Request


# ============================================================================
# ASGI Helpers
# ============================================================================


def make_scope(
    method: str = "GET",
    path: str = "/",
    query_string: str = "",
    headers: Optional[List[tuple]] = None,
) -> dict:
    """Build a minimal ASGI HTTP scope."""
    raw_headers = []
    for name, value in headers or []:
        raw_headers.append((name.encode("latin-1"), value.encode("latin-1")))
    return {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": method,
        "path": path,
        "raw_path": path.encode("utf-8"),
        "query_string": query_string.encode("utf-8"),
        "headers": raw_headers,
        "scheme": "http",
        "server": ("127.0.0.1", 8000),
        "client": ("127.0.0.1", 12345),
        "root_path": "",
    }


def make_receive(body: bytes = b"", *, chunks: Optional[List[bytes]] = None):
    """Create an ASGI receive callable from body bytes or chunked list."""
    if chunks:
        messages = [
            {"type": "http.request", "body": chunk, "more_body": i < len(chunks) - 1}
            for i, chunk in enumerate(chunks)
        ]
    else:
        messages = [{"type": "http.request", "body": body, "more_body": False}]

    idx = 0

    async def receive():
        nonlocal idx
        if idx < len(messages):
            msg = messages[idx]
            idx += 1
            return msg
        return {"type": "http.disconnect"}

    return receive


# ============================================================================
# Fake server collaborator
# ============================================================================


class FakeServer:
    """
    Records registrations and exposes spies for the authentication
    predicate and the logger.
    """

    def __init__(self, authenticated: Any = True):
        self.registered: Dict[tuple, Any] = {}
        self.logger = MagicMock(name="logger")
        self.is_authenticated = MagicMock(name="is_authenticated", return_value=authenticated)

    def _register(self, method: str, path: str, handler) -> None:
        self.registered[(method, path)] = handler

    def get(self, path, handler):
        self._register("GET", path, handler)

    def post(self, path, handler):
        self._register("POST", path, handler)

    def put(self, path, handler):
        self._register("PUT", path, handler)

    def patch(self, path, handler):
        self._register("PATCH", path, handler)

    def delete(self, path, handler):
        self._register("DELETE", path, handler)

    def head(self, path, handler):
        self._register("HEAD", path, handler)

    def options(self, path, handler):
        self._register("OPTIONS", path, handler)

    async def call(self, method: str, path: str, request: Any = None, channel: Any = None):
        """Invoke the registered handler; returns the response channel spy."""
        channel = channel if channel is not None else MagicMock(name="channel")
        await self.registered[(method, path)](request if request is not None else MagicMock(), channel)
        return channel


# ============================================================================
# Sample domain
# ============================================================================


class ItemRepo:
    def __init__(self):
        self.items: List[dict] = []
        self.fail_with: Optional[BaseException] = None

    def all(self) -> List[dict]:
        return list(self.items)

    def add(self, item: dict) -> dict:
        if self.fail_with is not None:
            raise self.fail_with
        self.items.append(item)
        return item


class ItemsController(Controller[ItemRepo]):
    authenticated_actions = frozenset({"create"})

    def __init__(self, repository: ItemRepo):
        super().__init__(repository)
        self.create_calls = 0

    @GET("/items")
    async def list(self, request, response):
        return HTTPResponse({"items": self.repository.all()})

    @GET("/items/:name")
    async def show(self, request, response):
        for item in self.repository.all():
            if item.get("name") == request.path_params.get("name"):
                return HTTPResponse(item)
        raise NotFoundFault(f"No item named {request.path_params.get('name')}")

    @POST("/items")
    async def create(self, request, response):
        self.create_calls += 1
        payload = await request.json() if isinstance(request, Request) else {"name": "widget"}
        return HTTPResponse(self.repository.add(payload), 201)


@pytest.fixture
def scope_factory():
    return make_scope


@pytest.fixture
def receive_factory():
    return make_receive


@pytest.fixture
def request_factory():
    def factory(method="GET", path="/", *, body=b"", headers=None, query_string="", path_params=None):
        scope = make_scope(method=method, path=path, headers=headers, query_string=query_string)
        return Request(scope, make_receive(body), path_params)

    return factory


@pytest.fixture
def repo():
    return ItemRepo()


@pytest.fixture
def controller(repo):
    return ItemsController(repo)


@pytest.fixture
def fake_server():
    return FakeServer()
