"""
Server collaborators (server/) and end-to-end requests through HTTPServer.
"""

from unittest.mock import AsyncMock, MagicMock

import httpx
import pytest

from switchyard import (
    Authenticator,
    AuthOptions,
    HTTPServer,
    NoAuthenticator,
)
from switchyard.server import RouteTable, ServerEvents


class TokenAuthenticator(Authenticator[str]):
    """Accepts ``Authorization: Bearer <token>`` for one fixed token."""

    def __init__(self, token: str):
        super().__init__("/auth")
        self.token = token
        self.servers = []

    def register_server(self, server):
        self.servers.append(server)

    def is_authenticated(self, options: AuthOptions) -> bool:
        return options.request.header("authorization") == f"Bearer {self.token}"

    def authenticate(self, options: AuthOptions) -> str:
        return self.token

    def unauthenticate(self, options: AuthOptions) -> None:
        pass


def _client(server):
    return httpx.AsyncClient(transport=httpx.ASGITransport(app=server), base_url="http://testserver")


# ============================================================================
# RouteTable
# ============================================================================

class TestRouteTable:

    def test_static_match(self):
        table = RouteTable()
        handler = MagicMock()
        table.add("get", "/items", handler)

        match = table.match("GET", "/items/")
        assert match.handler is handler
        assert match.params == {}

    def test_param_styles(self):
        table = RouteTable()
        table.add("GET", "/items/:id", "colon")
        table.add("GET", "/users/{user}/posts/{post}", "brace")

        assert table.match("GET", "/items/42").params == {"id": "42"}
        match = table.match("GET", "/users/ann/posts/7")
        assert match.handler == "brace"
        assert match.params == {"user": "ann", "post": "7"}

    def test_static_wins_over_dynamic(self):
        table = RouteTable()
        table.add("GET", "/items/:id", "dynamic")
        table.add("GET", "/items/new", "static")
        assert table.match("GET", "/items/new").handler == "static"

    def test_no_match(self):
        table = RouteTable()
        table.add("GET", "/items/:id", "h")
        assert table.match("GET", "/items/1/extra") is None
        assert table.match("POST", "/items/1") is None

    def test_allowed_methods(self):
        table = RouteTable()
        table.add("GET", "/items", "a")
        table.add("POST", "/items", "b")
        assert table.allowed_methods("/items") == ["GET", "POST"]
        assert table.allowed_methods("/nothing") == []
        assert len(table) == 2

    def test_duplicate_param_rejected(self):
        with pytest.raises(ValueError):
            RouteTable().add("GET", "/a/:id/b/:id", "h")


# ============================================================================
# Request
# ============================================================================

class TestRequest:

    def test_basic_properties(self, request_factory):
        request = request_factory(
            "post", "/items",
            headers=[("X-Token", "abc"), ("Accept", "a"), ("accept", "b")],
            query_string="page=2&tag=x&tag=y",
            path_params={"id": "1"},
        )
        assert request.method == "POST"
        assert request.path == "/items"
        assert request.header("x-token") == "abc"
        assert request.headers["accept"] == "a, b"
        assert request.query_param("page") == "2"
        assert request.query["tag"] == ["x", "y"]
        assert request.query_param("missing", "dflt") == "dflt"
        assert request.path_params == {"id": "1"}

    @pytest.mark.asyncio
    async def test_chunked_body(self, scope_factory, receive_factory):
        from switchyard.server import Request

        request = Request(scope_factory("POST"), receive_factory(chunks=[b'{"a":', b"1}"]))
        assert await request.body() == b'{"a":1}'
        assert await request.json() == {"a": 1}

    @pytest.mark.asyncio
    async def test_invalid_json_is_bad_request(self, request_factory):
        from switchyard import BadRequestFault

        request = request_factory("POST", "/items", body=b"{nope")
        with pytest.raises(BadRequestFault):
            await request.json()


# ============================================================================
# ServerEvents
# ============================================================================

class TestServerEvents:

    @pytest.mark.asyncio
    async def test_subscribe_and_emit(self):
        events = ServerEvents()
        sync_listener = MagicMock()
        async_listener = AsyncMock()
        events.subscribe("error", sync_listener)
        events.subscribe("error", async_listener)

        err = RuntimeError("x")
        await events.emit("error", err)

        sync_listener.assert_called_once_with(err)
        async_listener.assert_awaited_once_with(err)

    @pytest.mark.asyncio
    async def test_unsubscribe(self):
        events = ServerEvents()
        listener = MagicMock()
        unsubscribe = events.subscribe("close", listener)
        unsubscribe()
        await events.emit("close")
        listener.assert_not_called()

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_stop_others(self):
        events = ServerEvents()
        after = MagicMock()
        events.subscribe("listen", MagicMock(side_effect=RuntimeError("bad listener")))
        events.subscribe("listen", after)
        await events.emit("listen")
        after.assert_called_once()

    def test_unknown_event(self):
        with pytest.raises(ValueError):
            ServerEvents().subscribe("explode", MagicMock())


# ============================================================================
# Server collaborator contract
# ============================================================================

class TestServerContract:

    def test_default_authenticator(self):
        server = HTTPServer()
        assert isinstance(server.authenticator, NoAuthenticator)
        assert server.is_authenticated(MagicMock(), MagicMock()) is True

    def test_authenticator_registered_at_construction(self):
        auth = TokenAuthenticator("t")
        server = HTTPServer(authenticator=auth)
        assert auth.servers == [server]
        assert auth.path == "/auth"

    def test_logger_name(self):
        assert HTTPServer().logger.name == "switchyard.server"

    def test_stop_without_start_is_noop(self):
        HTTPServer().stop()

    def test_from_config(self):
        from switchyard import ServerConfig

        server = HTTPServer.from_config(ServerConfig(host="0.0.0.0", port=9001, log_level="debug"))
        assert (server.host, server.port, server.log_level) == ("0.0.0.0", 9001, "debug")


# ============================================================================
# End to end
# ============================================================================

class TestHTTPServerEndToEnd:

    @pytest.fixture
    def server(self, controller):
        server = HTTPServer(authenticator=TokenAuthenticator("secret"))
        controller.register_actions(server)
        return server

    @pytest.mark.asyncio
    async def test_get_items(self, server):
        async with _client(server) as client:
            r = await client.get("/items")
        assert r.status_code == 200
        assert r.json() == {"items": []}
        assert r.headers["content-type"].startswith("application/json")

    @pytest.mark.asyncio
    async def test_post_without_token_is_401(self, server, controller):
        async with _client(server) as client:
            r = await client.post("/items", json={"name": "widget"})
        assert r.status_code == 401
        assert r.json() == "Unauthorized"
        assert controller.create_calls == 0

    @pytest.mark.asyncio
    async def test_post_with_token_creates(self, server, repo):
        async with _client(server) as client:
            r = await client.post(
                "/items", json={"name": "widget"}, headers={"Authorization": "Bearer secret"},
            )
            listed = await client.get("/items")
        assert r.status_code == 201
        assert r.json() == {"name": "widget"}
        assert listed.json() == {"items": [{"name": "widget"}]}

    @pytest.mark.asyncio
    async def test_post_invalid_json_is_400(self, server):
        async with _client(server) as client:
            r = await client.post(
                "/items", content=b"{nope", headers={"Authorization": "Bearer secret"},
            )
        assert r.status_code == 400
        assert r.json().startswith("Invalid JSON")

    @pytest.mark.asyncio
    async def test_handler_crash_is_generic_500(self, server, repo, caplog):
        repo.fail_with = RuntimeError("boom")
        async with _client(server) as client:
            r = await client.post(
                "/items", json={"name": "x"}, headers={"Authorization": "Bearer secret"},
            )
        assert r.status_code == 500
        assert r.json() == "Internal Server Error"
        assert "boom" not in r.text

        errors = [rec for rec in caplog.records if rec.name == "switchyard.server" and rec.levelname == "ERROR"]
        assert len(errors) == 1
        assert errors[0].exc_info[1].__cause__ is repo.fail_with

    @pytest.mark.asyncio
    async def test_path_params_and_domain_fault(self, server, repo):
        repo.items.append({"name": "bolt"})
        async with _client(server) as client:
            found = await client.get("/items/bolt")
            missing = await client.get("/items/nut")
        assert found.json() == {"name": "bolt"}
        assert missing.status_code == 404
        assert missing.json() == "No item named nut"

    @pytest.mark.asyncio
    async def test_unknown_route_404(self, server):
        async with _client(server) as client:
            r = await client.get("/nowhere")
        assert r.status_code == 404

    @pytest.mark.asyncio
    async def test_wrong_method_405(self, server):
        async with _client(server) as client:
            r = await client.delete("/items")
        assert r.status_code == 405
        assert r.headers["allow"] == "GET, POST"

    @pytest.mark.asyncio
    async def test_raw_route_without_commit_is_500(self):
        server = HTTPServer()
        server.get("/raw", lambda request, response: None)
        async with _client(server) as client:
            r = await client.get("/raw")
        assert r.status_code == 500

    @pytest.mark.asyncio
    async def test_raw_route_crash_emits_error(self):
        server = HTTPServer()
        listener = MagicMock()
        server.events.subscribe("error", listener)

        async def raw(request, response):
            raise RuntimeError("raw failure")

        server.get("/raw", raw)
        async with _client(server) as client:
            r = await client.get("/raw")
        assert r.status_code == 500
        assert isinstance(listener.call_args.args[0], RuntimeError)

    @pytest.mark.asyncio
    async def test_connection_event(self, server):
        listener = MagicMock()
        server.events.subscribe("connection", listener)
        async with _client(server) as client:
            await client.get("/items")
        listener.assert_called_once()
        assert listener.call_args.args[0]["path"] == "/items"


class TestLifespan:

    @pytest.mark.asyncio
    async def test_listen_and_close_events(self):
        server = HTTPServer()
        listen, close = MagicMock(), MagicMock()
        server.events.subscribe("listen", listen)
        server.events.subscribe("close", close)

        incoming = [{"type": "lifespan.startup"}, {"type": "lifespan.shutdown"}]
        sent = []

        async def receive():
            return incoming.pop(0)

        async def send(message):
            sent.append(message["type"])

        await server({"type": "lifespan"}, receive, send)

        listen.assert_called_once()
        close.assert_called_once()
        assert sent == ["lifespan.startup.complete", "lifespan.shutdown.complete"]
