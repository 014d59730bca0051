"""
HTTPServer - an ASGI application served by uvicorn.

Per request:
    match route -> build Request + ResponseChannel -> run handler -> flush

Lifecycle notifications (listen/close/connection/error) go through
``server.events``.
"""

from __future__ import annotations

from typing import Any, Callable, Optional
import inspect

from ..auth import Authenticator
from ..config import ServerConfig
from .base import Server
from .channel import ResponseChannel
from .request import Request


class HTTPServer(Server):
    """
    HTTP server.

    Example:
        server = HTTPServer(port=8080)
        ItemsController(repo).register_actions(server)
        server.start()

    The instance itself is the ASGI application, so it can also be handed
    to any ASGI server (``uvicorn module:server``).
    """

    def __init__(
        self,
        port: int = 8000,
        authenticator: Optional[Authenticator] = None,
        *,
        host: str = "127.0.0.1",
        log_level: str = "info",
    ):
        super().__init__(port, authenticator, host=host)
        self.log_level = log_level
        self._uvicorn_server: Any = None

    @classmethod
    def from_config(
        cls,
        config: ServerConfig,
        authenticator: Optional[Authenticator] = None,
    ) -> "HTTPServer":
        return cls(
            config.port,
            authenticator,
            host=config.host,
            log_level=config.log_level,
        )

    # ------------------------------------------------------------------
    # ASGI entry point
    # ------------------------------------------------------------------

    async def __call__(self, scope: dict, receive: Callable, send: Callable):
        scope_type = scope["type"]
        if scope_type == "http":
            await self.handle_http(scope, receive, send)
        elif scope_type == "lifespan":
            await self.handle_lifespan(scope, receive, send)
        else:
            self.logger.warning(f"Unsupported ASGI scope type: {scope_type}")

    async def handle_http(self, scope: dict, receive: Callable, send: Callable):
        await self.events.emit("connection", scope)

        method = scope.get("method", "GET").upper()
        path = scope.get("path", "/")
        channel = ResponseChannel()

        match = self.routes.match(method, path)
        if match is None:
            allowed = self.routes.allowed_methods(path)
            if allowed:
                channel.status(405).json("Method Not Allowed")
                channel.headers.append((b"allow", ", ".join(allowed).encode("latin-1")))
            else:
                channel.status(404).json("Not Found")
            await channel.send_asgi(send, method=method)
            return

        request = Request(scope, receive, match.params)

        try:
            result = match.handler(request, channel)
            if inspect.isawaitable(result):
                await result
        except Exception as e:
            self.logger.error(f"Unhandled error in {method} {match.pattern}: {e}", exc_info=True)
            await self.events.emit("error", e)
            if not channel.committed:
                channel = ResponseChannel().status(500).json("Internal Server Error")

        if not channel.committed:
            self.logger.warning(f"{method} {match.pattern} finished without committing a response")
            channel = ResponseChannel().status(500).json("Internal Server Error")

        await channel.send_asgi(send, method=method)

    async def handle_lifespan(self, scope: dict, receive: Callable, send: Callable):
        """Handle ASGI lifespan events."""
        while True:
            message = await receive()

            if message["type"] == "lifespan.startup":
                self.logger.info(f"Listening on http://{self.host}:{self.port}")
                await self.events.emit("listen")
                await send({"type": "lifespan.startup.complete"})

            elif message["type"] == "lifespan.shutdown":
                await self.events.emit("close")
                self.logger.info("Server closed")
                await send({"type": "lifespan.shutdown.complete"})
                return

    # ------------------------------------------------------------------
    # Serving
    # ------------------------------------------------------------------

    def _build_uvicorn_server(self):
        import uvicorn

        config = uvicorn.Config(
            self,
            host=self.host,
            port=self.port,
            log_level=self.log_level,
            lifespan="on",
        )
        self._uvicorn_server = uvicorn.Server(config)
        return self._uvicorn_server

    def start(self) -> None:
        """Serve until interrupted (blocking)."""
        self.logger.info(f"Starting uvicorn server on {self.host}:{self.port}")
        self._build_uvicorn_server().run()

    async def serve(self) -> None:
        """Serve from inside a running event loop."""
        await self._build_uvicorn_server().serve()

    def stop(self) -> None:
        """Ask a running uvicorn server to exit."""
        if self._uvicorn_server is not None:
            self._uvicorn_server.should_exit = True
