"""
Server - the collaborator controllers register their actions with.

Provides the three things the dispatcher relies on:
- one registration function per HTTP verb: ``get(path, handler)``, ...
- an authentication predicate: ``is_authenticated(request, response)``
- a logging sink: ``logger``
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Optional
import logging

from ..auth import Authenticator, AuthOptions, NoAuthenticator
from .events import ServerEvents
from .routing import Handler, RouteTable


class Server(ABC):
    """
    Base server.

    Args:
        port: Port to listen on
        authenticator: Decides whether a request is authenticated.
            Defaults to NoAuthenticator (everything passes).
        host: Interface to bind
    """

    def __init__(
        self,
        port: int = 8000,
        authenticator: Optional[Authenticator] = None,
        *,
        host: str = "127.0.0.1",
    ):
        self.port = port
        self.host = host
        self.logger = logging.getLogger("switchyard.server")
        self.routes = RouteTable()
        self.events = ServerEvents()
        self.authenticator = authenticator or NoAuthenticator()
        self.authenticator.register_server(self)

    # -- Registration -----------------------------------------------------

    def route(self, method: str, path: str, handler: Handler) -> None:
        self.routes.add(method, path, handler)
        self.logger.debug(f"Route added: {method.upper()} {path}")

    def get(self, path: str, handler: Handler) -> None:
        self.route("GET", path, handler)

    def post(self, path: str, handler: Handler) -> None:
        self.route("POST", path, handler)

    def put(self, path: str, handler: Handler) -> None:
        self.route("PUT", path, handler)

    def patch(self, path: str, handler: Handler) -> None:
        self.route("PATCH", path, handler)

    def delete(self, path: str, handler: Handler) -> None:
        self.route("DELETE", path, handler)

    def head(self, path: str, handler: Handler) -> None:
        self.route("HEAD", path, handler)

    def options(self, path: str, handler: Handler) -> None:
        self.route("OPTIONS", path, handler)

    # -- Authentication ---------------------------------------------------

    def is_authenticated(self, request: Any, response: Any) -> Any:
        """Ask the authenticator about this request. May return an awaitable."""
        return self.authenticator.is_authenticated(AuthOptions(request, response))

    # -- Lifecycle --------------------------------------------------------

    @abstractmethod
    def start(self) -> None:
        ...

    @abstractmethod
    def stop(self) -> None:
        ...
