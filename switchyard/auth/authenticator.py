"""
Authenticators decide whether a request is authenticated and issue or
revoke the artifact (token, session, ...) that proves it.

How a concrete authenticator verifies credentials is its own business; the
server only calls ``is_authenticated``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Generic, TypeVar

if TYPE_CHECKING:
    from ..server.base import Server


A = TypeVar("A")


@dataclass(frozen=True)
class AuthOptions:
    """The request/response pair handed to an authenticator."""
    request: Any
    response: Any


class Authenticator(ABC, Generic[A]):
    """
    Base authenticator.

    Args:
        path: Route prefix the authenticator mounts its own endpoints under
            (login/logout), if it has any.
    """

    def __init__(self, path: str = ""):
        self.path = path

    @abstractmethod
    def register_server(self, server: "Server") -> None:
        """Called once by the server at construction time."""

    @abstractmethod
    def is_authenticated(self, options: AuthOptions) -> bool:
        ...

    @abstractmethod
    def authenticate(self, options: AuthOptions) -> A:
        ...

    @abstractmethod
    def unauthenticate(self, options: AuthOptions) -> None:
        ...


class NoAuthenticator(Authenticator[None]):
    """Treats every request as authenticated."""

    def register_server(self, server: "Server") -> None:
        pass

    def is_authenticated(self, options: AuthOptions) -> bool:
        return True

    def authenticate(self, options: AuthOptions) -> None:
        return None

    def unauthenticate(self, options: AuthOptions) -> None:
        pass
