"""
Action descriptors.

An Action is the immutable (verb, path, handler name) triple a controller
declares. A BoundAction is the same descriptor bound, at controller
construction time, to the callable that serves it and to its
authentication requirement.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Union

from ..faults import ActionDeclarationFault


class HTTPMethod(str, Enum):
    """Recognized HTTP verbs."""
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, value: Union[str, "HTTPMethod"]) -> "HTTPMethod":
        if isinstance(value, HTTPMethod):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            raise ActionDeclarationFault(f"unrecognized HTTP method {value!r}") from None


@dataclass(frozen=True)
class Action:
    """
    Route declaration: HTTP verb, path pattern and handler name.

    Example:
        Action("GET", "/items", "list")
    """

    method: HTTPMethod
    path: str
    handler_name: str

    def __post_init__(self):
        object.__setattr__(self, "method", HTTPMethod.parse(self.method))

        if not isinstance(self.path, str) or not self.path.startswith("/"):
            raise ActionDeclarationFault(
                f"path for '{self.handler_name}' must be a non-empty pattern starting with '/', "
                f"got {self.path!r}"
            )
        if not isinstance(self.handler_name, str) or not self.handler_name.isidentifier():
            raise ActionDeclarationFault(f"handler name {self.handler_name!r} is not an identifier")

    def server_method(self, server: Any) -> Callable[[str, Callable], Any]:
        """Return the server's registration function for this verb."""
        register = getattr(server, self.method.value.lower(), None)
        if not callable(register):
            raise ActionDeclarationFault(
                f"server {type(server).__name__} has no '{self.method.value.lower()}' registration function"
            )
        return register

    def __str__(self) -> str:
        return f"{self.method.value} {self.path} -> {self.handler_name}"


@dataclass(frozen=True)
class BoundAction:
    """An Action bound to its handler callable and auth requirement."""

    action: Action
    handler: Callable[..., Any]
    requires_auth: bool = False

    @property
    def name(self) -> str:
        return self.action.handler_name
