"""
Request - a lean view over an ASGI HTTP scope.
"""

from __future__ import annotations

import json as stdlib_json
from typing import Any, Awaitable, Callable, Dict, List, Optional
from urllib.parse import parse_qs

from ..faults import BadRequestFault


class Request:
    """
    HTTP request as seen by route handlers.

    Attributes:
        scope: The raw ASGI scope
        path_params: Parameters captured by the route pattern
        state: Per-request scratch space (e.g. the authenticated identity)
    """

    __slots__ = ("scope", "_receive", "_body", "_json", "_headers", "_query", "path_params", "state")

    def __init__(
        self,
        scope: dict,
        receive: Callable[[], Awaitable[dict]],
        path_params: Optional[Dict[str, str]] = None,
    ):
        self.scope = scope
        self._receive = receive
        self._body: Optional[bytes] = None
        self._json: Any = None
        self._headers: Optional[Dict[str, str]] = None
        self._query: Optional[Dict[str, List[str]]] = None
        self.path_params: Dict[str, str] = path_params or {}
        self.state: Dict[str, Any] = {}

    @property
    def method(self) -> str:
        return self.scope.get("method", "GET").upper()

    @property
    def path(self) -> str:
        return self.scope.get("path", "/")

    @property
    def headers(self) -> Dict[str, str]:
        """Request headers with lower-cased names. Repeated headers are comma-joined."""
        if self._headers is None:
            headers: Dict[str, str] = {}
            for raw_name, raw_value in self.scope.get("headers", []):
                name = raw_name.decode("latin-1").lower()
                value = raw_value.decode("latin-1")
                headers[name] = f"{headers[name]}, {value}" if name in headers else value
            self._headers = headers
        return self._headers

    def header(self, name: str, default: Optional[str] = None) -> Optional[str]:
        return self.headers.get(name.lower(), default)

    @property
    def query(self) -> Dict[str, List[str]]:
        if self._query is None:
            raw = self.scope.get("query_string", b"")
            if isinstance(raw, bytes):
                raw = raw.decode("latin-1")
            self._query = parse_qs(raw, keep_blank_values=True)
        return self._query

    def query_param(self, name: str, default: Optional[str] = None) -> Optional[str]:
        values = self.query.get(name)
        return values[0] if values else default

    async def body(self) -> bytes:
        """Read the full request body (idempotent)."""
        if self._body is not None:
            return self._body

        chunks = []
        while True:
            message = await self._receive()
            if message["type"] == "http.disconnect":
                break
            chunks.append(message.get("body", b""))
            if not message.get("more_body", False):
                break

        self._body = b"".join(chunks)
        return self._body

    async def json(self) -> Any:
        """
        Parse the body as JSON.

        Raises:
            BadRequestFault: If the body is not valid UTF-8 JSON
        """
        if self._json is not None:
            return self._json

        body_bytes = await self.body()
        try:
            self._json = stdlib_json.loads(body_bytes.decode("utf-8"))
        except (UnicodeDecodeError, stdlib_json.JSONDecodeError) as e:
            raise BadRequestFault(f"Invalid JSON: {e}") from e
        return self._json

    def __repr__(self) -> str:
        return f"Request({self.method} {self.path})"
