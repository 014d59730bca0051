"""
ResponseChannel - the write side of one HTTP exchange.

Route handlers set a status and a JSON body on the channel; the server
flushes it to the ASGI ``send`` callable once the handler has returned.
"""

from __future__ import annotations

import json
from typing import Any, Awaitable, Callable, List, Optional, Tuple


def _json_default_serializer(o):
    """Default JSON serializer for non-standard types."""
    if isinstance(o, (set, frozenset, tuple)):
        return list(o)
    if hasattr(o, "isoformat"):
        return o.isoformat()
    if hasattr(o, "to_dict"):
        return o.to_dict()
    return str(o)


class ResponseChannel:
    """
    Buffered single-shot response.

    ``status()`` may be called any number of times before ``json()``;
    ``json()`` commits the body and may only be called once.
    """

    __slots__ = ("status_code", "body", "headers", "_committed")

    def __init__(self):
        self.status_code: int = 200
        self.body: bytes = b""
        self.headers: List[Tuple[bytes, bytes]] = []
        self._committed = False

    @property
    def committed(self) -> bool:
        return self._committed

    def status(self, code: int) -> "ResponseChannel":
        if self._committed:
            raise RuntimeError("Response already committed")
        self.status_code = int(code)
        return self

    def json(self, content: Any) -> "ResponseChannel":
        if self._committed:
            raise RuntimeError("Response already committed")
        self.body = json.dumps(
            content,
            default=_json_default_serializer,
            ensure_ascii=False,
            separators=(",", ":"),
        ).encode("utf-8")
        self.headers = [
            (b"content-type", b"application/json; charset=utf-8"),
            (b"content-length", str(len(self.body)).encode("latin-1")),
        ]
        self._committed = True
        return self

    async def send_asgi(
        self,
        send: Callable[[dict], Awaitable[None]],
        *,
        method: Optional[str] = None,
    ) -> None:
        """Write the buffered response to an ASGI ``send`` callable."""
        headers = self.headers
        body = self.body
        if self.status_code in (204, 304):
            headers = [(k, v) for k, v in headers if k != b"content-length"]
            body = b""
        elif method == "HEAD":
            body = b""

        await send({
            "type": "http.response.start",
            "status": self.status_code,
            "headers": headers,
        })
        await send({"type": "http.response.body", "body": body})
