"""
Response - the per-request HTTP response envelope.

A handler produces exactly one HTTPResponse; the dispatcher commits it to the
server's response channel once, as the last step of the request.
"""

from __future__ import annotations

from http import HTTPStatus
from typing import Any, Protocol


class ResponseChannelLike(Protocol):
    """What an envelope needs from the underlying response channel."""

    def status(self, code: int) -> Any:
        ...

    def json(self, content: Any) -> Any:
        ...


class HTTPResponse:
    """
    Mutable {content, code} pair.

    Args:
        content: Any JSON-serializable value (default ``None``)
        code: HTTP status code (default 200)

    Example:
        @GET("/items")
        async def list(self, request, response):
            return HTTPResponse({"items": self.repository.all()})
    """

    __slots__ = ("content", "code")

    def __init__(self, content: Any = None, code: int = HTTPStatus.OK):
        code = int(code)
        if not 100 <= code <= 599:
            raise ValueError(f"Invalid HTTP status code: {code}")
        self.content = content
        self.code = code

    def commit(self, channel: ResponseChannelLike) -> None:
        """
        Write status then serialized content to ``channel``.

        Calling this twice on the same channel is not supported.
        """
        channel.status(self.code)
        channel.json(self.content)

    def __repr__(self) -> str:
        return f"HTTPResponse(code={self.code}, content={self.content!r})"

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, HTTPResponse):
            return NotImplemented
        return self.code == other.code and self.content == other.content


def Ok(content: Any = None) -> HTTPResponse:
    return HTTPResponse(content, HTTPStatus.OK)


def Created(content: Any = None) -> HTTPResponse:
    return HTTPResponse(content, HTTPStatus.CREATED)


def NoContent() -> HTTPResponse:
    return HTTPResponse(None, HTTPStatus.NO_CONTENT)
