"""
Server collaborators: routing table, request/response channel, lifecycle
events and the uvicorn-served ASGI HTTPServer.
"""

from .base import Server
from .channel import ResponseChannel
from .events import EVENTS, ServerEvents
from .http import HTTPServer
from .request import Request
from .routing import RouteMatch, RouteTable

__all__ = [
    "Server",
    "HTTPServer",
    "Request",
    "ResponseChannel",
    "RouteMatch",
    "RouteTable",
    "ServerEvents",
    "EVENTS",
]
