"""
Controller system - declarative actions, dispatch and registration.

Example:
    class ItemsController(Controller):
        @GET("/items")
        async def list(self, request, response):
            return HTTPResponse({"items": []})

        @POST("/items", authenticated=True)
        async def create(self, request, response):
            ...

    ItemsController(repo).register_actions(server)
"""

from .action import Action, BoundAction, HTTPMethod
from .base import Controller
from .decorators import (
    RouteDecorator,
    GET,
    POST,
    PUT,
    PATCH,
    DELETE,
    HEAD,
    OPTIONS,
    route,
)
from .dispatcher import ActionDispatcher

__all__ = [
    "Action",
    "BoundAction",
    "HTTPMethod",
    "Controller",
    "ActionDispatcher",
    "RouteDecorator",
    "GET",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "HEAD",
    "OPTIONS",
    "route",
]
