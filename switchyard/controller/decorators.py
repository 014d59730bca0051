"""
Controller Method Decorators

HTTP method decorators for controller methods.
Attach metadata without import-time side effects.
"""

from typing import Any, Callable, List, Optional, TypeVar, Union

from .action import HTTPMethod


F = TypeVar('F', bound=Callable[..., Any])

ROUTE_METADATA_ATTR = "__route_metadata__"


class RouteDecorator:
    """
    Base route decorator.

    Attaches metadata to controller methods; the Controller reads it back
    when it is constructed.
    """

    method: Optional[HTTPMethod] = None

    def __init__(self, path: str, *, authenticated: bool = False):
        """
        Args:
            path: URL path pattern (e.g., "/items", "/items/:id")
            authenticated: Require a passing authentication check before
                the handler runs
        """
        self.path = path
        self.authenticated = authenticated

    def __call__(self, func: F) -> F:
        if not hasattr(func, ROUTE_METADATA_ATTR):
            func.__route_metadata__ = []

        func.__route_metadata__.append({
            'http_method': self.method,
            'path': self.path,
            'authenticated': self.authenticated,
            'func_name': func.__name__,
        })

        return func


class GET(RouteDecorator):
    """GET request decorator."""
    method = HTTPMethod.GET


class POST(RouteDecorator):
    """POST request decorator."""
    method = HTTPMethod.POST


class PUT(RouteDecorator):
    """PUT request decorator."""
    method = HTTPMethod.PUT


class PATCH(RouteDecorator):
    """PATCH request decorator."""
    method = HTTPMethod.PATCH


class DELETE(RouteDecorator):
    """DELETE request decorator."""
    method = HTTPMethod.DELETE


class HEAD(RouteDecorator):
    """HEAD request decorator."""
    method = HTTPMethod.HEAD


class OPTIONS(RouteDecorator):
    """OPTIONS request decorator."""
    method = HTTPMethod.OPTIONS


_DECORATORS = {
    HTTPMethod.GET: GET,
    HTTPMethod.POST: POST,
    HTTPMethod.PUT: PUT,
    HTTPMethod.PATCH: PATCH,
    HTTPMethod.DELETE: DELETE,
    HTTPMethod.HEAD: HEAD,
    HTTPMethod.OPTIONS: OPTIONS,
}


def route(
    method: Union[str, List[str]],
    path: str,
    **kwargs
) -> Callable[[F], F]:
    """
    Generic route decorator.

    Example:
        @route(["GET", "HEAD"], "/items")
        async def list(self, request, response):
            ...
    """
    methods = [method] if isinstance(method, str) else method

    def decorator(func: F) -> F:
        for http_method in methods:
            func = _DECORATORS[HTTPMethod.parse(http_method)](path, **kwargs)(func)
        return func

    return decorator
