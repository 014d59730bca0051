"""
Action Dispatcher - turns bound actions into live server routes.

Every registered route runs the same per-request protocol:

    authenticate (if required) -> invoke handler -> normalize outcome -> commit

Errors are caught exactly once, here. HTTP faults keep their status and
message; anything else is logged in full and answered with a generic 500.
Faults are logged at the level their severity maps to.
"""

from http import HTTPStatus
from typing import Any, Awaitable, Callable, Iterable, Optional, Tuple
import inspect
import logging

from .action import BoundAction
from ..faults import (
    HandlerContractFault,
    HTTPFault,
    InternalServerFault,
    UnauthorizedFault,
    wrap_unhandled,
)
from ..response import HTTPResponse


logger = logging.getLogger("switchyard.dispatch")


async def _resolve(value: Any) -> Any:
    """Await ``value`` if it is awaitable."""
    if inspect.isawaitable(value):
        return await value
    return value


def _client_message(fault: HTTPFault) -> str:
    """The message sent to the client; non-public faults get the status phrase."""
    if fault.public:
        return fault.message
    try:
        return HTTPStatus(fault.status).phrase
    except ValueError:
        return InternalServerFault.message


class ActionDispatcher:
    """
    Registers bound actions against a server.

    The server must expose one registration function per verb
    (``server.get(path, handler)``, ``server.post(...)``, ...), an
    ``is_authenticated(request, response)`` predicate and a ``logger``.
    """

    __slots__ = ("bindings", "name")

    def __init__(self, bindings: Iterable[BoundAction], *, name: str = ""):
        self.bindings: Tuple[BoundAction, ...] = tuple(bindings)
        self.name = name

    def register(self, server: Any) -> int:
        """Register a wrapped handler for every binding. Returns the count."""
        for binding in self.bindings:
            server_method = binding.action.server_method(server)
            server_method(binding.action.path, self._wrap(binding, server))
            logger.debug(
                f"Registered {binding.action}"
                + (" [authenticated]" if binding.requires_auth else "")
                + (f" on {self.name}" if self.name else "")
            )
        return len(self.bindings)

    def _wrap(self, binding: BoundAction, server: Any) -> Callable[[Any, Any], Awaitable[None]]:
        async def handle(request: Any, response: Any) -> None:
            await self.dispatch(binding, server, request, response)

        handle.__name__ = f"dispatch_{binding.name}"
        handle.__qualname__ = f"{self.name or 'ActionDispatcher'}.{binding.name}"
        return handle

    async def dispatch(self, binding: BoundAction, server: Any, request: Any, response: Any) -> None:
        """Run one request through the gate/invoke/translate/commit protocol."""
        envelope: Optional[HTTPResponse] = None

        try:
            if binding.requires_auth:
                authenticated = await _resolve(server.is_authenticated(request, response))
                if not authenticated:
                    raise UnauthorizedFault()

            result = await _resolve(binding.handler(request, response))
            envelope = self._to_envelope(binding, result)
        except Exception as exc:
            envelope = self._handle_error(server, binding, exc)
        finally:
            if envelope is not None:
                self._commit(server, binding, envelope, response)

    @classmethod
    def _commit(cls, server: Any, binding: BoundAction, envelope: HTTPResponse, response: Any) -> None:
        try:
            envelope.commit(response)
        except Exception as exc:
            fault = wrap_unhandled(exc)
            cls._log_fault(server, binding, fault)
            if not getattr(response, "committed", False):
                HTTPResponse(InternalServerFault.message, InternalServerFault.status).commit(response)

    @staticmethod
    def _to_envelope(binding: BoundAction, result: Any) -> HTTPResponse:
        if isinstance(result, HTTPResponse):
            return result
        raise HandlerContractFault(
            metadata={"handler": binding.name, "returned": type(result).__name__},
        )

    @classmethod
    def _handle_error(cls, server: Any, binding: BoundAction, exc: Exception) -> HTTPResponse:
        fault: HTTPFault = wrap_unhandled(exc)
        cls._log_fault(server, binding, fault)
        return HTTPResponse(_client_message(fault), fault.status)

    @staticmethod
    def _log_fault(server: Any, binding: BoundAction, fault: HTTPFault) -> None:
        server.logger.log(
            fault.log_level,
            f"{binding.action.method.value} {binding.action.path} "
            f"({binding.name}) failed: {fault}",
            exc_info=fault,
        )
