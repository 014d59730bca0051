"""
Switchyard faults - HTTP fault kinds.

Every HTTPFault pairs a fixed status code with a message intended for the
client. Anything raised by a handler that is not an HTTPFault is turned into
an InternalServerFault by ``wrap_unhandled``.
"""

from typing import Any, Optional

from .core import Fault, FaultDomain, Severity


# ============================================================================
# HTTP Faults
# ============================================================================

class HTTPFault(Fault):
    """
    Base class for faults that map onto an HTTP status.

    Subclasses set ``status``, ``code`` and ``message`` as class attributes;
    the message may be overridden per instance. Set ``public = False`` to
    keep the message out of the response body.
    """

    status: int = 500
    code = "HTTP_ERROR"
    message = "HTTP Error"
    domain = FaultDomain.HTTP
    public = True

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        status: Optional[int] = None,
        code: Optional[str] = None,
        severity: Optional[Severity] = None,
        metadata: Optional[dict[str, Any]] = None,
    ):
        if status is not None:
            self.status = status
        super().__init__(
            code=code,
            message=message,
            domain=self.domain,
            severity=severity,
            public=self.public,
            metadata=metadata,
        )

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        data["status"] = self.status
        return data


class BadRequestFault(HTTPFault):
    """Request could not be understood."""
    status = 400
    code = "BAD_REQUEST"
    message = "Bad Request"


class UnauthorizedFault(HTTPFault):
    """Client is not authenticated."""
    status = 401
    code = "UNAUTHORIZED"
    message = "Unauthorized"
    domain = FaultDomain.SECURITY


class ForbiddenFault(HTTPFault):
    """Client is authenticated but not allowed."""
    status = 403
    code = "FORBIDDEN"
    message = "Forbidden"
    domain = FaultDomain.SECURITY


class NotFoundFault(HTTPFault):
    status = 404
    code = "NOT_FOUND"
    message = "Not Found"


class MethodNotAllowedFault(HTTPFault):
    status = 405
    code = "METHOD_NOT_ALLOWED"
    message = "Method Not Allowed"


class ConflictFault(HTTPFault):
    status = 409
    code = "CONFLICT"
    message = "Conflict"


class UnprocessableEntityFault(HTTPFault):
    status = 422
    code = "UNPROCESSABLE_ENTITY"
    message = "Unprocessable Entity"


class InternalServerFault(HTTPFault):
    """Generic server-side failure. Never carries internal details."""
    status = 500
    code = "INTERNAL_SERVER_ERROR"
    message = "Internal Server Error"
    domain = FaultDomain.SYSTEM

    def __init__(self, message: Optional[str] = None, **kwargs):
        kwargs.setdefault("severity", Severity.ERROR)
        super().__init__(message, **kwargs)


class HandlerContractFault(InternalServerFault):
    """A handler returned something other than an HTTPResponse."""
    code = "HANDLER_CONTRACT_VIOLATION"


class ServiceUnavailableFault(HTTPFault):
    status = 503
    code = "SERVICE_UNAVAILABLE"
    message = "Service Unavailable"


# ============================================================================
# CONFIG Faults
# ============================================================================

class ActionDeclarationFault(Fault):
    """A controller declared an action that cannot be bound or registered."""

    def __init__(self, reason: str, **kwargs):
        super().__init__(
            code="ACTION_DECLARATION_INVALID",
            message=f"Invalid action declaration: {reason}",
            domain=FaultDomain.CONFIG,
            severity=Severity.FATAL,
            public=False,
            metadata={"reason": reason, **kwargs.get("metadata", {})},
        )


# ============================================================================
# Translation
# ============================================================================

def wrap_unhandled(exc: BaseException) -> HTTPFault:
    """
    Translate any exception into an HTTPFault.

    HTTP faults pass through untouched. Everything else becomes a generic
    InternalServerFault: the original message is dropped, the original
    traceback is kept and the original is chained as ``__cause__``.
    """
    if isinstance(exc, HTTPFault):
        return exc

    fault = InternalServerFault(
        metadata={"cause_type": type(exc).__name__},
    )
    fault.__cause__ = exc
    return fault.with_traceback(exc.__traceback__)
