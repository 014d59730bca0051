"""
Switchyard - declarative HTTP actions for controllers.

Controllers declare (verb, path, handler) actions; the dispatcher registers
them with a server, gates authenticated actions, and turns handler results
and faults into exactly one JSON response per request.
"""

from .config import ConfigError, ConfigLoader, ServerConfig, configure_logging
from .controller import (
    Action,
    ActionDispatcher,
    BoundAction,
    Controller,
    HTTPMethod,
    GET,
    POST,
    PUT,
    PATCH,
    DELETE,
    HEAD,
    OPTIONS,
    route,
)
from .faults import (
    Fault,
    FaultDomain,
    Severity,
    HTTPFault,
    BadRequestFault,
    UnauthorizedFault,
    ForbiddenFault,
    NotFoundFault,
    MethodNotAllowedFault,
    ConflictFault,
    UnprocessableEntityFault,
    InternalServerFault,
    HandlerContractFault,
    ServiceUnavailableFault,
    ActionDeclarationFault,
)
from .response import HTTPResponse, Ok, Created, NoContent
from .auth import Authenticator, AuthOptions, NoAuthenticator
from .server import HTTPServer, Request, ResponseChannel, Server, ServerEvents

__version__ = "0.1.0"

__all__ = [
    # Controllers
    "Action",
    "ActionDispatcher",
    "BoundAction",
    "Controller",
    "HTTPMethod",
    "GET",
    "POST",
    "PUT",
    "PATCH",
    "DELETE",
    "HEAD",
    "OPTIONS",
    "route",
    # Responses
    "HTTPResponse",
    "Ok",
    "Created",
    "NoContent",
    # Faults
    "Fault",
    "FaultDomain",
    "Severity",
    "HTTPFault",
    "BadRequestFault",
    "UnauthorizedFault",
    "ForbiddenFault",
    "NotFoundFault",
    "MethodNotAllowedFault",
    "ConflictFault",
    "UnprocessableEntityFault",
    "InternalServerFault",
    "HandlerContractFault",
    "ServiceUnavailableFault",
    "ActionDeclarationFault",
    # Auth
    "Authenticator",
    "AuthOptions",
    "NoAuthenticator",
    # Server
    "Server",
    "HTTPServer",
    "Request",
    "ResponseChannel",
    "ServerEvents",
    # Config
    "ConfigLoader",
    "ConfigError",
    "ServerConfig",
    "configure_logging",
]
