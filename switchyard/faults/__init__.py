"""
Switchyard faults - typed errors with fixed HTTP semantics.
"""

from .core import Fault, FaultDomain, Severity, DOMAIN_DEFAULTS, SEVERITY_LOG_LEVELS
from .domains import (
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
    wrap_unhandled,
)

__all__ = [
    "Fault",
    "FaultDomain",
    "Severity",
    "DOMAIN_DEFAULTS",
    "SEVERITY_LOG_LEVELS",
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
    "wrap_unhandled",
]
