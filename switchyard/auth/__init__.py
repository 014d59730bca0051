"""
Authentication collaborators for the server.
"""

from .authenticator import Authenticator, AuthOptions, NoAuthenticator

__all__ = [
    "Authenticator",
    "AuthOptions",
    "NoAuthenticator",
]
