"""
Portal error taxonomy.

Raised in services and turned into destructive notifications by the
exception handler registered in main.py.
"""


class PortalError(Exception):
    """Base exception for every user-visible portal failure."""

    title = "Error"
    status_code = 400

    def __init__(self, message: str, title: str | None = None, status_code: int | None = None):
        super().__init__(message)
        self.message = message
        if title is not None:
            self.title = title
        if status_code is not None:
            self.status_code = status_code


class ValidationError(PortalError):
    """Client-side input failed a check. Never reaches the network."""

    title = "Invalid input"
    status_code = 422


class AuthError(PortalError):
    """The backend rejected credentials or a token, or the role is not allowed."""

    title = "Authentication failed"
    status_code = 401


class NetworkError(PortalError):
    """A gateway call could not complete."""

    title = "Connection problem"
    status_code = 502


TransportError = NetworkError


class GatewayError(PortalError):
    """The backend answered with an error that is not an auth rejection."""

    title = "Request failed"
    status_code = 502


class StateError(PortalError):
    """An operation needs an identity, wizard step or idle control that is absent."""

    title = "Not available"
    status_code = 409
