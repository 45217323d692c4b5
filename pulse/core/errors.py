"""Typed service errors.

Every failure a request can end in is one of these classes. The HTTP status
travels with the type, so handlers never inspect message text to decide how
to answer.
"""

from __future__ import annotations

from fastapi import status


class ServiceError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None, *, error: str | None = None) -> None:
        self.message = message or self.default_message
        self.error = error
        super().__init__(self.message)


class InvalidRequestError(ServiceError):
    """Malformed or missing input."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request data"


class UnauthenticatedError(ServiceError):
    """Missing, invalid or expired session."""

    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Not authenticated"


class AccountNotFoundError(UnauthenticatedError):
    """Session points at an account that no longer exists."""

    default_message = "Account not found"


class ForbiddenRoleError(ServiceError):
    """Authenticated, but the role is not allowed to do this."""

    status_code = status.HTTP_403_FORBIDDEN
    default_message = "Admin access required"


class NotFoundError(ServiceError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class MethodNotAllowedError(ServiceError):
    status_code = status.HTTP_405_METHOD_NOT_ALLOWED
    default_message = "Method not allowed"


class InternalError(ServiceError):
    """Unexpected storage or runtime failure."""
