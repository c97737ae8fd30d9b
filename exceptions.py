"""
Domain exceptions for the user directory.

The services raise these; the HTTP boundary (``api.error_handlers``) maps
each class to a status code and a stable response body.

Exception hierarchy:
    UserServiceError (base)
    ├── ConflictError       -> 409
    ├── NotFoundError       -> 404
    ├── UnauthorizedError   -> 401
    └── InternalError       -> 500
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class UserServiceError(Exception):
    """
    Base exception for all user directory errors.

    Attributes:
        message: Human-readable error description, safe to return to clients
        details: Additional context for API responses
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Structured error body for API responses."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "details": self.details,
        }


class ConflictError(UserServiceError):
    """Raised when a unique field (the email) is already taken."""

    def __init__(self, message: str = "Email already exists", email: Optional[str] = None):
        super().__init__(message, details={"email": email} if email is not None else None)


class NotFoundError(UserServiceError):
    """Raised when no user matches the requested id."""

    def __init__(self, user_id: int):
        super().__init__(
            message=f"User with ID {user_id} not found",
            details={"user_id": user_id},
        )


class UnauthorizedError(UserServiceError):
    """
    Raised for bad credentials and for missing, invalid, expired or revoked
    bearer tokens. The message never says which of these happened.
    """

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class InternalError(UserServiceError):
    """Raised when the store fails in a way the caller cannot act on."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
