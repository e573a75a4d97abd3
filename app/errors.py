"""Domain errors raised by the service layer and rendered by the API."""

from __future__ import annotations

from typing import Any


class ReelmarkError(Exception):
    """Base class carrying the HTTP status and client-facing message."""

    status_code: int = 500
    default_message: str = "Internal Server Error"

    def __init__(self, message: str | None = None, *, details: str | None = None):
        self.message = message or self.default_message
        self.details = details
        super().__init__(self.message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message}
        if self.details is not None:
            payload["details"] = self.details
        return payload


class Unauthorized(ReelmarkError):
    """No session, or the session token is unknown or expired."""

    status_code = 401
    default_message = "Unauthorized"


class UserNotFound(ReelmarkError):
    """The session is valid but its email has no stored user."""

    status_code = 404
    default_message = "User not found"


class Conflict(ReelmarkError):
    status_code = 409
    default_message = "Already bookmarked"


class InvalidInput(ReelmarkError):
    status_code = 400
    default_message = "Invalid input"


class InternalError(ReelmarkError):
    """Store or input failure; ``details`` holds an opaque debug string."""

    status_code = 500
    default_message = "Internal Server Error"
