"""Application error taxonomy.

Every failure a request can end in is one of these kinds. Services raise them,
and the app's exception handler renders them as
``{"error": message, "code": kind, "details": {...}}`` with the matching status.
"""

from typing import Any


class AppError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str, details: dict[str, str] | None = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"error": self.message, "code": self.code}
        if self.details:
            payload["details"] = self.details
        return payload


class ValidationError(AppError):
    """Malformed or missing input; ``details`` maps field name to message."""

    status_code = 400
    code = "validation_error"

    def __init__(
        self,
        details: dict[str, str],
        message: str = "Validation failed",
    ) -> None:
        super().__init__(message, details)


class BadRequestError(AppError):
    status_code = 400
    code = "bad_request"


class UnauthorizedError(AppError):
    """Missing, invalid or expired credentials or token."""

    status_code = 401
    code = "unauthorized"


class ForbiddenError(AppError):
    """Valid identity, insufficient privilege."""

    status_code = 403
    code = "forbidden"


class NotFoundError(AppError):
    status_code = 404
    code = "not_found"

    def __init__(self, resource: str) -> None:
        self.resource = resource
        super().__init__(f"{resource} not found")


class ConflictError(AppError):
    status_code = 409
    code = "conflict"


class InternalError(AppError):
    """Unexpected store or signing failure. The message is always generic."""

    status_code = 500
    code = "internal_error"

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
