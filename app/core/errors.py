# app/core/errors.py
from typing import Any, Dict, Optional


class AppError(Exception):
    """Base for errors that are reported to the client in the response envelope."""

    status_code = 500
    default_message = "Server Error"

    def __init__(self, message: Optional[str] = None, **extra: Any):
        self.message = message or self.default_message
        self.extra: Dict[str, Any] = extra
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body = {"success": False, "message": self.message}
        body.update(self.extra)
        return body


class ValidationError(AppError):
    status_code = 400
    default_message = "Invalid request"


class InvalidTransitionError(AppError):
    status_code = 400
    default_message = "Invalid status transition"


class ConflictError(AppError):
    status_code = 400
    default_message = "Operation conflicts with current state"


class ForbiddenError(AppError):
    status_code = 403
    default_message = "Access denied"


class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class InternalError(AppError):
    status_code = 500
    default_message = "Server Error"
