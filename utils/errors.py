"""
Error taxonomy shared by the auth layer, the store helpers and the routes.

Every ``AppError`` is rendered by the handlers in ``api.errors`` as
``{"success": false, "message": ...}`` with the class's HTTP status.
"""

from __future__ import annotations

from typing import Optional


class AppError(Exception):
    status_code: int = 400
    message: str = "Request failed"

    def __init__(self, message: Optional[str] = None) -> None:
        if message is not None:
            self.message = message
        super().__init__(self.message)


class ValidationError(AppError):
    status_code = 400
    message = "Invalid request"


class EmailTaken(AppError):
    status_code = 400
    message = "Email already exists"


class TeacherCodeUnavailable(AppError):
    status_code = 400
    message = "Could not allocate a teacher code, please try again"


class InvalidCredentials(AppError):
    # Same message for unknown email and wrong password.
    status_code = 401
    message = "Invalid email or password"


class Unauthenticated(AppError):
    status_code = 401
    message = "Access token required"


class Forbidden(AppError):
    status_code = 403
    message = "Invalid token"


class InvalidTeacherCode(AppError):
    status_code = 404
    message = "Invalid teacher code"


class NotFound(AppError):
    # Also raised when the row exists but belongs to someone else.
    status_code = 404
    message = "Task not found"
