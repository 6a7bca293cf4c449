"""Exceptions raised by tasktrack services and rendered by the web layer.

Every error carries a stable machine-readable ``code`` and the HTTP status it
maps to, so routers can raise them directly and a single exception handler
produces the ``{"error": {"message", "code", "details"}}`` envelope.
"""

from __future__ import annotations

from typing import Any


class TaskTrackError(Exception):
    """Base exception for all tasktrack errors."""

    code = "SERVER_ERROR"
    status_code = 500

    def __init__(
        self,
        message: str,
        *,
        code: str | None = None,
        details: Any = None,
    ):
        super().__init__(message)
        self.message = message
        if code is not None:
            self.code = code
        self.details = details


class ValidationError(TaskTrackError):
    """Raised when request input is missing or malformed."""

    code = "VALIDATION_ERROR"
    status_code = 400


class InvalidIdError(TaskTrackError):
    """Raised when a path id is not an integer."""

    code = "INVALID_ID"
    status_code = 400


class UnauthorizedError(TaskTrackError):
    """Raised when no valid session backs the request."""

    code = "UNAUTHORIZED"
    status_code = 401


class InvalidCredentialsError(TaskTrackError):
    """Raised on unknown email or wrong password (deliberately indistinguishable)."""

    code = "INVALID_CREDENTIALS"
    status_code = 401


class AccountDeactivatedError(TaskTrackError):
    """Raised when a deactivated account tries to log in."""

    code = "ACCOUNT_DEACTIVATED"
    status_code = 403


class NotFoundError(TaskTrackError):
    """Raised when a task does not exist for the requesting user."""

    code = "NOT_FOUND"
    status_code = 404


class EmailExistsError(TaskTrackError):
    """Raised when an email address is already registered."""

    code = "EMAIL_EXISTS"
    status_code = 409


class OperationFailedError(TaskTrackError):
    """Unexpected failure inside an operation, reported with a per-operation code."""

    status_code = 500


class RequestTimeoutError(TaskTrackError):
    """Raised when a request exceeds the configured deadline."""

    code = "TIMEOUT"
    status_code = 504
