"""Error envelope and exception handlers for the HTTP API.

Every failure leaves the server as ``{"error": {"message", "code", "details"?}}``.
Routes raise :class:`~tasktrack.errors.TaskTrackError` subclasses and the
handlers registered here render them.
"""

from __future__ import annotations

import traceback
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from tasktrack.errors import OperationFailedError, TaskTrackError, ValidationError
from tasktrack.utils.logger import get_logger


def error_body(message: str, code: str, details: Any = None) -> dict[str, Any]:
    """Build the uniform error envelope."""
    error: dict[str, Any] = {"message": message, "code": code}
    if details is not None:
        error["details"] = details
    return {"error": error}


def error_response(exc: TaskTrackError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.code, exc.details),
    )


def _describe_validation_error(error: dict[str, Any]) -> str:
    location = [str(part) for part in error.get("loc", ()) if part != "body"]
    message = str(error.get("msg", "Invalid value"))
    # pydantic prefixes messages raised from validators
    message = message.removeprefix("Value error, ")
    if location:
        return f"{'.'.join(location)}: {message}"
    return message


@contextmanager
def operation(code: str, message: str, *, expose_details: bool) -> Iterator[None]:
    """Map unexpected failures inside a route to a 500 with a stable code.

    Domain errors pass through untouched. Anything else is logged with its
    traceback and re-raised as :class:`OperationFailedError`; the exception
    text is attached as ``details`` only when ``expose_details`` is true.

    Example:
        with operation("FETCH_ERROR", "Failed to fetch tasks", expose_details=True):
            page = await tasks.list_tasks(user.id, filters)
    """
    try:
        yield
    except TaskTrackError:
        raise
    except Exception as e:
        get_logger().error(
            "%s: %s\n%s", message, str(e), traceback.format_exc()
        )
        raise OperationFailedError(
            message,
            code=code,
            details=str(e) if expose_details else None,
        ) from e


async def handle_tasktrack_error(request: Request, exc: TaskTrackError) -> JSONResponse:
    if exc.status_code >= 500:
        get_logger().error(
            "%s %s failed: %s (%s)", request.method, request.url.path, exc.message, exc.code
        )
    return error_response(exc)


async def handle_request_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    details = [_describe_validation_error(error) for error in exc.errors()]
    return error_response(ValidationError("Validation failed", details=details))


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    get_logger().error(
        "unhandled error on %s %s: %s\n%s",
        request.method,
        request.url.path,
        str(exc),
        "".join(traceback.format_exception(exc)),
    )
    return JSONResponse(
        status_code=500,
        content=error_body("Internal server error", "SERVER_ERROR"),
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the envelope-rendering handlers on ``app``."""
    app.add_exception_handler(TaskTrackError, handle_tasktrack_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)
