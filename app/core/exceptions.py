"""Domain errors and the handlers that turn them into the response envelope.

Service functions raise ``AppError`` subclasses; FastAPI dependencies raise
``HTTPException`` as usual. Both end up as::

    {"success": false, "message": "...", "errors": ...}
"""

import logging
from typing import Any

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError, NoResultFound
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

NOT_FOUND_MESSAGE = "Resource not found"
FORBIDDEN_MESSAGE = "Access forbidden"
UNAUTHORIZED_MESSAGE = "Unauthorized access"
VALIDATION_MESSAGE = "Validation failed"
SERVER_ERROR_MESSAGE = "Internal server error"
SLOT_TAKEN_MESSAGE = "This time slot is already booked"


class AppError(Exception):
    """Base class for errors that map directly onto an HTTP status."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = SERVER_ERROR_MESSAGE

    def __init__(self, message: str | None = None, errors: Any = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class BadRequestError(AppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Bad request"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = UNAUTHORIZED_MESSAGE


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = FORBIDDEN_MESSAGE


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = NOT_FOUND_MESSAGE


class ConflictError(AppError):
    status_code = status.HTTP_409_CONFLICT
    default_message = "A record with this value already exists"


class SlotConflictError(ConflictError):
    """The requested (branch, date, slot) is held by an active appointment."""
    default_message = SLOT_TAKEN_MESSAGE


def error_response(status_code: int, message: str, errors: Any = None, headers: dict | None = None) -> JSONResponse:
    content: dict[str, Any] = {"success": False, "message": message}
    if errors is not None:
        content["errors"] = errors
    return JSONResponse(status_code=status_code, content=content, headers=headers)


async def app_error_handler(request: Request, exc: AppError):
    return error_response(exc.status_code, exc.message, exc.errors)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report pydantic validation errors as a list of field/message pairs."""
    errors = [
        {
            "field": ".".join(str(part) for part in err.get("loc", ()) if part != "body"),
            "message": err.get("msg", ""),
        }
        for err in exc.errors()
    ]
    logger.warning("Validation error for %s: %s", request.url.path, errors)
    return error_response(status.HTTP_422_UNPROCESSABLE_ENTITY, VALIDATION_MESSAGE, errors)


async def integrity_error_handler(request: Request, exc: IntegrityError):
    logger.warning("Integrity error for %s: %s", request.url.path, exc.orig)
    return error_response(status.HTTP_409_CONFLICT, ConflictError.default_message)


async def no_result_handler(request: Request, exc: NoResultFound):
    return error_response(status.HTTP_404_NOT_FOUND, NOT_FOUND_MESSAGE)


async def unhandled_exception_handler(request: Request, exc: Exception):
    """Catch-all handler for unexpected exceptions."""
    logger.error("Unexpected error on %s: %s", request.url.path, exc, exc_info=True)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, SERVER_ERROR_MESSAGE)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(NoResultFound, no_result_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
