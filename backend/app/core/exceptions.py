"""
Application error taxonomy.

Services raise these; the handlers registered in app.main turn them into
JSON responses with a stable status code and machine readable code.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for expected, caller-visible failures."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    code = "INTERNAL_ERROR"

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)
        self.message = message


class InvalidInputError(AppError):
    """Missing, oversize or mistyped payload. Always raised before any I/O."""

    status_code = status.HTTP_400_BAD_REQUEST
    code = "INVALID_INPUT"


class PayloadTooLargeError(InvalidInputError):
    status_code = status.HTTP_413_REQUEST_ENTITY_TOO_LARGE
    code = "PAYLOAD_TOO_LARGE"


class UnauthorizedError(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    code = "UNAUTHORIZED"

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class ForbiddenError(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "FORBIDDEN"

    def __init__(self, message: str = "Forbidden"):
        super().__init__(message)


class NotFoundError(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"

    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class GoneError(AppError):
    """The resource existed once but is no longer valid (expired share link)."""

    status_code = status.HTTP_410_GONE
    code = "GONE"

    def __init__(self, message: str = "Gone"):
        super().__init__(message)


class StorageError(AppError):
    """Blob backend transport or authorization failure."""

    status_code = status.HTTP_502_BAD_GATEWAY
    code = "STORAGE_ERROR"

    def __init__(self, key: str, reason: str):
        super().__init__(f"Storage operation failed for '{key}': {reason}")
        self.key = key
        self.reason = reason


class InternalError(AppError):
    pass


class ConfigurationError(Exception):
    """Invalid deployment configuration, raised at startup."""


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.message, "code": exc.code},
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Malformed requests are InvalidInput like any other payload problem."""
    return JSONResponse(
        status_code=InvalidInputError.status_code,
        content={"detail": jsonable_encoder(exc.errors()), "code": InvalidInputError.code},
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    error = InternalError()
    return JSONResponse(
        status_code=error.status_code,
        content={"detail": error.message, "code": error.code},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppError, app_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
