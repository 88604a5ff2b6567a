"""
Error types raised by the service layer and the handlers that turn them
into ``{"success": false, "error": ...}`` responses.
"""
import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)


class SalonEaseError(Exception):
    """Base class for errors that map onto an HTTP status."""

    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class BadRequest(SalonEaseError):
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidTimeSlot(BadRequest):
    """The requested date/time is malformed or not strictly in the future."""


class SlotAlreadyBooked(BadRequest):
    """An active booking already occupies the (salon, date, time) slot."""


class InvalidStatusTransition(BadRequest):
    """The booking's current status does not allow the requested change."""


class NotAuthorized(SalonEaseError):
    status_code = status.HTTP_401_UNAUTHORIZED


class Forbidden(SalonEaseError):
    status_code = status.HTTP_403_FORBIDDEN


class NotFound(SalonEaseError):
    status_code = status.HTTP_404_NOT_FOUND


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


def _describe_validation_error(exc: RequestValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return "Invalid request"
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())[1:])
    if location:
        return f"{location}: {first.get('msg', 'invalid value')}"
    return first.get("msg", "Invalid request")


def register_exception_handlers(app: FastAPI) -> None:
    """Render every failure with the same envelope."""

    @app.exception_handler(SalonEaseError)
    async def salonease_error_handler(request: Request, exc: SalonEaseError):
        logger.info(f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}")
        return error_response(exc.status_code, exc.message)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        response = error_response(exc.status_code, str(exc.detail))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
        return error_response(status.HTTP_400_BAD_REQUEST, _describe_validation_error(exc))

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        logger.exception(f"Unhandled error for {request.method} {request.url.path}")
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error")
