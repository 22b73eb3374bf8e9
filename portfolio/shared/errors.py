"""
Error taxonomy and secure error handling

Defines the exceptions raised by the content, page and stats layers and
maps them onto the uniform ``{"success": false, "error": ...}`` envelope
without leaking internals to the client.
"""

import logging
import uuid
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException

logger = logging.getLogger(__name__)


class PortfolioError(Exception):
    """Base class for errors raised by this service."""


class StoreUnavailable(PortfolioError, ConnectionError):
    """The document store could not be reached."""


class NotFound(PortfolioError):
    """No record matches the requested id or slug."""


class ValidationFailure(PortfolioError):
    """The store or schema rejected a write (duplicate slug, missing field)."""


class StatsUnavailable(PortfolioError):
    """A third-party stats call failed."""


class StatsUserNotFound(StatsUnavailable):
    pass


class StatsRateLimited(StatsUnavailable):
    pass


class PageBuildError(PortfolioError):
    """First-time generation of a page failed."""


def log_and_sanitize_error(
    error: Exception,
    context: str,
    user_message: Optional[str] = None
) -> tuple[str, str]:
    """
    Log full error details server-side and return sanitized message for client.

    Args:
        error: The exception that occurred
        context: Description of what operation failed (e.g., "Project update")
        user_message: Optional custom message to show user. If None, uses generic message.

    Returns:
        Tuple of (sanitized_message, error_id) for client response
    """
    error_id = str(uuid.uuid4())[:8]

    logger.error(
        f"{context} failed [{error_id}]: {type(error).__name__}: {str(error)}",
        exc_info=True
    )

    if user_message:
        sanitized = f"{user_message} (Error ID: {error_id})"
    else:
        sanitized = f"{context} failed. Please try again later. (Error ID: {error_id})"

    return sanitized, error_id


def error_response(message: Optional[str], status_code: int) -> JSONResponse:
    """Consistent error payloads across the API."""
    content = {"success": False}
    if message:
        content["error"] = message
    return JSONResponse(status_code=status_code, content=content)


def install_exception_handlers(app: FastAPI) -> None:
    """Register the envelope-producing exception handlers on ``app``."""

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        detail = exc.detail
        message = detail.get("message") if isinstance(detail, dict) else detail
        return error_response(
            message=str(message) if message else None,
            status_code=exc.status_code,
        )

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        errors = exc.errors()
        if errors:
            first = errors[0]
            location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
            message = f"{location}: {first.get('msg')}" if location else first.get("msg")
        else:
            message = "Invalid request"
        return error_response(message=message, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(ValidationFailure)
    async def validation_failure_handler(request: Request, exc: ValidationFailure):
        return error_response(message=str(exc), status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(NotFound)
    async def not_found_handler(request: Request, exc: NotFound):
        return error_response(message=str(exc), status_code=status.HTTP_404_NOT_FOUND)

    @app.exception_handler(StoreUnavailable)
    async def store_unavailable_handler(request: Request, exc: StoreUnavailable):
        logger.error(f"Store unavailable on {request.url.path}: {exc}")
        return error_response(message=None, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(SQLAlchemyError)
    async def database_exception_handler(request: Request, exc: SQLAlchemyError):
        logger.exception("Database error on %s", request.url.path)
        return error_response(message=None, status_code=status.HTTP_400_BAD_REQUEST)

    @app.exception_handler(PageBuildError)
    async def page_build_handler(request: Request, exc: PageBuildError):
        return error_response(
            message="Page temporarily unavailable",
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        )

    @app.exception_handler(Exception)
    async def unexpected_exception_handler(request: Request, exc: Exception):
        sanitized, _ = log_and_sanitize_error(exc, f"Request {request.url.path}")
        return error_response(
            message=sanitized,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
