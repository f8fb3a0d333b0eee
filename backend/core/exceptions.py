"""
API error types and the handlers that render them.

Services raise ``APIError`` subclasses directly. ``register_exception_handlers``
renders them, and stray ``ValueError``s, as ``{detail, error_code, path}``
JSON bodies. Server-side failures are logged here; their ``detail`` is
always a public-safe message.
"""

from fastapi import HTTPException, Request, status
from fastapi.responses import JSONResponse
from typing import Any, Dict, Optional
import logging

logger = logging.getLogger(__name__)


class APIError(HTTPException):
    """HTTP error carrying a machine-readable ``error_code``"""

    default_status = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = "Internal server error"
    default_error_code = "INTERNAL_ERROR"
    default_headers: Optional[Dict[str, Any]] = None

    def __init__(
        self,
        detail: Optional[str] = None,
        error_code: Optional[str] = None,
        status_code: Optional[int] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=status_code or self.default_status,
            detail=detail or self.default_detail,
            headers=headers or self.default_headers,
        )
        self.error_code = error_code or self.default_error_code


class ValidationError(APIError):
    default_status = status.HTTP_400_BAD_REQUEST
    default_detail = "Validation failed"
    default_error_code = "VALIDATION_ERROR"


class AuthenticationError(APIError):
    default_status = status.HTTP_401_UNAUTHORIZED
    default_detail = "Not authorized"
    default_error_code = "AUTH_FAILED"
    default_headers = {"WWW-Authenticate": "Bearer"}


class AuthorizationError(APIError):
    """Authenticated, but not allowed to use this resource"""

    default_status = status.HTTP_403_FORBIDDEN
    default_detail = "Permission denied"
    default_error_code = "PERMISSION_DENIED"


class NotFoundError(APIError):
    default_status = status.HTTP_404_NOT_FOUND
    default_detail = "Resource not found"
    default_error_code = "NOT_FOUND"


class InternalServerError(APIError):
    """Failure whose cause must not reach the caller"""


def _error_body(request: Request, detail: str, error_code: str) -> Dict[str, Any]:
    return {"detail": detail, "error_code": error_code, "path": str(request.url.path)}


async def handle_value_error(request: Request, exc: ValueError) -> JSONResponse:
    """Convert ValueError to consistent API response"""
    logger.warning(f"ValueError at {request.url.path}: {str(exc)}")
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(request, str(exc), "VALIDATION_ERROR"),
    )


async def handle_api_error(request: Request, exc: APIError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error(f"{exc.error_code} at {request.url.path}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, exc.detail, exc.error_code),
        headers=exc.headers,
    )


def register_exception_handlers(app):
    """Register all exception handlers with the FastAPI app"""
    app.add_exception_handler(ValueError, handle_value_error)
    app.add_exception_handler(APIError, handle_api_error)
