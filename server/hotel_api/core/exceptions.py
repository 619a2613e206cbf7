"""API errors rendered as the `{success, message, ...}` response envelope."""

import logging
import uuid
from collections.abc import Sequence
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .config import settings

logger = logging.getLogger(__name__)

# (message fragment, HTTP status, client-facing message)
ErrorRule = tuple[str, int, str]


class ApiError(HTTPException):
    """
    Base exception for every error the API reports to its clients.

    The response body is the failure half of the API envelope:
    ``{"success": false, "message": ..., "errors"?: [...], "error"?: ...}``.
    """

    def __init__(
        self,
        status_code: int,
        message: str,
        errors: Optional[List[Dict[str, Any]]] = None,
        error: Optional[str] = None,
        extensions: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ):
        """
        Initialize API error.

        Args:
            status_code: HTTP status code
            message: Human-readable summary shown to the client
            errors: Field-level validation problems
            error: Diagnostic detail (only populated outside production)
            extensions: Additional top-level fields
            headers: HTTP headers to include in response
        """
        self.status_code = status_code
        self.message = message

        self.body: Dict[str, Any] = {
            "success": False,
            "message": message,
        }

        if errors:
            self.body["errors"] = errors

        if error:
            self.body["error"] = error

        if extensions:
            self.body.update(extensions)

        super().__init__(
            status_code=status_code,
            detail=message,
            headers=headers
        )


class ValidationError(ApiError):
    """Exception for request validation errors."""

    def __init__(
        self,
        message: str = "Validation failed",
        errors: Optional[List[Dict[str, Any]]] = None,
    ):
        super().__init__(status_code=400, message=message, errors=errors)


class BadRequestError(ApiError):
    """Exception for requests that are well-formed but not acceptable."""

    def __init__(self, message: str):
        super().__init__(status_code=400, message=message)


class AuthenticationError(ApiError):
    """Exception for authentication errors."""

    def __init__(self, message: str = "Access token required"):
        super().__init__(
            status_code=401,
            message=message,
            headers={"WWW-Authenticate": "Bearer"},
        )


class AuthorizationError(ApiError):
    """Exception for authorization errors."""

    def __init__(self, message: str = "Access denied"):
        super().__init__(status_code=403, message=message)


class NotFoundError(ApiError):
    """Exception for resource not found errors."""

    def __init__(
        self,
        resource_type: str = "Resource",
        message: Optional[str] = None,
    ):
        super().__init__(
            status_code=404,
            message=message or f"{resource_type} not found",
        )


class ConflictError(ApiError):
    """Exception for resource conflict errors."""

    def __init__(self, message: str = "The request conflicts with the current state of the resource"):
        super().__init__(status_code=409, message=message)


class InternalServerError(ApiError):
    """
    Exception for internal server errors.

    The underlying error text is only exposed in development; other
    environments get a generic marker instead.
    """

    def __init__(
        self,
        message: str = "Internal server error",
        error: Optional[str] = None,
    ):
        detail = error if (error and settings.debug) else "Internal server error"
        super().__init__(status_code=500, message=message, error=detail)


def translate_procedure_error(
    exc: Exception,
    rules: Sequence[ErrorRule],
    fallback_message: str,
) -> ApiError:
    """
    Map a database routine failure onto an API error.

    Rules are checked in order; the first whose fragment occurs in the
    exception message decides the status code and client message.

    Args:
        exc: Error raised by a database routine
        rules: Ordered (fragment, status, message) triples
        fallback_message: Message used when no rule matches (HTTP 500)

    Returns:
        ApiError: Error to raise from the route handler
    """
    text = str(exc)
    for fragment, status_code, message in rules:
        if fragment in text:
            return ApiError(status_code=status_code, message=message)

    logger.error(
        "Unmapped database routine error",
        extra={"error": text, "fallback_message": fallback_message}
    )
    return InternalServerError(fallback_message, error=text)


async def api_error_handler(request: Request, exc: ApiError) -> JSONResponse:
    """Render an ApiError as the response envelope."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.body,
        headers=exc.headers,
    )


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Render pydantic request validation failures as HTTP 400.

    Each problem is reported as ``{field, message, location}``.
    """
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ())]
        location = loc[0] if loc else "body"
        field = ".".join(loc[1:]) if len(loc) > 1 else location
        errors.append({
            "field": field,
            "message": err.get("msg", "Invalid value"),
            "location": location,
        })

    return JSONResponse(
        status_code=400,
        content={
            "success": False,
            "message": "Validation failed",
            "errors": errors,
        },
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (unknown routes, wrong methods) as the envelope."""
    if exc.status_code == 404:
        content = {
            "success": False,
            "message": "Endpoint not found",
            "path": request.url.path,
            "method": request.method,
            "suggestion": f"Try GET {settings.api_prefix} for API documentation",
        }
    else:
        content = {
            "success": False,
            "message": str(exc.detail),
        }

    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Convert unhandled exceptions to a 500 envelope.

    Args:
        request: FastAPI request object
        exc: Unhandled exception

    Returns:
        JSONResponse: Envelope with the error detail hidden outside development
    """
    error_id = str(uuid.uuid4())

    logger.error(
        "Unhandled exception",
        extra={"error_id": error_id, "path": request.url.path, "error": str(exc)},
        exc_info=exc,
    )

    return JSONResponse(
        status_code=500,
        content={
            "success": False,
            "message": "Internal server error",
            "error": str(exc) if settings.debug else "Internal server error",
            "error_id": error_id,
        },
    )
