"""
FastAPI exception handlers for structured error responses.

Maps normalized error kinds to HTTP status codes. Every error body has the
shape {"success": false, "error": NormalizedError, "timestamp": ...}.
"""

from datetime import datetime, timezone

import structlog
from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from prompt_router.api.models import ErrorResponse
from prompt_router.models.enums import ErrorKind
from prompt_router.models.llm_models import NormalizedError
from prompt_router.providers.exceptions import RouterError

logger = structlog.get_logger(__name__)


KIND_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorKind.AUTHENTICATION_ERROR: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.RATE_LIMIT_ERROR: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.MODEL_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.PROVIDER_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.TIMEOUT_ERROR: status.HTTP_408_REQUEST_TIMEOUT,
    ErrorKind.NETWORK_ERROR: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.CONFIG_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def status_code_for(exc: RouterError) -> int:
    """
    HTTP status for a router error.

    API_ERROR passes the upstream status through when it is a valid error
    status, otherwise 500.
    """
    if exc.kind == ErrorKind.API_ERROR:
        if exc.status_code and 400 <= exc.status_code < 600:
            return exc.status_code
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    return KIND_STATUS_CODES.get(exc.kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


def _error_response(status_code: int, error: NormalizedError, headers: dict | None = None) -> JSONResponse:
    body = ErrorResponse(error=error, timestamp=datetime.now(timezone.utc))
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers=headers,
    )


async def router_error_handler(request: Request, exc: RouterError) -> JSONResponse:
    """
    Handle any normalized router error.

    Args:
        request: FastAPI request
        exc: RouterError instance

    Returns:
        JSON error response
    """
    status_code = status_code_for(exc)
    logger.warning(
        "Request failed with router error",
        kind=exc.kind.value,
        status_code=status_code,
        provider=exc.provider.value if exc.provider else None,
        model=exc.model,
        error=exc.message,
    )

    headers = None
    if exc.retry_after is not None:
        headers = {"Retry-After": str(exc.retry_after)}

    return _error_response(status_code, exc.to_normalized(), headers)


async def request_validation_error_handler(
    request: Request, exc: RequestValidationError | PydanticValidationError
) -> JSONResponse:
    """
    Handle malformed request bodies.

    Maps to 400 Bad Request with kind VALIDATION_ERROR.
    """
    errors = [
        {
            "field": ".".join(str(part) for part in error.get("loc", ()) if part != "body"),
            "message": error.get("msg"),
        }
        for error in exc.errors()
    ]
    logger.warning("Invalid request format", errors=errors)

    return _error_response(
        status.HTTP_400_BAD_REQUEST,
        NormalizedError(
            kind=ErrorKind.VALIDATION_ERROR,
            message="Request validation failed",
            details={"errors": errors},
        ),
    )


async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected errors.

    Maps to 500 Internal Server Error without leaking internals.
    """
    logger.exception("Unexpected error", error_type=type(exc).__name__)

    return _error_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        NormalizedError(kind=ErrorKind.API_ERROR, message="Internal server error"),
    )


# Exception handler mapping for FastAPI app.add_exception_handler()
EXCEPTION_HANDLERS = {
    RouterError: router_error_handler,
    RequestValidationError: request_validation_error_handler,
    PydanticValidationError: request_validation_error_handler,
    Exception: generic_error_handler,
}
