"""Global error handling.

All exceptions are converted to one JSON shape:
{error_code, message, user_message, suggestion, retry_allowed}
with the status code carried by the exception.
"""

import logging

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from budget_api.config import settings
from budget_api.core.errors import get_error
from budget_api.core.exceptions import BudgetApiError

logger = logging.getLogger(__name__)


def _error_content(error_code: str, message: str | None = None) -> dict:
    error_info = get_error(error_code)
    return {
        "error_code": error_code,
        "message": message or error_info["message"],
        "user_message": error_info["user_message"],
        "suggestion": error_info["suggestion"],
        "retry_allowed": error_info["retry_allowed"],
    }


async def handle_budget_api_error(request: Request, exc: BudgetApiError) -> JSONResponse:
    """Handle API exceptions raised by services, dependencies and the store client.

    Args:
        request: The incoming request
        exc: The API exception

    Returns:
        JSONResponse with catalog details, the exception message and its context
    """
    extra = {"error_code": exc.error_code, "path": request.url.path, "method": request.method}
    if settings.debug:
        extra["details"] = exc.details

    if exc.http_status >= 500:
        logger.error(f"Request failed: {exc.error_code}", extra=extra)
    else:
        logger.warning(f"Request rejected: {exc.error_code}", extra=extra)

    content = _error_content(exc.error_code, exc.message)
    content.update(exc.context)
    return JSONResponse(status_code=exc.http_status, content=content)


async def handle_http_exception(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    """Handle framework HTTP errors (405, 404) in the same JSON shape.

    Response headers such as ``Allow`` are preserved.
    """
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED:
        content = _error_content("REQ_003")
    else:
        content = {
            "error_code": f"HTTP_{exc.status_code}",
            "message": str(exc.detail),
            "user_message": str(exc.detail),
            "suggestion": "Please check the request URL and method",
            "retry_allowed": False,
        }

    logger.warning(
        f"HTTP {exc.status_code} on {request.url.path}",
        extra={"path": request.url.path, "method": request.method, "status_code": exc.status_code},
    )
    return JSONResponse(
        status_code=exc.status_code,
        content=content,
        headers=getattr(exc, "headers", None),
    )


async def handle_validation_error(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle Pydantic validation errors.

    Args:
        request: The incoming request
        exc: The validation error

    Returns:
        JSONResponse with validation error details
    """
    errors = exc.errors()
    error_messages = []

    for error in errors:
        field = ".".join(str(x) for x in error.get("loc", []))
        msg = error.get("msg", "Invalid value")
        error_messages.append(f"{field}: {msg}")

    extra = {"path": request.url.path, "method": request.method}
    if settings.debug:
        extra["errors"] = errors
    logger.warning(f"Validation error on {request.url.path}", extra=extra)

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_content("VAL_001", " | ".join(error_messages)),
    )


async def handle_generic_error(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions.

    Args:
        request: The incoming request
        exc: The unexpected exception

    Returns:
        JSONResponse with generic error message
    """
    extra = {
        "error_type": type(exc).__name__,
        "path": request.url.path,
        "method": request.method,
    }
    # In non-debug: do not log str(exc) or traceback (may include tokens or URLs).
    if settings.debug:
        logger.exception(f"Unexpected error on {request.url.path}", extra=extra)
    else:
        logger.error(f"Unexpected error on {request.url.path}", extra=extra)

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_content("SYS_001"),
    )
