"""Request logging middleware with secret redaction.

This module provides structured logging for all API requests with:
- Unique request IDs for tracing
- Request duration tracking
- Redaction of credentials (bearer tokens, Airtable tokens, API keys)
"""

import json
import logging
import re
import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


# Secret patterns to filter from logs
SECRET_PATTERNS = [
    # Authorization headers
    (re.compile(r"\bBearer\s+[A-Za-z0-9._~+/=-]+", re.I), "Bearer [REDACTED]"),
    # Airtable personal access tokens
    (re.compile(r"\bpat[A-Za-z0-9]{14}\.[A-Za-z0-9]{64}\b"), "[AIRTABLE_TOKEN]"),
    # Legacy Airtable API keys
    (re.compile(r"\bkey[A-Za-z0-9]{14}\b"), "[AIRTABLE_KEY]"),
    # Shared-secret header echoed in messages
    (re.compile(r"(x-api-key[\"']?\s*[:=]\s*[\"']?)[^\s\"',}]+", re.I), r"\1[REDACTED]"),
]

# Extra attributes copied from log records into JSON output
_EXTRA_FIELDS = (
    "request_id",
    "method",
    "path",
    "status_code",
    "duration_ms",
    "error_code",
    "error_type",
    "client_ip",
    "month",
    "pages",
    "transactions",
    "categories",
    "table_id",
    "requested",
    "created_count",
    "failed_count",
    "chunk_index",
    "unresolved",
    "records",
)


def redact_secrets(text: str) -> str:
    """Remove credentials from text using regex patterns.

    Args:
        text: Input text that may contain secrets

    Returns:
        Text with secrets replaced by placeholders
    """
    if not text:
        return text

    filtered = text
    for pattern, replacement in SECRET_PATTERNS:
        filtered = pattern.sub(replacement, filtered)

    return filtered


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all HTTP requests."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        """Process request and log details.

        Args:
            request: Incoming HTTP request
            call_next: Next middleware or route handler

        Returns:
            HTTP response
        """
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        start_time = time.time()

        logger.info(
            "Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client_ip": request.client.host if request.client else None,
            },
        )

        try:
            response = await call_next(request)
        except Exception as exc:
            duration_ms = int((time.time() - start_time) * 1000)
            logger.error(
                "Request failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "path": request.url.path,
                    "duration_ms": duration_ms,
                    "error_type": type(exc).__name__,
                },
            )
            raise

        duration_ms = int((time.time() - start_time) * 1000)

        response.headers["X-Request-ID"] = request_id

        logger.info(
            "Request completed",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "status_code": response.status_code,
                "duration_ms": duration_ms,
            },
        )

        return response


class JSONLogFormatter(logging.Formatter):
    """Format log records as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON-formatted log string
        """
        log_data = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": redact_secrets(record.getMessage()),
        }

        for name in _EXTRA_FIELDS:
            if hasattr(record, name):
                log_data[name] = getattr(record, name)

        if record.exc_info:
            log_data["exception"] = redact_secrets(self.formatException(record.exc_info))

        return json.dumps(log_data, default=str)
