"""Exception hierarchy for request handling and data store access.

Every exception maps to an error code in errors.py and carries the HTTP
status the API should answer with.
"""

from typing import Any


class BudgetApiError(Exception):
    """Base exception for all API errors.

    Attributes:
        error_code: Code from the error catalog (e.g., "REQ_001")
        message: Message shown to API clients; defaults to the catalog message
        details: Additional context for logs only
        context: Additional fields merged into the error response
        http_status: HTTP status code to return
    """

    default_code = "SYS_001"
    default_status = 500

    def __init__(
        self,
        message: str | None = None,
        *,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
        context: dict[str, Any] | None = None,
        http_status: int | None = None,
    ):
        self.error_code = error_code or self.default_code
        self.message = message
        self.details = details or {}
        self.context = context or {}
        self.http_status = http_status or self.default_status
        super().__init__(message or self.error_code)


class InvalidMonthError(BudgetApiError):
    """Raised when the month query parameter is missing or not YYYY-MM."""

    default_code = "REQ_001"
    default_status = 400


class EmptyPayloadError(BudgetApiError):
    """Raised when a budget request carries no rows."""

    default_code = "REQ_002"
    default_status = 400


class UnauthorizedError(BudgetApiError):
    """Raised when the shared-secret header is missing or wrong."""

    default_code = "AUTH_001"
    default_status = 401


class MissingCredentialsError(BudgetApiError):
    """Raised when no Airtable token is configured."""

    default_code = "CFG_001"
    default_status = 500


class RemoteStoreError(BudgetApiError):
    """Raised when an Airtable call fails.

    The message is the store's own error message, passed through verbatim.
    """

    default_code = "STORE_001"
    default_status = 502

    def __init__(self, message: str, *, status_code: int | None = None, **kwargs: Any):
        self.status_code = status_code
        super().__init__(message, **kwargs)


class BatchWriteError(RemoteStoreError):
    """Raised when a create chunk fails after earlier chunks were written.

    Records created by earlier chunks are kept (there is no rollback) and
    reported through ``created``.
    """

    default_code = "STORE_002"

    def __init__(
        self,
        message: str,
        *,
        created: list[dict[str, Any]],
        chunk_index: int,
        status_code: int | None = None,
    ):
        self.created = created
        self.chunk_index = chunk_index
        super().__init__(
            message,
            status_code=status_code,
            details={"chunk_index": chunk_index},
            context={
                "created_count": len(created),
                "created_ids": [record.get("id") for record in created],
            },
        )
