"""Error codes and user-friendly messages.

Each error in the catalog has:
- code: Unique identifier
- message: Technical description (for logs and API clients)
- user_message: User-friendly explanation
- suggestion: Actionable guidance for the caller
- retry_allowed: Whether re-sending the same request can succeed
"""

ERROR_CATALOG: dict[str, dict] = {
    "REQ_001": {
        "code": "REQ_001",
        "message": "Missing or invalid month (YYYY-MM)",
        "user_message": "The month parameter is missing or malformed.",
        "suggestion": "Pass the month as YYYY-MM, for example ?month=2025-10.",
        "retry_allowed": False,
    },
    "REQ_002": {
        "code": "REQ_002",
        "message": "Body must include non-empty rows[]",
        "user_message": "No budget rows were provided.",
        "suggestion": 'Send a JSON body like {"rows": [{"Month": "2025-10", "CategoryName": "Travel", "Planned": 800}]}.',
        "retry_allowed": False,
    },
    "REQ_003": {
        "code": "REQ_003",
        "message": "Method not allowed",
        "user_message": "This endpoint does not support that HTTP method.",
        "suggestion": "Check the Allow response header for supported methods.",
        "retry_allowed": False,
    },
    "AUTH_001": {
        "code": "AUTH_001",
        "message": "Unauthorized",
        "user_message": "The request is missing a valid API key.",
        "suggestion": "Send the shared secret in the x-api-key header.",
        "retry_allowed": False,
    },
    "CFG_001": {
        "code": "CFG_001",
        "message": "Missing Airtable token env var",
        "user_message": "The service is not configured to reach the data store.",
        "suggestion": "Set AIRTABLE_TOKEN in the service environment.",
        "retry_allowed": False,
    },
    "STORE_001": {
        "code": "STORE_001",
        "message": "Airtable request failed",
        "user_message": "The data store rejected or failed a request.",
        "suggestion": "Check the message for details and re-send the request.",
        "retry_allowed": True,
    },
    "STORE_002": {
        "code": "STORE_002",
        "message": "Batch write aborted",
        "user_message": "Some budget rows may have been created before the data store failed.",
        "suggestion": "Review created_ids before re-sending, otherwise those rows will be duplicated.",
        "retry_allowed": True,
    },
    "VAL_001": {
        "code": "VAL_001",
        "message": "Request validation failed",
        "user_message": "Invalid input data",
        "suggestion": "Please check your input and try again",
        "retry_allowed": True,
    },
    "SYS_001": {
        "code": "SYS_001",
        "message": "Internal server error",
        "user_message": "An unexpected error occurred",
        "suggestion": "Please try again later or contact support",
        "retry_allowed": True,
    },
}


def get_error(error_code: str) -> dict:
    """Get error definition by code.

    Args:
        error_code: Error code from the catalog

    Returns:
        Dict with error details; a generic entry for unknown codes
    """
    if error_code not in ERROR_CATALOG:
        return {
            "code": "UNKNOWN",
            "message": f"Unknown error code: {error_code}",
            "user_message": "An unexpected error occurred.",
            "suggestion": "Please try again. Contact support if the problem persists.",
            "retry_allowed": True,
        }
    return ERROR_CATALOG[error_code]


def is_retryable(error_code: str) -> bool:
    """Check if an error is retryable."""
    return get_error(error_code)["retry_allowed"]
