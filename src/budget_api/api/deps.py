"""FastAPI dependencies for settings, shared-secret auth and the store transport."""

import secrets

import httpx
from fastapi import Depends, Header

from budget_api.config import Settings, get_settings
from budget_api.core.exceptions import UnauthorizedError


async def require_api_key(
    x_api_key: str | None = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """
    Check the x-api-key header when a shared secret is configured.

    Args:
        x_api_key: Value of the x-api-key request header
        settings: Application settings

    Raises:
        UnauthorizedError: If a secret is configured and the header does not match
    """
    expected = settings.x_api_key
    if not expected:
        return
    if x_api_key is None or not secrets.compare_digest(x_api_key.encode(), expected.encode()):
        raise UnauthorizedError()


def get_store_transport() -> httpx.AsyncBaseTransport | None:
    """
    Transport for outgoing Airtable requests.

    Returns None so httpx uses its default network transport; tests override
    this dependency with an ``httpx.MockTransport``.
    """
    return None
