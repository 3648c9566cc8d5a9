from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from budget_api.config import Settings, get_settings

router = APIRouter(tags=["health"])


@router.get("/health")
async def health():
    """Basic health check."""
    return {"status": "ok"}


@router.get("/health/ready")
async def health_ready(settings: Settings = Depends(get_settings)):
    """Readiness check: the Airtable token must be configured (no remote call)."""
    if settings.airtable_token:
        return {"status": "ready", "airtable": "configured"}
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"status": "not ready", "airtable": "missing token"},
    )
