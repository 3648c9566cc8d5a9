"""API version 1 routes."""

from fastapi import APIRouter, Depends

from budget_api.api.deps import require_api_key
from budget_api.api.v1 import budgets, summarize

router = APIRouter(prefix="/api/v1", dependencies=[Depends(require_api_key)])

# Include routers
router.include_router(summarize.router)
router.include_router(budgets.router)
