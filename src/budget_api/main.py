from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from budget_api.api.middleware.error_handler import (
    handle_budget_api_error,
    handle_generic_error,
    handle_http_exception,
    handle_validation_error,
)
from budget_api.api.middleware.logging import RequestLoggingMiddleware
from budget_api.api.v1 import router as v1_router
from budget_api.api.v1.health import router as health_router
from budget_api.config import settings
from budget_api.core.exceptions import BudgetApiError
from budget_api.core.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    yield
    # Shutdown


def create_app() -> FastAPI:
    setup_logging(settings.log_level, json_format=settings.log_json)

    app = FastAPI(
        title="Airtable Budget API",
        description="Monthly transaction summaries and budget creation over Airtable",
        version="0.1.0",
        debug=settings.debug,
        lifespan=lifespan,
    )

    # Add request logging middleware
    app.add_middleware(RequestLoggingMiddleware)

    # Register exception handlers (order matters - most specific first)
    app.add_exception_handler(BudgetApiError, handle_budget_api_error)
    app.add_exception_handler(RequestValidationError, handle_validation_error)
    app.add_exception_handler(StarletteHTTPException, handle_http_exception)
    app.add_exception_handler(Exception, handle_generic_error)

    # Register routers
    app.include_router(health_router)
    app.include_router(v1_router)

    return app


app = create_app()
