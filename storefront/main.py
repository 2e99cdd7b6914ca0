"""Storefront variant API main application module.

This module initializes the FastAPI application and configures
core middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

import structlog
from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from storefront.api.catalog import router as catalog_router
from storefront.api.errors import error_response, internal_error_response
from storefront.api.health import router as health_router
from storefront.api.middleware import setup_middleware
from storefront.api.sessions import router as sessions_router
from storefront.application.editing_service import get_attribute_catalog
from storefront.infrastructure.config import settings
from storefront.infrastructure.logging_config import configure_logging

configure_logging(settings)

logger = structlog.get_logger()


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Handle application startup and shutdown events.

    Args:
        app: The FastAPI application instance.

    Yields:
        None after startup, cleanup happens after yield.
    """
    logger.info(
        "Starting storefront variant API",
        version=settings.api_version,
        debug=settings.debug,
        storage_backend=settings.storage_backend,
        match_strategy=settings.variant_match_strategy,
    )

    attributes = await get_attribute_catalog().list_attributes()
    logger.info(
        "Attribute catalog loaded",
        attribute_count=len(attributes),
        variant_attributes=[a.id for a in attributes if a.is_variant_attribute],
    )

    yield

    if settings.storage_backend == "database":
        from storefront.infrastructure.database import get_engine

        await get_engine().dispose()

    logger.info("Shutting down storefront variant API")


app = FastAPI(
    title="Storefront Variant API",
    description="Variant generation and reconciliation for the product editor",
    version=settings.api_version,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_middleware(app)

app.include_router(health_router, tags=["Health"])
app.include_router(catalog_router)
app.include_router(sessions_router)


# ============================================================================
# Exception Handlers
# ============================================================================


def _request_id(request: Request) -> str | None:
    return getattr(request.state, "request_id", None)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Render HTTP exceptions in the error envelope."""
    detail = exc.detail
    if isinstance(detail, dict):
        return error_response(
            exc.status_code,
            detail.get("error_code", "ERROR"),
            detail.get("message", str(detail)),
            _request_id(request),
            detail.get("details"),
        )
    return error_response(exc.status_code, "ERROR", str(detail), _request_id(request))


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Render request body and query validation failures in the error envelope."""
    details = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part != "body"),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return error_response(
        422,
        "VALIDATION_ERROR",
        "Request validation failed",
        _request_id(request),
        details,
    )


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Render uncaught exceptions as a 500 envelope."""
    logger.exception(
        "Unhandled exception in handler",
        path=request.url.path,
        method=request.method,
        error=str(exc),
    )
    return internal_error_response(_request_id(request))
