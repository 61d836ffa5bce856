"""FastAPI application entry point."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from apparel_catalog.api.catalog import CatalogAPIError
from apparel_catalog.api.catalog import router as catalog_router
from apparel_catalog.config import settings
from apparel_catalog.database import (
    create_engine_from_settings,
    create_session_factory,
    create_tables,
)
from apparel_catalog.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Own the database engine for the lifetime of the process."""
    configure_logging(settings.log_level)
    engine = create_engine_from_settings(settings)
    if settings.create_tables_on_startup:
        await create_tables(engine)
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    logger.info("Database engine ready")
    try:
        yield
    finally:
        await engine.dispose()
        logger.info("Database engine disposed")


app = FastAPI(
    title="Apparel Catalog",
    description="Catalog item management for custom apparel orders",
    version="0.1.0",
    debug=settings.debug,
    lifespan=lifespan,
)

app.include_router(catalog_router)


def format_validation_errors(exc: RequestValidationError) -> list[str]:
    """Flatten request validation errors into ``"field: message"`` strings."""
    messages = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(location) or "body"
        messages.append(f"{field}: {error.get('msg', 'invalid value')}")
    return messages


@app.exception_handler(RequestValidationError)
async def validation_error_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={
            "success": False,
            "message": "Invalid request data",
            "errors": format_validation_errors(exc),
        },
    )


@app.exception_handler(CatalogAPIError)
async def catalog_error_handler(request: Request, exc: CatalogAPIError) -> JSONResponse:
    content = {"success": False, "message": exc.message}
    if exc.error:
        content["error"] = exc.error
    return JSONResponse(status_code=exc.status_code, content=content)


@app.get("/health")
async def health_check() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}
