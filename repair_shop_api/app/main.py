"""
Main entrypoint for the Repair Shop API.

This module assembles the FastAPI application: it sets up logging,
builds the ``Database`` handle and the repository services around it,
registers exception handlers and includes the versioned routers.  The
module-level ``app`` makes the application discoverable by uvicorn::

    uvicorn repair_shop_api.app.main:app --reload
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.v1.router import router as v1_router
from .core.config import Settings, settings
from .core.db import Database
from .core.errors import StoreError
from .core.logging_config import setup_logging
from .services import InventoryService, TicketService

logger = logging.getLogger(__name__)


def _field_name(loc: tuple) -> str:
    # ("body", "customerName") -> "customerName"; ("query", "status") -> "query.status"
    parts = [str(part) for part in loc]
    if parts and parts[0] == "body":
        parts = parts[1:]
    return ".".join(parts)


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report invalid payloads as 400 with one entry per offending field."""
    errors = [
        {"field": _field_name(err.get("loc", ())), "message": err.get("msg", ""), "type": err.get("type", "")}
        for err in exc.errors()
    ]
    logger.info("Rejected %s %s: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": "Invalid request data", "errors": errors},
    )


async def store_exception_handler(request: Request, exc: StoreError) -> JSONResponse:
    # The cause has already been logged by the service; only the generic
    # message is returned.
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": str(exc)},
    )


def create_app(app_settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    app_settings : Optional[Settings]
        Settings to use instead of the ones read from the environment.
        Tests pass their own instance pointing at a temporary database.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.  The database schema
        is applied on startup and the handle is closed on shutdown.
    """
    app_settings = app_settings or settings
    setup_logging(app_settings.log_level, app_settings.log_file or None)

    app = FastAPI(
        title=app_settings.project_name,
        version=app_settings.api_version,
        debug=app_settings.debug,
    )

    db = Database(app_settings.database_url)
    app.state.settings = app_settings
    app.state.db = db
    app.state.ticket_service = TicketService(db, serial_prefix=app_settings.serial_prefix)
    app.state.inventory_service = InventoryService(db)

    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StoreError, store_exception_handler)

    app.include_router(v1_router, prefix=app_settings.api_prefix)

    @app.on_event("startup")
    async def startup_event() -> None:
        db.init_db()

    @app.on_event("shutdown")
    async def shutdown_event() -> None:
        db.close()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
