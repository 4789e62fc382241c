"""
Main entrypoint for the Evenza API.

This module assembles the FastAPI application: logging, CORS, the API
router under ``/api``, the static mount for uploaded files, the
validation and database error handlers and the startup hook applying
migrations.  Run
it with uvicorn, e.g.::

    uvicorn evenza_api.app.main:app --reload
"""

import logging
import sqlite3

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from .api.router import router as api_router
from .core.config import settings
from .core.db import init_db
from .core.logging_config import setup_logging
from .services.storage_service import get_upload_root


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    origins = [o.strip() for o in settings.cors_origins.split(",") if o.strip()]
    if origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.include_router(api_router, prefix="/api")

    upload_root = get_upload_root()
    upload_root.mkdir(parents=True, exist_ok=True)
    app.mount(settings.upload_url_prefix, StaticFiles(directory=str(upload_root)), name="uploads")

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = jsonable_encoder(exc.errors())
        logger.info("Validation error on %s %s: %s", request.method, request.url.path, errors)
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"detail": errors[0]["msg"] if errors else "Invalid request", "errors": errors},
        )

    @app.exception_handler(sqlite3.Error)
    async def database_error_handler(request: Request, exc: sqlite3.Error) -> JSONResponse:
        logger.error("Database error on %s %s: %s", request.method, request.url.path, exc, exc_info=exc)
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": "Internal Server Error"},
        )

    @app.on_event("startup")
    async def startup_event() -> None:
        # Creates the database file on first run and applies pending migrations
        init_db()
        logger.info("%s %s started", settings.project_name, settings.api_version)

    return app


# Created at import time so that uvicorn can discover it
app = create_app()
