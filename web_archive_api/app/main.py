"""
Main entrypoint for the Web Archive Tag API.

This module assembles the FastAPI application, sets up logging,
registers the envelope exception handlers and includes versioned
routers.  The app is instantiated at import time as ``app``, so it can
be served with::

    uvicorn web_archive_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from .core.config import settings
from .core.logging_config import setup_logging
from .core.result import ResultError, error
from .api.v1.router import router as v1_router
from .core.db import init_db


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Creates the database file if needed and brings the schema up to date.
    init_db()
    logger.info("Database ready")
    yield


async def result_error_handler(request: Request, exc: ResultError) -> JSONResponse:
    """Render a ``ResultError`` as an error envelope."""
    level = logging.WARNING if exc.code >= 500 else logging.DEBUG
    logger.log(level, "%s %s -> %s %s", request.method, request.url.path, exc.code, exc.message)
    return JSONResponse(status_code=exc.code, content=error(exc.code, exc.message))


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Render framework HTTP errors (401, 404, 405) as error envelopes."""
    return JSONResponse(
        status_code=exc.status_code,
        content=error(exc.status_code, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.add_exception_handler(ResultError, result_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)

    app.include_router(v1_router, prefix="/api/v1")

    return app


app = create_app()
