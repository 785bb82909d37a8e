"""
Main entrypoint for the Sing Me A Song API.

This module assembles the FastAPI application, sets up logging,
registers the ``AppError`` handler and includes versioned routers.
``create_app`` builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn sing_me_a_song_api.app.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from .api.v1.router import build_router
from .core.config import settings
from .core.db import init_db
from .core.errors import AppError, error_type_to_status_code
from .core.logging_config import setup_logging


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    # Create the database file and apply migrations before serving.
    init_db()
    logger.info("Database ready (%s environment)", settings.environment)
    yield


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    status_code = error_type_to_status_code(exc.type)
    logger.info("%s %s -> %s (%s)", request.method, request.url.path, status_code, exc.type)
    return JSONResponse(status_code=status_code, content={"detail": exc.message})


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that the setup below
    # can log messages.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, lifespan=lifespan)
    app.add_exception_handler(AppError, app_error_handler)
    app.include_router(build_router(), prefix="/api/v1")

    @app.get("/health")
    async def health_check() -> dict:
        return {"status": "ok"}

    return app


app = create_app()
