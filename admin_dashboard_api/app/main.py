"""
Main entrypoint for the Admin Dashboard API.

This module assembles the FastAPI application: logging, the record
stores, the activity recorder, CORS, the uploads directory, exception
handlers and the versioned routers.  ``create_app`` builds and
configures the app, which is then instantiated at module import time
as ``app``, so it can be served with uvicorn::

    uvicorn admin_dashboard_api.app.main:app --reload

Tests call ``create_app`` with their own ``Settings`` pointing at a
temporary data directory.
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.db import StoreUnavailable
from .core.logging_config import setup_logging
from .services.audit_service import AuditRecorder, install_activity_logger
from .stores import build_stores

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"


def _register_exception_handlers(app: FastAPI) -> None:
    """Render every error in the ``{"success": false, "message": ...}`` envelope."""

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.detail},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"field": ".".join(str(part) for part in error["loc"][1:]), "message": error["msg"]}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"success": False, "message": "Validation failed", "errors": errors},
        )

    @app.exception_handler(StoreUnavailable)
    async def store_exception_handler(request: Request, exc: StoreUnavailable) -> JSONResponse:
        logger.error("Store unavailable while handling %s %s", request.method, request.url.path, exc_info=exc)
        return JSONResponse(status_code=500, content={"success": False, "message": "Server error"})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    settings : Optional[Settings]
        Configuration to use.  Defaults to the module-level settings
        read from the environment.

    Returns
    -------
    FastAPI
        A configured FastAPI instance.  Stores and the activity
        recorder are created when the application starts.
    """
    settings = settings or default_settings

    # Initialise logging before anything else so that the startup below
    # can log.
    setup_logging(settings.log_level, settings.resolve(settings.log_file) if settings.log_file else None)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        stores = build_stores(settings)
        await stores.ensure_initialized()
        settings.upload_path.joinpath("products").mkdir(parents=True, exist_ok=True)

        recorder = AuditRecorder(stores.logs, max_pending=settings.audit_queue_size)
        await recorder.start()

        app.state.stores = stores
        app.state.recorder = recorder
        logger.info("%s started with data in %s", settings.project_name, settings.data_path)
        try:
            yield
        finally:
            await recorder.stop()
            logger.info("%s stopped", settings.project_name)

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        debug=settings.debug,
        lifespan=lifespan,
    )
    app.state.settings = settings

    origins = settings.cors_origin_list
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    install_activity_logger(app, API_PREFIX)
    _register_exception_handlers(app)

    app.include_router(v1_router, prefix=API_PREFIX)
    app.mount("/uploads", StaticFiles(directory=settings.upload_path, check_dir=False), name="uploads")

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
