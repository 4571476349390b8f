"""
Main entrypoint for the Student Records API.

``create_app`` assembles the FastAPI application: logging, CORS for the
browser client, the versioned routers and the record store.  The store
is passed in explicitly (or built from ``settings`` when omitted) and
kept on ``app.state``; handlers reach it through a dependency, so tests
can hand in any ``StudentStore``.  The application is instantiated at
import time so that it can be served with::

    uvicorn student_records_api.app.main:app
"""

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware

from .api.v1.endpoints.students import request_validation_handler
from .api.v1.router import router as v1_router
from .core.config import Settings, settings as default_settings
from .core.logging_config import setup_logging
from .services.student_store import StorageFault, StudentStore, create_student_store

logger = logging.getLogger(__name__)


def create_app(
    store: Optional[StudentStore] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Create and configure a FastAPI application.

    Parameters
    ----------
    store : Optional[StudentStore]
        Record store used by every handler.  When omitted, one is built
        from ``settings.database_url``.
    settings : Optional[Settings]
        Configuration; defaults to the process-wide ``settings``.
    """
    settings = settings or default_settings
    setup_logging(settings.log_level, settings.log_file or None)

    if store is None:
        store = create_student_store(
            settings.database_url,
            mongo_db_name=settings.mongo_db_name,
            mongo_timeout_ms=settings.mongo_timeout_ms,
        )

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # An unreachable store does not stop the server; requests report 500
        # until the engine becomes available.
        try:
            app.state.student_store.init()
        except StorageFault:
            logger.exception("Record store initialisation failed")
        yield
        app.state.student_store.close()

    app = FastAPI(
        title=settings.project_name,
        version=settings.api_version,
        lifespan=lifespan,
    )
    app.state.student_store = store

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.include_router(v1_router)

    logger.debug("Application created with %s", type(store).__name__)
    return app


app = create_app()
