"""
Main entrypoint for the Memo Board API.

This module assembles the FastAPI application, sets up logging,
registers the error handler and includes versioned routers.  The
``create_app`` function builds and configures the app, which is then
instantiated at module import time as ``app``, e.g.::

    uvicorn memo_api.app.main:app --reload
"""

from fastapi import FastAPI

from .core.config import settings
from .core.db import init_db
from .core.errors import ServiceError, service_error_handler
from .core.logging_config import setup_logging
from .api.v1.router import router as v1_router


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Configures logging, maps ``ServiceError`` to ``{"error", "code"}``
    responses and mounts the v1 routers under ``/api/v1``.  The database
    schema is brought up to date when the application starts.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Logging first so that everything below can log.
    setup_logging(settings.log_level, settings.log_file or None)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.add_exception_handler(ServiceError, service_error_handler)

    app.include_router(v1_router, prefix="/api/v1")

    @app.on_event("startup")
    async def startup_event() -> None:
        init_db()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can discover it without calling create_app manually.
app = create_app()
