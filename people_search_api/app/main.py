"""
Main entrypoint for the People Search API.

This module assembles the FastAPI application, sets up logging and
includes the API routers.  The ``create_app`` function builds and
configures the app, which is then instantiated at module import time
as ``app``, e.g.::

    uvicorn people_search_api.app.main:app --reload

The application title and version are provided via ``Settings`` from
``core.config``.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .api.router import router as api_router
from .core.config import settings
from .core.db import init_db
from .core.errors import ErrorKind, ValidationError
from .core.logging_config import setup_logging
from .core.seed import seed_database


logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    """Create and configure a FastAPI application.

    Configures logging, mounts the API routers under ``/api`` and
    registers a startup hook that creates the database schema and,
    when enabled, loads the demo data.

    Returns
    -------
    FastAPI
        A configured FastAPI application instance.
    """
    # Initialise logging before anything else so that startup code can
    # log.  The level comes from settings.
    setup_logging(settings.log_level, settings.log_file or None, access_log=settings.debug)

    app = FastAPI(title=settings.project_name, version=settings.api_version, debug=settings.debug)

    app.include_router(api_router, prefix="/api")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        # A body that does not even parse into the schema is a bad request,
        # like the blank-field errors raised by the services.
        detail = ValidationError(ErrorKind.UNRECOGNIZED_JSON_OBJECT).to_detail()
        detail["errors"] = jsonable_encoder(exc.errors())
        logger.warning("Rejected unparseable request to %s", request.url.path)
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": detail})

    @app.on_event("startup")
    async def startup_event() -> None:
        init_db()
        if settings.seed_demo_data:
            seed_database()

    return app


# Create the application instance at import time so that tools such as
# uvicorn can import it directly.
app = create_app()
