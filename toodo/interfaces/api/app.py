"""FastAPI application factory."""

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toodo import __version__
from toodo.config import Settings, load_settings
from toodo.domain.todo import utcnow
from toodo.infrastructure import Database
from toodo.interfaces.api.errors import register_error_handlers
from toodo.interfaces.api.routes import router

logger = logging.getLogger(__name__)


def create_app(
    database: Database | None = None,
    settings: Settings | None = None,
    clock: Callable[[], datetime] = utcnow,
) -> FastAPI:
    """Create the FastAPI application.

    Args:
        database: Database handle to serve from. When omitted, one is opened
            from the settings and closed again on shutdown.
        settings: Settings to use; loaded from the config file if omitted.
        clock: Source of the current time for the services.
    """
    settings = settings or load_settings()
    owns_database = database is None
    database = database or Database(settings.resolved_database_url())

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the schema on startup, release the engine on shutdown."""
        database.create_all()
        yield
        if owns_database:
            database.close()
            logger.info("Database connection closed")

    app = FastAPI(
        title="toodo",
        description="Todo management with dependencies and work-time tracking",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.database = database
    app.state.settings = settings
    app.state.clock = clock

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    register_error_handlers(app)
    app.include_router(router)

    @app.get("/")
    def root():
        return {"name": "toodo", "version": __version__}

    return app
