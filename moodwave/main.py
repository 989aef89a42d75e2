"""Application entry point for the FastAPI backend."""
from __future__ import annotations

import logging
import sys
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .clients import AuthProvider, SpotifyClient
from .config import Settings, get_settings
from .database import Database
from .routers import (
    auth_router,
    catalog_router,
    friends_router,
    mood_posts_router,
    profiles_router,
    realtime_router,
)
from .services import NotificationHub

logger = logging.getLogger(__name__)


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
    )


def create_app(
    settings: Settings | None = None,
    *,
    spotify_client: AuthProvider | None = None,
) -> FastAPI:
    """Build an application with its own store, notification hub and upstream client."""

    settings = settings or get_settings()
    configure_logging(settings.log_level)

    database = Database(settings.database_url)
    # The in-memory store only lives as long as its engine, so build the schema now.
    database.init_schema()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("%s %s serving (database: %s)", settings.app_name, settings.api_version, database.engine.url.get_backend_name())
        yield
        database.dispose()
        logger.info("%s shut down", settings.app_name)

    app = FastAPI(title=settings.app_name, version=settings.api_version, lifespan=lifespan)
    app.state.settings = settings
    app.state.database = database
    app.state.notification_hub = NotificationHub()
    app.state.spotify_client = spotify_client or SpotifyClient(settings)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origin_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(auth_router)
    app.include_router(catalog_router)
    app.include_router(friends_router)
    app.include_router(mood_posts_router)
    app.include_router(profiles_router)
    app.include_router(realtime_router)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        error_id = str(uuid.uuid4())[:8]
        logger.error(
            "[ERROR_ID: %s] Unhandled exception on %s %s",
            error_id,
            request.method,
            request.url.path,
            exc_info=exc,
        )
        return JSONResponse(
            status_code=500,
            content={"detail": "An internal server error occurred", "error_id": error_id},
        )

    @app.get("/api", tags=["system"])
    def api_info() -> dict[str, str]:
        return {"service": settings.app_name, "version": settings.api_version}

    @app.get("/health", tags=["system"])
    async def healthcheck() -> dict[str, str]:
        return {"status": "ok"}

    return app


app = create_app()


__all__ = ["app", "create_app", "configure_logging"]
