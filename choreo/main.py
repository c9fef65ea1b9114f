"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from choreo.api.error_handlers import register_exception_handlers
from choreo.api.routers import get_api_router
from choreo.core.config import AppSettings, get_settings
from choreo.core.database import engine
from choreo.core.logging import configure_logging
from choreo.models import Base


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: D401
    """Application lifespan context for startup/shutdown hooks."""

    settings = get_settings()
    if settings.token_store_backend == "sql":
        Base.metadata.create_all(bind=engine)

    yield


def create_app(settings: AppSettings | None = None) -> FastAPI:
    """Application factory."""

    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title="Choreography Insights",
        version="1.0.0",
        lifespan=lifespan,
    )

    register_exception_handlers(app)
    app.include_router(get_api_router())
    return app


app = create_app()
