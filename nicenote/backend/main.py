"""
NiceNote API application.

Serve with `python run.py --action server` or
`uvicorn nicenote.backend.main:app`. The app is built lazily on first
attribute access so importing this module never reads configuration.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nicenote.backend.api import health
from nicenote.backend.api.routes import router as api_router
from nicenote.backend.core.config import get_app_config
from nicenote.backend.core.database import dispose_engine
from nicenote.backend.core.exception_handlers import register_exception_handlers
from nicenote.backend.core.logging import get_logger, setup_logging
from nicenote.backend.core.middleware import RequestContextMiddleware

logger = get_logger(__name__)

_app: FastAPI | None = None


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    application = get_app_config().application
    setup_logging(level=get_app_config().logging.level)
    logger.info(
        "NiceNote API starting",
        extra={"app_name": application.name, "env": application.environment},
    )
    yield
    await dispose_engine()
    logger.info("NiceNote API stopped")


def create_app() -> FastAPI:
    settings = get_app_config().application

    app = FastAPI(
        title=settings.name,
        description=settings.description,
        version=settings.version,
        docs_url="/docs" if settings.docs_enabled else None,
        redoc_url="/redoc" if settings.docs_enabled else None,
        lifespan=lifespan,
    )

    app.add_middleware(RequestContextMiddleware)
    if settings.cors.origins:
        # Browser editors read the request id and timing headers.
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.cors.origins,
            allow_credentials=True,
            allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
            allow_headers=["*"],
            expose_headers=["X-Request-ID", "X-Response-Time"],
        )

    register_exception_handlers(app)
    app.include_router(health.router, tags=["health"])
    app.include_router(api_router, prefix=settings.api_prefix)
    return app


def get_app() -> FastAPI:
    """Return the process-wide app, creating it on first use."""
    global _app
    if _app is None:
        _app = create_app()
    return _app


def __getattr__(name: str) -> FastAPI:
    if name == "app":
        return get_app()
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
