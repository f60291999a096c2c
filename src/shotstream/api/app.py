"""
FastAPI Application Factory & Configuration.

This module initializes the FastAPI application instance. It is responsible for:
1.  **Middleware Setup**: CORS for browser-based result viewers.
2.  **Exception Handling**: Global handlers so all errors return structured JSON.
3.  **Routing**: Mounting the events router and the health probe.
4.  **Lifecycle**: Flushing a pending refresh on shutdown.

Design Pattern
--------------
An **Application Factory** (`create_app`) builds a fresh session per app, so
tests get isolated state and can inject a manual timer.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from shotstream import __version__
from shotstream.api.routers import events
from shotstream.api.session import ShotSession
from shotstream.core.events.timers import OneShotTimer
from shotstream.core.settings import Settings, load_settings, settings_logger


def create_app(settings: Settings | None = None, timer: OneShotTimer | None = None) -> FastAPI:
    """
    Construct and configure the shotstream FastAPI application.

    Parameters
    ----------
    settings : Settings | None
        Configuration; defaults to :func:`load_settings`.
    timer : OneShotTimer | None
        Refresh timer; defaults to an asyncio timer on the server loop.

    Returns
    -------
    FastAPI
        The configured ASGI application ready to be served by Uvicorn.
    """
    cfg = settings if settings is not None else load_settings()
    logger = settings_logger(cfg, "api")
    session = ShotSession(cfg, timer=timer)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        logger.info("shotstream API starting (env=%s)", cfg.environment)
        yield
        session.close()
        logger.info("shotstream API stopped")

    app = FastAPI(
        title="shotstream API",
        description="Shot result reconstruction from execution event streams",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )
    app.state.session = session

    # -----------------------------------------------------------------------
    # Middleware
    # -----------------------------------------------------------------------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # -----------------------------------------------------------------------
    # Global Exception Handlers
    # -----------------------------------------------------------------------
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Return unhandled exceptions as structured JSON instead of a 500 page."""
        logger.exception("Unhandled error on %s", request.url.path)
        return JSONResponse(
            status_code=500,
            content={
                "error": "Internal Server Error",
                "detail": str(exc),
                "path": request.url.path,
            },
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError) -> JSONResponse:
        """Map Python ValueErrors to HTTP 400 Bad Request."""
        return JSONResponse(
            status_code=400,
            content={
                "error": "Bad Request",
                "detail": str(exc),
            },
        )

    # -----------------------------------------------------------------------
    # Routes
    # -----------------------------------------------------------------------
    app.include_router(events.router)

    @app.get("/health", tags=["System"])
    async def health_check() -> dict[str, str]:
        """Simple liveness probe."""
        return {"status": "ok", "environment": cfg.environment, "version": __version__}

    return app


get_app = create_app

__all__ = ["create_app", "get_app"]
