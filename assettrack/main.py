"""
AssetTrack FastAPI application.

Builds the app: logging from LOG_LEVEL, a global slowapi request limit, CORS
that lets browsers read the activity-log warning header, error handlers and
the v1 routers.
"""
from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware
from slowapi.util import get_remote_address
from sqlalchemy import text

from assettrack.api.v1.responses import LOG_WARNING_HEADER
from assettrack.api.v1.router import api_router
from assettrack.core.config import settings
from assettrack.core.dependencies import DBSession
from assettrack.core.exceptions import register_exception_handlers
from assettrack.db.session import engine

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

# Applied to every route by SlowAPIMiddleware.
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[settings.RATE_LIMIT_DEFAULT],
)


def configure_logging() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)
    if not settings.DEBUG:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    logger.info(
        "Starting %s v%s (statistics timezone %s)",
        settings.APP_NAME,
        settings.APP_VERSION,
        settings.TIMEZONE,
    )
    yield
    logger.info("Shutting down %s", settings.APP_NAME)
    await engine.dispose()


def create_application() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title=settings.APP_NAME,
        version=settings.APP_VERSION,
        description=(
            "Administration API for property owners and properties, "
            "with a field-level, append-only activity log."
        ),
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Authorization", "Content-Type"],
        expose_headers=[LOG_WARNING_HEADER],
    )

    app.state.limiter = limiter
    app.add_middleware(SlowAPIMiddleware)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)  # type: ignore[arg-type]

    register_exception_handlers(app)
    app.include_router(api_router, prefix=settings.API_V1_STR)

    @app.get("/health", tags=["Health"], include_in_schema=False)
    async def health_check(db: DBSession) -> dict[str, str]:
        await db.execute(text("SELECT 1"))
        return {"status": "ok", "service": settings.APP_NAME, "database": "ok"}

    return app


app = create_application()
