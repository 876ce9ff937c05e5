"""FastAPI application entry point.

Main application configuration, middleware, and startup lifecycle.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from inkwell.api.config.openapi import custom_openapi
from inkwell.api.exceptions import register_exception_handlers
from inkwell.api.middleware import RateLimitMiddleware, RateLimiter
from inkwell.core.config import get_settings
from inkwell.core.encryption import get_cipher
from inkwell.core.logging import configure_logging
from inkwell.core.security import get_token_service
from inkwell.models.database import close_db, create_tables, init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan handler.

    Startup:
    - Validate key material (fails fast on a bad AES key or IV)
    - Initialize database connection pool

    Shutdown:
    - Close database connections
    """
    settings = get_settings()

    get_cipher()
    get_token_service()
    logger.info("Encryption and token services configured")

    logger.info("Initializing database connection...")
    engine_kwargs = {}
    if not settings.async_database_url.startswith("sqlite"):
        engine_kwargs = {
            "pool_size": settings.database_pool_size,
            "max_overflow": settings.database_max_overflow,
        }
    init_db(settings.async_database_url, **engine_kwargs)
    if not settings.is_production:
        # Production schemas are managed by Alembic
        await create_tables()
    logger.info("Database initialized")

    yield

    logger.info("Shutting down...")
    await close_db()
    logger.info("Database connections closed")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Inkwell API",
        description="Book-writing backend with encrypted section storage",
        version=settings.app_version,
        docs_url="/api/docs" if not settings.is_production else None,
        redoc_url="/api/redoc" if not settings.is_production else None,
        openapi_url="/api/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.cors_origin],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if settings.rate_limit_enabled:
        app.add_middleware(
            RateLimitMiddleware,
            limiter=RateLimiter(
                max_requests=settings.rate_limit_max_requests,
                window_seconds=settings.rate_limit_window_seconds,
            ),
        )

    from inkwell.api.routers import auth, books, health

    app.include_router(health.router, tags=["health"])
    app.include_router(auth.router, prefix="/api/auth", tags=["auth"])
    app.include_router(books.router, prefix="/api/books", tags=["books"])

    register_exception_handlers(app)

    app.openapi = lambda: custom_openapi(app)  # type: ignore[method-assign]

    return app


# Application instance for uvicorn
app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "inkwell.api.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        workers=settings.workers if settings.environment == "production" else 1,
    )
