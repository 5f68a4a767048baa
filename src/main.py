"""FastAPI application entry point.

Run with: uvicorn src.main:app --reload --port 3000
      or: python -m src.main   (binds HOST:PORT from settings, uvloop event loop)
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import redis.asyncio as aioredis
import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, PlainTextResponse
from redis.exceptions import RedisError
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine

from config.settings import Settings
from config.settings import settings as default_settings
from src.svc_cache.cache_aside import CacheAside
from src.svc_common.database import create_engine, create_session_factory
from src.svc_common.errors import AppError, StoreError
from src.svc_common.logging import configure_logging
from src.svc_common.redis_client import close_redis, create_redis
from src.svc_common.request_log import RequestLogMiddleware
from src.svc_user.api.router import router as user_router
from src.svc_user.application.service import UserService

VERSION = "0.1.0"

logger = logging.getLogger(__name__)


def create_app(
    settings: Settings = default_settings,
    engine: AsyncEngine | None = None,
    redis: aioredis.Redis | None = None,
) -> FastAPI:
    """Build the app. Injected engine/redis handles are used as-is and not closed."""

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Startup: build pool + cache handles, verify DB. Shutdown: dispose."""
        configure_logging(settings)
        db_engine = engine or create_engine(settings)
        cache_client = redis or create_redis(settings)

        async with db_engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        try:
            await cache_client.ping()
        except (RedisError, OSError) as exc:
            # Reads degrade to the store; not a startup failure
            logger.warning("cache unavailable at startup: %r", exc)

        app.state.session_factory = create_session_factory(db_engine)
        app.state.cache = CacheAside(
            cache_client,
            ttl_seconds=settings.CACHE_TTL_SECONDS,
            single_flight=settings.CACHE_SINGLE_FLIGHT,
        )
        app.state.user_service = UserService(
            timeout_seconds=settings.STORE_TIMEOUT_SECONDS
        )
        logger.info("Server is running on %s:%d", settings.HOSTNAME, settings.PORT)
        yield
        if engine is None:
            await db_engine.dispose()
        if redis is None:
            await close_redis(cache_client)

    app = FastAPI(
        title=settings.APP_NAME,
        version=VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(RequestLogMiddleware)

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        if isinstance(exc, StoreError):
            logger.error(
                "store error on %s %s: %s",
                request.method,
                request.url.path,
                exc,
                exc_info=exc,
            )
        return JSONResponse(status_code=exc.http_status, content={"error": exc.message})

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = first.get("msg", "Invalid request")
        content = {"error": f"{location}: {message}" if location else message}
        return JSONResponse(status_code=400, content=content)

    @app.get("/", response_class=PlainTextResponse)
    async def greeting() -> str:
        return f"Hello, World {settings.HOSTNAME}!\n"

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok", "version": VERSION}

    app.include_router(user_router)
    return app


app = create_app()


def run() -> None:
    uvicorn.run(
        "src.main:app",
        host=default_settings.HOST,
        port=default_settings.PORT,
        loop="uvloop",
    )


if __name__ == "__main__":
    run()
