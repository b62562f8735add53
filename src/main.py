"""Registry API entry point.

Run with: uvicorn src.main:app --reload --port 8000
Requires `alembic upgrade head` first: startup refuses to serve without the
registry_config row.
"""

# ruff: noqa: E402  -- uvloop.install() must run before other imports

import uvloop

uvloop.install()

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from config.settings import settings
from src.pm_admin.api.router import router as admin_router
from src.pm_common.database import async_session_factory, engine
from src.pm_common.errors import AppError
from src.pm_common.redis_client import close_redis, get_redis
from src.pm_common.response import error_response
from src.pm_gateway.middleware.request_log import RequestLogMiddleware
from src.pm_market.api.router import router as market_router
from src.pm_market.infrastructure.persistence import MarketRepository

logger = logging.getLogger(__name__)

VERSION = "0.1.0"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Startup: load registry_config (proves DB + schema) and ping Redis."""
    async with async_session_factory() as db:
        config = await MarketRepository().get_config(db)
    redis = await get_redis()
    await redis.ping()
    logger.info(
        "Registry ready: owner=%s resolver=%s fee=%d markets=%d channel=%s",
        config.owner,
        config.resolver,
        config.creation_fee,
        config.market_count,
        settings.MARKET_EVENTS_CHANNEL,
    )
    yield
    await engine.dispose()
    await close_redis()


app = FastAPI(
    title=settings.APP_NAME,
    version=VERSION,
    lifespan=lifespan,
)


app.add_middleware(RequestLogMiddleware)


@app.exception_handler(AppError)
async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    resp = error_response(exc.code, exc.message)
    resp.request_id = getattr(request.state, "request_id", resp.request_id)
    if exc.http_status >= 500:
        logger.error("AppError %d on %s: %s", exc.code, request.url.path, exc.message)
    return JSONResponse(
        status_code=exc.http_status,
        content=resp.model_dump(),
    )


app.include_router(market_router, prefix="/api/v1")
app.include_router(admin_router, prefix="/api/v1")


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok", "service": settings.APP_NAME, "version": VERSION}
