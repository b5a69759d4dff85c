"""FastAPI application entrypoint for the store gateway."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from uuid import uuid4

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse

from src.api.dependencies import (
    KV_STORE_STATE_KEY,
    get_health_check_service,
    get_redis_health_indicator,
)
from src.core.config import Settings, get_settings
from src.core.logger import bind_request_context, clear_request_context, get_logger
from src.health.indicators import RedisHealthIndicator
from src.health.service import HealthCheckService
from src.storage.connection import build_connection_config
from src.storage.redis_client import KeyValueStore


REDIS_CHECK_KEY = "redis"

settings = get_settings()
logger = get_logger("store_gateway.api")


def create_store(app_settings: Settings) -> KeyValueStore:
    return KeyValueStore(build_connection_config(app_settings))


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    store = create_store(settings)
    setattr(app.state, KV_STORE_STATE_KEY, store)
    logger.info(
        "application_startup",
        env=settings.env,
        version=settings.app_version,
        redis_host=settings.redis_host,
        redis_port=settings.redis_port,
    )
    try:
        yield
    finally:
        await store.shutdown()
        setattr(app.state, KV_STORE_STATE_KEY, None)
        logger.info("application_shutdown")


app = FastAPI(title=settings.app_name, version=settings.app_version, lifespan=lifespan)


@app.middleware("http")
async def request_context_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id", str(uuid4()))
    bind_request_context(request_id=request_id)
    try:
        response = await call_next(request)
    finally:
        clear_request_context()
    response.headers["x-request-id"] = request_id
    return response


@app.get("/health")
async def health(
    indicator: RedisHealthIndicator = Depends(get_redis_health_indicator),
    service: HealthCheckService = Depends(get_health_check_service),
) -> JSONResponse:
    report, healthy = await service.check([lambda: indicator.check_health(REDIS_CHECK_KEY)])
    return JSONResponse(content=report, status_code=200 if healthy else 503)


@app.get("/version")
def version() -> dict[str, str]:
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "env": settings.env,
    }
