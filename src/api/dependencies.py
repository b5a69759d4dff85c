"""FastAPI dependencies exposing the application-scoped store."""

from __future__ import annotations

from fastapi import Depends, HTTPException, Request, status

from src.health.indicators import RedisHealthIndicator
from src.health.service import HealthCheckService
from src.storage.redis_client import KeyValueStore


KV_STORE_STATE_KEY = "kv_store"


def get_kv_store(request: Request) -> KeyValueStore:
    store = getattr(request.app.state, KV_STORE_STATE_KEY, None)
    if store is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Store is not initialized",
        )
    return store


def get_redis_health_indicator(store: KeyValueStore = Depends(get_kv_store)) -> RedisHealthIndicator:
    return RedisHealthIndicator(store)


def get_health_check_service() -> HealthCheckService:
    return HealthCheckService()
