from __future__ import annotations

from typing import Callable, Dict, Optional

import pytest

from src.core.config import get_settings
from src.core.logger import configure_logging
from src.storage.connection import ConnectionConfig
from src.storage.redis_client import KeyValueStore


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeRedis:
    def __init__(self, clock: Callable[[], float]) -> None:
        self._clock = clock
        self._store: Dict[str, str] = {}
        self._expires_at: Dict[str, float] = {}
        self.ping_reply: object = True
        self.ping_error: Optional[Exception] = None
        self.close_calls = 0

    def _purge(self, key: str) -> None:
        expires_at = self._expires_at.get(key)
        if expires_at is not None and self._clock() >= expires_at:
            self._store.pop(key, None)
            self._expires_at.pop(key, None)

    async def set(self, key: str, value: str, ex: int | None = None):
        self._store[key] = str(value)
        if ex is None:
            self._expires_at.pop(key, None)
        else:
            self._expires_at[key] = self._clock() + ex
        return True

    async def get(self, key: str):
        self._purge(key)
        return self._store.get(key)

    async def delete(self, key: str):
        self._purge(key)
        self._expires_at.pop(key, None)
        return 1 if self._store.pop(key, None) is not None else 0

    async def exists(self, key: str):
        self._purge(key)
        return 1 if key in self._store else 0

    def ttl(self, key: str) -> float | None:
        expires_at = self._expires_at.get(key)
        if expires_at is None:
            return None
        return expires_at - self._clock()

    async def ping(self):
        if self.ping_error is not None:
            raise self.ping_error
        return self.ping_reply

    async def aclose(self) -> None:
        self.close_calls += 1


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    # Configure structlog before any capture_logs block replaces its processors.
    configure_logging()
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def fake_redis(clock: FakeClock) -> FakeRedis:
    return FakeRedis(clock)


@pytest.fixture
def connection_config() -> ConnectionConfig:
    return ConnectionConfig(host="localhost", port=6379)


@pytest.fixture
def kv_store(fake_redis: FakeRedis, connection_config: ConnectionConfig) -> KeyValueStore:
    return KeyValueStore(connection_config, client_factory=lambda config, on_connect: fake_redis)
