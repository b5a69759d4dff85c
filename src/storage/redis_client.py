"""Process-wide Redis connection and the typed operations built on it."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, Optional, TypeVar

from redis.asyncio import Redis
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from src.core.logger import get_logger
from src.storage.connection import ConnectionConfig, connect


PONG = "PONG"

T = TypeVar("T")

ClientFactory = Callable[..., Redis]


class StoreClosedError(RuntimeError):
    """Raised when an operation is issued after ``shutdown``."""


class KeyValueStore:
    """Owns the single Redis handle for the lifetime of the process.

    The handle is created once here and released once by ``shutdown``.
    Operations are thin pass-throughs: no caching, batching or retries beyond
    what the client itself is configured to do.
    """

    def __init__(
        self,
        config: ConnectionConfig,
        *,
        client_factory: ClientFactory = connect,
    ) -> None:
        self._logger = get_logger("store_gateway.redis")
        self._config = config
        self._closed = False
        try:
            self._client = client_factory(config, on_connect=self._on_connect)
        except Exception as exc:
            self._logger.error(
                "redis_connection_init_failed",
                host=config.host,
                port=config.port,
                error=str(exc),
                exc_info=True,
            )
            raise

    @property
    def client(self) -> Redis:
        return self._client

    @property
    def closed(self) -> bool:
        return self._closed

    def _on_connect(self) -> None:
        self._logger.info("redis_connected", host=self._config.host, port=self._config.port)

    def _on_error(self, exc: Exception) -> None:
        self._logger.error(
            "redis_connection_error",
            host=self._config.host,
            port=self._config.port,
            error=str(exc),
            error_type=type(exc).__name__,
        )

    async def _execute(self, command: Callable[[], Awaitable[T]]) -> T:
        if self._closed:
            raise StoreClosedError("Redis connection has been shut down")
        try:
            return await command()
        except (RedisConnectionError, RedisTimeoutError) as exc:
            self._on_error(exc)
            raise

    async def set(self, key: str, value: str, ttl_seconds: Optional[int] = None) -> None:
        if ttl_seconds is not None and ttl_seconds > 0:
            await self._execute(lambda: self._client.set(key, value, ex=ttl_seconds))
            return
        await self._execute(lambda: self._client.set(key, value))

    async def get(self, key: str) -> Optional[str]:
        return await self._execute(lambda: self._client.get(key))

    async def delete(self, key: str) -> int:
        return int(await self._execute(lambda: self._client.delete(key)))

    async def exists(self, key: str) -> int:
        return int(await self._execute(lambda: self._client.exists(key)))

    async def ping(self) -> str:
        reply: Any = await self._execute(self._client.ping)
        # redis-py turns the PONG status reply into True.
        if reply is True or reply == PONG:
            return PONG
        return str(reply)

    async def shutdown(self) -> None:
        if self._closed:
            self._logger.info("redis_already_disconnected")
            return
        self._closed = True
        await self._client.aclose()
        self._logger.info("redis_disconnected", host=self._config.host, port=self._config.port)
