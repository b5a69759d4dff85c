"""Connection parameters and client construction for the Redis store."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Optional

from redis.asyncio import Redis
from redis.asyncio.connection import AbstractConnection
from redis.asyncio.retry import Retry
from redis.backoff import ExponentialBackoff
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import TimeoutError as RedisTimeoutError

from src.core.config import Settings


CONNECT_TIMEOUT_MS = 10000
MAX_RETRIES_PER_REQUEST = 3


@dataclass(frozen=True)
class ConnectionConfig:
    host: str
    port: int
    connect_timeout_ms: int = CONNECT_TIMEOUT_MS
    max_retries_per_request: int = MAX_RETRIES_PER_REQUEST
    password: Optional[str] = None

    def to_client_kwargs(self) -> dict[str, Any]:
        """Keyword arguments for the client; ``password`` only when one is set."""

        kwargs: dict[str, Any] = {
            "host": self.host,
            "port": self.port,
            "connect_timeout_ms": self.connect_timeout_ms,
            "max_retries_per_request": self.max_retries_per_request,
        }
        if self.password:
            kwargs["password"] = self.password
        return kwargs


def build_connection_config(settings: Settings) -> ConnectionConfig:
    # An empty REDIS_PASSWORD is treated the same as an unset one.
    password = settings.redis_password or None
    return ConnectionConfig(
        host=settings.redis_host,
        port=settings.redis_port,
        password=password,
    )


def connect(
    config: ConnectionConfig,
    *,
    on_connect: Optional[Callable[[], None]] = None,
) -> Redis:
    """Create the asyncio client for ``config``.

    The client connects lazily on the first command. ``on_connect`` runs after
    the client's own handshake every time a new socket is established.
    Construction errors are not caught here.
    """

    kwargs = config.to_client_kwargs()
    client_kwargs: dict[str, Any] = {
        "host": kwargs["host"],
        "port": kwargs["port"],
        "socket_connect_timeout": kwargs["connect_timeout_ms"] / 1000,
        "retry": Retry(ExponentialBackoff(), kwargs["max_retries_per_request"]),
        "retry_on_error": [RedisConnectionError, RedisTimeoutError],
        "decode_responses": True,
    }
    if "password" in kwargs:
        client_kwargs["password"] = kwargs["password"]

    if on_connect is not None:

        async def _handshake(connection: AbstractConnection) -> None:
            await connection.on_connect()
            on_connect()

        client_kwargs["redis_connect_func"] = _handshake

    return Redis(**client_kwargs)
