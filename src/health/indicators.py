"""Health indicators translating store liveness into structured results."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional, Protocol

from src.core.logger import get_logger


CHECK_FAILED_REASON = "Redis check failed"
AVAILABLE_MESSAGE = "Redis is available"
NOT_RESPONDING_MESSAGE = "Redis is not responding"
UNKNOWN_ERROR_MESSAGE = "Unknown error occurred"


@dataclass(frozen=True)
class HealthStatus:
    key: str
    healthy: bool
    message: str

    def as_detail(self) -> dict[str, Any]:
        return {
            self.key: {
                "status": "up" if self.healthy else "down",
                "message": self.message,
            }
        }


@dataclass(frozen=True)
class HealthCheckFailure:
    reason: str
    status: HealthStatus


@dataclass(frozen=True)
class HealthCheckResult:
    status: HealthStatus
    failure: Optional[HealthCheckFailure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None


class Pingable(Protocol):
    async def ping(self) -> str:
        """Return ``PONG`` when the store answers."""


def _failed(key: str, message: str) -> HealthCheckResult:
    status = HealthStatus(key=key, healthy=False, message=message)
    return HealthCheckResult(
        status=status,
        failure=HealthCheckFailure(reason=CHECK_FAILED_REASON, status=status),
    )


class RedisHealthIndicator:
    """Single-probe liveness check against the shared store."""

    def __init__(self, store: Pingable) -> None:
        self._store = store
        self._logger = get_logger("store_gateway.health")

    async def check_health(self, key: str) -> HealthCheckResult:
        try:
            reply = await self._store.ping()
        except Exception as exc:
            message = str(exc) or UNKNOWN_ERROR_MESSAGE
            self._logger.warning("health_check_failed", key=key, error=message)
            return _failed(key, message)

        if reply != "PONG":
            self._logger.warning("health_check_failed", key=key, reply=reply)
            return _failed(key, NOT_RESPONDING_MESSAGE)

        return HealthCheckResult(status=HealthStatus(key=key, healthy=True, message=AVAILABLE_MESSAGE))
