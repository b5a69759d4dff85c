"""Aggregate individual health checks into one report."""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from typing import Any, Tuple

from src.health.indicators import HealthCheckResult


HealthCheck = Callable[[], Awaitable[HealthCheckResult]]


class HealthCheckService:
    async def check(self, checks: Sequence[HealthCheck]) -> Tuple[dict[str, Any], bool]:
        """Run each check once and return ``(report, healthy)``."""

        info: dict[str, Any] = {}
        error: dict[str, Any] = {}
        details: dict[str, Any] = {}

        for check in checks:
            result = await check()
            detail = result.status.as_detail()
            details.update(detail)
            if result.ok:
                info.update(detail)
            else:
                error.update(detail)

        healthy = not error
        report = {
            "status": "ok" if healthy else "error",
            "info": info,
            "error": error,
            "details": details,
        }
        return report, healthy
