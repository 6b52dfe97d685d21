"""Health checks reported by the app server's /health route."""

from __future__ import annotations

import asyncio
import os
import time
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Awaitable, Callable

from phototaker.common.logging import get_logger


class HealthStatus(Enum):
    """Health status enum."""

    HEALTHY = "healthy"
    DEGRADED = "degraded"
    UNHEALTHY = "unhealthy"


@dataclass
class HealthCheck:
    """Individual health check definition."""

    name: str
    check_fn: Callable[[], Awaitable[bool]]
    timeout_seconds: float = 2.0
    critical: bool = True  # If False, failure only causes DEGRADED status


@dataclass
class HealthResult:
    """Result of a health check."""

    name: str
    status: HealthStatus
    message: str = ""
    latency_ms: float = 0.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "status": self.status.value,
            "message": self.message,
            "latencyMs": round(self.latency_ms, 2),
        }


@dataclass
class AggregatedHealth:
    """Aggregated health status from multiple checks."""

    status: HealthStatus
    checks: list[HealthResult]
    timestamp: float = field(default_factory=time.time)


class HealthChecker:
    """Runs registered checks concurrently and folds them into one status."""

    def __init__(self, service_name: str) -> None:
        self.service_name = service_name
        self._checks: list[HealthCheck] = []
        self.logger = get_logger("health_checker", service=service_name)

    def add_check(
        self,
        name: str,
        check_fn: Callable[[], Awaitable[bool]],
        timeout_seconds: float = 2.0,
        critical: bool = True,
    ) -> None:
        """Register a check.

        Args:
            name: Check name.
            check_fn: Async function returning True if healthy.
            timeout_seconds: Timeout for the check.
            critical: If True, failure causes UNHEALTHY status.
        """
        self._checks.append(HealthCheck(name, check_fn, timeout_seconds, critical))

    async def _run_check(self, check: HealthCheck) -> HealthResult:
        failed = HealthStatus.UNHEALTHY if check.critical else HealthStatus.DEGRADED
        start_time = time.time()

        try:
            ok = await asyncio.wait_for(check.check_fn(), timeout=check.timeout_seconds)
        except asyncio.TimeoutError:
            return HealthResult(
                name=check.name,
                status=failed,
                message=f"Timeout after {check.timeout_seconds}s",
                latency_ms=check.timeout_seconds * 1000,
            )
        except Exception as e:
            self.logger.warning("health_check_error", check=check.name, error=str(e))
            return HealthResult(
                name=check.name,
                status=failed,
                message=str(e),
                latency_ms=(time.time() - start_time) * 1000,
            )

        return HealthResult(
            name=check.name,
            status=HealthStatus.HEALTHY if ok else failed,
            message="" if ok else "Check returned False",
            latency_ms=(time.time() - start_time) * 1000,
        )

    async def check(self) -> AggregatedHealth:
        """Run all health checks and aggregate results."""
        results = list(await asyncio.gather(*[self._run_check(c) for c in self._checks]))

        if any(r.status == HealthStatus.UNHEALTHY for r in results):
            status = HealthStatus.UNHEALTHY
        elif any(r.status == HealthStatus.DEGRADED for r in results):
            status = HealthStatus.DEGRADED
        else:
            status = HealthStatus.HEALTHY

        return AggregatedHealth(status=status, checks=results)


async def check_directory_writable(path: Path) -> bool:
    """Check that a directory exists and accepts new files."""
    return path.is_dir() and os.access(path, os.W_OK)
