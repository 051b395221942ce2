# ============================================================================
# DATABASE HEALTH CHECK
# ============================================================================
# STATUS: Core - PostgreSQL round-trip probe
# PURPOSE: Database responsiveness and connection pool occupancy
# CREATED: 19 OCT 2026
# ============================================================================
"""
Database Health Check

Issues a trivial round-trip query through the injected psycopg_pool
AsyncConnectionPool and classifies the wall-clock latency.

Pool occupancy (total/idle/waiting) is attached when the pool exposes
get_stats(); otherwise it is omitted. A single attempt is made; retrying
is left to whoever polls the endpoint.
"""

import logging
import time
from typing import Any, Dict, Mapping, Optional

from health.core import (
    CheckResult,
    HealthCheckPlugin,
    HealthStatus,
    ThresholdSpec,
)

logger = logging.getLogger(__name__)

HEALTH_QUERY = "SELECT 1"


def pool_occupancy(pool: Any) -> Optional[Dict[str, int]]:
    """
    Read total/idle/waiting connection counts from a pool.

    Returns None if the pool does not expose stats.
    """
    get_stats = getattr(pool, "get_stats", None)
    if not callable(get_stats):
        return None

    stats = get_stats()
    return {
        "total": stats.get("pool_size", 0),
        "idle": stats.get("pool_available", 0),
        "waiting": stats.get("requests_waiting", 0),
    }


class PostgresCheck(HealthCheckPlugin):
    """
    PostgreSQL connectivity health check.

    Latency thresholds default to warn at 100ms, down at 1000ms.
    """

    name = "database"
    label = "Database"
    requires = ("database",)
    critical = True
    default_thresholds = ThresholdSpec.latency(warn_ms=100, down_ms=1000)

    MESSAGES = {
        HealthStatus.UP: "Healthy",
        HealthStatus.WARNING: "Slow response time",
        HealthStatus.DOWN: "Response time above critical threshold",
    }

    async def check(self, handles: Mapping[str, Any]) -> CheckResult:
        pool = handles["database"]

        start = time.perf_counter()
        async with pool.connection() as conn:
            await conn.execute(HEALTH_QUERY)
        latency_ms = (time.perf_counter() - start) * 1000

        details: Dict[str, Any] = {"type": "PostgreSQL"}
        occupancy = pool_occupancy(pool)
        if occupancy is not None:
            details["pool"] = occupancy

        return CheckResult.classified(
            latency_ms,
            self.thresholds,
            latency_ms=latency_ms,
            messages=self.MESSAGES,
            **details,
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HEALTH_QUERY",
    "pool_occupancy",
    "PostgresCheck",
]
