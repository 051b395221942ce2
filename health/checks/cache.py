# ============================================================================
# CACHE HEALTH CHECK
# ============================================================================
# STATUS: Core - Redis round-trip probe
# PURPOSE: Cache responsiveness and memory usage
# CREATED: 19 OCT 2026
# ============================================================================
"""
Cache Health Check

Sends PING through the injected redis.asyncio client and classifies the
latency. On success, the memory figure from INFO memory is attached.

redis-py returns INFO as a dict, which is read directly. A raw text
payload is handled by parse_memory_used(); if the figure cannot be
obtained the detail is simply left out and the check result stands.
"""

import asyncio
import logging
import re
import time
from typing import Any, Mapping, Optional

from health.core import (
    CheckResult,
    HealthCheckPlugin,
    HealthStatus,
    ThresholdSpec,
)

logger = logging.getLogger(__name__)

_USED_MEMORY_HUMAN = re.compile(r"^used_memory_human:(.+)$", re.MULTILINE)


def parse_memory_used(info: Any) -> Optional[str]:
    """
    Extract the human-readable memory figure from an INFO memory payload.

    Args:
        info: Dict as returned by redis-py, or raw INFO text

    Returns:
        e.g. "1.04M", or None if not present
    """
    if isinstance(info, Mapping):
        value = info.get("used_memory_human")
        return str(value).strip() if value is not None else None

    if isinstance(info, bytes):
        info = info.decode("utf-8", errors="replace")

    if isinstance(info, str):
        match = _USED_MEMORY_HUMAN.search(info)
        if match:
            return match.group(1).strip()

    return None


class RedisCheck(HealthCheckPlugin):
    """
    Redis connectivity health check.

    Latency thresholds default to warn at 50ms, down at 500ms.
    """

    name = "cache"
    label = "Redis"
    requires = ("cache",)
    critical = True
    default_thresholds = ThresholdSpec.latency(warn_ms=50, down_ms=500)
    info_timeout_seconds = 1.0

    MESSAGES = {
        HealthStatus.UP: "Healthy",
        HealthStatus.WARNING: "Slow response time",
        HealthStatus.DOWN: "Response time above critical threshold",
    }

    async def check(self, handles: Mapping[str, Any]) -> CheckResult:
        client = handles["cache"]

        start = time.perf_counter()
        await client.ping()
        latency_ms = (time.perf_counter() - start) * 1000

        details = {"type": "Redis"}
        memory_used = await self._memory_used(client)
        if memory_used is not None:
            details["memory_used"] = memory_used

        return CheckResult.classified(
            latency_ms,
            self.thresholds,
            latency_ms=latency_ms,
            messages=self.MESSAGES,
            **details,
        )

    async def _memory_used(self, client: Any) -> Optional[str]:
        try:
            info = await asyncio.wait_for(
                client.info("memory"), timeout=self.info_timeout_seconds
            )
        except asyncio.TimeoutError:
            logger.debug(f"Redis memory info timed out after {self.info_timeout_seconds}s")
            return None
        except Exception as e:
            logger.debug(f"Redis memory info unavailable: {e}")
            return None
        return parse_memory_used(info)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "parse_memory_used",
    "RedisCheck",
]
