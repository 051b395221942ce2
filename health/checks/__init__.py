# ============================================================================
# HEALTH CHECK PLUGINS
# ============================================================================
# STATUS: Core - Health check implementations
# PURPOSE: Dependency probes and resource samplers
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Plugins

Dependency probes (network round-trip, critical for startup):
- database: PostgreSQL SELECT 1 through the connection pool
- cache: Redis PING

Resource samplers (local, no network I/O):
- memory: Host memory occupancy
- cpu: Aggregate CPU occupancy and load averages
- disk: File system occupancy

default_checks() builds one instance of each, configured from Defaults.
"""

from typing import List, Optional

from core.config import Defaults, get_defaults
from health.core import HealthCheckPlugin, ThresholdSpec
from health.checks.database import PostgresCheck
from health.checks.cache import RedisCheck
from health.checks.resources import MemoryCheck, CpuCheck, DiskCheck


def default_checks(defaults: Optional[Defaults] = None) -> List[HealthCheckPlugin]:
    """Instantiate the standard check set with configured thresholds."""
    defaults = defaults or get_defaults()
    t = defaults.thresholds
    probe_timeout = defaults.timeouts.probe_timeout
    sampler_timeout = defaults.timeouts.sampler_timeout

    return [
        PostgresCheck(
            thresholds=ThresholdSpec.latency(t.database_warn_ms, t.database_down_ms),
            timeout_seconds=probe_timeout,
        ),
        RedisCheck(
            thresholds=ThresholdSpec.latency(t.cache_warn_ms, t.cache_down_ms),
            timeout_seconds=probe_timeout,
        ),
        MemoryCheck(
            thresholds=ThresholdSpec.occupancy(t.memory_warn_pct, t.memory_down_pct),
            timeout_seconds=sampler_timeout,
        ),
        DiskCheck(
            path=defaults.service.disk_path,
            thresholds=ThresholdSpec.occupancy(t.disk_warn_pct, t.disk_down_pct),
            timeout_seconds=sampler_timeout,
        ),
        CpuCheck(
            thresholds=ThresholdSpec.occupancy(t.cpu_warn_pct),
            timeout_seconds=sampler_timeout,
        ),
    ]


__all__ = [
    "default_checks",
    # Probes
    "PostgresCheck",
    "RedisCheck",
    # Samplers
    "MemoryCheck",
    "CpuCheck",
    "DiskCheck",
]
