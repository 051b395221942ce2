# ============================================================================
# RESOURCE HEALTH CHECKS
# ============================================================================
# STATUS: Core - Host and process resource samplers
# PURPOSE: Memory, CPU and disk occupancy
# CREATED: 19 OCT 2026
# ============================================================================
"""
Resource Health Checks

Local samplers backed by psutil (no network I/O):
- MemoryCheck: Host memory occupancy, plus process RSS/VMS
- CpuCheck: Aggregate CPU occupancy from per-core tick counters
- DiskCheck: File system occupancy for one path

psutil calls block, so each sampler runs in a worker thread.
"""

import asyncio
import logging
import math
import os
import platform
from typing import Any, Dict, Mapping, Optional

import psutil

from health.core import (
    CheckResult,
    HealthCheckPlugin,
    HealthStatus,
    ThresholdSpec,
)

logger = logging.getLogger(__name__)


def _mb(num_bytes: float) -> int:
    """Bytes to whole megabytes."""
    return round(num_bytes / 1024 / 1024)


def _occupancy_messages(subject: str, thresholds: ThresholdSpec) -> Dict[HealthStatus, str]:
    """Status messages for the boundaries that are enabled."""
    messages = {HealthStatus.UP: f"{subject} usage is healthy"}
    if thresholds.warn_at is not None:
        messages[HealthStatus.WARNING] = f"Warning: {subject} usage above {thresholds.warn_at:g}%"
    if thresholds.down_at is not None:
        messages[HealthStatus.DOWN] = f"Critical: {subject} usage above {thresholds.down_at:g}%"
    return messages


class ResourceSampler(HealthCheckPlugin):
    """Base class for checks that read local resource state."""

    timeout_seconds = 2.0

    async def check(self, handles: Mapping[str, Any]) -> CheckResult:
        return await asyncio.to_thread(self.sample)

    def sample(self) -> CheckResult:
        raise NotImplementedError


class MemoryCheck(ResourceSampler):
    """
    Memory health check.

    Occupancy is computed from host totals; above 90% is DOWN, above 80%
    is WARNING.
    """

    name = "memory"
    label = "Memory"
    default_thresholds = ThresholdSpec.occupancy(warn_pct=80, down_pct=90)

    def sample(self) -> CheckResult:
        host = psutil.virtual_memory()
        used = host.total - host.available
        usage_pct = used / host.total * 100

        proc = psutil.Process(os.getpid()).memory_info()

        return CheckResult.classified(
            usage_pct,
            self.thresholds,
            messages=_occupancy_messages("Memory", self.thresholds),
            system={
                "total_mb": _mb(host.total),
                "used_mb": _mb(used),
                "free_mb": _mb(host.available),
                "usage_percent": round(usage_pct),
            },
            process={
                "rss_mb": _mb(proc.rss),
                "vms_mb": _mb(proc.vms),
            },
        )


def cpu_occupancy(per_cpu_times) -> int:
    """
    Aggregate occupancy from per-core tick counters.

    100 - floor(100 * avg_idle / avg_total). This is a snapshot of
    cumulative counters, not a windowed rate.

    On Linux, guest and guest_nice are already included in user and nice,
    so they are not added to the total a second time.
    """
    cores = len(per_cpu_times)
    total_idle = sum(t.idle for t in per_cpu_times)
    total_tick = sum(
        sum(t) - getattr(t, "guest", 0) - getattr(t, "guest_nice", 0)
        for t in per_cpu_times
    )
    if not cores or not total_tick:
        raise ValueError("CPU tick counters unavailable")

    avg_idle = total_idle / cores
    avg_total = total_tick / cores
    return 100 - math.floor(100 * avg_idle / avg_total)


class CpuCheck(ResourceSampler):
    """
    CPU health check.

    Above 90% occupancy is WARNING. CPU pressure never reports DOWN.
    """

    name = "cpu"
    label = "CPU"
    default_thresholds = ThresholdSpec.occupancy(warn_pct=90)

    def sample(self) -> CheckResult:
        per_cpu = psutil.cpu_times(percpu=True)
        usage_pct = cpu_occupancy(per_cpu)
        load_1, load_5, load_15 = psutil.getloadavg()

        details: Dict[str, Any] = {
            "cores": len(per_cpu),
            "model": platform.processor() or platform.machine(),
            "usage_percent": usage_pct,
            "load_average": {
                "1min": round(load_1, 2),
                "5min": round(load_5, 2),
                "15min": round(load_15, 2),
            },
        }
        frequency = self._frequency_mhz()
        if frequency is not None:
            details["speed_mhz"] = frequency

        return CheckResult.classified(
            usage_pct,
            self.thresholds,
            messages=_occupancy_messages("CPU", self.thresholds),
            **details,
        )

    @staticmethod
    def _frequency_mhz() -> Optional[int]:
        try:
            freq = psutil.cpu_freq()
        except (NotImplementedError, OSError):
            return None
        return round(freq.current) if freq else None


class DiskCheck(ResourceSampler):
    """
    Disk health check.

    UP with usage details when file system statistics are available,
    UNKNOWN when the platform cannot provide them. Occupancy thresholds
    are disabled unless configured.
    """

    name = "disk"
    label = "Disk"
    default_thresholds = ThresholdSpec.occupancy(warn_pct=None, down_pct=None)

    def __init__(self, path: str = "/", **kwargs):
        super().__init__(**kwargs)
        self.path = path

    def sample(self) -> CheckResult:
        try:
            usage = psutil.disk_usage(self.path)
        except (OSError, NotImplementedError, AttributeError) as e:
            logger.debug(f"Disk statistics unavailable for {self.path}: {e}")
            return CheckResult.unknown(
                f"Disk statistics unavailable for {self.path}",
                path=self.path,
                reason=str(e),
            )

        return CheckResult.classified(
            usage.percent,
            self.thresholds,
            messages=_occupancy_messages("Disk", self.thresholds),
            path=self.path,
            total_mb=_mb(usage.total),
            used_mb=_mb(usage.used),
            free_mb=_mb(usage.free),
            usage_percent=round(usage.percent),
        )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ResourceSampler",
    "MemoryCheck",
    "CpuCheck",
    "DiskCheck",
    "cpu_occupancy",
]
