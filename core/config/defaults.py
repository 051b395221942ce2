# ============================================================================
# CONFIGURATION DEFAULTS
# ============================================================================
# STATUS: Core - Default configuration values
# PURPOSE: Centralized defaults for health thresholds, timeouts, service info
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Defaults

Provides the default threshold tables and probe timeouts for the health
checks. Every value can be overridden via environment variables.

Design:
- Immutable dataclasses for defaults
- Environment variable overrides
- Type-safe access
"""

import os
from dataclasses import dataclass, field
from typing import Optional


def _optional_float(name: str) -> Optional[float]:
    """Read an optional float; unset or empty disables the boundary."""
    value = os.getenv(name, "").strip()
    return float(value) if value else None


@dataclass(frozen=True)
class ThresholdDefaults:
    """
    Defaults for check classification thresholds.

    Latency values are milliseconds (boundary value counts as breach).
    Occupancy values are percentages (strictly greater than breaches).
    """
    # Dependency round-trip latency (ms)
    database_warn_ms: float = 100.0
    database_down_ms: float = 1000.0
    cache_warn_ms: float = 50.0
    cache_down_ms: float = 500.0

    # Host occupancy (%)
    memory_warn_pct: float = 80.0
    memory_down_pct: float = 90.0
    cpu_warn_pct: float = 90.0  # CPU pressure alone never reports DOWN

    # Disk boundaries are disabled unless configured
    disk_warn_pct: Optional[float] = None
    disk_down_pct: Optional[float] = None

    @classmethod
    def from_env(cls) -> "ThresholdDefaults":
        """Create from environment variables."""
        return cls(
            database_warn_ms=float(os.getenv("HEALTH_DB_WARN_MS", 100)),
            database_down_ms=float(os.getenv("HEALTH_DB_DOWN_MS", 1000)),
            cache_warn_ms=float(os.getenv("HEALTH_CACHE_WARN_MS", 50)),
            cache_down_ms=float(os.getenv("HEALTH_CACHE_DOWN_MS", 500)),
            memory_warn_pct=float(os.getenv("HEALTH_MEMORY_WARN_PCT", 80)),
            memory_down_pct=float(os.getenv("HEALTH_MEMORY_DOWN_PCT", 90)),
            cpu_warn_pct=float(os.getenv("HEALTH_CPU_WARN_PCT", 90)),
            disk_warn_pct=_optional_float("HEALTH_DISK_WARN_PCT"),
            disk_down_pct=_optional_float("HEALTH_DISK_DOWN_PCT"),
        )


@dataclass(frozen=True)
class TimeoutDefaults:
    """
    Defaults for check timeouts (seconds).

    A check that exceeds its timeout is reported DOWN.
    """
    probe_timeout: float = 5.0  # database, cache
    sampler_timeout: float = 2.0  # memory, cpu, disk

    @classmethod
    def from_env(cls) -> "TimeoutDefaults":
        """Create from environment variables."""
        return cls(
            probe_timeout=float(os.getenv("HEALTH_PROBE_TIMEOUT", 5.0)),
            sampler_timeout=float(os.getenv("HEALTH_SAMPLER_TIMEOUT", 2.0)),
        )


@dataclass(frozen=True)
class ServiceDefaults:
    """Service identity reported in health responses."""
    service_name: str = "service-health"
    disk_path: str = "/"

    @classmethod
    def from_env(cls) -> "ServiceDefaults":
        """Create from environment variables."""
        return cls(
            service_name=os.getenv("SERVICE_NAME", "service-health"),
            disk_path=os.getenv("HEALTH_DISK_PATH", "/"),
        )


# ============================================================================
# GLOBAL DEFAULTS INSTANCE
# ============================================================================

@dataclass
class Defaults:
    """Container for all default configurations."""
    thresholds: ThresholdDefaults = field(default_factory=ThresholdDefaults)
    timeouts: TimeoutDefaults = field(default_factory=TimeoutDefaults)
    service: ServiceDefaults = field(default_factory=ServiceDefaults)

    @classmethod
    def from_env(cls) -> "Defaults":
        """Create all defaults from environment variables."""
        return cls(
            thresholds=ThresholdDefaults.from_env(),
            timeouts=TimeoutDefaults.from_env(),
            service=ServiceDefaults.from_env(),
        )


_defaults: Optional[Defaults] = None


def get_defaults() -> Defaults:
    """Get global defaults instance."""
    global _defaults
    if _defaults is None:
        _defaults = Defaults.from_env()
    return _defaults


def reset_defaults() -> None:
    """Reset defaults (for testing)."""
    global _defaults
    _defaults = None


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "ThresholdDefaults",
    "TimeoutDefaults",
    "ServiceDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
