# ============================================================================
# HEALTH CHECK CORE TYPES
# ============================================================================
# STATUS: Core - Status values, thresholds, results, plugin base class
# PURPOSE: Classification of raw measurements into tri-state health status
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Core Types

Defines the status values, threshold tables, result type and plugin
interface shared by every health check.

Status values:
- UP: Operating normally
- WARNING: Operating, but a threshold has been crossed
- DOWN: Failed, unreachable, or past the critical threshold
- UNKNOWN: The check cannot measure on this platform

Threshold semantics:
- Latency checks (inclusive): m < warn -> UP, warn <= m < down -> WARNING,
  m >= down -> DOWN
- Occupancy checks (exclusive): m > down -> DOWN, m > warn -> WARNING,
  otherwise UP
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple


class HealthConfigurationError(ValueError):
    """Raised at startup when checks or signals are misconfigured."""


class HealthStatus(str, Enum):
    """Health check status values."""
    UP = "UP"
    WARNING = "WARNING"
    DOWN = "DOWN"
    UNKNOWN = "UNKNOWN"


@dataclass(frozen=True)
class ThresholdSpec:
    """
    Boundary pair used to classify a measurement.

    Attributes:
        warn_at: Boundary at which the check degrades to WARNING (None disables)
        down_at: Boundary at which the check fails to DOWN (None disables)
        inclusive: True if a measurement equal to a boundary breaches it
            (latency checks); False for strictly-greater occupancy checks
    """
    warn_at: Optional[float] = None
    down_at: Optional[float] = None
    inclusive: bool = True

    def __post_init__(self):
        if (
            self.warn_at is not None
            and self.down_at is not None
            and self.warn_at > self.down_at
        ):
            raise ValueError(
                f"warn_at ({self.warn_at}) must not exceed down_at ({self.down_at})"
            )

    @classmethod
    def latency(cls, warn_ms: float, down_ms: float) -> "ThresholdSpec":
        """Round-trip latency thresholds in milliseconds."""
        return cls(warn_at=warn_ms, down_at=down_ms, inclusive=True)

    @classmethod
    def occupancy(
        cls,
        warn_pct: Optional[float],
        down_pct: Optional[float] = None,
    ) -> "ThresholdSpec":
        """Occupancy percentage thresholds."""
        return cls(warn_at=warn_pct, down_at=down_pct, inclusive=False)

    def breached(self, measurement: float, boundary: Optional[float]) -> bool:
        if boundary is None:
            return False
        if self.inclusive:
            return measurement >= boundary
        return measurement > boundary


def classify(measurement: float, thresholds: ThresholdSpec) -> HealthStatus:
    """Map a raw measurement onto a status using the threshold table."""
    if thresholds.breached(measurement, thresholds.down_at):
        return HealthStatus.DOWN
    if thresholds.breached(measurement, thresholds.warn_at):
        return HealthStatus.WARNING
    return HealthStatus.UP


@dataclass(frozen=True)
class CheckResult:
    """
    Result from a single health check.

    Immutable once built. ``error`` is only ever set on DOWN results that
    come from a failure (exception, timeout, missing client); threshold
    breaches carry no error, only ``details``.
    """
    status: HealthStatus
    latency_ms: Optional[float] = None
    error: Optional[str] = None
    message: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.error is not None and self.status != HealthStatus.DOWN:
            raise ValueError("error is only allowed on DOWN results")
        if self.latency_ms is not None and self.latency_ms < 0:
            raise ValueError("latency_ms must be non-negative")

    @classmethod
    def up(cls, message: str = None, **details) -> "CheckResult":
        """Create UP result."""
        return cls(status=HealthStatus.UP, message=message, details=details)

    @classmethod
    def unknown(cls, message: str, **details) -> "CheckResult":
        """Create UNKNOWN result (measurement unsupported)."""
        return cls(status=HealthStatus.UNKNOWN, message=message, details=details)

    @classmethod
    def failed(cls, error: str, **details) -> "CheckResult":
        """Create DOWN result caused by a failure rather than a threshold."""
        return cls(status=HealthStatus.DOWN, error=error, details=details)

    @classmethod
    def from_exception(cls, e: BaseException, **details) -> "CheckResult":
        """Create DOWN result carrying the exception text verbatim."""
        return cls.failed(str(e), exception_type=type(e).__name__, **details)

    @classmethod
    def classified(
        cls,
        measurement: float,
        thresholds: ThresholdSpec,
        latency_ms: Optional[float] = None,
        messages: Optional[Mapping[HealthStatus, str]] = None,
        **details,
    ) -> "CheckResult":
        """Create a result whose status comes from the classifier."""
        status = classify(measurement, thresholds)
        message = (messages or {}).get(status)
        return cls(
            status=status,
            latency_ms=latency_ms,
            message=message,
            details=details,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON response."""
        result: Dict[str, Any] = {"status": self.status.value}
        if self.latency_ms is not None:
            result["latency_ms"] = round(self.latency_ms, 2)
        if self.error:
            result["error"] = self.error
        if self.message:
            result["message"] = self.message
        if self.details:
            result["details"] = self.details
        return result


class HealthCheckPlugin(ABC):
    """
    Base class for health checks.

    Subclass and implement check(). Dependency handles (database pool,
    cache client) are injected into the registry and handed to check()
    as a read-only mapping; a check listing a handle in ``requires`` is
    never run until that handle is present.

    Attributes:
        name: Unique identifier for the check
        label: Human name used in messages ("Database", "Redis")
        requires: Names of dependency handles the check needs
        critical: If True, the startup signal waits for this check
        timeout_seconds: Max wait before the check is reported DOWN
        thresholds: Boundaries used to classify the measurement

    Example:
        class PostgresCheck(HealthCheckPlugin):
            name = "database"
            requires = ("database",)

            async def check(self, handles) -> CheckResult:
                await handles["database"].execute("SELECT 1")
                return CheckResult.up()
    """

    name: str = "unnamed"
    label: str = "Unnamed"
    requires: Tuple[str, ...] = ()
    critical: bool = False
    timeout_seconds: float = 5.0
    default_thresholds: ThresholdSpec = ThresholdSpec()

    def __init__(
        self,
        thresholds: Optional[ThresholdSpec] = None,
        timeout_seconds: Optional[float] = None,
    ):
        self.thresholds = thresholds or self.default_thresholds
        if timeout_seconds is not None:
            self.timeout_seconds = timeout_seconds

    def missing_handles(self, handles: Mapping[str, Any]) -> Tuple[str, ...]:
        """Names of required handles that have not been injected."""
        return tuple(key for key in self.requires if handles.get(key) is None)

    def uninitialized(self) -> CheckResult:
        """Result reported while a required client has not been injected."""
        return CheckResult.failed(
            f"{self.label} client not initialized",
            type=self.label,
        )

    @abstractmethod
    async def check(self, handles: Mapping[str, Any]) -> CheckResult:
        """
        Execute health check.

        May raise; the executor converts exceptions into DOWN results.
        """

    def __repr__(self) -> str:
        return f"<{type(self).__name__} name={self.name!r}>"


__all__ = [
    "HealthConfigurationError",
    "HealthStatus",
    "ThresholdSpec",
    "classify",
    "CheckResult",
    "HealthCheckPlugin",
]
