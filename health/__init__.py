# ============================================================================
# HEALTH CHECK MODULE
# ============================================================================
# STATUS: Core - Health aggregation engine
# PURPOSE: Liveness, readiness, startup and detailed health signals
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Module

Health aggregation engine for the service and its dependencies:
- /livez: Process alive (no checks)
- /readyz: Ready for traffic (database, cache, memory, disk all UP)
- /startupz: Started (database and cache UP)
- /health: Detailed status (all checks, WARNING tolerated)

Architecture:
- HealthCheckPlugin: Base class for checks (probes and samplers)
- classify / ThresholdSpec: Measurement -> UP / WARNING / DOWN
- HealthCheckRegistry: Named checks plus injected client handles
- HealthCheckExecutor: Concurrent execution with per-check timeouts
- AggregateSignal: Check subset plus aggregation rule
- HealthEngine: Wiring and the client injection entry point

Usage:
    from health import HealthEngine, health_router

    engine = HealthEngine()
    engine.init(database=pool, cache=redis_client)
    app.state.health = engine
    app.include_router(health_router)
"""

from health.core import (
    HealthConfigurationError,
    HealthStatus,
    ThresholdSpec,
    classify,
    CheckResult,
    HealthCheckPlugin,
)
from health.registry import HealthCheckRegistry
from health.signals import (
    AggregationRule,
    AggregateSignal,
    DEFAULT_SIGNALS,
    aggregate,
)
from health.executor import HealthCheckExecutor, SignalResult
from health.engine import HealthEngine
from health.router import health_router

__all__ = [
    # Core types
    "HealthConfigurationError",
    "HealthStatus",
    "ThresholdSpec",
    "classify",
    "CheckResult",
    "HealthCheckPlugin",
    # Registry
    "HealthCheckRegistry",
    # Signals
    "AggregationRule",
    "AggregateSignal",
    "DEFAULT_SIGNALS",
    "aggregate",
    # Executor
    "HealthCheckExecutor",
    "SignalResult",
    "HealthEngine",
    # Router
    "health_router",
]
