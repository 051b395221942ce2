# ============================================================================
# HEALTH ENGINE
# ============================================================================
# STATUS: Core - Engine wiring
# PURPOSE: Build registry and executor; single client injection entry point
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Engine

Owns the registry and executor for one application. The application
constructs it at startup, calls init() with its database pool and cache
client, and attaches it to app.state for the health router.

Usage:
    engine = HealthEngine()
    engine.init(database=pool, cache=redis_client)
    app.state.health = engine
"""

import logging
import os
import time
from typing import Any, Iterable, Optional

import psutil

from core.config import Defaults, get_defaults
from health.checks import default_checks
from health.core import CheckResult
from health.executor import HealthCheckExecutor, SignalResult
from health.registry import HealthCheckRegistry
from health.signals import AggregateSignal, DEFAULT_SIGNALS

logger = logging.getLogger(__name__)


class HealthEngine:
    """
    Health aggregation engine.

    Signals are validated against the registered checks on construction;
    a misconfigured signal raises HealthConfigurationError here.
    """

    def __init__(
        self,
        registry: Optional[HealthCheckRegistry] = None,
        signals: Iterable[AggregateSignal] = DEFAULT_SIGNALS,
        defaults: Optional[Defaults] = None,
    ):
        self.defaults = defaults or get_defaults()
        self.registry = registry or HealthCheckRegistry(default_checks(self.defaults))
        self.executor = HealthCheckExecutor(self.registry, signals)
        self._process_started = self._process_create_time()

    def init(self, database: Any = None, cache: Any = None) -> None:
        """
        Inject the database pool and cache client.

        Until called, the database and cache checks report DOWN with a
        "client not initialized" error.
        """
        self.registry.inject_handles(database=database, cache=cache)

    @property
    def service_name(self) -> str:
        return self.defaults.service.service_name

    @property
    def uptime_seconds(self) -> float:
        return max(0.0, time.time() - self._process_started)

    async def evaluate(self, signal: str) -> SignalResult:
        """Evaluate a named signal."""
        return await self.executor.evaluate(signal)

    async def check(self, name: str) -> Optional[CheckResult]:
        """Run one check by name; None if not registered."""
        return await self.executor.execute_single(name)

    @staticmethod
    def _process_create_time() -> float:
        try:
            return psutil.Process(os.getpid()).create_time()
        except psutil.Error as e:
            logger.debug(f"Process start time unavailable: {e}")
            return time.time()


__all__ = [
    "HealthEngine",
]
