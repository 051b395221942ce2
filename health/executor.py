# ============================================================================
# HEALTH CHECK EXECUTOR
# ============================================================================
# STATUS: Core - Concurrent health check execution and aggregation
# PURPOSE: Evaluate signals with per-check timeouts
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Executor

Evaluates signals with:
- Concurrent execution of the signal's checks (fan-out / fan-in)
- Per-check timeouts (a timed-out check is DOWN)
- Exceptions converted to DOWN results at the check boundary
- Aggregation through the signal's rule

If the caller is cancelled while checks are in flight, the checks keep
running to completion and their results are dropped. Probes are
idempotent reads, so nothing is propagated into the dependency clients.
"""

import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Sequence, Union

from core.logging import log_context
from health.core import CheckResult, HealthCheckPlugin, HealthConfigurationError
from health.registry import HealthCheckRegistry
from health.signals import (
    AggregateSignal,
    DEFAULT_SIGNALS,
    render_outcome,
    validate_signals,
)

logger = logging.getLogger(__name__)


@dataclass
class SignalResult:
    """Outcome of one signal evaluation."""
    signal: str
    status: str
    status_code: int
    checks: Dict[str, CheckResult]
    total_duration_ms: float

    @property
    def passed(self) -> bool:
        return self.status_code < 400


class HealthCheckExecutor:
    """
    Runs the checks behind a signal and aggregates their results.

    Signals are validated against the registry at construction, so a
    signal naming an unregistered check fails at startup, not per request.
    """

    def __init__(
        self,
        registry: HealthCheckRegistry,
        signals: Iterable[AggregateSignal] = DEFAULT_SIGNALS,
    ):
        self.registry = registry
        signals = tuple(signals)
        validate_signals(signals, set(registry.names()))
        self.signals: Dict[str, AggregateSignal] = {s.name: s for s in signals}
        self._critical = frozenset(c.name for c in registry.get_critical_checks())

    def get_signal(self, name: str) -> AggregateSignal:
        try:
            return self.signals[name]
        except KeyError:
            raise HealthConfigurationError(f"Unknown signal: {name}") from None

    async def evaluate(
        self,
        signal: Union[str, AggregateSignal],
    ) -> SignalResult:
        """
        Evaluate one signal.

        Args:
            signal: Signal name or definition

        Returns:
            SignalResult with status label, status code and check results
        """
        if isinstance(signal, str):
            signal = self.get_signal(signal)

        start_time = time.monotonic()
        with log_context(signal=signal.name):
            results = await self.run_checks(signal.checks)
            status, status_code = render_outcome(signal, results, self._critical)

            total_duration_ms = (time.monotonic() - start_time) * 1000
            logger.debug(
                f"Signal {signal.name}: {status} "
                f"({len(results)} checks, {total_duration_ms:.1f}ms)"
            )

        return SignalResult(
            signal=signal.name,
            status=status,
            status_code=status_code,
            checks=results,
            total_duration_ms=total_duration_ms,
        )

    async def run_checks(self, names: Sequence[str]) -> Dict[str, CheckResult]:
        """Execute the named checks concurrently and join their results."""
        checks = [self.registry.get(name) for name in names]
        if not checks:
            return {}

        tasks = [asyncio.create_task(self._execute_check(check)) for check in checks]
        results = await asyncio.shield(asyncio.gather(*tasks))

        return {check.name: result for check, result in zip(checks, results)}

    async def execute_single(self, name: str) -> Optional[CheckResult]:
        """Execute a single check by name."""
        check = self.registry.get(name)
        if check is None:
            return None

        return await self._execute_check(check)

    async def _execute_check(self, check: HealthCheckPlugin) -> CheckResult:
        """Execute a single check with timeout; never raises."""
        handles = self.registry.handles
        if check.missing_handles(handles):
            return check.uninitialized()

        start_time = time.monotonic()

        with log_context(check=check.name):
            try:
                result = await asyncio.wait_for(
                    check.check(handles),
                    timeout=check.timeout_seconds,
                )

                logger.debug(
                    f"Health check {check.name}: {result.status.value} "
                    f"({(time.monotonic() - start_time) * 1000:.1f}ms)"
                )
                return result

            except asyncio.TimeoutError:
                logger.warning(
                    f"Health check {check.name} timed out after {check.timeout_seconds}s"
                )
                return CheckResult.failed(
                    f"Timeout after {check.timeout_seconds}s",
                    type=check.label,
                )

            except Exception as e:
                logger.error(f"Health check {check.name} failed: {e}")
                return CheckResult.from_exception(e, type=check.label)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "SignalResult",
    "HealthCheckExecutor",
]
