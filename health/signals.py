# ============================================================================
# HEALTH SIGNALS
# ============================================================================
# STATUS: Core - Aggregate signal definitions and aggregation rules
# PURPOSE: Fold per-check statuses into liveness/readiness/startup/health
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Signals

A signal is a named view over a subset of checks plus the rule used to
fold their statuses into one outcome.

Rules:
- ALWAYS:   No checks, always passes (liveness)
- STRICT:   Every check must be exactly UP (readiness)
- TOLERANT: No check may be DOWN; WARNING and UNKNOWN pass (health)
- CRITICAL: Every critical check must be exactly UP, others are
            ignored (startup)

An empty check set passes under every rule. Only ALWAYS may legitimately
have one; validate_signals() rejects the rest at startup.
"""

from dataclasses import dataclass
from enum import Enum
from typing import AbstractSet, Iterable, Mapping, Tuple

from health.core import CheckResult, HealthConfigurationError, HealthStatus

HTTP_OK = 200
HTTP_UNAVAILABLE = 503


class AggregationRule(str, Enum):
    """How a signal folds its check statuses."""
    ALWAYS = "always"
    STRICT = "strict"
    TOLERANT = "tolerant"
    CRITICAL = "critical"


@dataclass(frozen=True)
class AggregateSignal:
    """A named aggregate health view."""
    name: str
    checks: Tuple[str, ...]
    rule: AggregationRule
    passed_label: str = HealthStatus.UP.value
    failed_label: str = HealthStatus.DOWN.value


LIVENESS = AggregateSignal(
    name="liveness",
    checks=(),
    rule=AggregationRule.ALWAYS,
)

READINESS = AggregateSignal(
    name="readiness",
    checks=("database", "cache", "memory", "disk"),
    rule=AggregationRule.STRICT,
)

STARTUP = AggregateSignal(
    name="startup",
    checks=("database", "cache"),
    rule=AggregationRule.CRITICAL,
    passed_label="STARTED",
    failed_label="STARTING",
)

HEALTH = AggregateSignal(
    name="health",
    checks=("database", "cache", "memory", "disk", "cpu"),
    rule=AggregationRule.TOLERANT,
)

DEFAULT_SIGNALS = (LIVENESS, READINESS, STARTUP, HEALTH)


def aggregate(
    statuses: Mapping[str, HealthStatus],
    rule: AggregationRule,
    critical: AbstractSet[str] = frozenset(),
) -> bool:
    """
    Fold check statuses into a pass/fail outcome.

    Args:
        statuses: Check name -> status
        rule: Aggregation rule to apply
        critical: Names of critical checks (CRITICAL rule only)

    Returns:
        True if the signal passes
    """
    if rule == AggregationRule.ALWAYS:
        return True
    if rule == AggregationRule.STRICT:
        return all(s == HealthStatus.UP for s in statuses.values())
    if rule == AggregationRule.TOLERANT:
        return all(s != HealthStatus.DOWN for s in statuses.values())
    if rule == AggregationRule.CRITICAL:
        return all(
            s == HealthStatus.UP
            for name, s in statuses.items()
            if name in critical
        )
    raise ValueError(f"Unknown aggregation rule: {rule}")


def render_outcome(
    signal: AggregateSignal,
    results: Mapping[str, CheckResult],
    critical: AbstractSet[str] = frozenset(),
) -> Tuple[str, int]:
    """
    Aggregate results for a signal into (status label, HTTP status code).
    """
    passed = aggregate(
        {name: result.status for name, result in results.items()},
        signal.rule,
        critical,
    )
    if passed:
        return signal.passed_label, HTTP_OK
    return signal.failed_label, HTTP_UNAVAILABLE


def validate_signals(
    signals: Iterable[AggregateSignal],
    registered: AbstractSet[str],
) -> None:
    """
    Fail fast on misconfigured signals.

    Raises:
        HealthConfigurationError: If a signal references an unregistered
            check, or a non-ALWAYS signal has no checks
    """
    seen = set()
    for signal in signals:
        if signal.name in seen:
            raise HealthConfigurationError(f"Duplicate signal: {signal.name}")
        seen.add(signal.name)

        if signal.rule == AggregationRule.ALWAYS:
            if signal.checks:
                raise HealthConfigurationError(
                    f"Signal {signal.name!r} uses rule 'always' but lists checks"
                )
            continue

        if not signal.checks:
            raise HealthConfigurationError(
                f"Signal {signal.name!r} has no checks"
            )

        unknown = [name for name in signal.checks if name not in registered]
        if unknown:
            raise HealthConfigurationError(
                f"Signal {signal.name!r} references unregistered checks: "
                f"{', '.join(unknown)}"
            )


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HTTP_OK",
    "HTTP_UNAVAILABLE",
    "AggregationRule",
    "AggregateSignal",
    "LIVENESS",
    "READINESS",
    "STARTUP",
    "HEALTH",
    "DEFAULT_SIGNALS",
    "aggregate",
    "render_outcome",
    "validate_signals",
]
