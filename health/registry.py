# ============================================================================
# HEALTH CHECK REGISTRY
# ============================================================================
# STATUS: Core - Health check registration and dependency handles
# PURPOSE: Hold named checks and the client handles they need
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Registry

Holds the named health checks and the dependency handles (database pool,
cache client) they use.

The registry is mutated only during startup: checks are registered, then
handles are injected once via inject_handles(). After that it is sealed
and read-only, so concurrent evaluations can share it safely. Handles are
referenced, never owned: the registry does not open or close them.

Usage:
    registry = HealthCheckRegistry()
    registry.register(PostgresCheck())
    registry.inject_handles(database=pool, cache=redis_client)
"""

import logging
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from health.core import HealthCheckPlugin, HealthConfigurationError

logger = logging.getLogger(__name__)


class HealthCheckRegistry:
    """
    Registry for health check plugins and their dependency handles.
    """

    def __init__(self, checks: Optional[Iterable[HealthCheckPlugin]] = None):
        self._checks: Dict[str, HealthCheckPlugin] = {}
        self._handles: Dict[str, Any] = {}
        self._initialized = False

        for check in checks or ():
            self.register(check)

    def register(self, check: HealthCheckPlugin) -> None:
        """
        Register a health check plugin instance.

        Raises:
            HealthConfigurationError: If a check with the same name exists,
                or the registry has already been initialized
        """
        if self._initialized:
            raise HealthConfigurationError(
                f"Cannot register {check.name!r}: registry already initialized"
            )
        if check.name in self._checks:
            raise HealthConfigurationError(
                f"Duplicate health check name: {check.name}"
            )

        self._checks[check.name] = check
        logger.debug(
            f"Registered health check: {check.name} "
            f"(critical={check.critical}, timeout={check.timeout_seconds}s)"
        )

    def inject_handles(self, **handles: Any) -> None:
        """
        Inject dependency handles and seal the registry.

        Handles passed as None stay uninjected; checks that need them
        report DOWN with an "uninitialized" error.
        """
        if self._initialized:
            logger.warning("Health check handles re-injected")

        self._handles.update(
            {name: handle for name, handle in handles.items() if handle is not None}
        )
        self._initialized = True

        missing = sorted(self.required_handles() - set(self._handles))
        if missing:
            logger.warning(f"Health checks initialized without: {', '.join(missing)}")
        else:
            logger.info(f"Health checks initialized ({len(self)} checks registered)")

    def required_handles(self) -> set:
        """Names of every handle some registered check requires."""
        return {key for check in self._checks.values() for key in check.requires}

    @property
    def handles(self) -> Mapping[str, Any]:
        """Read-only view of the injected handles."""
        return MappingProxyType(self._handles)

    def get(self, name: str) -> Optional[HealthCheckPlugin]:
        """Get health check by name."""
        return self._checks.get(name)

    def get_all(self) -> List[HealthCheckPlugin]:
        """Get all registered checks."""
        return list(self._checks.values())

    def get_critical_checks(self) -> List[HealthCheckPlugin]:
        """Get checks the startup signal waits for."""
        return [c for c in self._checks.values() if c.critical]

    def names(self) -> List[str]:
        return list(self._checks)

    @property
    def is_initialized(self) -> bool:
        """Check if handles have been injected."""
        return self._initialized

    def __len__(self) -> int:
        return len(self._checks)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "HealthCheckRegistry",
]
