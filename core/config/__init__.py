# ============================================================================
# CONFIGURATION MODULE
# ============================================================================
# STATUS: Core - Configuration and defaults
# PURPOSE: Centralized configuration management
# CREATED: 19 OCT 2026
# ============================================================================
"""
Configuration Module

Provides centralized configuration and defaults for the health service.
"""

from core.config.defaults import (
    ThresholdDefaults,
    TimeoutDefaults,
    ServiceDefaults,
    Defaults,
    get_defaults,
    reset_defaults,
)

__all__ = [
    "ThresholdDefaults",
    "TimeoutDefaults",
    "ServiceDefaults",
    "Defaults",
    "get_defaults",
    "reset_defaults",
]
