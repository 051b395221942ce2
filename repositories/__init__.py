# ============================================================================
# REPOSITORIES MODULE
# ============================================================================
# STATUS: Infrastructure - External client management
# PURPOSE: PostgreSQL pool and Redis client lifecycle
# CREATED: 19 OCT 2026
# ============================================================================

from repositories.database import init_pool, close_pool
from repositories.cache import init_cache, close_cache

__all__ = [
    "init_pool",
    "close_pool",
    "init_cache",
    "close_cache",
]
