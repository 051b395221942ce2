# ============================================================================
# CACHE CLIENT
# ============================================================================
# STATUS: Infrastructure - Async Redis client management
# PURPOSE: Provide the client probed by the cache health check
# CREATED: 19 OCT 2026
# ============================================================================
"""
Cache Client

Manages the application's redis.asyncio client. One client per
application; the health engine borrows it but never closes it.

Connection settings:
- REDIS_URL (default redis://localhost:6379/0)

Usage:
    from repositories.cache import init_cache, close_cache

    client = await init_cache()
    await client.ping()
"""

import os
import logging
from typing import Optional

from redis.asyncio import Redis

logger = logging.getLogger(__name__)

# Global client instance
_client: Optional[Redis] = None


def get_redis_url() -> str:
    """Get Redis URL from environment."""
    return os.environ.get("REDIS_URL", "redis://localhost:6379/0")


async def init_cache(
    url: Optional[str] = None,
    socket_timeout: float = 5.0,
) -> Redis:
    """
    Initialize the global Redis client.

    The client connects lazily, so an unreachable server surfaces through
    the cache health check rather than at startup.

    Args:
        url: Override Redis URL (defaults to env)
        socket_timeout: Per-command socket timeout in seconds
    """
    global _client

    if _client is not None:
        logger.warning("Cache client already initialized, returning existing client")
        return _client

    url = url or get_redis_url()
    logger.info(f"Initializing cache client: {url.split('@')[-1]}")

    client = Redis.from_url(
        url,
        socket_timeout=socket_timeout,
        socket_connect_timeout=socket_timeout,
        decode_responses=True,
    )
    _client = client
    logger.info("Cache client created")
    return _client


async def close_cache() -> None:
    """Close the global Redis client."""
    global _client

    if _client is not None:
        await _client.aclose()
        _client = None
        logger.info("Cache client closed")


__all__ = [
    "get_redis_url",
    "init_cache",
    "close_cache",
]
