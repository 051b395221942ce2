# ============================================================================
# DATABASE CONNECTION POOL
# ============================================================================
# STATUS: Infrastructure - Async PostgreSQL connection management
# PURPOSE: Provide the connection pool probed by the database health check
# CREATED: 19 OCT 2026
# ============================================================================
"""
Database Connection Pool

Manages async PostgreSQL connections using psycopg3 and psycopg_pool.
One pool per application; the health engine borrows it but never opens
or closes it.

Connection settings:
- DATABASE_URL, or
- POSTGRES_HOST / POSTGRES_PORT / POSTGRES_DB / POSTGRES_USER /
  POSTGRES_PASSWORD / POSTGRES_SSLMODE

Usage:
    from repositories.database import init_pool, close_pool

    pool = await init_pool()
    async with pool.connection() as conn:
        await conn.execute("SELECT 1")
"""

import os
import logging
from typing import Optional

from psycopg_pool import AsyncConnectionPool

logger = logging.getLogger(__name__)

# Global pool instance
_pool: Optional[AsyncConnectionPool] = None


def get_connection_string() -> str:
    """
    Get database connection string from environment.

    Priority:
    1. DATABASE_URL environment variable
    2. Individual POSTGRES_* components
    """
    if url := os.environ.get("DATABASE_URL"):
        return url

    host = os.environ.get("POSTGRES_HOST", "localhost")
    port = os.environ.get("POSTGRES_PORT", "5432")
    name = os.environ.get("POSTGRES_DB", "postgres")
    user = os.environ.get("POSTGRES_USER", "postgres")
    password = os.environ.get("POSTGRES_PASSWORD", "")
    sslmode = os.environ.get("POSTGRES_SSLMODE", "prefer")

    return f"postgresql://{user}:{password}@{host}:{port}/{name}?sslmode={sslmode}"


def mask_conninfo(conninfo: str) -> str:
    """Strip credentials from a connection string for logging."""
    if "@" in conninfo:
        return conninfo.split("@")[-1]
    if "password=" in conninfo:
        return conninfo.split("password=")[0] + "password=***"
    return conninfo


async def init_pool(
    min_size: int = 1,
    max_size: int = 10,
    connection_string: Optional[str] = None,
) -> AsyncConnectionPool:
    """
    Initialize the global connection pool.

    Args:
        min_size: Minimum connections to maintain
        max_size: Maximum connections allowed
        connection_string: Override connection string (defaults to env)
    """
    global _pool

    if _pool is not None:
        logger.warning("Pool already initialized, returning existing pool")
        return _pool

    conninfo = connection_string or get_connection_string()
    logger.info(f"Initializing connection pool: {mask_conninfo(conninfo)}")

    pool = AsyncConnectionPool(
        conninfo=conninfo,
        min_size=min_size,
        max_size=max_size,
        open=False,  # We'll open it explicitly
    )
    await pool.open()
    _pool = pool
    logger.info(f"Connection pool opened (min={min_size}, max={max_size})")

    return _pool


async def close_pool() -> None:
    """Close the global connection pool."""
    global _pool

    if _pool is not None:
        await _pool.close()
        _pool = None
        logger.info("Connection pool closed")


__all__ = [
    "get_connection_string",
    "mask_conninfo",
    "init_pool",
    "close_pool",
]
