# ============================================================================
# SERVICE HEALTH - MAIN APPLICATION
# ============================================================================
# STATUS: Core - FastAPI application entry point
# PURPOSE: Wire database pool and cache client into the health engine
# CREATED: 19 OCT 2026
# ============================================================================
"""
Service Health Main Application

FastAPI application that:
1. Opens the PostgreSQL pool and Redis client
2. Builds the health engine and injects both clients
3. Serves /livez, /readyz, /startupz and /health

Usage:
    uvicorn main:app --host 0.0.0.0 --port 8000
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI

from __version__ import __version__, BUILD_DATE
from core.logging import configure_logging, get_logger
from health import HealthEngine, health_router
from repositories.database import init_pool, close_pool
from repositories.cache import init_cache, close_cache

configure_logging(
    level=os.environ.get("LOG_LEVEL", "INFO"),
    json_output=os.environ.get("LOG_FORMAT", "").lower() == "json",
)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    A client that cannot be created is left uninjected; its health check
    then reports "client not initialized" instead of the app failing to
    start.
    """
    engine = HealthEngine()
    logger.info(f"Starting {engine.service_name} v{__version__} (Build {BUILD_DATE})")

    pool = None
    try:
        pool = await init_pool()
    except Exception as e:
        logger.error(f"Database pool initialization failed: {e}")

    cache = None
    try:
        cache = await init_cache()
    except Exception as e:
        logger.error(f"Cache client initialization failed: {e}")

    engine.init(database=pool, cache=cache)
    app.state.health = engine

    yield

    logger.info(f"Shutting down {engine.service_name}...")
    await close_cache()
    await close_pool()


app = FastAPI(
    title="Service Health",
    description="Liveness, readiness, startup and detailed health signals",
    version=__version__,
    lifespan=lifespan,
)

# Health check routes (no prefix - /livez, /readyz, /startupz, /health)
app.include_router(health_router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": app.state.health.service_name,
        "version": __version__,
        "build_date": BUILD_DATE,
        "status": "running",
        "docs": "/docs",
    }


# ============================================================================
# MAIN ENTRY POINT
# ============================================================================

if __name__ == "__main__":
    import uvicorn

    host = os.environ.get("HOST", "0.0.0.0")
    port = int(os.environ.get("PORT", "8000"))

    uvicorn.run(
        "main:app",
        host=host,
        port=port,
        reload=os.environ.get("RELOAD", "false").lower() == "true",
    )
