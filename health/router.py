# ============================================================================
# HEALTH CHECK ROUTER
# ============================================================================
# STATUS: Core - FastAPI health check endpoints
# PURPOSE: Orchestrator probes and detailed health endpoint
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Router

FastAPI router exposing the four health signals:

Endpoints:
    GET /livez      - Liveness probe (is the process scheduling work?)
                      Always 200, no checks run.

    GET /readyz     - Readiness probe (should we receive traffic?)
                      200 only if database, cache, memory and disk are all UP.

    GET /startupz   - Startup probe (have we finished starting?)
                      200 "STARTED" once database and cache are UP,
                      503 "STARTING" otherwise. Resource pressure is ignored.

    GET /health     - Detailed health (diagnostics)
                      200 unless some check is DOWN; WARNING is reported
                      but tolerated. Includes host/process metadata.

    GET /health/{check_name} - Single check status

Response Codes:
    200 - Signal passes
    503 - Signal fails (service unavailable)
    404 - Unknown check name

The HealthEngine is read from app.state.health. Each request runs under
a log context carrying its request id (X-Request-ID header, or a new
one), which is echoed back on the response.
"""

import logging
import os
import platform
import socket
import sys
import time
import uuid
from datetime import datetime, timezone
from typing import Annotated

import psutil
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from core.logging import log_context
from health.core import HealthStatus
from health.engine import HealthEngine
from health.executor import SignalResult
from health.schemas import (
    CheckResultResponse,
    HealthResponse,
    LivenessResponse,
    ReadinessResponse,
    SystemInfo,
)
from health.signals import HEALTH, LIVENESS, READINESS, STARTUP
from __version__ import __version__

logger = logging.getLogger(__name__)

health_router = APIRouter(tags=["Health"])

REQUEST_ID_HEADER = "X-Request-ID"


async def get_health_engine(request: Request) -> HealthEngine:
    """Get the HealthEngine instance from app state."""
    return request.app.state.health


HealthEngineDep = Annotated[HealthEngine, Depends(get_health_engine)]


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _checks(result: SignalResult) -> dict:
    return {
        name: CheckResultResponse(**check.to_dict())
        for name, check in result.checks.items()
    }


def _system_info() -> SystemInfo:
    memory = psutil.virtual_memory()
    return SystemInfo(
        hostname=socket.gethostname(),
        platform=sys.platform,
        arch=platform.machine(),
        python_version=platform.python_version(),
        pid=os.getpid(),
        load_average=[round(x, 2) for x in psutil.getloadavg()],
        total_memory=memory.total,
        free_memory=memory.available,
    )


def _request_id(request: Request) -> str:
    """Caller-supplied request id, or a new one."""
    return request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:12]


def _respond(status_code: int, body, request_id: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=body.model_dump(mode="json", exclude_none=True),
        headers={REQUEST_ID_HEADER: request_id},
    )


# ============================================================================
# LIVENESS PROBE
# ============================================================================

@health_router.get("/livez", response_model=LivenessResponse)
async def liveness_probe(request: Request, engine: HealthEngineDep):
    """
    Liveness probe.

    Returns 200 if the process is alive. No dependency checks: a
    failing database must not get a healthy process restarted.
    """
    request_id = _request_id(request)
    with log_context(request_id=request_id):
        result = await engine.evaluate(LIVENESS.name)

    body = LivenessResponse(
        status=result.status,
        timestamp=_now(),
        service=engine.service_name,
        version=__version__,
    )
    return _respond(result.status_code, body, request_id)


# ============================================================================
# READINESS PROBE
# ============================================================================

@health_router.get("/readyz", response_model=ReadinessResponse)
async def readiness_probe(request: Request, engine: HealthEngineDep):
    """
    Readiness probe.

    Returns 200 only if every included check is exactly UP. Any
    WARNING, DOWN or UNKNOWN takes the instance out of rotation.
    """
    request_id = _request_id(request)
    with log_context(request_id=request_id):
        result = await engine.evaluate(READINESS.name)

        if not result.passed:
            failing = [
                name for name, check in result.checks.items()
                if check.status != HealthStatus.UP
            ]
            logger.info(f"Not ready: {', '.join(failing)}")

    body = ReadinessResponse(
        status=result.status,
        timestamp=_now(),
        service=engine.service_name,
        checks=_checks(result),
    )
    return _respond(result.status_code, body, request_id)


# ============================================================================
# STARTUP PROBE
# ============================================================================

@health_router.get("/startupz", response_model=ReadinessResponse)
async def startup_probe(request: Request, engine: HealthEngineDep):
    """
    Startup probe.

    Returns 200 "STARTED" once the critical dependencies (database,
    cache) are UP, otherwise 503 "STARTING".
    """
    request_id = _request_id(request)
    with log_context(request_id=request_id):
        result = await engine.evaluate(STARTUP.name)

    body = ReadinessResponse(
        status=result.status,
        timestamp=_now(),
        service=engine.service_name,
        checks=_checks(result),
    )
    return _respond(result.status_code, body, request_id)


# ============================================================================
# FULL HEALTH CHECK
# ============================================================================

@health_router.get("/health", response_model=HealthResponse)
async def full_health_check(request: Request, engine: HealthEngineDep):
    """
    Detailed health check.

    Runs every check. WARNING and UNKNOWN are reported but tolerated;
    any DOWN check fails the whole.

    Returns:
        200: No check DOWN
        503: At least one check DOWN
    """
    start = time.perf_counter()
    request_id = _request_id(request)
    with log_context(request_id=request_id):
        result = await engine.evaluate(HEALTH.name)

    body = HealthResponse(
        status=result.status,
        timestamp=_now(),
        service=engine.service_name,
        version=__version__,
        uptime_seconds=round(engine.uptime_seconds, 2),
        checks=_checks(result),
        system=_system_info(),
        response_time_ms=round((time.perf_counter() - start) * 1000, 2),
    )
    return _respond(result.status_code, body, request_id)


# ============================================================================
# SINGLE CHECK
# ============================================================================

@health_router.get("/health/{check_name}", response_model=CheckResultResponse)
async def single_health_check(check_name: str, request: Request, engine: HealthEngineDep):
    """
    Run a single health check by name.

    Useful for debugging specific components.
    """
    request_id = _request_id(request)
    with log_context(request_id=request_id):
        result = await engine.check(check_name)

    if result is None:
        return JSONResponse(
            status_code=404,
            content={"error": f"Health check not found: {check_name}"},
            headers={REQUEST_ID_HEADER: request_id},
        )

    status_code = 503 if result.status == HealthStatus.DOWN else 200
    return _respond(status_code, CheckResultResponse(**result.to_dict()), request_id)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "health_router",
    "get_health_engine",
    "REQUEST_ID_HEADER",
]
