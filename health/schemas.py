# ============================================================================
# HEALTH SCHEMAS
# ============================================================================
# STATUS: Core - Response schemas
# PURPOSE: Pydantic models for health endpoint bodies
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Schemas

Response models for the health endpoints.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, Field


class CheckResultResponse(BaseModel):
    """Single check outcome."""
    status: str
    latency_ms: Optional[float] = None
    error: Optional[str] = None
    message: Optional[str] = None
    details: Dict[str, Any] = Field(default_factory=dict)


class LivenessResponse(BaseModel):
    """Body for /livez."""
    status: str = "UP"
    timestamp: datetime
    service: str
    version: str


class ReadinessResponse(BaseModel):
    """Body for /readyz and /startupz."""
    status: str
    timestamp: datetime
    service: str
    checks: Dict[str, CheckResultResponse]


class SystemInfo(BaseModel):
    """Host and process metadata for /health."""
    hostname: str
    platform: str
    arch: str
    python_version: str
    pid: int
    load_average: List[float]
    total_memory: int
    free_memory: int


class HealthResponse(BaseModel):
    """Body for /health."""
    status: str
    timestamp: datetime
    service: str
    version: str
    uptime_seconds: float
    checks: Dict[str, CheckResultResponse]
    system: SystemInfo
    response_time_ms: float


__all__ = [
    "CheckResultResponse",
    "LivenessResponse",
    "ReadinessResponse",
    "SystemInfo",
    "HealthResponse",
]
