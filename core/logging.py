# ============================================================================
# STRUCTURED LOGGING
# ============================================================================
# STATUS: Core - Structured logging with context
# PURPOSE: Consistent, queryable logging for health evaluations
# CREATED: 19 OCT 2026
# ============================================================================
"""
Structured Logging

Provides JSON or human-readable log output for the health service.

Features:
- Context-aware logger adapter
- Contextual fields (signal, check, request_id)
- JSON output for log aggregation

Context is held in a ContextVar so that concurrently running probe
tasks each see the context of the evaluation that spawned them.

Usage:
    from core.logging import get_logger, log_context

    logger = get_logger("health.executor")

    with log_context(signal="readiness"):
        logger.info("Evaluating signal")
"""

import json
import logging
import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field, asdict, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union


@dataclass(frozen=True)
class LogContext:
    """Contextual fields attached to every log record."""
    signal: Optional[str] = None
    check: Optional[str] = None
    request_id: Optional[str] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict, excluding None values."""
        result = {
            key: value
            for key, value in asdict(self).items()
            if value is not None and key != "extra"
        }
        if self.extra:
            result.update(self.extra)
        return result


_current_context: ContextVar[LogContext] = ContextVar(
    "health_log_context", default=LogContext()
)


def get_current_context() -> LogContext:
    """Get current logging context."""
    return _current_context.get()


@contextmanager
def log_context(**kwargs):
    """
    Context manager for adding logging context.

    Args:
        **kwargs: signal, check, request_id, or extra={...}

    Example:
        with log_context(signal="health", check="database"):
            logger.warning("Slow response")
    """
    parent = get_current_context()
    extra = {**parent.extra, **kwargs.pop("extra", {})}
    new_context = replace(parent, extra=extra, **kwargs)

    token = _current_context.set(new_context)
    try:
        yield new_context
    finally:
        _current_context.reset(token)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class StructuredFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.

    Outputs log records as JSON for easy parsing by log aggregators.
    """

    def __init__(self, include_context: bool = True):
        super().__init__()
        self.include_context = include_context

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data: Dict[str, Any] = {
            "timestamp": _utc_now().isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if self.include_context:
            context_dict = get_current_context().to_dict()
            if context_dict:
                log_data["context"] = context_dict

        if getattr(record, "extra", None):
            log_data["data"] = record.extra

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        log_data["source"] = {
            "file": record.filename,
            "line": record.lineno,
            "function": record.funcName,
        }

        return json.dumps(log_data, default=str)


class HumanFormatter(logging.Formatter):
    """Human-readable formatter for development."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = _utc_now().strftime("%Y-%m-%d %H:%M:%S")
        level = record.levelname.ljust(8)

        context = get_current_context()
        context_parts = []
        if context.signal:
            context_parts.append(f"signal={context.signal}")
        if context.check:
            context_parts.append(f"check={context.check}")
        if context.request_id:
            context_parts.append(f"request={context.request_id}")
        context_str = f" [{', '.join(context_parts)}]" if context_parts else ""

        result = f"{timestamp} {level} {record.name}{context_str}: {record.getMessage()}"

        if record.exc_info:
            result += f"\n{self.formatException(record.exc_info)}"

        return result


class ContextLogger(logging.LoggerAdapter):
    """
    Logger adapter that includes context in log records.

    Structured data passed via ``extra`` is stored on the record as
    ``record.extra`` for StructuredFormatter.
    """

    def process(self, msg, kwargs):
        extra = dict(kwargs.get("extra") or {})
        extra.update(get_current_context().to_dict())
        kwargs["extra"] = {"extra": extra}
        return msg, kwargs


def get_logger(name: str) -> ContextLogger:
    """
    Get a context-aware logger.

    Args:
        name: Logger name (e.g., "health.executor")

    Returns:
        ContextLogger instance
    """
    return ContextLogger(logging.getLogger(name), {})


def configure_logging(
    level: Union[str, int] = "INFO",
    json_output: bool = False,
) -> None:
    """
    Configure logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR)
        json_output: Use JSON format (for production)
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    if json_output or os.getenv("LOG_FORMAT", "").lower() == "json":
        formatter: logging.Formatter = StructuredFormatter(include_context=True)
    else:
        formatter = HumanFormatter()

    root = logging.getLogger()
    root.setLevel(level)

    for handler in root.handlers[:]:
        root.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(formatter)
    root.addHandler(handler)


# ============================================================================
# EXPORTS
# ============================================================================

__all__ = [
    "LogContext",
    "StructuredFormatter",
    "HumanFormatter",
    "ContextLogger",
    "get_logger",
    "configure_logging",
    "log_context",
    "get_current_context",
]
