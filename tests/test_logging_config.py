# ============================================================================
# LOGGING + CONFIG TESTS
# ============================================================================
# STATUS: Tests - Log context propagation and environment defaults
# PURPOSE: Verify log_context nesting, JSON output and env overrides
# CREATED: 19 OCT 2026
# ============================================================================
"""
Logging + Config Tests

Run with:
    pytest tests/test_logging_config.py -v
"""

import asyncio
import json
import logging

import pytest

from core.config import Defaults, get_defaults, reset_defaults
from core.logging import (
    StructuredFormatter,
    get_current_context,
    get_logger,
    log_context,
)


# ============================================================================
# LOG CONTEXT
# ============================================================================

class TestLogContext:

    def test_nesting_and_restore(self):
        with log_context(signal="readiness"):
            with log_context(check="database", extra={"attempt": 1}):
                ctx = get_current_context()
                assert ctx.signal == "readiness"
                assert ctx.check == "database"
                assert ctx.extra == {"attempt": 1}
            assert get_current_context().check is None
        assert get_current_context().signal is None

    def test_tasks_keep_their_own_context(self):
        seen = {}

        async def probe(name):
            with log_context(check=name):
                await asyncio.sleep(0.01)
                seen[name] = get_current_context().check

        async def scenario():
            with log_context(signal="health"):
                await asyncio.gather(probe("database"), probe("cache"))

        asyncio.run(scenario())
        assert seen == {"database": "database", "cache": "cache"}

    def test_to_dict_drops_empty_fields(self):
        with log_context(signal="startup", extra={"host": "a"}):
            assert get_current_context().to_dict() == {"signal": "startup", "host": "a"}


# ============================================================================
# STRUCTURED FORMATTER
# ============================================================================

class TestStructuredFormatter:

    def _record(self, msg):
        return logging.LogRecord(
            name="health.executor",
            level=logging.WARNING,
            pathname=__file__,
            lineno=10,
            msg=msg,
            args=(),
            exc_info=None,
        )

    def test_json_includes_context(self):
        formatter = StructuredFormatter()
        with log_context(signal="readiness", check="cache"):
            data = json.loads(formatter.format(self._record("Slow response")))

        assert data["level"] == "WARNING"
        assert data["message"] == "Slow response"
        assert data["context"] == {"signal": "readiness", "check": "cache"}
        assert data["source"]["line"] == 10

    def test_json_without_context(self):
        data = json.loads(StructuredFormatter().format(self._record("ok")))
        assert "context" not in data

    def test_context_logger_attaches_fields(self, caplog):
        logger = get_logger("health.test")
        with caplog.at_level(logging.INFO, logger="health.test"):
            with log_context(check="disk"):
                logger.info("sampled", extra={"usage": 42})

        record = caplog.records[-1]
        assert record.extra == {"usage": 42, "check": "disk"}


# ============================================================================
# DEFAULTS
# ============================================================================

class TestDefaults:

    @pytest.fixture(autouse=True)
    def _reset(self):
        reset_defaults()
        yield
        reset_defaults()

    def test_builtin_values(self):
        defaults = Defaults()
        assert defaults.thresholds.database_warn_ms == 100.0
        assert defaults.thresholds.cache_down_ms == 500.0
        assert defaults.thresholds.disk_warn_pct is None
        assert defaults.timeouts.probe_timeout == 5.0
        assert defaults.service.disk_path == "/"

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("HEALTH_DB_WARN_MS", "250")
        monkeypatch.setenv("HEALTH_DISK_DOWN_PCT", "95")
        monkeypatch.setenv("HEALTH_PROBE_TIMEOUT", "1.5")
        monkeypatch.setenv("SERVICE_NAME", "orders-api")

        defaults = get_defaults()

        assert defaults.thresholds.database_warn_ms == 250.0
        assert defaults.thresholds.disk_down_pct == 95.0
        assert defaults.thresholds.disk_warn_pct is None
        assert defaults.timeouts.probe_timeout == 1.5
        assert defaults.service.service_name == "orders-api"

    def test_empty_disk_threshold_disabled(self, monkeypatch):
        monkeypatch.setenv("HEALTH_DISK_WARN_PCT", "  ")
        assert get_defaults().thresholds.disk_warn_pct is None

    def test_cached(self):
        assert get_defaults() is get_defaults()
