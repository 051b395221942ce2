# ============================================================================
# HEALTH CHECK PLUGIN TESTS
# ============================================================================
# STATUS: Tests - Probes and samplers
# PURPOSE: Verify database/cache probes and memory/cpu/disk samplers
# CREATED: 19 OCT 2026
# ============================================================================
"""
Health Check Plugin Tests

Probes run against mocked psycopg_pool / redis.asyncio clients.
Samplers run against a mocked psutil module.

Run with:
    pytest tests/test_checks.py -v
"""

import asyncio
from collections import namedtuple
from contextlib import asynccontextmanager
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from core.config import Defaults, ThresholdDefaults
from health.checks import default_checks
from health.checks.cache import RedisCheck, parse_memory_used
from health.checks.database import PostgresCheck, pool_occupancy
from health.checks.resources import CpuCheck, DiskCheck, MemoryCheck, cpu_occupancy
from health.core import HealthStatus, ThresholdSpec
from health.executor import HealthCheckExecutor
from health.registry import HealthCheckRegistry

MB = 1024 * 1024

CpuTimes = namedtuple("CpuTimes", "user nice system idle irq")
LinuxCpuTimes = namedtuple(
    "LinuxCpuTimes", "user nice system idle iowait irq softirq steal guest guest_nice"
)


# ============================================================================
# HELPERS
# ============================================================================

def _make_pool(stats=None, error=None, with_stats=True):
    """
    Create a mock AsyncConnectionPool.

    Args:
        stats: What pool.get_stats() returns.
        error: If set, conn.execute() raises this exception.
        with_stats: If False, the pool has no get_stats attribute.
    """
    conn = MagicMock()
    conn.execute = AsyncMock(side_effect=error)

    pool = MagicMock(spec=["connection", "get_stats"] if with_stats else ["connection"])

    @asynccontextmanager
    async def connection():
        yield conn

    pool.connection = connection
    if with_stats:
        pool.get_stats.return_value = stats or {
            "pool_size": 4,
            "pool_available": 3,
            "requests_waiting": 0,
        }
    return pool, conn


def _make_redis(info=None, error=None, info_error=None):
    """Create a mock redis.asyncio client."""
    client = MagicMock()
    client.ping = AsyncMock(return_value=True, side_effect=error)
    client.info = AsyncMock(
        return_value=info if info is not None else {"used_memory_human": "1.04M"},
        side_effect=info_error,
    )
    return client


def _run_single(check, **handles):
    registry = HealthCheckRegistry([check])
    registry.inject_handles(**handles)
    executor = HealthCheckExecutor(registry, signals=[])
    return asyncio.run(executor.execute_single(check.name))


# ============================================================================
# DATABASE PROBE
# ============================================================================

class TestPostgresCheck:

    def test_up_with_pool_stats(self):
        pool, conn = _make_pool()
        result = asyncio.run(PostgresCheck().check({"database": pool}))

        assert result.status == HealthStatus.UP
        assert result.latency_ms is not None
        assert result.details["type"] == "PostgreSQL"
        assert result.details["pool"] == {"total": 4, "idle": 3, "waiting": 0}
        conn.execute.assert_awaited_once_with("SELECT 1")

    def test_pool_stats_omitted_when_unavailable(self):
        pool, _ = _make_pool(with_stats=False)
        result = asyncio.run(PostgresCheck().check({"database": pool}))

        assert result.status == HealthStatus.UP
        assert "pool" not in result.details

    @patch("health.checks.database.time.perf_counter", side_effect=[10.0, 10.12])
    def test_slow_query_is_warning(self, _perf):
        pool, _ = _make_pool()
        result = asyncio.run(PostgresCheck().check({"database": pool}))

        assert result.status == HealthStatus.WARNING
        assert result.latency_ms == pytest.approx(120)
        assert result.message == "Slow response time"
        assert result.error is None

    @patch("health.checks.database.time.perf_counter", side_effect=[10.0, 11.5])
    def test_very_slow_query_is_down_without_error(self, _perf):
        pool, _ = _make_pool()
        result = asyncio.run(PostgresCheck().check({"database": pool}))

        assert result.status == HealthStatus.DOWN
        assert result.error is None

    def test_query_error_verbatim(self):
        message = 'FATAL:  password authentication failed for user "app"'
        pool, _ = _make_pool(error=RuntimeError(message))

        result = _run_single(PostgresCheck(), database=pool)

        assert result.status == HealthStatus.DOWN
        assert result.error == message

    def test_uninitialized(self):
        result = _run_single(PostgresCheck())

        assert result.status == HealthStatus.DOWN
        assert result.error == "Database client not initialized"

    def test_pool_occupancy_defaults_missing_keys(self):
        pool = MagicMock()
        pool.get_stats.return_value = {}
        assert pool_occupancy(pool) == {"total": 0, "idle": 0, "waiting": 0}


# ============================================================================
# CACHE PROBE
# ============================================================================

class TestRedisCheck:

    def test_up_with_memory(self):
        client = _make_redis()
        result = asyncio.run(RedisCheck().check({"cache": client}))

        assert result.status == HealthStatus.UP
        assert result.details == {"type": "Redis", "memory_used": "1.04M"}
        client.info.assert_awaited_once_with("memory")

    def test_info_failure_is_soft(self):
        client = _make_redis(info_error=RuntimeError("NOPERM"))
        result = asyncio.run(RedisCheck().check({"cache": client}))

        assert result.status == HealthStatus.UP
        assert "memory_used" not in result.details

    def test_unparseable_info_is_soft(self):
        client = _make_redis(info="garbage")
        result = asyncio.run(RedisCheck().check({"cache": client}))

        assert result.status == HealthStatus.UP
        assert "memory_used" not in result.details

    def test_stalled_info_is_soft(self):
        client = _make_redis()

        async def stalled(section):
            await asyncio.sleep(5)

        client.info = stalled
        check = RedisCheck(timeout_seconds=1.0)
        check.info_timeout_seconds = 0.05

        result = _run_single(check, cache=client)

        assert result.status == HealthStatus.UP
        assert result.error is None
        assert result.details == {"type": "Redis"}

    @patch("health.checks.cache.time.perf_counter", side_effect=[1.0, 1.06])
    def test_slow_ping_is_warning(self, _perf):
        result = asyncio.run(RedisCheck().check({"cache": _make_redis()}))
        assert result.status == HealthStatus.WARNING

    def test_ping_error_verbatim(self):
        message = "Error 111 connecting to localhost:6379. Connection refused."
        client = _make_redis(error=ConnectionError(message))

        result = _run_single(RedisCheck(), cache=client)

        assert result.status == HealthStatus.DOWN
        assert result.error == message
        client.info.assert_not_awaited()

    def test_uninitialized(self):
        result = _run_single(RedisCheck())
        assert result.error == "Redis client not initialized"


class TestParseMemoryUsed:

    def test_dict_payload(self):
        assert parse_memory_used({"used_memory_human": "2.50M"}) == "2.50M"

    def test_text_payload(self):
        text = "# Memory\r\nused_memory:1086824\r\nused_memory_human:1.04M\r\n"
        assert parse_memory_used(text) == "1.04M"

    def test_bytes_payload(self):
        assert parse_memory_used(b"used_memory_human:900K\n") == "900K"

    @pytest.mark.parametrize("payload", [{}, "", "used_memory:1", None, 42])
    def test_missing(self, payload):
        assert parse_memory_used(payload) is None


# ============================================================================
# MEMORY SAMPLER
# ============================================================================

class TestMemoryCheck:

    def _psutil(self, used_pct):
        fake = MagicMock()
        total = 1000 * MB
        fake.virtual_memory.return_value = SimpleNamespace(
            total=total,
            available=total - used_pct * 10 * MB,
        )
        fake.Process.return_value.memory_info.return_value = SimpleNamespace(
            rss=64 * MB, vms=512 * MB
        )
        return fake

    @pytest.mark.parametrize(
        "used_pct, expected",
        [
            (70, HealthStatus.UP),
            (80, HealthStatus.UP),
            (85, HealthStatus.WARNING),
            (90, HealthStatus.WARNING),
            (95, HealthStatus.DOWN),
        ],
    )
    def test_policy(self, used_pct, expected):
        with patch("health.checks.resources.psutil", self._psutil(used_pct)):
            result = asyncio.run(MemoryCheck().check({}))
        assert result.status == expected
        assert result.error is None

    def test_details_in_megabytes(self):
        with patch("health.checks.resources.psutil", self._psutil(70)):
            result = asyncio.run(MemoryCheck().check({}))

        assert result.details["system"] == {
            "total_mb": 1000,
            "used_mb": 700,
            "free_mb": 300,
            "usage_percent": 70,
        }
        assert result.details["process"] == {"rss_mb": 64, "vms_mb": 512}
        assert result.latency_ms is None

    def test_single_boundary_healthy(self):
        check = MemoryCheck(thresholds=ThresholdSpec.occupancy(80))
        with patch("health.checks.resources.psutil", self._psutil(30)):
            result = _run_single(check)

        assert result.status == HealthStatus.UP
        assert result.message == "Memory usage is healthy"

    def test_single_boundary_warning(self):
        check = MemoryCheck(thresholds=ThresholdSpec.occupancy(80))
        with patch("health.checks.resources.psutil", self._psutil(95)):
            result = _run_single(check)

        assert result.status == HealthStatus.WARNING
        assert result.message == "Warning: Memory usage above 80%"

    def test_down_only_boundary(self):
        check = MemoryCheck(thresholds=ThresholdSpec.occupancy(None, 90))
        with patch("health.checks.resources.psutil", self._psutil(95)):
            result = _run_single(check)

        assert result.status == HealthStatus.DOWN
        assert result.message == "Critical: Memory usage above 90%"
        assert result.error is None


# ============================================================================
# CPU SAMPLER
# ============================================================================

class TestCpuCheck:

    def _psutil(self, idle):
        fake = MagicMock()
        fake.cpu_times.return_value = [
            CpuTimes(user=100 - idle, nice=0, system=0, idle=idle, irq=0),
            CpuTimes(user=100 - idle, nice=0, system=0, idle=idle, irq=0),
        ]
        fake.getloadavg.return_value = (1.234, 0.5, 0.25)
        fake.cpu_freq.return_value = SimpleNamespace(current=2400.4)
        return fake

    def test_occupancy_formula(self):
        times = [
            CpuTimes(user=60, nice=0, system=10, idle=30, irq=0),
            CpuTimes(user=40, nice=0, system=5, idle=55, irq=0),
        ]
        # avg idle 42.5 / avg total 100 -> 100 - floor(42.5) = 58
        assert cpu_occupancy(times) == 58

    def test_guest_time_not_counted_twice(self):
        times = [
            LinuxCpuTimes(
                user=60, nice=0, system=0, idle=40, iowait=0, irq=0,
                softirq=0, steal=0, guest=40, guest_nice=0,
            ),
        ]
        assert cpu_occupancy(times) == 60

    def test_guest_nice_not_counted_twice(self):
        times = [
            LinuxCpuTimes(
                user=30, nice=20, system=10, idle=40, iowait=0, irq=0,
                softirq=0, steal=0, guest=10, guest_nice=20,
            ),
        ]
        assert cpu_occupancy(times) == 60

    def test_occupancy_requires_ticks(self):
        with pytest.raises(ValueError):
            cpu_occupancy([])

    def test_healthy(self):
        with patch("health.checks.resources.psutil", self._psutil(idle=50)):
            result = asyncio.run(CpuCheck().check({}))

        assert result.status == HealthStatus.UP
        assert result.details["cores"] == 2
        assert result.details["usage_percent"] == 50
        assert result.details["load_average"] == {"1min": 1.23, "5min": 0.5, "15min": 0.25}
        assert result.details["speed_mhz"] == 2400

    @pytest.mark.parametrize("idle", [5, 0])
    def test_pressure_is_warning_never_down(self, idle):
        with patch("health.checks.resources.psutil", self._psutil(idle=idle)):
            result = asyncio.run(CpuCheck().check({}))
        assert result.status == HealthStatus.WARNING
        assert result.message == "Warning: CPU usage above 90%"


# ============================================================================
# DISK SAMPLER
# ============================================================================

class TestDiskCheck:

    def _psutil(self, percent=42.0, error=None):
        fake = MagicMock()
        fake.disk_usage.return_value = SimpleNamespace(
            total=1000 * MB,
            used=int(percent * 10) * MB,
            free=(1000 - int(percent * 10)) * MB,
            percent=percent,
        )
        if error:
            fake.disk_usage.side_effect = error
        return fake

    def test_available_is_up_with_details(self):
        with patch("health.checks.resources.psutil", self._psutil(97.0)):
            result = asyncio.run(DiskCheck(path="/data").check({}))

        assert result.status == HealthStatus.UP
        assert result.details["path"] == "/data"
        assert result.details["usage_percent"] == 97

    @pytest.mark.parametrize(
        "error",
        [NotImplementedError("no statvfs"), OSError("ENOSYS"), AttributeError("disk_usage")],
    )
    def test_unsupported_is_unknown(self, error):
        with patch("health.checks.resources.psutil", self._psutil(error=error)):
            result = asyncio.run(DiskCheck().check({}))

        assert result.status == HealthStatus.UNKNOWN
        assert result.error is None
        assert "reason" in result.details

    def test_missing_path_names_path(self):
        error = FileNotFoundError(2, "No such file or directory", "/mnt/data")
        with patch("health.checks.resources.psutil", self._psutil(error=error)):
            result = asyncio.run(DiskCheck(path="/mnt/data").check({}))

        assert result.status == HealthStatus.UNKNOWN
        assert result.message == "Disk statistics unavailable for /mnt/data"
        assert result.details["path"] == "/mnt/data"

    def test_configured_thresholds(self):
        check = DiskCheck(thresholds=ThresholdSpec.occupancy(80, 95))
        with patch("health.checks.resources.psutil", self._psutil(85.0)):
            result = asyncio.run(check.check({}))
        assert result.status == HealthStatus.WARNING


# ============================================================================
# DEFAULT CHECK SET
# ============================================================================

class TestDefaultChecks:

    def test_names_and_criticality(self):
        checks = {c.name: c for c in default_checks(Defaults())}

        assert set(checks) == {"database", "cache", "memory", "disk", "cpu"}
        assert {n for n, c in checks.items() if c.critical} == {"database", "cache"}

    def test_thresholds_from_defaults(self):
        defaults = Defaults(thresholds=ThresholdDefaults(database_warn_ms=250, database_down_ms=2000))
        checks = {c.name: c for c in default_checks(defaults)}

        assert checks["database"].thresholds == ThresholdSpec.latency(250, 2000)
        assert checks["cache"].thresholds == ThresholdSpec.latency(50, 500)
        assert checks["memory"].thresholds == ThresholdSpec.occupancy(80, 90)
        assert checks["cpu"].thresholds.down_at is None
