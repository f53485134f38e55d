"""
Pytest Configuration and Shared Test Fixtures

This module provides pytest configuration and reusable fixtures for all tests.
All fixtures defined here are automatically available to all test files.
"""

import asyncio
import os
import socket
import sys
from unittest.mock import MagicMock

import pytest
import pytest_asyncio

# Add project root to sys.path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))


# ============================================================================
# Mock Configuration Fixtures
# ============================================================================


@pytest.fixture
def mock_settings():
    """
    Mock application settings for testing.

    Returns a MagicMock with common settings attributes.
    """
    from src.core.config.settings import Settings

    settings = MagicMock(spec=Settings)

    # Probe settings
    settings.probe.PROBE_DEFAULT_TIMEOUT = 2.0
    settings.probe.PROBE_UDP_PAYLOAD = "PING"
    settings.probe.PROBE_UDP_BUFFER_SIZE = 1024
    settings.probe.PROBE_HTTP_METHOD = "GET"
    settings.probe.PROBE_HTTP_EXPECTED_STATUS = 200
    settings.probe.PROBE_ICMP_MODE = "auto"
    settings.probe.PROBE_ICMP_FALLBACK_PORT = 80
    settings.probe.PROBE_EXEC_MAX_OUTPUT = 4096

    # Logging settings
    settings.logging.LOG_LEVEL = "DEBUG"
    settings.logging.LOG_FORMAT = "console"

    return settings


@pytest.fixture
def engine_settings(tmp_path):
    """Engine settings pointing at empty procfs / cgroupfs fixture roots."""
    from src.core.config.settings import EngineSettings

    proc_root = tmp_path / "proc"
    cgroup_root = tmp_path / "cgroup"
    proc_root.mkdir()
    cgroup_root.mkdir()
    return EngineSettings(
        ENGINE_PROC_ROOT=str(proc_root),
        ENGINE_CGROUP_ROOT=str(cgroup_root),
        ENGINE_CPU_SAMPLE_INTERVAL=0.0,
        ENGINE_RUNTIME_SOCKET_TIMEOUT=0.1,
    )


# ============================================================================
# Mock Engine Fixtures
# ============================================================================


@pytest.fixture
def mock_engine():
    """
    Mock MetricsEngine for isolated collector testing.

    Every call succeeds with default (zeroed) snapshots unless a test
    overrides the return value.
    """
    from src.core.interfaces.engine import (
        EngineResult,
        MetricsEngine,
        RawAllMetrics,
        RawContainerInfo,
        RawCPUData,
        RawDiskUsageData,
        RawIOStatsData,
        RawList,
        RawLoadData,
        RawMemoryData,
        RawPressureMetrics,
        RawProcessData,
        RawQuotaLimits,
        RawQuotaUsage,
        RawRuntimeInfo,
        RawTcpStats,
    )

    engine = MagicMock(spec=MetricsEngine)
    ok = EngineResult.ok()

    engine.init.return_value = ok
    engine.platform.return_value = "linux"
    engine.quota_supported.return_value = True

    engine.collect_cpu.return_value = (ok, RawCPUData())
    engine.collect_memory.return_value = (ok, RawMemoryData())
    engine.collect_load.return_value = (ok, RawLoadData())
    engine.collect_process.return_value = (ok, RawProcessData())
    engine.collect_pressure.return_value = (ok, RawPressureMetrics())
    engine.collect_io_stats.return_value = (ok, RawIOStatsData())
    engine.collect_disk_usage.return_value = (ok, RawDiskUsageData())
    engine.collect_tcp_stats.return_value = (ok, RawTcpStats())
    engine.read_quota_limits.return_value = (ok, RawQuotaLimits())
    engine.read_quota_usage.return_value = (ok, RawQuotaUsage())
    engine.detect_container.return_value = (ok, RawContainerInfo())
    engine.detect_runtime.return_value = (ok, RawRuntimeInfo())
    engine.is_containerized.return_value = False
    engine.get_runtime_name.return_value = "none"
    engine.collect_all.return_value = (ok, RawAllMetrics())

    for name in (
        "list_partitions",
        "collect_disk_io",
        "list_net_interfaces",
        "collect_net_stats",
        "collect_tcp_connections",
        "collect_udp_connections",
        "collect_unix_sockets",
    ):
        getattr(engine, name).side_effect = lambda: (EngineResult.ok(), RawList())

    return engine


@pytest.fixture
def lifecycle(mock_engine):
    """Uninitialized lifecycle around the mock engine."""
    from src.metrics.lifecycle import EngineLifecycle

    return EngineLifecycle(mock_engine)


@pytest.fixture
def initialized_lifecycle(lifecycle):
    """Initialized lifecycle around the mock engine."""
    lifecycle.init()
    yield lifecycle
    lifecycle.shutdown()


@pytest.fixture
def background_ctx():
    from src.core.context import CallContext

    return CallContext.background()


@pytest.fixture
def cancelled_ctx():
    from src.core.context import CallContext

    ctx = CallContext.background().with_cancel()
    ctx.cancel()
    return ctx


# ============================================================================
# Loopback Server Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def tcp_server():
    """
    Loopback TCP listener accepting and immediately closing connections.

    Yields "127.0.0.1:<port>".
    """

    async def handle(reader, writer):
        writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    yield f"127.0.0.1:{port}"
    server.close()
    await server.wait_closed()


@pytest_asyncio.fixture
async def http_server():
    """
    Minimal HTTP/1.1 server on loopback.

    ``/`` and ``/health`` answer 200, anything else 404.
    Yields "127.0.0.1:<port>".
    """

    async def handle(reader, writer):
        request_line = await reader.readline()
        while (await reader.readline()) not in (b"\r\n", b"\n", b""):
            pass
        parts = request_line.decode().split()
        path = parts[1] if len(parts) > 1 else "/"
        status = "200 OK" if path in ("/", "/health") else "404 Not Found"
        body = status.encode()
        writer.write(
            f"HTTP/1.1 {status}\r\nContent-Length: {len(body)}\r\nConnection: close\r\n\r\n".encode() + body
        )
        await writer.drain()
        writer.close()

    server = await asyncio.start_server(handle, "127.0.0.1", 0)
    port = server.sockets[0].getsockname()[1]
    yield f"127.0.0.1:{port}"
    server.close()
    await server.wait_closed()


@pytest.fixture
def silent_udp_socket():
    """
    Bound UDP socket that never answers.

    Yields "127.0.0.1:<port>". Datagrams are queued but never read, so a
    prober waiting for a reply hits its read timeout.
    """
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    yield f"127.0.0.1:{port}"
    sock.close()


@pytest.fixture
def echo_udp_server():
    """UDP server answering every datagram with PONG, served from a thread."""
    import threading

    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(0.1)
    port = sock.getsockname()[1]
    stop = threading.Event()

    def serve():
        while not stop.is_set():
            try:
                data, addr = sock.recvfrom(1024)
            except socket.timeout:
                continue
            sock.sendto(b"PONG", addr)

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    yield f"127.0.0.1:{port}"
    stop.set()
    thread.join(timeout=1)
    sock.close()


@pytest.fixture
def closed_tcp_port():
    """A loopback port with nothing listening on it."""
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    sock.bind(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return f"127.0.0.1:{port}"
