"""
Host metrics layer: public records, engine lifecycle, collectors and detectors.
"""

from src.metrics.collectors import (
    ConnectionCollector,
    CPUCollector,
    DiskCollector,
    IOCollector,
    MemoryCollector,
    MetricsCollector,
    NetworkCollector,
)
from src.metrics.connections import (
    AddressFamily,
    SocketState,
    TcpConnection,
    TcpStats,
    UdpConnection,
    UnixSocket,
)
from src.metrics.detectors import ContainerDetector, QuotaDetector, RuntimeDetector
from src.metrics.errors import raise_for_result, result_to_error
from src.metrics.lifecycle import EngineLifecycle, get_engine_lifecycle
from src.metrics.quota import (
    ContainerInfo,
    ContainerRuntime,
    QuotaFlag,
    QuotaLimits,
    QuotaUsage,
)
from src.metrics.runtime import AvailableRuntime, RuntimeInfo, RuntimeType
from src.metrics.types import AllSystemMetrics

__all__ = [
    "AddressFamily",
    "AllSystemMetrics",
    "AvailableRuntime",
    "CPUCollector",
    "ConnectionCollector",
    "ContainerDetector",
    "ContainerInfo",
    "ContainerRuntime",
    "DiskCollector",
    "EngineLifecycle",
    "IOCollector",
    "MemoryCollector",
    "MetricsCollector",
    "NetworkCollector",
    "QuotaDetector",
    "QuotaFlag",
    "QuotaLimits",
    "QuotaUsage",
    "RuntimeDetector",
    "RuntimeInfo",
    "RuntimeType",
    "SocketState",
    "TcpConnection",
    "TcpStats",
    "UdpConnection",
    "UnixSocket",
    "get_engine_lifecycle",
    "raise_for_result",
    "result_to_error",
]
