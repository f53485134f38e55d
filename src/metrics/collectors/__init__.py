"""Metrics collectors."""

from src.metrics.collectors.base import BaseCollector
from src.metrics.collectors.connections import ConnectionCollector
from src.metrics.collectors.cpu import CPUCollector
from src.metrics.collectors.disk import DiskCollector
from src.metrics.collectors.facade import MetricsCollector
from src.metrics.collectors.io import IOCollector
from src.metrics.collectors.memory import MemoryCollector
from src.metrics.collectors.network import NetworkCollector

__all__ = [
    "BaseCollector",
    "CPUCollector",
    "ConnectionCollector",
    "DiskCollector",
    "IOCollector",
    "MemoryCollector",
    "MetricsCollector",
    "NetworkCollector",
]
