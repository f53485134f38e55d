"""Metrics engine implementations."""

from src.infrastructure.engine.cgroup import CgroupReader
from src.infrastructure.engine.container import RuntimeInspector
from src.infrastructure.engine.psutil_engine import PsutilEngine

__all__ = ["CgroupReader", "PsutilEngine", "RuntimeInspector"]
