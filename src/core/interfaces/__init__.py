"""
Core Interfaces Module

Abstract interfaces for the two pluggable seams of the host probe layer.

Components:
-----------
- **prober.py**: Prober protocol implemented by every protocol prober
- **engine.py**: MetricsEngine protocol plus the raw snapshot records and
  result codes exchanged across the engine boundary

Interfaces follow the Protocol pattern (PEP 544) for structural subtyping,
so test doubles need no inheritance.

Author: System Architect
Date: 2025-12-08
"""

from src.core.interfaces.engine import EngineResult, MetricsEngine, RawList, ResultCode
from src.core.interfaces.prober import Prober

__all__ = [
    "Prober",
    "MetricsEngine",
    "EngineResult",
    "RawList",
    "ResultCode",
]
