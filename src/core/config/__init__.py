"""
Configuration Module

Centralized, type-safe configuration for the host probe layer.

Components:
-----------
- **settings.py**: Pydantic-based configuration with environment variable loading
- **constants.py**: Log stages, prober kinds and protocol/engine constants

Usage:
------
```python
from src.core.config import get_settings
from src.core.config.constants import Stage, ProberKind

settings = get_settings()
timeout = settings.probe.PROBE_DEFAULT_TIMEOUT
```

Testing:
-------
```python
import os
from src.core.config import reload_settings

os.environ["PROBE_DEFAULT_TIMEOUT"] = "1.5"
settings = reload_settings()
assert settings.probe.PROBE_DEFAULT_TIMEOUT == 1.5
```

Author: System Architect
Date: 2025-12-05
"""

from src.core.config.constants import (
    DEFAULT_HTTP_METHOD,
    DEFAULT_HTTP_STATUS,
    DEFAULT_ICMP_FALLBACK_PORT,
    DEFAULT_TIMEOUT,
    DEFAULT_UDP_PAYLOAD,
    FULL_PERCENT,
    MAX_EXEC_OUTPUT,
    MAX_PORT,
    PID_NOT_FOUND,
    QUOTA_UNLIMITED,
    SECTOR_SIZE,
    TRUNCATION_MARKER,
    UDP_BUFFER_SIZE,
    ICMPMode,
    ProberKind,
    Stage,
)
from src.core.config.settings import get_settings, reload_settings

__all__ = [
    # Settings
    "get_settings",
    "reload_settings",
    # Enums
    "Stage",
    "ProberKind",
    "ICMPMode",
    # Prober defaults
    "DEFAULT_TIMEOUT",
    "DEFAULT_UDP_PAYLOAD",
    "UDP_BUFFER_SIZE",
    "DEFAULT_HTTP_METHOD",
    "DEFAULT_HTTP_STATUS",
    "DEFAULT_ICMP_FALLBACK_PORT",
    "MAX_PORT",
    "MAX_EXEC_OUTPUT",
    "TRUNCATION_MARKER",
    # Metrics
    "FULL_PERCENT",
    "SECTOR_SIZE",
    "QUOTA_UNLIMITED",
    "PID_NOT_FOUND",
]
