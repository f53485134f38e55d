#!/usr/bin/env python3
"""
Centralized Configuration Module using Pydantic Settings

This module provides type-safe, environment-based configuration for the
host probe layer. Prober defaults, engine paths and logging options are
all declared here so that every component reads the same values.

Architectural Decision: Pydantic Settings for type safety and validation
- Environment variable loading with .env support
- Type validation at startup (fail fast on misconfiguration)
- IDE autocomplete for all settings
- Easy testing with override mechanisms

Author: System Architect
Date: 2025-12-05
"""

from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ProbeSettings(BaseSettings):
    """
    Protocol prober defaults.

    STAGE-H.0: Prober configuration

    The default timeout is what the factory substitutes when a caller
    asks for a prober with a zero timeout.
    """

    PROBE_DEFAULT_TIMEOUT: float = Field(default=5.0, gt=0, description="Default probe timeout in seconds")
    PROBE_UDP_PAYLOAD: str = Field(default="PING", description="Datagram sent by the UDP prober")
    PROBE_UDP_BUFFER_SIZE: int = Field(default=1024, gt=0, description="UDP response buffer size")
    PROBE_HTTP_METHOD: str = Field(default="GET", description="Default HTTP method")
    PROBE_HTTP_EXPECTED_STATUS: int = Field(default=200, description="Default expected HTTP status")
    PROBE_ICMP_MODE: Literal["auto", "native", "fallback"] = Field(
        default="auto",
        description="ICMP strategy: native raw socket, TCP fallback, or auto"
    )
    PROBE_ICMP_FALLBACK_PORT: int = Field(default=80, description="TCP port used when ICMP is unavailable")
    PROBE_EXEC_MAX_OUTPUT: int = Field(default=4096, gt=0, description="Max bytes of exec failure output")

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class EngineSettings(BaseSettings):
    """
    Metrics engine configuration.

    STAGE-M.0: Engine configuration

    Paths are configurable so tests and chroot deployments can point the
    engine at a different procfs / cgroupfs mount.
    """

    ENGINE_PROC_ROOT: str = Field(default="/proc", description="procfs mount point")
    ENGINE_CGROUP_ROOT: str = Field(default="/sys/fs/cgroup", description="cgroupfs mount point")
    ENGINE_CPU_SAMPLE_INTERVAL: float = Field(
        default=0.1, ge=0, description="CPU sampling window in seconds"
    )
    ENGINE_RUNTIME_SOCKET_TIMEOUT: float = Field(
        default=0.5, gt=0, description="Timeout when checking container runtime sockets"
    )

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)


class LoggingSettings(BaseSettings):
    """
    Logging configuration for structured logging.

    STAGE-L: Logging configuration

    Architectural Decision: structlog for production-grade logging
    """

    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    model_config = SettingsConfigDict(env_prefix="", case_sensitive=True)



class Settings(BaseSettings):
    """
    Main settings class that aggregates all configuration sections.

    STAGE-0: Centralized configuration initialization

    Usage:
        from src.core.config.settings import get_settings

        settings = get_settings()
        timeout = settings.probe.PROBE_DEFAULT_TIMEOUT
        proc_root = settings.engine.ENGINE_PROC_ROOT
    """

    # Probe settings
    PROBE_DEFAULT_TIMEOUT: float = Field(default=5.0, gt=0, description="Default probe timeout in seconds")
    PROBE_UDP_PAYLOAD: str = Field(default="PING", description="Datagram sent by the UDP prober")
    PROBE_UDP_BUFFER_SIZE: int = Field(default=1024, gt=0, description="UDP response buffer size")
    PROBE_HTTP_METHOD: str = Field(default="GET", description="Default HTTP method")
    PROBE_HTTP_EXPECTED_STATUS: int = Field(default=200, description="Default expected HTTP status")
    PROBE_ICMP_MODE: Literal["auto", "native", "fallback"] = Field(
        default="auto",
        description="ICMP strategy: native raw socket, TCP fallback, or auto"
    )
    PROBE_ICMP_FALLBACK_PORT: int = Field(default=80, description="TCP port used when ICMP is unavailable")
    PROBE_EXEC_MAX_OUTPUT: int = Field(default=4096, gt=0, description="Max bytes of exec failure output")

    # Engine settings
    ENGINE_PROC_ROOT: str = Field(default="/proc", description="procfs mount point")
    ENGINE_CGROUP_ROOT: str = Field(default="/sys/fs/cgroup", description="cgroupfs mount point")
    ENGINE_CPU_SAMPLE_INTERVAL: float = Field(
        default=0.1, ge=0, description="CPU sampling window in seconds"
    )
    ENGINE_RUNTIME_SOCKET_TIMEOUT: float = Field(
        default=0.5, gt=0, description="Timeout when checking container runtime sockets"
    )

    # Logging settings
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: Literal["json", "console"] = Field(default="json", description="Log output format")

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    # Nested configuration views
    @property
    def probe(self) -> 'ProbeSettings':
        """Get prober settings."""
        return ProbeSettings(
            PROBE_DEFAULT_TIMEOUT=self.PROBE_DEFAULT_TIMEOUT,
            PROBE_UDP_PAYLOAD=self.PROBE_UDP_PAYLOAD,
            PROBE_UDP_BUFFER_SIZE=self.PROBE_UDP_BUFFER_SIZE,
            PROBE_HTTP_METHOD=self.PROBE_HTTP_METHOD,
            PROBE_HTTP_EXPECTED_STATUS=self.PROBE_HTTP_EXPECTED_STATUS,
            PROBE_ICMP_MODE=self.PROBE_ICMP_MODE,
            PROBE_ICMP_FALLBACK_PORT=self.PROBE_ICMP_FALLBACK_PORT,
            PROBE_EXEC_MAX_OUTPUT=self.PROBE_EXEC_MAX_OUTPUT
        )

    @property
    def engine(self) -> 'EngineSettings':
        """Get metrics engine settings."""
        return EngineSettings(
            ENGINE_PROC_ROOT=self.ENGINE_PROC_ROOT,
            ENGINE_CGROUP_ROOT=self.ENGINE_CGROUP_ROOT,
            ENGINE_CPU_SAMPLE_INTERVAL=self.ENGINE_CPU_SAMPLE_INTERVAL,
            ENGINE_RUNTIME_SOCKET_TIMEOUT=self.ENGINE_RUNTIME_SOCKET_TIMEOUT
        )

    @property
    def logging(self) -> 'LoggingSettings':
        """Get logging settings."""
        return LoggingSettings(
            LOG_LEVEL=self.LOG_LEVEL,
            LOG_FORMAT=self.LOG_FORMAT
        )


    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore"  # Ignore extra environment variables
    )


# Global settings instance (singleton pattern)
_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Get the global settings instance (singleton).

    STAGE-0.3: Settings initialization

    Returns:
        Settings: Global settings instance
    """
    global _settings

    if _settings is None:
        _settings = Settings()

    return _settings


def reload_settings() -> Settings:
    """
    Reload settings (useful for testing).

    Returns:
        Settings: New settings instance
    """
    global _settings
    _settings = Settings()
    return _settings
