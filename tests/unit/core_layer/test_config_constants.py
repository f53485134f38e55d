"""
Unit Tests for Configuration Constants

Tests the protocol defaults, engine constants and enumerations.
"""

import pytest

from src.core.config.constants import (
    DEFAULT_HTTP_METHOD,
    DEFAULT_HTTP_STATUS,
    DEFAULT_ICMP_FALLBACK_PORT,
    DEFAULT_TIMEOUT,
    DEFAULT_UDP_PAYLOAD,
    MAX_EXEC_OUTPUT,
    QUOTA_UNLIMITED,
    SECTOR_SIZE,
    ICMPMode,
    ProberKind,
    Stage,
)


@pytest.mark.unit
class TestProtocolDefaults:
    """Test prober default values."""

    def test_udp_payload_is_ping(self):
        """Test that the default UDP payload is PING."""
        assert DEFAULT_UDP_PAYLOAD == b"PING"

    def test_http_defaults(self):
        """Test that HTTP defaults to GET expecting 200."""
        assert DEFAULT_HTTP_METHOD == "GET"
        assert DEFAULT_HTTP_STATUS == 200

    def test_exec_output_ceiling_is_4k(self):
        """Test that exec output is bounded to 4 KiB."""
        assert MAX_EXEC_OUTPUT == 4096

    def test_timeouts_and_ports_are_positive(self):
        """Test that the default timeout and fallback port are usable."""
        assert DEFAULT_TIMEOUT > 0
        assert 0 < DEFAULT_ICMP_FALLBACK_PORT <= 65535


@pytest.mark.unit
class TestEngineConstants:
    """Test engine-side constants."""

    def test_sector_size(self):
        """Test that disk sectors are 512 bytes."""
        assert SECTOR_SIZE == 512

    def test_quota_unlimited_is_max_uint64(self):
        """Test that the unlimited sentinel is the max unsigned 64-bit value."""
        assert QUOTA_UNLIMITED == 2**64 - 1


@pytest.mark.unit
class TestEnums:
    """Test string enumerations."""

    def test_prober_kinds(self):
        """Test that all six prober kinds are declared."""
        assert {k.value for k in ProberKind} == {"tcp", "udp", "http", "grpc", "exec", "icmp"}

    def test_icmp_modes(self):
        """Test ICMP mode values."""
        assert {m.value for m in ICMPMode} == {"auto", "native", "fallback"}

    def test_stage_values_are_unique(self):
        """Test that log stage identifiers are unique strings."""
        values = [s.value for s in Stage]
        assert len(values) == len(set(values))
        assert all(isinstance(v, str) and v for v in values)
