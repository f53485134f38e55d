"""
Unit Tests for ProberFactory

Tests kind dispatch, timeout defaulting, settings wiring and the
per-kind constructors.
"""

from unittest.mock import patch

import pytest

from src.core.config.constants import DEFAULT_TIMEOUT, ICMPMode
from src.core.config.settings import ProbeSettings
from src.core.exceptions import UnknownProberTypeError
from src.healthcheck import (
    ExecProber,
    GRPCProber,
    HTTPProber,
    ICMPProber,
    ProberFactory,
    TCPProber,
    UDPProber,
    get_prober_factory,
    new_exec_prober,
    new_grpc_prober,
    new_http_prober,
    new_icmp_prober,
    new_tcp_prober,
    new_udp_prober,
)
import src.healthcheck.factory as factory_module


@pytest.mark.unit
class TestProberFactoryCreate:
    """Test create() dispatch."""

    @pytest.mark.parametrize(
        "kind, expected",
        [
            ("tcp", TCPProber),
            ("udp", UDPProber),
            ("http", HTTPProber),
            ("grpc", GRPCProber),
            ("exec", ExecProber),
            ("icmp", ICMPProber),
        ],
    )
    def test_create_each_kind(self, kind, expected):
        """Test that every supported kind yields its prober."""
        prober = ProberFactory(3.0).create(kind, 2.0)
        assert isinstance(prober, expected)
        assert prober.type() == kind
        assert prober.timeout == 2.0

    def test_kind_is_case_insensitive(self):
        """Test that 'TCP' resolves like 'tcp'."""
        assert isinstance(ProberFactory().create("TCP"), TCPProber)

    def test_zero_timeout_uses_factory_default(self):
        """Test that a zero timeout picks the factory default."""
        prober = ProberFactory(default_timeout=3.0).create("tcp", 0)
        assert prober.timeout == 3.0

    def test_negative_timeout_uses_factory_default(self):
        """Test that a negative timeout picks the factory default."""
        assert ProberFactory(default_timeout=7.0).create("udp", -1).timeout == 7.0

    def test_invalid_factory_default(self):
        """Test that a non-positive factory default becomes the package default."""
        assert ProberFactory(default_timeout=0).default_timeout == DEFAULT_TIMEOUT

    def test_unknown_kind(self):
        """Test that unknown kinds raise UnknownProberTypeError."""
        with pytest.raises(UnknownProberTypeError) as exc_info:
            ProberFactory().create("bogus")

        assert "bogus" in str(exc_info.value)

    def test_available_types(self):
        """Test the advertised kind list."""
        assert sorted(ProberFactory().available_types()) == [
            "exec", "grpc", "http", "icmp", "tcp", "udp",
        ]


@pytest.mark.unit
class TestProberFactorySettings:
    """Test that probe settings reach the probers."""

    def test_udp_payload_from_settings(self):
        """Test the configured UDP payload."""
        settings = ProbeSettings(PROBE_UDP_PAYLOAD="HELLO")
        prober = ProberFactory(settings=settings).create("udp")
        assert prober.payload == b"HELLO"

    def test_icmp_mode_from_settings(self):
        """Test the configured ICMP mode and fallback port."""
        settings = ProbeSettings(PROBE_ICMP_MODE="fallback", PROBE_ICMP_FALLBACK_PORT=8443)
        prober = ProberFactory(settings=settings).create("icmp")
        assert prober.mode == ICMPMode.FALLBACK
        assert prober.fallback_port == 8443

    def test_http_defaults_from_settings(self):
        """Test the configured HTTP method and expected status."""
        settings = ProbeSettings(PROBE_HTTP_METHOD="HEAD", PROBE_HTTP_EXPECTED_STATUS=204)
        prober = ProberFactory(settings=settings).create("http", 2.0)
        assert prober.default_method == "HEAD"
        assert prober.default_status == 204
        assert prober.timeout == 2.0

    def test_http_defaults_without_settings(self):
        """Test that a bare factory keeps GET / 200."""
        prober = ProberFactory().create("http")
        assert prober.default_method == "GET"
        assert prober.default_status == 200


@pytest.mark.unit
class TestConvenienceConstructors:
    """Test the new_* helpers."""

    @pytest.mark.parametrize(
        "constructor, expected",
        [
            (new_tcp_prober, TCPProber),
            (new_udp_prober, UDPProber),
            (new_http_prober, HTTPProber),
            (new_grpc_prober, GRPCProber),
            (new_exec_prober, ExecProber),
            (new_icmp_prober, ICMPProber),
        ],
    )
    def test_constructor(self, constructor, expected):
        """Test that each helper returns the right prober with the timeout."""
        prober = constructor(4.0)
        assert isinstance(prober, expected)
        assert prober.timeout == 4.0


@pytest.mark.unit
class TestGlobalFactory:
    """Test the settings-backed singleton."""

    def test_singleton(self):
        """Test that repeated calls return the same factory."""
        with patch.object(factory_module, "_factory", None):
            first = get_prober_factory()
            second = get_prober_factory()
            assert first is second
            assert first.default_timeout > 0
