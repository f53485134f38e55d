"""
Prober Factory

Factory pattern for creating protocol probers from a string identifier.
Supported kinds: tcp, udp, http, grpc, exec, icmp.

A zero (or negative) timeout is replaced by the factory's default
timeout. Callers that know the kind statically can skip the string
dispatch and use the ``new_*_prober()`` helpers.
"""

from collections.abc import Callable

from src.core.config.constants import DEFAULT_TIMEOUT, ProberKind, Stage
from src.core.config.settings import ProbeSettings
from src.core.exceptions import UnknownProberTypeError
from src.core.interfaces.prober import Prober
from src.core.logging.logger import get_logger
from src.healthcheck.exec_prober import ExecProber
from src.healthcheck.grpc_prober import GRPCProber
from src.healthcheck.http_prober import HTTPProber
from src.healthcheck.icmp_prober import ICMPProber
from src.healthcheck.tcp_prober import TCPProber
from src.healthcheck.udp_prober import UDPProber

logger = get_logger(__name__)


class ProberFactory:
    """
    Factory for creating prober instances.

    Usage:
        factory = ProberFactory(default_timeout=3.0)
        prober = factory.create("tcp")          # 3.0 s timeout
        prober = factory.create("http", 10.0)   # explicit timeout
    """

    def __init__(self, default_timeout: float = DEFAULT_TIMEOUT, settings: ProbeSettings | None = None):
        """
        Initialize the prober factory.

        Args:
            default_timeout: Timeout used when create() receives zero
            settings: Optional prober settings (UDP payload, HTTP defaults, ICMP mode, ...)
        """
        self._default_timeout = default_timeout if default_timeout > 0 else DEFAULT_TIMEOUT
        self._settings = settings
        self._prober_types: dict[str, Callable[[float], Prober]] = {
            ProberKind.TCP.value: TCPProber,
            ProberKind.UDP.value: self._udp,
            ProberKind.HTTP.value: self._http,
            ProberKind.GRPC.value: GRPCProber,
            ProberKind.EXEC.value: self._exec,
            ProberKind.ICMP.value: self._icmp,
        }

    @property
    def default_timeout(self) -> float:
        return self._default_timeout

    def create(self, kind: str, timeout: float = 0) -> Prober:
        """
        Create a prober of the given kind.

        Args:
            kind: Prober kind ("tcp", "udp", "http", "grpc", "exec", "icmp")
            timeout: Timeout in seconds; zero means the factory default

        Returns:
            Prober: Configured prober instance

        Raises:
            UnknownProberTypeError: If kind is not supported
        """
        constructor = self._prober_types.get(kind.lower())
        if constructor is None:
            raise UnknownProberTypeError(kind, available=self.available_types())

        if timeout <= 0:
            timeout = self._default_timeout

        prober = constructor(timeout)
        logger.debug("Prober created", stage=Stage.PROBER_CREATE, kind=kind, timeout=timeout)
        return prober

    def available_types(self) -> list[str]:
        """Get list of supported prober kinds."""
        return list(self._prober_types.keys())

    def _udp(self, timeout: float) -> UDPProber:
        if self._settings is None:
            return UDPProber(timeout)
        return UDPProber(
            timeout,
            payload=self._settings.PROBE_UDP_PAYLOAD.encode(),
            buffer_size=self._settings.PROBE_UDP_BUFFER_SIZE,
        )

    def _http(self, timeout: float) -> HTTPProber:
        if self._settings is None:
            return HTTPProber(timeout)
        return HTTPProber(
            timeout,
            default_method=self._settings.PROBE_HTTP_METHOD,
            default_status=self._settings.PROBE_HTTP_EXPECTED_STATUS,
        )

    def _exec(self, timeout: float) -> ExecProber:
        if self._settings is None:
            return ExecProber(timeout)
        return ExecProber(timeout, max_output=self._settings.PROBE_EXEC_MAX_OUTPUT)

    def _icmp(self, timeout: float) -> ICMPProber:
        if self._settings is None:
            return ICMPProber(timeout)
        return ICMPProber(
            timeout,
            mode=self._settings.PROBE_ICMP_MODE,
            fallback_port=self._settings.PROBE_ICMP_FALLBACK_PORT,
        )


# ============================================================================
# Per-kind convenience constructors
# ============================================================================


def new_tcp_prober(timeout: float = DEFAULT_TIMEOUT) -> TCPProber:
    return TCPProber(timeout)


def new_udp_prober(timeout: float = DEFAULT_TIMEOUT) -> UDPProber:
    return UDPProber(timeout)


def new_http_prober(timeout: float = DEFAULT_TIMEOUT) -> HTTPProber:
    return HTTPProber(timeout)


def new_grpc_prober(timeout: float = DEFAULT_TIMEOUT) -> GRPCProber:
    return GRPCProber(timeout)


def new_exec_prober(timeout: float = DEFAULT_TIMEOUT) -> ExecProber:
    return ExecProber(timeout)


def new_icmp_prober(timeout: float = DEFAULT_TIMEOUT) -> ICMPProber:
    return ICMPProber(timeout)


# ============================================================================
# Settings-backed singleton
# ============================================================================

_factory: ProberFactory | None = None


def get_prober_factory() -> ProberFactory:
    """
    Get the global prober factory, configured from settings.

    Example:
        prober = get_prober_factory().create("tcp")
    """
    global _factory

    if _factory is None:
        from src.core.config.settings import get_settings

        probe_settings = get_settings().probe
        _factory = ProberFactory(
            default_timeout=probe_settings.PROBE_DEFAULT_TIMEOUT,
            settings=probe_settings,
        )

    return _factory
