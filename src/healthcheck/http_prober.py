"""
HTTP Prober

Issues one request and compares the response status with the expected
one. A transport failure and a status mismatch are reported as distinct
errors (ProbeConnectionError vs HTTPStatusMismatchError).

HTTPX CLIENT CONFIGURATION:
---------------------------
- One short-lived AsyncClient per probe: probes are independent and keep
  no pooled state between calls
- follow_redirects=False: a 301 is the observed status, not the page it
  points to
- timeout: the prober timeout, narrowed by the context deadline

Author: Senior Solution Architect
Date: 2025-12-05
"""

import httpx

from src.core.config.constants import (
    DEFAULT_HTTP_METHOD,
    DEFAULT_HTTP_STATUS,
    DEFAULT_TIMEOUT,
    MAX_PORT,
    ProberKind,
)
from src.core.context import CallContext
from src.core.exceptions import HTTPStatusMismatchError, ProbeConnectionError
from src.healthcheck.base_prober import BaseProber
from src.healthcheck.types import Target


def build_url(address: str, path: str = "") -> str:
    """Prefix ``http://`` when the address has no scheme, then append ``path``."""
    url = address if "://" in address else f"http://{address}"
    return url + path


def parse_url(url: str) -> httpx.URL:
    """
    Parse ``url`` and reject ports outside 1..65535.

    Raises:
        httpx.InvalidURL: Malformed URL or out-of-range port
    """
    parsed = httpx.URL(url)
    if parsed.port is not None and not 0 < parsed.port <= MAX_PORT:
        raise httpx.InvalidURL(f"invalid port {parsed.port} in {url!r}")
    return parsed


class HTTPProber(BaseProber):
    """
    HTTP status prober.

    Target fields used: address, path, method (default GET),
    status_code (default 200). The defaults can be overridden per prober,
    which is how the factory applies PROBE_HTTP_METHOD and
    PROBE_HTTP_EXPECTED_STATUS.

    Usage:
        prober = HTTPProber(timeout=3.0)
        result = await prober.probe(ctx, Target(address="localhost:8080", path="/health"))
        # result.output == "HTTP 200"
    """

    kind = ProberKind.HTTP.value

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        default_method: str = DEFAULT_HTTP_METHOD,
        default_status: int = DEFAULT_HTTP_STATUS,
    ):
        super().__init__(timeout if timeout > 0 else DEFAULT_TIMEOUT)
        self._default_method = default_method.upper() or DEFAULT_HTTP_METHOD
        self._default_status = default_status or DEFAULT_HTTP_STATUS

    @property
    def default_method(self) -> str:
        return self._default_method

    @property
    def default_status(self) -> int:
        return self._default_status

    async def _probe_internal(self, ctx: CallContext, target: Target):
        method = target.method or self._default_method
        expected = target.status_code or self._default_status
        url = build_url(target.address, target.path)

        try:
            parsed = parse_url(url)
        except httpx.InvalidURL as e:
            return "", ProbeConnectionError.from_exception(e, f"request failed: {e}", url=url)

        try:
            async with httpx.AsyncClient(
                timeout=httpx.Timeout(ctx.bound_timeout(self.timeout)),
                follow_redirects=False,
            ) as client:
                response = await client.request(method, parsed)
        except httpx.HTTPError as e:
            return "", ProbeConnectionError.from_exception(
                e, f"request failed: {str(e) or type(e).__name__}", url=url
            )

        if response.status_code != expected:
            return f"HTTP {response.status_code}", HTTPStatusMismatchError(
                response.status_code, expected
            )
        return f"HTTP {response.status_code}", None
