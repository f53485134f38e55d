"""
gRPC Prober

Calls ``grpc.health.v1.Health/Check`` on the target and maps the serving
status to a ProbeResult.

Status mapping:
    SERVING          → success, "gRPC {service} serving at {address}"
    NOT_SERVING      → GRPCNotServingError
    SERVICE_UNKNOWN  → GRPCServiceUnknownError (also for RPC code NOT_FOUND)
    anything else    → GRPCUnknownStatusError
    DEADLINE_EXCEEDED (RPC) → "gRPC health check timeout"

Insecure (plaintext) channels by default; ``GRPCProber.secure()`` uses the
system TLS roots.

Author: Senior Solution Architect
Date: 2025-12-05
"""

import grpc
from grpc_health.v1 import health_pb2, health_pb2_grpc

from src.core.config.constants import DEFAULT_TIMEOUT, ProberKind
from src.core.context import CallContext
from src.core.exceptions import (
    GRPCNotServingError,
    GRPCServiceUnknownError,
    GRPCUnknownStatusError,
    ProbeConnectionError,
)
from src.healthcheck.base_prober import BaseProber
from src.healthcheck.types import Target

_SERVING_STATUS = health_pb2.HealthCheckResponse.ServingStatus


class GRPCProber(BaseProber):
    """
    gRPC health protocol prober.

    Target fields used: address, service (empty = overall server health).

    Usage:
        prober = GRPCProber(timeout=2.0)
        result = await prober.probe(ctx, Target(address="localhost:50051", service="api"))
    """

    kind = ProberKind.GRPC.value

    def __init__(self, timeout: float = DEFAULT_TIMEOUT, use_tls: bool = False):
        super().__init__(timeout)
        self._use_tls = use_tls

    @classmethod
    def secure(cls, timeout: float = DEFAULT_TIMEOUT) -> "GRPCProber":
        return cls(timeout, use_tls=True)

    def _open_channel(self, address: str) -> grpc.aio.Channel:
        if self._use_tls:
            return grpc.aio.secure_channel(address, grpc.ssl_channel_credentials())
        return grpc.aio.insecure_channel(address)

    async def _probe_internal(self, ctx: CallContext, target: Target):
        service = target.service
        try:
            async with self._open_channel(target.address) as channel:
                stub = health_pb2_grpc.HealthStub(channel)
                response = await stub.Check(
                    health_pb2.HealthCheckRequest(service=service),
                    timeout=ctx.bound_timeout(self.timeout),
                )
        except grpc.aio.AioRpcError as e:
            return self._rpc_error(e, service)
        except (grpc.RpcError, OSError, ValueError) as e:
            message = f"gRPC connection failed: {e}"
            return message, ProbeConnectionError.from_exception(e, message, address=target.address)

        return self._serving_status(response.status, service, target.address)

    @staticmethod
    def _rpc_error(error: grpc.aio.AioRpcError, service: str):
        code = error.code()
        if code == grpc.StatusCode.NOT_FOUND:
            return f'gRPC service "{service}" unknown', GRPCServiceUnknownError(service)
        if code == grpc.StatusCode.DEADLINE_EXCEEDED:
            message = "gRPC health check timeout"
            return message, ProbeConnectionError.from_exception(error, message)
        if code == grpc.StatusCode.UNAVAILABLE:
            message = f"gRPC connection failed: {error.details()}"
            return message, ProbeConnectionError.from_exception(error, message)
        message = f"gRPC health check failed: {error.details()}"
        return message, ProbeConnectionError.from_exception(error, message, code=code.name)

    @staticmethod
    def _serving_status(status: int, service: str, address: str):
        if status == health_pb2.HealthCheckResponse.SERVING:
            return f"gRPC {service or '(server)'} serving at {address}", None
        if status == health_pb2.HealthCheckResponse.NOT_SERVING:
            return f'gRPC service "{service}" not serving', GRPCNotServingError(service)
        if status == health_pb2.HealthCheckResponse.SERVICE_UNKNOWN:
            return f'gRPC service "{service}" unknown', GRPCServiceUnknownError(service)
        name = _SERVING_STATUS.Name(status) if status in _SERVING_STATUS.values() else str(status)
        return (
            f'gRPC service "{service}" status unknown: {name}',
            GRPCUnknownStatusError(name),
        )
