"""
Address helpers shared by the socket-based probers.
"""

import socket

from src.core.config.constants import MAX_PORT


def split_host_port(address: str) -> tuple[str, int]:
    """
    Split ``host:port`` (or ``[v6]:port``) into its parts.

    Raises:
        ValueError: If the port is missing, not a number or outside 0..65535
    """
    if address.startswith("["):
        end = address.find("]")
        if end == -1 or address[end + 1:end + 2] != ":":
            raise ValueError(f"missing port in address {address!r}")
        host, port = address[1:end], address[end + 2:]
    else:
        host, sep, port = address.rpartition(":")
        if not sep:
            raise ValueError(f"missing port in address {address!r}")
        if ":" in host:
            raise ValueError(f"too many colons in address {address!r}")
    if not port.isdigit() or int(port) > MAX_PORT:
        raise ValueError(f"invalid port in address {address!r}")
    return host, int(port)


def strip_port(address: str) -> str:
    """Return the host part of ``address``, whether or not it carries a port."""
    if address.startswith("["):
        end = address.find("]")
        return address[1:end] if end != -1 else address.strip("[")
    if address.count(":") == 1:
        return address.split(":", 1)[0]
    return address


def join_host_port(host: str, port: int) -> str:
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


def family_for(network: str) -> int:
    """Map a network kind suffix (tcp4, udp6, ...) to an address family."""
    if network.endswith("4"):
        return socket.AF_INET
    if network.endswith("6"):
        return socket.AF_INET6
    return socket.AF_UNSPEC
