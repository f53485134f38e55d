"""
procfs Readers

Linux-only counters that psutil does not expose in the shape the engine
needs: pressure stall information, run-queue / last-pid from loadavg,
sector-level diskstats and the inode / queue columns of the socket
tables.

Every reader takes the procfs root so tests can point it at a fixture
directory. Missing files raise FileNotFoundError; callers decide whether
that means "unsupported" or "not found".
"""

import socket
from pathlib import Path

from src.core.interfaces.engine import RawDiskIOData, RawPressure, RawPressureMetrics

PSI_RESOURCES = ("cpu", "memory", "io")


def read_lines(path: Path) -> list[str]:
    return path.read_text().splitlines()


# ============================================================================
# Pressure stall information (/proc/pressure/*)
# ============================================================================


def parse_pressure(lines: list[str]) -> RawPressure:
    """
    Parse one PSI file.

    Format:
        some avg10=0.00 avg60=0.00 avg300=0.00 total=0
        full avg10=0.00 avg60=0.00 avg300=0.00 total=0
    """
    pressure = RawPressure()
    for line in lines:
        kind, _, rest = line.partition(" ")
        if kind not in ("some", "full"):
            continue
        values = dict(item.split("=", 1) for item in rest.split() if "=" in item)
        setattr(pressure, f"{kind}_avg10", float(values.get("avg10", 0)))
        setattr(pressure, f"{kind}_avg60", float(values.get("avg60", 0)))
        setattr(pressure, f"{kind}_avg300", float(values.get("avg300", 0)))
        setattr(pressure, f"{kind}_total_us", int(values.get("total", 0)))
    return pressure


def read_pressure(proc_root: str) -> RawPressureMetrics:
    """
    Read cpu/memory/io pressure.

    Hosts without PSI yield ``available=False`` rather than an error.
    """
    base = Path(proc_root) / "pressure"
    if not base.is_dir():
        return RawPressureMetrics(available=False)

    parsed = {}
    for resource in PSI_RESOURCES:
        path = base / resource
        if not path.exists():
            return RawPressureMetrics(available=False)
        parsed[resource] = parse_pressure(read_lines(path))

    return RawPressureMetrics(available=True, **parsed)


# ============================================================================
# /proc/loadavg
# ============================================================================


def read_loadavg(proc_root: str) -> tuple[float, float, float, int, int, int]:
    """
    Returns:
        (load1, load5, load15, running, total, last_pid)

    Format: ``0.15 0.10 0.05 2/345 6789``
    """
    fields = (Path(proc_root) / "loadavg").read_text().split()
    running, _, total = fields[3].partition("/")
    return (
        float(fields[0]),
        float(fields[1]),
        float(fields[2]),
        int(running),
        int(total),
        int(fields[4]),
    )


# ============================================================================
# /proc/diskstats
# ============================================================================


def parse_diskstats(lines: list[str]) -> list[RawDiskIOData]:
    """
    Parse diskstats rows (major minor name + at least 11 counters).

    Partitions and virtual devices are kept; filtering is the caller's call.
    """
    devices = []
    for line in lines:
        fields = line.split()
        if len(fields) < 14:
            continue
        counters = [int(v) for v in fields[3:14]]
        devices.append(
            RawDiskIOData(
                device=fields[2],
                reads_completed=counters[0],
                sectors_read=counters[2],
                read_time_ms=counters[3],
                writes_completed=counters[4],
                sectors_written=counters[6],
                write_time_ms=counters[7],
                io_in_progress=counters[8],
                io_time_ms=counters[9],
                weighted_io_time_ms=counters[10],
            )
        )
    return devices


def read_diskstats(proc_root: str) -> list[RawDiskIOData]:
    return parse_diskstats(read_lines(Path(proc_root) / "diskstats"))


# ============================================================================
# /proc/net/{tcp,tcp6,udp,udp6}
# ============================================================================


def decode_address(hex_addr: str) -> tuple[str, int]:
    """
    Decode ``0100007F:1F90`` style kernel addresses.

    The address part is stored as host-order 32-bit words.
    """
    addr_hex, _, port_hex = hex_addr.partition(":")
    raw = bytes.fromhex(addr_hex)
    words = b"".join(raw[i:i + 4][::-1] for i in range(0, len(raw), 4))
    family = socket.AF_INET if len(raw) == 4 else socket.AF_INET6
    return socket.inet_ntop(family, words), int(port_hex, 16)


def parse_socket_table(lines: list[str]) -> dict[tuple[str, int, str, int], tuple[int, int, int]]:
    """
    Map (local_addr, local_port, remote_addr, remote_port) to
    (inode, rx_queue, tx_queue).
    """
    table = {}
    for line in lines[1:]:
        fields = line.split()
        if len(fields) < 10:
            continue
        local_addr, local_port = decode_address(fields[1])
        remote_addr, remote_port = decode_address(fields[2])
        tx_hex, _, rx_hex = fields[4].partition(":")
        table[(local_addr, local_port, remote_addr, remote_port)] = (
            int(fields[9]),
            int(rx_hex, 16),
            int(tx_hex, 16),
        )
    return table


def read_socket_tables(proc_root: str, protocol: str) -> dict[tuple[str, int, str, int], tuple[int, int, int]]:
    """
    Merge the IPv4 and IPv6 tables of one protocol.

    Missing tables (IPv6 disabled, non-Linux) contribute nothing.
    """
    merged = {}
    for name in (protocol, f"{protocol}6"):
        path = Path(proc_root) / "net" / name
        if path.exists():
            merged.update(parse_socket_table(read_lines(path)))
    return merged
