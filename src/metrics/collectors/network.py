"""
Network Collector
"""

from src.core.context import CallContext
from src.core.exceptions.engine import NotFoundError
from src.metrics.builders import build_net_interface, build_net_stat
from src.metrics.collectors.base import BaseCollector
from src.metrics.types import NetInterface, NetStats


class NetworkCollector(BaseCollector):

    def list_interfaces(self, ctx: CallContext) -> list[NetInterface]:
        """Interfaces with ``up`` / ``loopback`` flags."""
        return self._call_list(ctx, self._engine.list_net_interfaces, build_net_interface)

    def collect_all_stats(self, ctx: CallContext) -> list[NetStats]:
        return self._call_list(ctx, self._engine.collect_net_stats, build_net_stat)

    def collect_stats(self, ctx: CallContext, iface: str) -> NetStats:
        """
        Raises:
            NotFoundError: If the interface does not exist
        """
        for stats in self.collect_all_stats(ctx):
            if stats.interface == iface:
                return stats
        raise NotFoundError(details={"interface": iface})
