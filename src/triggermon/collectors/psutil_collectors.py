"""
Collector adapters built on the 'psutil' library.

Each collector reads one system-wide metric source and returns its raw
counters. Cumulative counters are returned as read; deltas are computed later
by the monitoring layer.
"""

import logging
from typing import Dict, List

import psutil

from ..validation import CollectorError
from .base import AbstractCollector

logger = logging.getLogger(__name__)


class CpuTimesCollector(AbstractCollector):
    """
    Collects system-wide cumulative CPU times (seconds per CPU state).

    Guest time is already accounted in user/nice time by the kernel, so the
    guest fields are dropped to avoid counting it twice.
    """

    kind = "cpu"
    EXCLUDED_FIELDS = ("guest", "guest_nice")

    def _read_counters(self) -> Dict[str, float]:
        times = psutil.cpu_times()
        return {
            name: float(value)
            for name, value in times._asdict().items()
            if name not in self.EXCLUDED_FIELDS
        }


class MemoryCollector(AbstractCollector):
    """Collects virtual memory and swap usage."""

    kind = "memory"

    def _read_counters(self) -> Dict[str, float]:
        vmem = psutil.virtual_memory()
        swap = psutil.swap_memory()
        return {
            "total": float(vmem.total),
            "available": float(vmem.available),
            "used": float(vmem.used),
            "percent": float(vmem.percent),
            "swap_total": float(swap.total),
            "swap_used": float(swap.used),
            "swap_percent": float(swap.percent),
        }


class DiskIOCollector(AbstractCollector):
    """Collects system-wide cumulative disk I/O counters."""

    kind = "disk"
    FIELDS: List[str] = ["read_count", "write_count", "read_bytes", "write_bytes"]

    def _read_counters(self) -> Dict[str, float]:
        counters = psutil.disk_io_counters()
        if counters is None:
            raise CollectorError("Disk I/O counters are not available on this system", kind=self.kind)
        return {name: float(getattr(counters, name)) for name in self.FIELDS}


class NetworkIOCollector(AbstractCollector):
    """Collects system-wide cumulative network I/O counters."""

    kind = "network"
    FIELDS: List[str] = ["bytes_sent", "bytes_recv", "packets_sent", "packets_recv"]

    def _read_counters(self) -> Dict[str, float]:
        counters = psutil.net_io_counters()
        if counters is None:
            raise CollectorError("Network I/O counters are not available on this system", kind=self.kind)
        return {name: float(getattr(counters, name)) for name in self.FIELDS}
