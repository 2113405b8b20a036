"""
Collector adapters for system metrics.

Each adapter produces point-in-time snapshots of one metric source and can
serialize them to bytes for the history buffers.
"""

from .base import AbstractCollector, Snapshot, deserialize_snapshot, serialize_snapshot
from .factory import COLLECTOR_TYPES, DEFAULT_COLLECTOR_KINDS, create_collector, create_collectors
from .psutil_collectors import (
    CpuTimesCollector,
    DiskIOCollector,
    MemoryCollector,
    NetworkIOCollector,
)

__all__ = [
    "AbstractCollector",
    "Snapshot",
    "serialize_snapshot",
    "deserialize_snapshot",
    "COLLECTOR_TYPES",
    "DEFAULT_COLLECTOR_KINDS",
    "create_collector",
    "create_collectors",
    "CpuTimesCollector",
    "MemoryCollector",
    "DiskIOCollector",
    "NetworkIOCollector",
]
