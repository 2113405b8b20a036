"""
Collector factory.

Maps configured collector kinds to their adapter classes.
"""

import logging
from typing import Dict, List, Type

from .base import AbstractCollector
from .psutil_collectors import (
    CpuTimesCollector,
    DiskIOCollector,
    MemoryCollector,
    NetworkIOCollector,
)

logger = logging.getLogger(__name__)

COLLECTOR_TYPES: Dict[str, Type[AbstractCollector]] = {
    CpuTimesCollector.kind: CpuTimesCollector,
    MemoryCollector.kind: MemoryCollector,
    DiskIOCollector.kind: DiskIOCollector,
    NetworkIOCollector.kind: NetworkIOCollector,
}

DEFAULT_COLLECTOR_KINDS: List[str] = list(COLLECTOR_TYPES)


def create_collector(kind: str) -> AbstractCollector:
    """
    Create a collector instance for the given kind.

    Args:
        kind: Collector kind ("cpu", "memory", "disk" or "network")

    Returns:
        Collector instance

    Raises:
        ValueError: If the kind is unknown
    """
    try:
        collector_class = COLLECTOR_TYPES[kind]
    except KeyError:
        raise ValueError(f"Unknown collector kind: {kind}") from None
    logger.debug(f"Creating {collector_class.__name__} for kind '{kind}'")
    return collector_class()


def create_collectors(kinds: List[str]) -> List[AbstractCollector]:
    """Create one collector per kind, preserving order."""
    return [create_collector(kind) for kind in kinds]
