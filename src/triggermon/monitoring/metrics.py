"""
Metric values derived from one tick's snapshots.

The trigger expression is evaluated against the mapping produced here. Names
are lower case; a metric is only present when the collector it derives from
is registered.
"""

import logging
from typing import Dict, Mapping

from ..collectors.base import Snapshot
from .cpu_usage import calculate_cpu_usage

logger = logging.getLogger(__name__)

BYTES_PER_KIB = 1024.0


def counter_delta(prev: float, curr: float) -> float:
    """Increase of a cumulative counter; a decrease means a reset and counts as 0."""
    return max(0.0, curr - prev)


def _rate_kib_per_second(prev: Snapshot, curr: Snapshot, fields, elapsed: float) -> float:
    if elapsed <= 0:
        return 0.0
    total = sum(
        counter_delta(prev.values.get(name, 0.0), curr.values.get(name, 0.0))
        for name in fields
    )
    return total / BYTES_PER_KIB / elapsed


def compute_metrics(
    prev: Mapping[str, Snapshot],
    curr: Mapping[str, Snapshot],
    elapsed: float,
) -> Dict[str, float]:
    """
    Compute the metric map for a tick.

    Args:
        prev: Snapshots of the previous tick keyed by collector kind
        curr: Snapshots of the current tick keyed by collector kind
        elapsed: Seconds between the two ticks

    Returns:
        Mapping with any of ``cpu`` (busy %), ``mem`` (memory used %),
        ``swap`` (swap used %), ``disk`` (read+write KiB/s) and ``net``
        (sent+received KiB/s)
    """
    metrics: Dict[str, float] = {}

    if "cpu" in prev and "cpu" in curr:
        metrics["cpu"] = calculate_cpu_usage(prev["cpu"], curr["cpu"])

    memory = curr.get("memory")
    if memory is not None:
        metrics["mem"] = float(memory.values.get("percent", 0.0))
        metrics["swap"] = float(memory.values.get("swap_percent", 0.0))

    if "disk" in prev and "disk" in curr:
        metrics["disk"] = _rate_kib_per_second(
            prev["disk"], curr["disk"], ("read_bytes", "write_bytes"), elapsed
        )

    if "network" in prev and "network" in curr:
        metrics["net"] = _rate_kib_per_second(
            prev["network"], curr["network"], ("bytes_sent", "bytes_recv"), elapsed
        )

    return metrics
