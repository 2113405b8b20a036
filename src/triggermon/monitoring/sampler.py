"""
Per-tick sampling of all registered collectors into history buffers.
"""

import logging
from typing import Dict

from ..collectors.base import Snapshot
from ..models.runtime import MonitorContext
from .history import HistoryBuffer

logger = logging.getLogger(__name__)


class Sampler:
    """
    Takes one snapshot from every registered collector per tick.

    The sampler owns one history buffer per collector kind; all buffers share
    the same capacity. It never sleeps: the monitoring loop waits between
    ticks through the context clock.
    """

    def __init__(self, context: MonitorContext, capacity: int):
        """
        Args:
            context: Context holding the collector registry
            capacity: Number of snapshots kept per collector kind
        """
        self.context = context
        self.capacity = capacity
        self.buffers: Dict[str, HistoryBuffer] = {
            kind: HistoryBuffer(kind, capacity) for kind in context.kinds
        }
        self.sequence = 0

    def tick(self) -> Dict[str, Snapshot]:
        """
        Collect one snapshot per collector and push it into its buffer.

        All snapshots of a tick carry the same sequence number. The registry is
        read under the context lock; collection happens outside it.

        Returns:
            Snapshots of this tick keyed by collector kind

        Raises:
            CollectorError: If any collector fails; nothing is pushed then
        """
        collectors = self.context.get_collectors()
        self.sequence += 1

        snapshots = {
            collector.kind: collector.collect(self.sequence) for collector in collectors
        }

        for collector in collectors:
            buffer = self.buffers.get(collector.kind)
            if buffer is None:
                buffer = HistoryBuffer(collector.kind, self.capacity)
                self.buffers[collector.kind] = buffer
            buffer.push(collector.serialize(snapshots[collector.kind]))

        logger.debug(f"Tick {self.sequence}: sampled {sorted(snapshots)}")
        return snapshots
