"""
Bounded history of serialized snapshots.
"""

import logging
from collections import deque
from typing import Deque, List

logger = logging.getLogger(__name__)


class HistoryBuffer:
    """
    Fixed-capacity FIFO of serialized snapshots for one collector kind.

    Pushing into a full buffer evicts the oldest entry. Reading is
    non-destructive: `drain_copy` returns the contents and leaves them in
    place, and the buffer is only emptied by an explicit `clear`.
    """

    def __init__(self, kind: str, capacity: int):
        """
        Args:
            kind: Collector kind whose snapshots the buffer holds
            capacity: Maximum number of snapshots kept

        Raises:
            ValueError: If capacity is smaller than 1
        """
        if capacity < 1:
            raise ValueError(f"History buffer capacity must be >= 1, got {capacity}")
        self.kind = kind
        self._entries: Deque[bytes] = deque(maxlen=capacity)

    @property
    def capacity(self) -> int:
        return self._entries.maxlen

    def push(self, payload: bytes) -> None:
        self._entries.append(payload)

    def drain_copy(self) -> List[bytes]:
        """Return all buffered snapshots, oldest first, without removing them."""
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"HistoryBuffer(kind={self.kind!r}, size={len(self)}, capacity={self.capacity})"
