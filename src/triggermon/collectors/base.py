"""
Defines the snapshot type and the abstract base class for collectors.

This module provides:
- Snapshot: an immutable point-in-time capture of one metric source's counters.
- AbstractCollector: an abstract base class (ABC) defining the interface every
  collector adapter implements (prepare, collect, serialize).
"""

import json
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Mapping

from ..validation import CollectorError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """
    Point-in-time capture of one metric source.

    Attributes:
        kind: Collector kind tag (e.g. "cpu", "memory").
        sequence: Tick number; all snapshots taken in the same tick share it.
        values: Raw counter values keyed by field name. Cumulative counters
                (cpu times, byte counts) are stored as read, not as deltas.
    """

    kind: str
    sequence: int
    values: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))


class AbstractCollector(ABC):
    """
    Abstract base class for collector adapters.

    Subclasses implement `_read_counters` to read the raw values of one metric
    source. `collect` wraps that call so that any failure surfaces as a
    `CollectorError` tagged with the collector kind.
    """

    kind: str = ""

    def __init__(self):
        self.prepared = False

    def prepare(self) -> None:
        """
        Performs one-time initialization before the first collection.

        The default implementation takes a throwaway reading to make sure the
        source is available. Called under the context lock.

        Raises:
            CollectorError: If the source cannot be read.
        """
        self.collect()
        self.prepared = True
        logger.debug(f"Collector '{self.kind}' prepared")

    def collect(self, sequence: int = 0) -> Snapshot:
        """
        Takes one snapshot of the metric source.

        Args:
            sequence: Tick number to stamp on the snapshot.

        Returns:
            A new Snapshot.

        Raises:
            CollectorError: If the source cannot be read.
        """
        try:
            values = self._read_counters()
        except CollectorError:
            raise
        except Exception as e:
            raise CollectorError(
                f"Collector '{self.kind}' failed: {type(e).__name__}: {e}", kind=self.kind
            ) from e
        return Snapshot(kind=self.kind, sequence=sequence, values=values)

    def serialize(self, snapshot: Snapshot) -> bytes:
        """
        Serializes a snapshot to bytes.

        The encoding is compact JSON with sorted keys, so the same snapshot
        always produces the same bytes, and it never contains a newline.
        """
        return serialize_snapshot(snapshot)

    @abstractmethod
    def _read_counters(self) -> Dict[str, float]:
        """
        Reads the raw counter values of the metric source.

        Returns:
            Mapping of field name to numeric value.
        """
        pass


def serialize_snapshot(snapshot: Snapshot) -> bytes:
    payload = {
        "kind": snapshot.kind,
        "sequence": snapshot.sequence,
        "values": dict(snapshot.values),
    }
    return json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")


def deserialize_snapshot(data: bytes) -> Snapshot:
    """Rebuilds a Snapshot from bytes produced by `serialize_snapshot`."""
    payload = json.loads(data.decode("utf-8"))
    return Snapshot(
        kind=payload["kind"],
        sequence=payload["sequence"],
        values=payload["values"],
    )
