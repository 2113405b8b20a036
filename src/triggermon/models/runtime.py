"""
Runtime data models.

This module contains the structures shared while a monitor is running: the
context object that owns the collector registry, and the options passed to a
recording session.
"""

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING, Dict, List, Optional

if TYPE_CHECKING:
    from ..collectors.base import AbstractCollector
    from ..system.clock import Clock

logger = logging.getLogger(__name__)


@dataclass
class RecordOptions:
    """
    Options of one bounded recording session.
    """

    # Name of the run; the recorder writes to <tmp_dir>/<run_name>.
    run_name: str
    # Interval (in seconds) at which data is collected.
    interval: float
    # Time (in seconds) for which data is collected.
    period: float
    # Gather a system-wide profile using the 'perf' binary.
    profile: bool = False
    # Frequency for perf profiling (Hz).
    perf_frequency: int = 99
    # Reuse collectors already prepared by the caller.
    skip_prep: bool = False


@dataclass
class MonitorContext:
    """
    Process-lifetime context shared by the monitoring loop and the recorder.

    The lock guards the collector registry and collector preparation only. It
    is released before any sampling or recording work starts.
    """

    clock: "Clock"
    tmp_dir: Path
    run_log: Path
    collectors: Dict[str, "AbstractCollector"] = field(default_factory=dict)
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def register_collector(self, collector: "AbstractCollector") -> None:
        """
        Register a collector under its kind.

        Raises:
            ValueError: If a collector of the same kind is already registered
        """
        with self.lock:
            if collector.kind in self.collectors:
                raise ValueError(f"Collector kind '{collector.kind}' is already registered")
            self.collectors[collector.kind] = collector
        logger.debug(f"Registered collector '{collector.kind}'")

    def prepare_collectors(self, force: bool = False) -> None:
        """
        Prepare every registered collector that has not been prepared yet.

        Args:
            force: Prepare all collectors again, even already prepared ones

        Raises:
            CollectorError: If a collector cannot be prepared
        """
        with self.lock:
            pending = [
                collector for collector in self.collectors.values()
                if force or not collector.prepared
            ]
            for collector in pending:
                collector.prepare()
        if pending:
            logger.info(f"Prepared {len(pending)} collectors: {[c.kind for c in pending]}")

    def get_collectors(self) -> List["AbstractCollector"]:
        """Return the registered collectors in registration order."""
        with self.lock:
            return list(self.collectors.values())

    @property
    def kinds(self) -> List[str]:
        with self.lock:
            return list(self.collectors)

    def post_output_dir(self, run_name: str) -> Path:
        """Directory the recorder writes to for the given run."""
        return self.tmp_dir / run_name


def resolve_run_log(output_dir: Path, run_log: Optional[Path]) -> Path:
    """Default run log location: ``<output_dir>/triggermon.log``."""
    return run_log if run_log is not None else output_dir / "triggermon.log"
