"""
Result data models.

This module defines what a recording session, a single capture and a whole
monitoring run produce, so callers and tests can inspect the outcome without
walking the filesystem.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional


@dataclass
class RecordResult:
    """
    Outcome of one post-trigger recording session.
    """

    # Name of the run the session recorded.
    run_name: str
    # Directory holding the session output.
    output_dir: Path
    # Number of sampling rounds performed.
    samples_collected: int
    # Parquet file written per collector kind.
    data_files: Dict[str, Path] = field(default_factory=dict)
    # perf.data file when profiling was enabled.
    profile_file: Optional[Path] = None


@dataclass
class CaptureResult:
    """
    Outcome of one firing of the trigger.
    """

    # Timestamp used to name the run directory and dump files.
    timestamp: str
    # <output_root>/<timestamp>
    run_dir: Path
    # Pre-trigger dump file per collector kind.
    dump_files: Dict[str, Path]
    # Number of snapshots dumped per collector kind.
    snapshots_dumped: Dict[str, int]
    # <run_dir>/post, or None if the recorder produced nothing.
    post_dir: Optional[Path]
    record_result: Optional[RecordResult] = None


@dataclass
class MonitorSummary:
    """
    Outcome of a complete monitoring run.
    """

    # Number of ticks executed.
    iterations: int
    # Number of times the trigger fired.
    triggers_fired: int
    # "trigger_count_reached" or "max_iterations_reached".
    exit_reason: str
    captures: List[CaptureResult] = field(default_factory=list)
