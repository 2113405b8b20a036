"""
Configuration data models.

This module contains the configuration structures for sampling, trigger
evaluation, post-trigger recording, output locations and storage.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Literal, Optional

ParquetCompression = Literal["uncompressed", "snappy", "gzip", "brotli", "lz4", "zstd"]
PARQUET_COMPRESSIONS = ("uncompressed", "snappy", "gzip", "brotli", "lz4", "zstd")


@dataclass
class StorageConfig:
    """
    Storage settings for post-trigger recording output.

    Attributes:
        compression: Compression algorithm for the Parquet files written by
            the recorder. Pre-trigger dump files are never compressed.
    """

    compression: ParquetCompression = "snappy"

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> "StorageConfig":
        """
        Create a StorageConfig instance from a dictionary.

        Raises:
            ValueError: If an unsupported compression is given
        """
        compression = config_dict.get("compression", "snappy")
        if compression not in PARQUET_COMPRESSIONS:
            raise ValueError(f"Unsupported compression algorithm: {compression}")
        return cls(compression=compression)

    def to_dict(self) -> Dict[str, Any]:
        return {"compression": self.compression}


@dataclass
class TriggerConfig:
    """
    Trigger settings, loaded from `[monitor.trigger]`.
    """

    # Condition expression, e.g. "cpu > 80 && mem > 50" or "custom /usr/local/bin/check.sh".
    expression: str
    # Consecutive positive evaluations required before firing.
    trigger_times: int = 1
    # Number of firings after which monitoring stops.
    trigger_count: int = 10
    # Minimum number of seconds between two firings.
    cooldown_seconds: float = 1200.0


@dataclass
class PostRecordConfig:
    """
    Settings of the recording session started after a firing, loaded from `[monitor.post]`.
    """

    period_seconds: float
    interval_seconds: float
    # Run a system-wide 'perf' profile alongside the recording.
    profile: bool = False
    perf_frequency: int = 99


@dataclass
class MonitorConfig:
    """
    Root configuration of a monitoring run, loaded from `config.toml`.
    """

    # [monitor.collection]
    interval_seconds: float
    period_seconds: float
    collectors: List[str]

    # [monitor.trigger] / [monitor.post]
    trigger: TriggerConfig
    post: PostRecordConfig

    # [monitor.output]
    output_dir: Path
    tmp_dir: Optional[Path] = None
    run_log: Optional[Path] = None

    # [monitor.general]
    max_iterations: Optional[int] = None
    log_level: str = "INFO"

    # [monitor.storage]
    storage: StorageConfig = field(default_factory=StorageConfig)

    @property
    def history_capacity(self) -> int:
        """Number of snapshots each history buffer holds."""
        return int(self.period_seconds // self.interval_seconds)
