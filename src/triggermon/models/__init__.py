"""
Data models and structures for the monitoring system.

Configuration Models:
- Sampling, trigger, post-trigger recording and storage settings

Runtime Models:
- The context object shared by the monitoring loop and the recorder
- Options of a recording session

Result Models:
- Outcomes of recording sessions, captures and whole monitoring runs
"""

from .config import MonitorConfig, PostRecordConfig, StorageConfig, TriggerConfig
from .results import CaptureResult, MonitorSummary, RecordResult
from .runtime import MonitorContext, RecordOptions, resolve_run_log

__all__ = [
    # Configuration
    "MonitorConfig",
    "PostRecordConfig",
    "StorageConfig",
    "TriggerConfig",
    # Runtime
    "MonitorContext",
    "RecordOptions",
    "resolve_run_log",
    # Results
    "CaptureResult",
    "MonitorSummary",
    "RecordResult",
]
