"""
Post-trigger recording sessions.
"""

from .profiling import PerfProfiler
from .recorder import collect_system_info, record

__all__ = [
    "PerfProfiler",
    "collect_system_info",
    "record",
]
