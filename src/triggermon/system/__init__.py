"""
System interaction utilities.

- Time source abstraction used for tick pacing and cooldown arithmetic
- External command execution for custom trigger scripts
- Detection of optional system tools used by the recorder
"""

from .clock import Clock, SystemClock, format_run_timestamp
from .commands import check_perf_installed, run_condition_command, split_command

__all__ = [
    "Clock",
    "SystemClock",
    "format_run_timestamp",
    "check_perf_installed",
    "run_condition_command",
    "split_command",
]
