"""
Time source used by the monitoring loop and the recorder.

All waiting and all cooldown arithmetic go through a ``Clock`` so the loop can
be driven by a fake clock in tests without real wall-clock delays.
"""

import time
from datetime import datetime, timezone
from typing import Protocol

RUN_TIMESTAMP_FORMAT = "%Y%m%dT%H%M%S"


class Clock(Protocol):
    """Wall-clock time source with a blocking sleep."""

    def now(self) -> float:
        """Current time as seconds since the epoch."""
        ...

    def sleep(self, seconds: float) -> None:
        """Block for ``seconds``."""
        ...


class SystemClock:
    """Clock backed by the real system time."""

    def now(self) -> float:
        return time.time()

    def sleep(self, seconds: float) -> None:
        if seconds > 0:
            time.sleep(seconds)


def format_run_timestamp(epoch_seconds: float) -> str:
    """
    Format an epoch time as a run directory name.

    Args:
        epoch_seconds: Seconds since the epoch

    Returns:
        UTC timestamp such as ``20250705T120000``
    """
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc).strftime(
        RUN_TIMESTAMP_FORMAT
    )
