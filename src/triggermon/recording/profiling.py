"""
System-wide profiling with ``perf record`` during a recording session.
"""

import logging
import signal
import subprocess
from pathlib import Path
from typing import List, Optional

from ..system.commands import check_perf_installed
from ..validation import RecorderError

logger = logging.getLogger(__name__)

PERF_DATA_FILE_NAME = "perf.data"
PERF_LOG_FILE_NAME = "perf.log"
PERF_STOP_TIMEOUT = 30.0


class PerfProfiler:
    """
    Runs ``perf record -F <frequency> -a -g`` for the length of a session.

    `start` launches perf in the background; `stop` interrupts it the way a
    user pressing Ctrl-C would, so perf finalizes its data file.
    """

    def __init__(self, output_dir: Path, frequency: int = 99):
        self.output_dir = Path(output_dir)
        self.frequency = frequency
        self.data_file = self.output_dir / PERF_DATA_FILE_NAME
        self.process: Optional[subprocess.Popen] = None
        self._log_file = None

    def command(self) -> List[str]:
        return [
            "perf", "record",
            "-F", str(self.frequency),
            "-a", "-g",
            "-o", str(self.data_file),
        ]

    def start(self) -> None:
        """
        Start perf.

        Raises:
            RecorderError: If perf is not installed or cannot be started
        """
        if not check_perf_installed():
            raise RecorderError("Profiling requested but 'perf' was not found in PATH")

        self.output_dir.mkdir(parents=True, exist_ok=True)
        self._log_file = open(self.output_dir / PERF_LOG_FILE_NAME, "w", encoding="utf-8")
        try:
            self.process = subprocess.Popen(
                self.command(),
                stdin=subprocess.DEVNULL,
                stdout=self._log_file,
                stderr=subprocess.STDOUT,
            )
        except OSError as e:
            self._log_file.close()
            self._log_file = None
            raise RecorderError(f"Cannot start perf: {e}") from e

        logger.info(f"Started perf (PID: {self.process.pid}) at {self.frequency} Hz")

    def stop(self) -> Path:
        """
        Stop perf and wait for it to write its data file.

        Returns:
            Path of the perf data file

        Raises:
            RecorderError: If perf was not started or exits with an error
        """
        if self.process is None:
            raise RecorderError("perf was not started")

        try:
            if self.process.poll() is None:
                self.process.send_signal(signal.SIGINT)
            try:
                exit_code = self.process.wait(timeout=PERF_STOP_TIMEOUT)
            except subprocess.TimeoutExpired:
                logger.warning(f"perf did not stop within {PERF_STOP_TIMEOUT}s, killing it")
                self.process.kill()
                exit_code = self.process.wait()
        finally:
            if self._log_file is not None:
                self._log_file.close()
                self._log_file = None

        # perf exits with the signal number when interrupted
        if exit_code not in (0, -signal.SIGINT, 128 + signal.SIGINT):
            raise RecorderError(f"perf exited with code {exit_code}")

        logger.info(f"perf stopped, profile written to {self.data_file}")
        return self.data_file
