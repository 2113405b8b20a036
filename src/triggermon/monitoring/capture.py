"""
Capture coordination when the trigger fires.

A capture runs synchronously inside the tick that fired:

1. Create ``<output_root>/<timestamp>``, suffixed with ``-N`` if it already exists
2. Dump every history buffer to ``<kind>_<timestamp>.bin``
3. Run a bounded recording session into ``<tmp_dir>/<timestamp>``
4. Move the recording output to ``<run_dir>/post``
5. Clear every history buffer

Any failure in steps 1-3 aborts the capture and propagates. Buffers are only
cleared after everything else succeeded.
"""

import dataclasses
import logging
import shutil
from pathlib import Path
from typing import Callable, Dict, Mapping, Tuple

from ..models.results import CaptureResult, RecordResult
from ..models.runtime import MonitorContext, RecordOptions
from ..recording import record
from ..storage import dump_file_name, write_snapshot_dump
from ..system.clock import format_run_timestamp
from ..validation import CaptureError, MonitorError, handle_error, handle_file_error
from .history import HistoryBuffer

logger = logging.getLogger(__name__)

Recorder = Callable[[RecordOptions, MonitorContext, Path, Path], RecordResult]


class CaptureCoordinator:
    """
    Turns a firing into a run directory on disk.
    """

    def __init__(
        self,
        context: MonitorContext,
        buffers: Mapping[str, HistoryBuffer],
        output_root: Path,
        post_options: RecordOptions,
        recorder: Recorder = record,
    ):
        """
        Args:
            context: Monitor context; provides tmp_dir and run_log
            buffers: History buffers keyed by collector kind
            output_root: Directory under which run directories are created
            post_options: Template for the recording session; run_name and
                skip_prep are filled in per capture
            recorder: Callable running the recording session
        """
        self.context = context
        self.buffers = buffers
        self.output_root = Path(output_root)
        self.post_options = post_options
        self.recorder = recorder

    def capture(self, now: float) -> CaptureResult:
        """
        Run a complete capture.

        Args:
            now: Firing time; names the run directory and dump files

        Returns:
            Description of what was written

        Raises:
            CaptureError: If the run directory or a dump file cannot be written
            MonitorError: If the recording session fails
        """
        timestamp, run_dir = self._create_run_dir(format_run_timestamp(now))
        logger.info(f"Capturing run {timestamp}")

        dump_files, counts = self._dump_buffers(run_dir, timestamp)
        record_result = self._record(timestamp)
        post_dir = self._collect_post_output(timestamp, run_dir)

        for buffer in self.buffers.values():
            buffer.clear()

        logger.info(f"Capture {timestamp} complete: {run_dir}")
        return CaptureResult(
            timestamp=timestamp,
            run_dir=run_dir,
            dump_files=dump_files,
            snapshots_dumped=counts,
            post_dir=post_dir,
            record_result=record_result,
        )

    def _create_run_dir(self, timestamp: str) -> Tuple[str, Path]:
        """
        Create a fresh run directory named after the firing time.

        Firings within the same second get a ``-1``, ``-2``, ... suffix so an
        earlier capture is never overwritten.

        Returns:
            The run name and the created directory
        """
        run_name = timestamp
        suffix = 0
        while True:
            run_dir = self.output_root / run_name
            try:
                run_dir.mkdir(parents=True, exist_ok=False)
                return run_name, run_dir
            except FileExistsError:
                suffix += 1
                run_name = f"{timestamp}-{suffix}"
            except OSError as e:
                handle_file_error(
                    CaptureError(f"Cannot create run directory {run_dir}: {e}"),
                    f"creating run directory {run_dir}",
                    logger=logger,
                )

    def _dump_buffers(self, run_dir: Path, timestamp: str):
        dump_files: Dict[str, Path] = {}
        counts: Dict[str, int] = {}
        for kind, buffer in self.buffers.items():
            path = run_dir / dump_file_name(kind, timestamp)
            try:
                counts[kind] = write_snapshot_dump(path, buffer.drain_copy())
            except (OSError, ValueError) as e:
                handle_file_error(
                    CaptureError(f"Cannot write dump file {path}: {e}"),
                    f"dumping {kind} history",
                    logger=logger,
                )
            dump_files[kind] = path
            logger.debug(f"Dumped {counts[kind]} {kind} snapshots to {path}")
        return dump_files, counts

    def _record(self, timestamp: str) -> RecordResult:
        options = dataclasses.replace(self.post_options, run_name=timestamp, skip_prep=True)
        try:
            return self.recorder(
                options, self.context, self.context.tmp_dir, self.context.run_log
            )
        except MonitorError as e:
            handle_error(e, f"recording session {timestamp}", logger=logger)
        except Exception as e:
            handle_error(
                CaptureError(f"Recording session {timestamp} failed: {e}"),
                f"recording session {timestamp}",
                logger=logger,
            )

    def _collect_post_output(self, timestamp: str, run_dir: Path):
        source = self.context.post_output_dir(timestamp)
        if not source.exists():
            logger.warning(f"Recorder produced no output at {source}, skipping move")
            return None

        post_dir = run_dir / "post"
        try:
            shutil.move(str(source), str(post_dir))
        except OSError as e:
            handle_file_error(
                CaptureError(f"Cannot move {source} to {post_dir}: {e}"),
                f"moving recording output of {timestamp}",
                logger=logger,
            )
        return post_dir
