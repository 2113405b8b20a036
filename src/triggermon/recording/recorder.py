"""
Bounded post-trigger recording sessions.

A session samples every registered collector ``floor(period / interval)``
times and writes its output under ``<tmp_dir>/<run_name>``:

- ``system_info.json``: static host information
- ``<kind>.parquet``: one row per sample for each collector
- ``cpu_utilization.parquet``: per-interval CPU state shares
- ``perf.data``: system profile, when profiling is enabled
"""

import logging
import platform
from pathlib import Path
from typing import Any, Dict, List, Optional

import polars as pl
import psutil

from ..models.results import RecordResult
from ..models.runtime import MonitorContext, RecordOptions
from ..monitoring.cpu_usage import aggregate_cpu_times
from ..storage import DataStorage, create_storage
from ..system.clock import format_run_timestamp
from ..validation import RecorderError, handle_file_error, validate_capture_window
from .profiling import PerfProfiler

logger = logging.getLogger(__name__)

SESSION_LOG_FORMAT = "%(asctime)s [%(levelname)-5.5s] %(name)s:%(filename)s:%(lineno)d\t %(message)s"
SESSION_LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"
SYSTEM_INFO_FILE_NAME = "system_info.json"
CPU_UTILIZATION_FILE_NAME = "cpu_utilization.parquet"


def collect_system_info() -> Dict[str, Any]:
    """Static host information stored with every recording."""
    return {
        "hostname": platform.node(),
        "platform": platform.platform(),
        "python_version": platform.python_version(),
        "cpu_count_logical": psutil.cpu_count(logical=True),
        "cpu_count_physical": psutil.cpu_count(logical=False),
        "memory_total": psutil.virtual_memory().total,
        "boot_time": psutil.boot_time(),
    }


def _attach_session_log(log_path: Path) -> logging.Handler:
    log_path.parent.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(log_path, encoding="utf-8")
    handler.setFormatter(logging.Formatter(SESSION_LOG_FORMAT, datefmt=SESSION_LOG_DATEFMT))
    logging.getLogger("triggermon").addHandler(handler)
    return handler


def _detach_session_log(handler: logging.Handler) -> None:
    logging.getLogger("triggermon").removeHandler(handler)
    handler.close()


def record(
    options: RecordOptions,
    context: MonitorContext,
    tmp_dir: Path,
    log_path: Path,
    storage: Optional[DataStorage] = None,
) -> RecordResult:
    """
    Run one recording session.

    Args:
        options: Session options
        context: Context holding the collectors and the clock
        tmp_dir: Directory under which ``<run_name>/`` is created
        log_path: File receiving a copy of the session log
        storage: Storage backend for the output; defaults to Parquet

    Returns:
        Description of the recorded data

    Raises:
        ValidationError: If interval or period are invalid
        CollectorError: If a collector fails
        RecorderError: If profiling or writing the output fails
    """
    sample_count = validate_capture_window(
        options.interval, options.period, "interval", "period"
    )
    storage = storage or create_storage()
    clock = context.clock
    run_name = options.run_name or format_run_timestamp(clock.now())
    output_dir = Path(tmp_dir) / run_name

    handler = _attach_session_log(Path(log_path))
    try:
        logger.info(
            f"Recording '{run_name}': {sample_count} samples every {options.interval}s "
            f"into {output_dir}"
        )
        try:
            output_dir.mkdir(parents=True, exist_ok=True)
            storage.save_dict(collect_system_info(), output_dir / SYSTEM_INFO_FILE_NAME)
        except OSError as e:
            handle_file_error(
                RecorderError(f"Cannot write to {output_dir}: {e}"),
                f"preparing recording output {output_dir}",
                logger=logger,
            )

        if not options.skip_prep:
            context.prepare_collectors()
        collectors = context.get_collectors()

        profiler = None
        if options.profile:
            profiler = PerfProfiler(output_dir, options.perf_frequency)
            profiler.start()

        samples: Dict[str, List[Dict[str, float]]] = {c.kind: [] for c in collectors}
        sample_times: List[float] = []
        try:
            for sequence in range(1, sample_count + 1):
                clock.sleep(options.interval)
                sample_times.append(clock.now())
                for collector in collectors:
                    snapshot = collector.collect(sequence)
                    samples[collector.kind].append(dict(snapshot.values))
        finally:
            profile_file = profiler.stop() if profiler is not None else None

        data_files = _write_samples(storage, output_dir, samples, sample_times)
        logger.info(f"Recording '{run_name}' complete: {sample_count} samples")
    finally:
        _detach_session_log(handler)

    return RecordResult(
        run_name=run_name,
        output_dir=output_dir,
        samples_collected=sample_count,
        data_files=data_files,
        profile_file=profile_file,
    )


def _write_samples(
    storage: DataStorage,
    output_dir: Path,
    samples: Dict[str, List[Dict[str, float]]],
    sample_times: List[float],
) -> Dict[str, Path]:
    data_files: Dict[str, Path] = {}
    try:
        for kind, rows in samples.items():
            df = pl.from_dicts(rows).with_columns(
                pl.Series("sample", list(range(1, len(rows) + 1))),
                pl.Series("time", sample_times[:len(rows)], dtype=pl.Float64),
            )
            path = output_dir / f"{kind}.parquet"
            storage.save_dataframe(df.select(["sample", "time", *rows[0].keys()]), path)
            data_files[kind] = path

        if samples.get("cpu"):
            path = output_dir / CPU_UTILIZATION_FILE_NAME
            storage.save_dataframe(aggregate_cpu_times(samples["cpu"]), path)
            data_files["cpu_utilization"] = path
    except OSError as e:
        handle_file_error(
            RecorderError(f"Cannot write recording data to {output_dir}: {e}"),
            f"writing recording data {output_dir}",
            logger=logger,
        )
    return data_files
