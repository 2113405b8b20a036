"""
The trigger monitoring loop.

Each tick samples every collector, computes the metric map against the
previous tick, evaluates the trigger condition and, when the state machine
decides to fire, runs a capture. The first tick, and the first tick after a
capture, only prime the history.
"""

import functools
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, List, Optional

from ..collectors import create_collectors
from ..collectors.base import Snapshot
from ..models.config import MonitorConfig
from ..models.results import CaptureResult, MonitorSummary
from ..models.runtime import MonitorContext, RecordOptions, resolve_run_log
from ..recording import record
from ..storage import create_storage
from ..system.clock import Clock, SystemClock
from ..validation import ValidationError, validate_capture_window
from .capture import CaptureCoordinator, Recorder
from .metrics import compute_metrics
from .sampler import Sampler
from .state_machine import TriggerStateMachine
from .trigger_expression import parse_trigger_expression

logger = logging.getLogger(__name__)

EXIT_TRIGGER_COUNT_REACHED = "trigger_count_reached"
EXIT_MAX_ITERATIONS_REACHED = "max_iterations_reached"


class TriggerMonitor:
    """
    Runs the sample, evaluate and capture loop until the configured number of
    captures has been taken or the iteration bound is hit.
    """

    def __init__(
        self,
        config: MonitorConfig,
        context: MonitorContext,
        recorder: Optional[Recorder] = None,
        cleanup_tmp_dir: bool = False,
    ):
        """
        Args:
            config: Validated monitor configuration
            context: Context with the collectors to sample already registered
            recorder: Recording session callable; defaults to the built-in
                recorder writing Parquet with the configured compression
            cleanup_tmp_dir: Remove context.tmp_dir when the run ends

        Raises:
            TriggerExpressionError: If the trigger expression cannot be parsed
        """
        self.config = config
        self.context = context
        self.condition = parse_trigger_expression(config.trigger.expression)
        self.state_machine = TriggerStateMachine(
            trigger_times=config.trigger.trigger_times,
            max_triggers=config.trigger.trigger_count,
            cooldown_seconds=config.trigger.cooldown_seconds,
        )
        if recorder is None:
            recorder = functools.partial(record, storage=create_storage(config.storage))
        self.recorder = recorder
        self.cleanup_tmp_dir = cleanup_tmp_dir
        self.sampler: Optional[Sampler] = None
        self.coordinator: Optional[CaptureCoordinator] = None

    @classmethod
    def from_config(cls, config: MonitorConfig, clock: Optional[Clock] = None) -> "TriggerMonitor":
        """
        Build a monitor with the configured psutil collectors.

        Without a configured tmp_dir, recordings go to a private temporary
        directory that is removed when `run` returns.

        Args:
            config: Validated monitor configuration
            clock: Time source; defaults to the system clock
        """
        private_tmp_dir = config.tmp_dir is None
        if private_tmp_dir:
            tmp_dir = Path(tempfile.mkdtemp(prefix=f"triggermon-{os.getpid()}-"))
        else:
            tmp_dir = Path(config.tmp_dir)
            tmp_dir.mkdir(parents=True, exist_ok=True)
        logger.debug(f"Recording sessions write to {tmp_dir}")

        context = MonitorContext(
            clock=clock or SystemClock(),
            tmp_dir=tmp_dir,
            run_log=resolve_run_log(Path(config.output_dir), config.run_log),
        )
        for collector in create_collectors(config.collectors):
            context.register_collector(collector)
        return cls(config, context, cleanup_tmp_dir=private_tmp_dir)

    def _validate(self) -> None:
        validate_capture_window(
            self.config.interval_seconds,
            self.config.period_seconds,
            "collection.interval_seconds",
            "collection.period_seconds",
        )
        validate_capture_window(
            self.config.post.interval_seconds,
            self.config.post.period_seconds,
            "post.interval_seconds",
            "post.period_seconds",
        )
        if not self.context.kinds:
            raise ValidationError("No collectors registered", field_name="collection.collectors")

    def _setup(self) -> None:
        self.sampler = Sampler(self.context, self.config.history_capacity)
        post_options = RecordOptions(
            run_name="",
            interval=self.config.post.interval_seconds,
            period=self.config.post.period_seconds,
            profile=self.config.post.profile,
            perf_frequency=self.config.post.perf_frequency,
        )
        self.coordinator = CaptureCoordinator(
            self.context,
            self.sampler.buffers,
            Path(self.config.output_dir),
            post_options,
            recorder=self.recorder,
        )

    def run(self) -> MonitorSummary:
        """
        Run the monitoring loop.

        Returns:
            Summary of the run

        Raises:
            ValidationError: If the capture windows are invalid
            MonitorError: On any collector, evaluation, capture or recording
                failure; the loop is not resumed
        """
        try:
            return self._run_loop()
        finally:
            if self.cleanup_tmp_dir:
                self._remove_tmp_dir()

    def _remove_tmp_dir(self) -> None:
        tmp_dir = self.context.tmp_dir
        try:
            shutil.rmtree(tmp_dir)
            logger.debug(f"Removed temporary directory {tmp_dir}")
        except OSError as e:
            logger.warning(f"Error during temporary directory cleanup of {tmp_dir}: {e}")

    def _run_loop(self) -> MonitorSummary:
        self._validate()
        self.context.prepare_collectors()
        self._setup()

        clock = self.context.clock
        max_iterations = self.config.max_iterations
        captures: List[CaptureResult] = []
        previous: Optional[Dict[str, Snapshot]] = None
        previous_time = 0.0
        iterations = 0

        logger.info(
            f"Monitoring {self.context.kinds} every {self.config.interval_seconds}s, "
            f"keeping {self.config.history_capacity} snapshots, "
            f"trigger '{self.condition.expression}'"
        )

        while True:
            now = clock.now()
            snapshots = self.sampler.tick()
            iterations += 1

            if previous is None:
                previous = snapshots
            else:
                metrics = compute_metrics(previous, snapshots, now - previous_time)
                if "cpu" in metrics:
                    logger.info(f"Current CPU utilization: {metrics['cpu']:.2f}%")

                condition_met = self.condition.evaluate(metrics)
                if self.state_machine.observe(condition_met, now):
                    captures.append(self.coordinator.capture(now))
                    self.state_machine.record_fire(now)
                    previous = None
                else:
                    previous = snapshots
            previous_time = now

            if self.state_machine.done:
                exit_reason = EXIT_TRIGGER_COUNT_REACHED
                break
            if max_iterations is not None and iterations >= max_iterations:
                exit_reason = EXIT_MAX_ITERATIONS_REACHED
                break

            clock.sleep(self.config.interval_seconds)

        summary = MonitorSummary(
            iterations=iterations,
            triggers_fired=self.state_machine.state.trigger_count_done,
            exit_reason=exit_reason,
            captures=captures,
        )
        logger.info(
            f"Monitoring finished after {iterations} ticks: "
            f"{summary.triggers_fired} captures, {exit_reason}"
        )
        return summary
