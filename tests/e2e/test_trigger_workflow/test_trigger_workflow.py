"""
End-to-end tests for the trigger monitoring workflow.

Drives the complete loop (configuration, sampling, evaluation, state machine,
capture and hand-off to the recorder) with synthetic collectors and a fake
clock, then inspects what ended up on disk.
"""

import pytest

from triggermon.collectors.base import deserialize_snapshot
from triggermon.config import load_config
from triggermon.monitoring.monitor import TriggerMonitor
from triggermon.storage import read_snapshot_dump
from triggermon.system.clock import format_run_timestamp

from conftest import FAKE_EPOCH_START


@pytest.mark.e2e
class TestTriggerWorkflow:
    """End-to-end monitoring scenarios."""

    def test_busy_sequence_fires_once_then_cools_down(self, config_files, synthetic_context, recording_recorder):
        """
        interval=1, period=5, post=10, cooldown=20, threshold 80,
        trigger_times=2 and busy values 10, 20, 30, 90, 95, 95 on ticks 2-7.

        The trigger fires on tick 6 (the second consecutive tick above 80),
        dumps at most 5 snapshots per kind, records for 10 seconds and is then
        suppressed by the cooldown for the rest of the run.
        """
        config = load_config(config_files["config"])
        monitor = TriggerMonitor(config, synthetic_context, recorder=recording_recorder)

        summary = monitor.run()

        assert summary.iterations == 10
        assert summary.exit_reason == "max_iterations_reached"
        assert summary.triggers_fired == 1
        assert len(summary.captures) == 1

        # Tick 6 runs at start + 5 seconds
        fire_time = FAKE_EPOCH_START + 5
        capture = summary.captures[0]
        assert capture.timestamp == format_run_timestamp(fire_time)
        assert monitor.state_machine.state.cooldown_until == fire_time + 20

        # Pre-trigger window: ticks 2-6, oldest first, one file per kind
        run_dir = config.output_dir / capture.timestamp
        assert capture.run_dir == run_dir
        for kind in ("cpu", "memory"):
            dump_file = run_dir / f"{kind}_{capture.timestamp}.bin"
            payloads = read_snapshot_dump(dump_file)
            assert len(payloads) <= 5
            assert [deserialize_snapshot(p).sequence for p in payloads] == [2, 3, 4, 5, 6]

        # Recorder hand-off
        assert len(recording_recorder.calls) == 1
        options = recording_recorder.calls[0]["options"]
        assert options.period == 10.0
        assert options.interval == 1.0
        assert options.skip_prep is True
        assert options.run_name == capture.timestamp
        assert (run_dir / "post" / "marker.txt").is_file()

        # Hits kept counting during cooldown without firing
        assert monitor.state_machine.state.consecutive_hits >= 2

    def test_exits_when_trigger_count_reached(self, config_files, synthetic_context, recording_recorder):
        """Test that the loop ends cleanly after the configured number of captures."""
        config = load_config(
            config_files["config"],
            overrides={
                "trigger": {"threshold": 5.0, "trigger_times": 1, "cooldown_seconds": 0.0},
                "general": {"max_iterations": 100},
            },
        )
        monitor = TriggerMonitor(config, synthetic_context, recorder=recording_recorder)

        summary = monitor.run()

        # Tick 1 primes, tick 2 fires, tick 3 re-primes, tick 4 fires
        assert summary.exit_reason == "trigger_count_reached"
        assert summary.triggers_fired == 2
        assert summary.iterations == 4
        assert [c.timestamp for c in summary.captures] == [
            format_run_timestamp(FAKE_EPOCH_START + 1),
            format_run_timestamp(FAKE_EPOCH_START + 3),
        ]
        assert len(recording_recorder.calls) == 2

    def test_second_capture_contains_only_new_snapshots(self, config_files, synthetic_context, recording_recorder):
        """Test that buffers are cleared between captures."""
        config = load_config(
            config_files["config"],
            overrides={"trigger": {"expression": "cpu > 5", "trigger_times": 1, "cooldown_seconds": 0.0}},
        )

        summary = TriggerMonitor(config, synthetic_context, recorder=recording_recorder).run()

        second = summary.captures[1]
        payloads = read_snapshot_dump(second.dump_files["cpu"])
        assert [deserialize_snapshot(p).sequence for p in payloads] == [3, 4]

    def test_expression_with_memory_condition(self, config_files, synthetic_context, recording_recorder):
        """Test that an AND with an unmet memory clause never fires."""
        config = load_config(
            config_files["config"],
            overrides={"trigger": {"expression": "cpu > 80 && mem > 90", "trigger_times": 1}},
        )

        summary = TriggerMonitor(config, synthetic_context, recorder=recording_recorder).run()

        assert summary.triggers_fired == 0
        assert recording_recorder.calls == []
        assert not config.output_dir.exists()
