"""
Unit tests for CPU utilization computation.
"""

import pytest

from triggermon.collectors.base import Snapshot
from triggermon.monitoring.cpu_usage import aggregate_cpu_times, calculate_cpu_usage


def cpu_snapshot(sequence, **values):
    return Snapshot(kind="cpu", sequence=sequence, values=values)


@pytest.mark.unit
class TestAggregateCpuTimes:
    """Test cases for the shared CPU aggregation pipeline."""

    def test_shares_per_interval(self):
        """Test that each consecutive pair yields one row of percentages."""
        samples = [
            {"user": 0.0, "system": 0.0, "idle": 0.0},
            {"user": 30.0, "system": 10.0, "idle": 60.0},
            {"user": 40.0, "system": 10.0, "idle": 150.0},
        ]

        df = aggregate_cpu_times(samples)

        assert df.columns == ["user", "system", "idle"]
        assert len(df) == 2
        assert df["user"].to_list() == pytest.approx([30.0, 10.0])
        assert df["system"].to_list() == pytest.approx([10.0, 0.0])
        assert df["idle"].to_list() == pytest.approx([60.0, 90.0])

    def test_negative_deltas_are_clipped(self):
        """Test that a counter reset does not produce negative utilization."""
        samples = [
            {"user": 500.0, "idle": 500.0},
            {"user": 10.0, "idle": 540.0},
        ]

        df = aggregate_cpu_times(samples)

        assert df["user"].to_list() == [0.0]
        assert df["idle"].to_list() == [100.0]

    def test_zero_total_interval_is_dropped(self):
        """Test that intervals without elapsed time produce no row."""
        samples = [
            {"user": 1.0, "idle": 1.0},
            {"user": 1.0, "idle": 1.0},
        ]

        assert aggregate_cpu_times(samples).is_empty()

    def test_single_sample_has_no_rows(self):
        """Test that one sample produces an empty frame with the state columns."""
        df = aggregate_cpu_times([{"user": 1.0, "idle": 2.0}])

        assert df.is_empty()
        assert df.columns == ["user", "idle"]

    def test_no_samples(self):
        """Test that no samples produce an empty frame."""
        assert aggregate_cpu_times([]).is_empty()


@pytest.mark.unit
class TestCalculateCpuUsage:
    """Test cases for the live busy percentage."""

    def test_busy_is_100_minus_idle(self):
        """Test the busy percentage of a simple interval."""
        prev = cpu_snapshot(1, user=100.0, system=50.0, idle=850.0)
        curr = cpu_snapshot(2, user=160.0, system=70.0, idle=870.0)

        assert calculate_cpu_usage(prev, curr) == pytest.approx(80.0)

    def test_matches_aggregation_pipeline(self):
        """Test that the live value equals what the stored table reports."""
        prev = cpu_snapshot(1, user=12.0, system=3.0, idle=85.0, iowait=0.0)
        curr = cpu_snapshot(2, user=20.0, system=5.0, idle=99.0, iowait=1.0)

        df = aggregate_cpu_times([prev.values, curr.values])

        assert calculate_cpu_usage(prev, curr) == pytest.approx(100.0 - df["idle"][-1])

    def test_identical_snapshots_give_zero(self):
        """Test that an empty aggregation never reports load."""
        snapshot = cpu_snapshot(1, user=10.0, idle=90.0)

        assert calculate_cpu_usage(snapshot, snapshot) == 0.0

    def test_counter_reset_is_clamped(self):
        """Test that a wrapped counter yields a value within [0, 100]."""
        prev = cpu_snapshot(1, user=1000.0, idle=1000.0)
        curr = cpu_snapshot(2, user=5.0, idle=995.0)

        usage = calculate_cpu_usage(prev, curr)

        assert 0.0 <= usage <= 100.0
        assert usage == 0.0

    def test_missing_idle_state_gives_zero(self):
        """Test that snapshots without an idle counter report 0%."""
        prev = cpu_snapshot(1, user=1.0)
        curr = cpu_snapshot(2, user=2.0)

        assert calculate_cpu_usage(prev, curr) == 0.0

    def test_fully_busy_interval(self):
        """Test an interval without any idle time."""
        prev = cpu_snapshot(1, user=0.0, idle=10.0)
        curr = cpu_snapshot(2, user=50.0, idle=10.0)

        assert calculate_cpu_usage(prev, curr) == pytest.approx(100.0)
