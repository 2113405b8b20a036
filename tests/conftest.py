"""
Pytest configuration and shared fixtures for the triggermon test suite.

This module provides common fixtures, synthetic collectors and a fake clock
so the monitoring loop can be driven deterministically without touching real
system counters or waiting on the wall clock.
"""

import shutil
import sys
import tempfile
from collections import namedtuple
from pathlib import Path
from typing import Dict, List, Sequence
from unittest.mock import Mock, patch

import pytest

# Add src to Python path for testing
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from triggermon.collectors.base import AbstractCollector, Snapshot  # noqa: E402
from triggermon.models.results import RecordResult  # noqa: E402
from triggermon.models.runtime import MonitorContext  # noqa: E402


# ============================================================================
# Test Configuration
# ============================================================================


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "e2e: mark test as an end-to-end test")


# ============================================================================
# Test Doubles
# ============================================================================


FAKE_EPOCH_START = 1_700_000_001.0


class FakeClock:
    """Clock whose sleep advances time instantly."""

    def __init__(self, start: float = FAKE_EPOCH_START):
        self.current = start
        self.sleeps: List[float] = []

    def now(self) -> float:
        return self.current

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.current += seconds


class SyntheticCpuCollector(AbstractCollector):
    """
    CPU collector replaying a sequence of busy percentages.

    The snapshot of tick ``n`` differs from the one of tick ``n - 1`` by
    ``busy_sequence[n - 2]`` busy units and ``100 - busy`` idle units, so the
    busy percentage computed for tick ``n`` is exactly that value. Once the
    sequence is exhausted its last value repeats.
    """

    kind = "cpu"

    def __init__(self, busy_sequence: Sequence[float]):
        super().__init__()
        self.busy_sequence = list(busy_sequence)
        self._sequence = 0
        self.collect_calls = 0

    def collect(self, sequence: int = 0) -> Snapshot:
        self._sequence = sequence
        self.collect_calls += 1
        return super().collect(sequence)

    def _busy_at(self, step: int) -> float:
        if step < len(self.busy_sequence):
            return self.busy_sequence[step]
        return self.busy_sequence[-1]

    def _read_counters(self) -> Dict[str, float]:
        steps = max(0, self._sequence - 1)
        busy = sum(self._busy_at(step) for step in range(steps))
        return {
            "user": 1000.0 + busy,
            "system": 0.0,
            "idle": 5000.0 + 100.0 * steps - busy,
        }


class SyntheticMemoryCollector(AbstractCollector):
    """Memory collector reporting fixed usage."""

    kind = "memory"

    def __init__(self, percent: float = 42.0, swap_percent: float = 1.5):
        super().__init__()
        self.percent = percent
        self.swap_percent = swap_percent

    def _read_counters(self) -> Dict[str, float]:
        return {
            "total": 16.0 * 1024 ** 3,
            "percent": self.percent,
            "swap_percent": self.swap_percent,
        }


class FailingCollector(AbstractCollector):
    """Collector whose source is unreadable."""

    kind = "disk"

    def _read_counters(self) -> Dict[str, float]:
        raise OSError("device vanished")


class RecordingRecorder:
    """Recorder stand-in that remembers its calls and writes a marker file."""

    def __init__(self, produce_output: bool = True):
        self.produce_output = produce_output
        self.calls = []

    def __call__(self, options, context, tmp_dir, log_path):
        self.calls.append(
            {"options": options, "context": context, "tmp_dir": tmp_dir, "log_path": log_path}
        )
        output_dir = Path(tmp_dir) / options.run_name
        if self.produce_output:
            output_dir.mkdir(parents=True, exist_ok=True)
            (output_dir / "marker.txt").write_text(options.run_name)
        return RecordResult(
            run_name=options.run_name,
            output_dir=output_dir,
            samples_collected=int(options.period // options.interval),
        )


# ============================================================================
# Core Fixtures
# ============================================================================


@pytest.fixture
def temp_dir():
    """Create a temporary directory for test files."""
    temp_path = tempfile.mkdtemp()
    yield Path(temp_path)
    shutil.rmtree(temp_path, ignore_errors=True)


@pytest.fixture
def fake_clock():
    """Deterministic clock starting at a fixed epoch time."""
    return FakeClock()


@pytest.fixture
def monitor_context(temp_dir, fake_clock):
    """Context with an empty collector registry."""
    tmp_dir = temp_dir / "tmp"
    tmp_dir.mkdir()
    return MonitorContext(clock=fake_clock, tmp_dir=tmp_dir, run_log=temp_dir / "triggermon.log")


@pytest.fixture
def busy_sequence():
    """CPU busy percentages of ticks 2, 3, 4, ..."""
    return [10.0, 20.0, 30.0, 90.0, 95.0, 95.0]


@pytest.fixture
def synthetic_context(monitor_context, busy_sequence):
    """Context with a synthetic CPU and memory collector registered."""
    monitor_context.register_collector(SyntheticCpuCollector(busy_sequence))
    monitor_context.register_collector(SyntheticMemoryCollector())
    return monitor_context


@pytest.fixture
def recording_recorder():
    """Recorder stand-in producing a marker file per session."""
    return RecordingRecorder()


@pytest.fixture
def sample_config_data(temp_dir):
    """Sample `[monitor]` configuration table for testing."""
    return {
        "collection": {
            "interval_seconds": 1.0,
            "period_seconds": 5.0,
            "collectors": ["cpu", "memory"],
        },
        "trigger": {
            "threshold": 80.0,
            "trigger_times": 2,
            "trigger_count": 2,
            "cooldown_seconds": 20.0,
        },
        "post": {
            "period_seconds": 10.0,
            "interval_seconds": 1.0,
            "profile": False,
        },
        "output": {
            "output_dir": str(temp_dir / "captures"),
        },
        "general": {
            "max_iterations": 10,
            "log_level": "INFO",
        },
        "storage": {
            "compression": "snappy",
        },
    }


# ============================================================================
# Mock Fixtures
# ============================================================================


CpuTimes = namedtuple("CpuTimes", ["user", "nice", "system", "idle", "iowait", "guest", "guest_nice"])


@pytest.fixture
def mock_psutil():
    """Mock the psutil counters read by the collectors."""
    with (
        patch("triggermon.collectors.psutil_collectors.psutil.cpu_times") as mock_cpu_times,
        patch("triggermon.collectors.psutil_collectors.psutil.virtual_memory") as mock_vmem,
        patch("triggermon.collectors.psutil_collectors.psutil.swap_memory") as mock_swap,
        patch("triggermon.collectors.psutil_collectors.psutil.disk_io_counters") as mock_disk,
        patch("triggermon.collectors.psutil_collectors.psutil.net_io_counters") as mock_net,
    ):
        mock_cpu_times.return_value = CpuTimes(
            user=100.0, nice=1.0, system=50.0, idle=800.0, iowait=5.0, guest=3.0, guest_nice=0.5
        )
        mock_vmem.return_value = Mock(
            total=8 * 1024 ** 3, available=6 * 1024 ** 3, used=2 * 1024 ** 3, percent=25.0
        )
        mock_swap.return_value = Mock(total=2 * 1024 ** 3, used=0, percent=0.0)
        mock_disk.return_value = Mock(
            read_count=10, write_count=20, read_bytes=4096, write_bytes=8192
        )
        mock_net.return_value = Mock(
            bytes_sent=1000, bytes_recv=2000, packets_sent=10, packets_recv=20
        )

        yield {
            "cpu_times": mock_cpu_times,
            "virtual_memory": mock_vmem,
            "swap_memory": mock_swap,
            "disk_io_counters": mock_disk,
            "net_io_counters": mock_net,
        }


# ============================================================================
# Configuration Fixtures
# ============================================================================


@pytest.fixture
def config_files(temp_dir, sample_config_data):
    """Create a temporary configuration file for testing."""
    import toml

    config_file = temp_dir / "config.toml"
    with open(config_file, "w") as f:
        toml.dump({"monitor": sample_config_data}, f)

    return {
        "config": config_file,
        "dir": temp_dir,
    }
