"""
Unit tests for the bounded snapshot history buffer.
"""

import pytest

from triggermon.monitoring.history import HistoryBuffer


@pytest.mark.unit
class TestHistoryBuffer:
    """Test cases for HistoryBuffer."""

    def test_capacity_is_never_exceeded(self):
        """Test that the buffer length stays at capacity when overfilled."""
        buffer = HistoryBuffer("cpu", capacity=3)

        for i in range(10):
            buffer.push(f"s{i}".encode())
            assert len(buffer) <= 3

        assert len(buffer) == 3
        assert buffer.capacity == 3

    def test_oldest_entries_are_evicted_first(self):
        """Test strict FIFO eviction."""
        buffer = HistoryBuffer("cpu", capacity=3)
        for payload in (b"a", b"b", b"c", b"d", b"e"):
            buffer.push(payload)

        assert buffer.drain_copy() == [b"c", b"d", b"e"]

    def test_drain_copy_is_non_destructive(self):
        """Test that draining leaves the contents in place."""
        buffer = HistoryBuffer("memory", capacity=5)
        buffer.push(b"one")
        buffer.push(b"two")

        first = buffer.drain_copy()
        second = buffer.drain_copy()

        assert first == second == [b"one", b"two"]
        assert len(buffer) == 2

    def test_drain_copy_returns_independent_list(self):
        """Test that modifying the drained list does not affect the buffer."""
        buffer = HistoryBuffer("cpu", capacity=2)
        buffer.push(b"x")

        drained = buffer.drain_copy()
        drained.append(b"y")

        assert buffer.drain_copy() == [b"x"]

    def test_clear_empties_buffer(self):
        """Test that clear removes everything but keeps the capacity."""
        buffer = HistoryBuffer("cpu", capacity=2)
        buffer.push(b"x")
        buffer.push(b"y")

        buffer.clear()

        assert len(buffer) == 0
        assert buffer.drain_copy() == []
        assert buffer.capacity == 2

    @pytest.mark.parametrize("capacity", [0, -1])
    def test_invalid_capacity(self, capacity):
        """Test that a capacity below 1 is rejected."""
        with pytest.raises(ValueError):
            HistoryBuffer("cpu", capacity=capacity)

    def test_repr_mentions_kind_and_size(self):
        """Test the debug representation."""
        buffer = HistoryBuffer("network", capacity=4)
        buffer.push(b"x")

        assert "network" in repr(buffer)
        assert "size=1" in repr(buffer)
