"""
Unit tests for Sample and SampleHistory.
"""

from __future__ import annotations

import dataclasses

import pytest

from interleave_rate.tracker.history import Sample, SampleHistory


class TestSample:
    """Tests for the Sample dataclass."""

    def test_fields(self) -> None:
        sample = Sample(time=12.5, size=100)

        assert sample.time == 12.5
        assert sample.size == 100

    def test_is_immutable(self) -> None:
        sample = Sample(time=0.0, size=1)

        with pytest.raises(dataclasses.FrozenInstanceError):
            sample.size = 2  # type: ignore[misc]


class TestSampleHistory:
    """Tests for SampleHistory."""

    def test_starts_empty(self) -> None:
        history = SampleHistory()

        assert len(history) == 0
        assert history.total_size() == 0

    def test_append_keeps_order_and_total(self) -> None:
        history = SampleHistory()
        history.append(1.0, 10)
        history.append(2.0, 20)
        history.append(3.0, 30)

        assert [s.size for s in history] == [10, 20, 30]
        assert history.total_size() == 60

    def test_prune_before_trims_prefix(self) -> None:
        history = SampleHistory()
        for t, size in [(1.0, 10), (2.0, 20), (3.0, 30), (4.0, 40)]:
            history.append(t, size)

        removed = history.prune_before(3.0)

        assert removed == 2
        assert [s.time for s in history] == [3.0, 4.0]
        assert history.total_size() == 70

    def test_prune_before_everything(self) -> None:
        history = SampleHistory()
        history.append(1.0, 10)

        assert history.prune_before(100.0) == 1
        assert len(history) == 0
        assert history.total_size() == 0

    def test_prune_on_empty_history(self) -> None:
        assert SampleHistory().prune_before(5.0) == 0

    def test_clear(self) -> None:
        history = SampleHistory()
        history.append(1.0, 10)
        history.append(2.0, 20)

        history.clear()

        assert len(history) == 0
        assert history.total_size() == 0
