# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Rolling byte history for the interleave rate tracker.

Samples are appended in time order, so stale entries are always at the
front and pruning is a prefix trim on a deque.
"""

from __future__ import annotations

from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Sample:
    """
    One delivery of bytes to the interleave.

    Attributes:
        time: Monotonic timestamp of the delivery, in milliseconds
        size: Number of bytes delivered
    """

    time: float
    size: int


class SampleHistory:
    """
    Time-ordered samples within (roughly) the last window.

    Only the owning tracker mutates a history. ``append`` and
    ``prune_before`` are O(1) per sample touched; a running total is kept so
    ``total_size`` does not rescan.
    """

    def __init__(self) -> None:
        self._samples: deque[Sample] = deque()
        self._total = 0

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(self._samples)

    def append(self, time: float, size: int) -> None:
        self._samples.append(Sample(time, size))
        self._total += size

    def prune_before(self, cutoff: float) -> int:
        """Drop leading samples with ``time < cutoff``; return how many."""
        removed = 0
        samples = self._samples
        while samples and samples[0].time < cutoff:
            self._total -= samples.popleft().size
            removed += 1
        return removed

    def total_size(self) -> int:
        """Sum of sizes of all samples currently held."""
        return self._total

    def clear(self) -> None:
        self._samples.clear()
        self._total = 0


__all__ = ["Sample", "SampleHistory"]
