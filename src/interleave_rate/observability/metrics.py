# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Per-tracker metrics for the minimum interleave rate tracker.

InterleaveMetrics keeps plain counters for one tracker and, when given a
MetricsCollector, forwards every observation to it labelled with the
tracker's name.

Usage:
    metrics = InterleaveMetrics(name="/live/interleave0")
    metrics.record_poll(window_bytes=500)
    metrics.record_padding(1500)
    stats = metrics.get_stats()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .collector import MetricsCollector
from .constants import (
    ACTIVE_TRACKERS,
    DATA_BYTES_TOTAL,
    PADDING_BYTES_TOTAL,
    PADDING_ERRORS_TOTAL,
    PADDING_EVENTS_TOTAL,
    PADDING_SIZE_BYTES,
    POLLS_TOTAL,
    WINDOW_BYTES,
)

logger = logging.getLogger(__name__)


@dataclass
class InterleaveMetrics:
    """
    Counters describing one tracker's behaviour.

    The tracker runs on a single event loop, so the counters are plain
    ints with no locking; the collector handles cross-thread reads.

    Example:
        >>> metrics = InterleaveMetrics(name="main")
        >>> metrics.record_poll(window_bytes=500)
        >>> metrics.record_padding(1500)
        >>> metrics.get_padding_ratio()
        1.0
    """

    name: str = "interleave"
    collector: MetricsCollector | None = field(default=None, repr=False)

    polls: int = 0
    padding_events: int = 0
    padding_bytes: int = 0
    data_bytes: int = 0
    padding_errors: int = 0
    last_window_bytes: int = 0

    @property
    def _labels(self) -> dict[str, str]:
        return {"interleave": self.name}

    def record_poll(self, window_bytes: int) -> None:
        """Record a completed poll and the bytes seen in its window."""
        self.polls += 1
        self.last_window_bytes = window_bytes
        if self.collector:
            self.collector.inc_counter(POLLS_TOTAL, labels=self._labels)
            self.collector.set_gauge(WINDOW_BYTES, window_bytes, labels=self._labels)

    def record_padding(self, size: int) -> None:
        """Record a padding buffer of ``size`` bytes handed to the sink."""
        self.padding_events += 1
        self.padding_bytes += size
        if self.collector:
            self.collector.inc_counter(PADDING_EVENTS_TOTAL, labels=self._labels)
            self.collector.inc_counter(PADDING_BYTES_TOTAL, size, labels=self._labels)
            self.collector.observe_histogram(
                PADDING_SIZE_BYTES, size, labels=self._labels
            )

    def record_data(self, size: int) -> None:
        """Record bytes reported through add_data."""
        self.data_bytes += size
        if self.collector:
            self.collector.inc_counter(DATA_BYTES_TOTAL, size, labels=self._labels)

    def record_padding_error(self) -> None:
        """Record a padding sink that raised."""
        self.padding_errors += 1
        if self.collector:
            self.collector.inc_counter(PADDING_ERRORS_TOTAL, labels=self._labels)

    def record_running(self, running: bool) -> None:
        """Track the number of running trackers across the process."""
        if self.collector:
            self.collector.inc_gauge(ACTIVE_TRACKERS, 1.0 if running else -1.0)

    def get_padding_ratio(self) -> float:
        """Fraction of polls that needed padding (0.0 when no polls ran)."""
        if self.polls == 0:
            return 0.0
        return self.padding_events / self.polls

    def get_stats(self) -> dict[str, Any]:
        """Return the counters as a JSON-serializable dict."""
        return {
            "name": self.name,
            "polls": self.polls,
            "padding_events": self.padding_events,
            "padding_bytes": self.padding_bytes,
            "data_bytes": self.data_bytes,
            "padding_errors": self.padding_errors,
            "last_window_bytes": self.last_window_bytes,
            "padding_ratio": self.get_padding_ratio(),
        }

    def reset(self) -> None:
        """Zero all local counters."""
        self.polls = 0
        self.padding_events = 0
        self.padding_bytes = 0
        self.data_bytes = 0
        self.padding_errors = 0
        self.last_window_bytes = 0
        logger.debug(f"Interleave metrics reset for {self.name}")


__all__ = ["InterleaveMetrics"]
