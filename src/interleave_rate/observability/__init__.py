# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Observability and metrics for interleave rate trackers.

Classes:
    InterleaveMetrics: Per-tracker counters, optionally forwarded to a collector.
    MetricsCollector: Dict-backed metrics mirrored into Prometheus.

Functions:
    get_metrics_collector: Get the global metrics collector singleton.
    reset_metrics_collector: Reset the global metrics collector singleton.
"""

from .collector import (
    METRIC_DEFINITIONS,
    MetricDefinition,
    MetricsCollector,
    get_metrics_collector,
    reset_metrics_collector,
)
from .constants import (
    ACTIVE_TRACKERS,
    DATA_BYTES_TOTAL,
    METRIC_PREFIX,
    PADDING_BYTES_TOTAL,
    PADDING_ERRORS_TOTAL,
    PADDING_EVENTS_TOTAL,
    PADDING_SIZE_BUCKETS,
    PADDING_SIZE_BYTES,
    POLLS_TOTAL,
    WINDOW_BYTES,
)
from .metrics import InterleaveMetrics

__all__ = [
    "ACTIVE_TRACKERS",
    "DATA_BYTES_TOTAL",
    "METRIC_DEFINITIONS",
    "METRIC_PREFIX",
    "PADDING_BYTES_TOTAL",
    "PADDING_ERRORS_TOTAL",
    "PADDING_EVENTS_TOTAL",
    "PADDING_SIZE_BUCKETS",
    "PADDING_SIZE_BYTES",
    "POLLS_TOTAL",
    "WINDOW_BYTES",
    "InterleaveMetrics",
    "MetricDefinition",
    "MetricsCollector",
    "get_metrics_collector",
    "reset_metrics_collector",
]
