# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metric name constants following Prometheus naming conventions.

All metric names use the `interleave_rate_` prefix.

Naming Conventions:
    - Counter metrics end with `_total`
    - Byte-valued gauges and histograms end with `_bytes`

Label Best Practices:
    The only label is `interleave`, the tracker name. Use categorical names
    (an interleave path pattern such as "/live/interleave{1}"), NEVER a
    per-client or per-connection identifier.
"""


METRIC_PREFIX = "interleave_rate"
"""Prefix for all Prometheus metrics in this library."""


# =============================================================================
# Tracker Counters (tracker/rate.py)
# =============================================================================

POLLS_TOTAL = f"{METRIC_PREFIX}_polls_total"
"""Total poll cycles run by rate trackers."""

PADDING_EVENTS_TOTAL = f"{METRIC_PREFIX}_padding_events_total"
"""Total poll cycles that emitted padding."""

PADDING_BYTES_TOTAL = f"{METRIC_PREFIX}_padding_bytes_total"
"""Total padding bytes handed to padding sinks."""

DATA_BYTES_TOTAL = f"{METRIC_PREFIX}_data_bytes_total"
"""Total bytes reported through add_data (real data and padding)."""

PADDING_ERRORS_TOTAL = f"{METRIC_PREFIX}_padding_errors_total"
"""Total padding sink invocations that raised."""


# =============================================================================
# Gauges
# =============================================================================

WINDOW_BYTES = f"{METRIC_PREFIX}_window_bytes"
"""Bytes observed in the current window at the last poll."""

ACTIVE_TRACKERS = f"{METRIC_PREFIX}_active_trackers"
"""Number of trackers currently running."""


# =============================================================================
# Histograms
# =============================================================================

PADDING_SIZE_BYTES = f"{METRIC_PREFIX}_padding_size_bytes"
"""Size of each padding buffer emitted."""

PADDING_SIZE_BUCKETS: list[float] = [
    64,
    256,
    1024,
    4096,
    16384,
    65536,
    262144,
    1048576,
]
"""Histogram buckets for padding buffer sizes, in bytes."""


__all__ = [
    "ACTIVE_TRACKERS",
    "DATA_BYTES_TOTAL",
    "METRIC_PREFIX",
    "PADDING_BYTES_TOTAL",
    "PADDING_ERRORS_TOTAL",
    "PADDING_EVENTS_TOTAL",
    "PADDING_SIZE_BUCKETS",
    "PADDING_SIZE_BYTES",
    "POLLS_TOTAL",
    "WINDOW_BYTES",
]
