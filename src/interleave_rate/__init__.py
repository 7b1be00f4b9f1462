# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Interleave Rate - keep live interleaved streams flowing.

This library guarantees that an outbound, time-interleaved channel (for
example a multiplexed audio/video feed) never delivers fewer bytes than a
floor rate within a sliding window, by injecting non-compressible padding
when the real payload falls short. It also ships the timing primitives a
streaming client needs alongside it.

Key Features:
    - Sliding-window rate tracking with O(1) byte reporting
    - Random, incompressible padding sized to exactly close the deficit
    - A clock synchronized once to a server's reference time
    - Abortable sleep / wait-for-event / callback adapters sharing one
      AbortError contract
    - Prometheus metrics for polls and padding

Quick Start:
    >>> from interleave_rate import MinimumInterleaveRate
    >>>
    >>> def on_pad(buffer: bytes) -> None:
    ...     channel.write(PADDING_INDEX, buffer)  # reports back via add_data
    >>>
    >>> tracker = MinimumInterleaveRate(on_pad, minimum_rate=1000, window_size_ms=2000)
    >>> tracker.start()          # inside a running event loop
    >>> tracker.add_data(len(chunk))
    >>> tracker.stop()

Main Exports:
    - MinimumInterleaveRate, InterleaveRateConfig: Rate tracking
    - SynchronizedClock: Reference-time clock
    - AbortController, AbortSignal, abortable, sleep, wait_for_event: Waits
    - InterleaveMetrics, MetricsCollector: Observability

Version: 1.0.0
"""

__version__ = "1.0.0"

from .config import DEFAULT_WINDOW_SIZE_MS, PADDING_CHUNK_WIDTH, InterleaveRateConfig
from .exceptions import (
    AbortError,
    ConfigurationError,
    InterleaveRateError,
    ParseError,
    PreconditionViolation,
    ReferenceTimeError,
)
from .observability import (
    InterleaveMetrics,
    MetricsCollector,
    get_metrics_collector,
)
from .protocols import (
    EventEmitter,
    EventSourceProtocol,
    PaddingSink,
    PaddingWriterProtocol,
)
from .timing import (
    AbortController,
    AbortSignal,
    SynchronizedClock,
    abortable,
    fetch_reference_time,
    parse_reference_time,
    sleep,
    wait_for_event,
)
from .tracker import (
    MinimumInterleaveRate,
    Sample,
    SampleHistory,
    generate_padding,
    padding_length,
)

__all__ = [
    "DEFAULT_WINDOW_SIZE_MS",
    "PADDING_CHUNK_WIDTH",
    # Timing
    "AbortController",
    # Exceptions
    "AbortError",
    "AbortSignal",
    "ConfigurationError",
    # Protocols
    "EventEmitter",
    "EventSourceProtocol",
    # Observability
    "InterleaveMetrics",
    "InterleaveRateConfig",
    "InterleaveRateError",
    "MetricsCollector",
    # Tracker
    "MinimumInterleaveRate",
    "PaddingSink",
    "PaddingWriterProtocol",
    "ParseError",
    "PreconditionViolation",
    "ReferenceTimeError",
    "Sample",
    "SampleHistory",
    "SynchronizedClock",
    "abortable",
    "fetch_reference_time",
    "generate_padding",
    "get_metrics_collector",
    "padding_length",
    "parse_reference_time",
    "sleep",
    "wait_for_event",
]
