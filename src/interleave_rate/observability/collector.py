# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Metrics collector backed by dicts and mirrored into Prometheus.

This module provides the MetricsCollector class, the single sink for all
metrics emitted by interleave rate trackers.

Features:
    1. Thread-safe counter/gauge/histogram operations
    2. Prometheus metric registration on first use
    3. Dict snapshot for JSON export
    4. Label cardinality protection
    5. Optional HTTP server for Prometheus scraping

Usage:
    >>> from interleave_rate.observability.collector import get_metrics_collector
    >>> collector = get_metrics_collector()
    >>> collector.inc_counter('interleave_rate_polls_total',
    ...                       labels={'interleave': '/live/interleave0'})
    >>> metrics = collector.get_metrics()

Thread Safety:
    All operations are thread-safe. Uses RLock for reentrant locking. The
    trackers themselves run on one event loop, but a Prometheus scrape or a
    stats endpoint may read from another thread.
"""

from __future__ import annotations

import logging
import threading
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, ClassVar

from prometheus_client import (
    REGISTRY,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    start_http_server,
)

from .constants import (
    ACTIVE_TRACKERS,
    DATA_BYTES_TOTAL,
    PADDING_BYTES_TOTAL,
    PADDING_ERRORS_TOTAL,
    PADDING_EVENTS_TOTAL,
    PADDING_SIZE_BUCKETS,
    PADDING_SIZE_BYTES,
    POLLS_TOTAL,
    WINDOW_BYTES,
)

logger = logging.getLogger(__name__)


@dataclass
class MetricDefinition:
    """Schema for a metric: type, description, labels and histogram buckets."""

    name: str
    metric_type: str  # 'counter', 'gauge', 'histogram'
    description: str
    label_names: tuple[str, ...] = ()
    buckets: list[float] | None = None


METRIC_DEFINITIONS: dict[str, MetricDefinition] = {
    POLLS_TOTAL: MetricDefinition(
        POLLS_TOTAL,
        "counter",
        "Total rate tracker poll cycles",
        ("interleave",),
    ),
    PADDING_EVENTS_TOTAL: MetricDefinition(
        PADDING_EVENTS_TOTAL,
        "counter",
        "Total poll cycles that emitted padding",
        ("interleave",),
    ),
    PADDING_BYTES_TOTAL: MetricDefinition(
        PADDING_BYTES_TOTAL,
        "counter",
        "Total padding bytes emitted",
        ("interleave",),
    ),
    DATA_BYTES_TOTAL: MetricDefinition(
        DATA_BYTES_TOTAL,
        "counter",
        "Total bytes reported to rate trackers",
        ("interleave",),
    ),
    PADDING_ERRORS_TOTAL: MetricDefinition(
        PADDING_ERRORS_TOTAL,
        "counter",
        "Total padding sink failures",
        ("interleave",),
    ),
    WINDOW_BYTES: MetricDefinition(
        WINDOW_BYTES,
        "gauge",
        "Bytes in the current window at the last poll",
        ("interleave",),
    ),
    ACTIVE_TRACKERS: MetricDefinition(
        ACTIVE_TRACKERS,
        "gauge",
        "Currently running rate trackers",
        (),
    ),
    PADDING_SIZE_BYTES: MetricDefinition(
        PADDING_SIZE_BYTES,
        "histogram",
        "Size of emitted padding buffers",
        ("interleave",),
        buckets=PADDING_SIZE_BUCKETS,
    ),
}


class MetricsCollector:
    """
    Metrics collector supporting both dict-based and Prometheus metrics.

    Only metrics listed in METRIC_DEFINITIONS are mirrored into Prometheus;
    anything else is kept in the dict snapshot only.

    Cardinality Protection:
        At most MAX_LABEL_COMBINATIONS unique label combinations are tracked
        per metric. Further combinations are dropped with a warning.

    Example:
        >>> collector = MetricsCollector(registry=CollectorRegistry())
        >>> collector.inc_counter('interleave_rate_padding_bytes_total', 1500,
        ...                       labels={'interleave': 'main'})
        >>> collector.get_metrics()["counters"]
        {'interleave_rate_padding_bytes_total': {'interleave=main': 1500}}
    """

    MAX_LABEL_COMBINATIONS: ClassVar[int] = 1000

    def __init__(
        self,
        enable_prometheus: bool = True,
        registry: CollectorRegistry | None = None,
    ) -> None:
        """
        Initialize the metrics collector.

        Args:
            enable_prometheus: Whether to mirror metrics into Prometheus
            registry: Optional Prometheus CollectorRegistry (use a fresh one in tests)
        """
        self._enable_prometheus = enable_prometheus
        self._registry = registry if registry is not None else REGISTRY

        self._counters: dict[str, dict[str, int]] = defaultdict(
            lambda: defaultdict(int)
        )
        self._gauges: dict[str, dict[str, float]] = defaultdict(
            lambda: defaultdict(float)
        )
        self._histograms: dict[str, dict[str, list[float]]] = defaultdict(
            lambda: defaultdict(list)
        )

        self._lock = threading.RLock()

        # Prometheus metric instances (lazy initialized)
        self._prom_metrics: dict[str, Any] = {}

        self._label_combinations: dict[str, set[str]] = defaultdict(set)

        self._server_running = False

        logger.debug(
            f"MetricsCollector initialized "
            f"(prometheus={'enabled' if self._enable_prometheus else 'disabled'})"
        )

    def _labels_to_key(self, labels: dict[str, str] | None) -> str:
        """Convert labels dict to a stable string key."""
        if not labels:
            return ""
        return ",".join(f"{k}={v}" for k, v in sorted(labels.items()))

    def _check_cardinality(self, name: str, label_key: str) -> bool:
        """Return True if the label combination may be recorded."""
        if label_key in self._label_combinations[name]:
            return True
        if len(self._label_combinations[name]) >= self.MAX_LABEL_COMBINATIONS:
            logger.warning(
                f"Cardinality limit ({self.MAX_LABEL_COMBINATIONS}) reached "
                f"for metric {name}. Dropping label combination: {label_key}"
            )
            return False
        self._label_combinations[name].add(label_key)
        return True

    def _get_or_create_prom_metric(self, name: str, metric_type: str) -> Any | None:
        """Get or create the Prometheus metric backing ``name``."""
        if not self._enable_prometheus:
            return None

        defn = METRIC_DEFINITIONS.get(name)
        if defn is None or defn.metric_type != metric_type:
            return None

        with self._lock:
            if name not in self._prom_metrics:
                try:
                    if metric_type == "counter":
                        metric: Any = Counter(
                            name,
                            defn.description,
                            list(defn.label_names),
                            registry=self._registry,
                        )
                    elif metric_type == "gauge":
                        metric = Gauge(
                            name,
                            defn.description,
                            list(defn.label_names),
                            registry=self._registry,
                        )
                    else:
                        metric = Histogram(
                            name,
                            defn.description,
                            list(defn.label_names),
                            buckets=defn.buckets or PADDING_SIZE_BUCKETS,
                            registry=self._registry,
                        )
                except ValueError as e:
                    # Duplicate registration in a shared registry
                    logger.warning(f"Failed to create Prometheus {metric_type} {name}: {e}")
                    return None
                self._prom_metrics[name] = metric

        return self._prom_metrics.get(name)

    @staticmethod
    def _with_labels(metric: Any, labels: dict[str, str] | None) -> Any:
        return metric.labels(**labels) if labels else metric

    # === Counter Operations ===

    def inc_counter(
        self,
        name: str,
        value: int = 1,
        labels: dict[str, str] | None = None,
    ) -> None:
        """
        Increment a counter metric.

        Raises:
            ValueError: If value is negative
        """
        if value < 0:
            raise ValueError("Counter increment must be non-negative")

        label_key = self._labels_to_key(labels)

        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            self._counters[name][label_key] += value

        prom_counter = self._get_or_create_prom_metric(name, "counter")
        if prom_counter is not None:
            self._with_labels(prom_counter, labels).inc(value)

    # === Gauge Operations ===

    def set_gauge(
        self,
        name: str,
        value: float,
        labels: dict[str, str] | None = None,
    ) -> None:
        """Set a gauge metric to a specific value."""
        label_key = self._labels_to_key(labels)

        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            self._gauges[name][label_key] = value

        prom_gauge = self._get_or_create_prom_metric(name, "gauge")
        if prom_gauge is not None:
            self._with_labels(prom_gauge, labels).set(value)

    def inc_gauge(
        self,
        name: str,
        value: float = 1.0,
        labels: dict[str, str] | None = None,
    ) -> None:
        """Increment a gauge metric (use a negative value to decrement)."""
        label_key = self._labels_to_key(labels)

        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            self._gauges[name][label_key] += value

        prom_gauge = self._get_or_create_prom_metric(name, "gauge")
        if prom_gauge is not None:
            self._with_labels(prom_gauge, labels).inc(value)

    # === Histogram Operations ===

    def observe_histogram(
        self,
        name: str,
        value: float,
        labels: dict[str, str] | None = None,
    ) -> None:
        """Record an observation in a histogram."""
        label_key = self._labels_to_key(labels)

        with self._lock:
            if not self._check_cardinality(name, label_key):
                return
            observations = self._histograms[name][label_key]
            observations.append(value)
            # Keep only recent observations to prevent memory growth
            if len(observations) > 10000:
                self._histograms[name][label_key] = observations[-5000:]

        prom_histogram = self._get_or_create_prom_metric(name, "histogram")
        if prom_histogram is not None:
            self._with_labels(prom_histogram, labels).observe(value)

    # === Snapshot Operations ===

    def get_metrics(self) -> dict[str, Any]:
        """
        Get a snapshot of all metrics.

        Returns a dict suitable for JSON serialization with structure:
        {
            "counters": {"metric_name": {"label_key": value, ...}, ...},
            "gauges": {"metric_name": {"label_key": value, ...}, ...},
            "histograms": {"metric_name": {"label_key": {...}, ...}, ...}
        }
        """
        with self._lock:
            counters = {
                name: dict(label_values)
                for name, label_values in self._counters.items()
            }
            gauges = {
                name: dict(label_values) for name, label_values in self._gauges.items()
            }

            histograms: dict[str, dict[str, dict[str, Any]]] = {}
            for name, label_values in self._histograms.items():
                histograms[name] = {}
                for label_key, observations in label_values.items():
                    if observations:
                        histograms[name][label_key] = {
                            "count": len(observations),
                            "sum": sum(observations),
                            "avg": sum(observations) / len(observations),
                            "min": min(observations),
                            "max": max(observations),
                        }

        return {
            "counters": counters,
            "gauges": gauges,
            "histograms": histograms,
        }

    # === Lifecycle ===

    def reset(self) -> None:
        """Reset the dict-based metrics. Prometheus series are left in place."""
        with self._lock:
            self._counters.clear()
            self._gauges.clear()
            self._histograms.clear()
            self._label_combinations.clear()

        logger.debug("Metrics collector reset")

    def start_http_server(self, host: str = "127.0.0.1", port: int = 9090) -> bool:
        """
        Start the Prometheus HTTP server for metrics scraping.

        Binds to localhost by default. Returns True if the server is running
        after the call.
        """
        if self._server_running:
            logger.warning("Prometheus server already running")
            return True

        try:
            # start_http_server runs in a daemon thread
            start_http_server(port, addr=host, registry=self._registry)
        except OSError as e:
            logger.error(f"Failed to start Prometheus server: {e}")
            return False

        self._server_running = True
        logger.info(f"Prometheus metrics server started on {host}:{port}")
        return True

    @property
    def prometheus_enabled(self) -> bool:
        """Check if Prometheus metrics are enabled."""
        return self._enable_prometheus

    @property
    def server_running(self) -> bool:
        """Check if the Prometheus HTTP server is running."""
        return self._server_running


# =============================================================================
# Singleton Pattern
# =============================================================================

_global_collector: MetricsCollector | None = None
_collector_lock = threading.Lock()


def get_metrics_collector(enable_prometheus: bool = True) -> MetricsCollector:
    """
    Get or create the global metrics collector singleton.

    Args:
        enable_prometheus: Whether to enable Prometheus metrics
            (only used on first call)
    """
    global _global_collector

    if _global_collector is None:
        with _collector_lock:
            if _global_collector is None:
                _global_collector = MetricsCollector(
                    enable_prometheus=enable_prometheus
                )

    return _global_collector


def reset_metrics_collector() -> None:
    """
    Reset the global metrics collector singleton (mainly for testing).

    The next call to get_metrics_collector() creates a fresh instance.
    """
    global _global_collector
    with _collector_lock:
        if _global_collector:
            _global_collector.reset()
        _global_collector = None


__all__ = [
    "METRIC_DEFINITIONS",
    "MetricDefinition",
    "MetricsCollector",
    "get_metrics_collector",
    "reset_metrics_collector",
]
