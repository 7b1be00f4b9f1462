# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Minimum interleave rate tracker.

Interleaving a slow stream (audio) with a fast one (video) helps push the
slow stream through fixed-size network buffers, but only while the combined
stream keeps flowing. This tracker watches the bytes written to an
interleave and, whenever the rate over the trailing window drops below a
floor, hands random padding to a sink so the channel never stalls.

Classes:
    MinimumInterleaveRate: Tracks the interleave rate and emits padding.
"""

from __future__ import annotations

import asyncio
import logging
import random
import time
from collections.abc import Callable
from types import TracebackType
from typing import Any

from typing_extensions import Self

from ..config import PADDING_CHUNK_WIDTH, InterleaveRateConfig
from ..exceptions import PreconditionViolation
from ..observability.metrics import InterleaveMetrics
from ..protocols.padding import PaddingSink
from .history import SampleHistory
from .padding import generate_padding, padding_length

logger = logging.getLogger(__name__)


def _monotonic_ms() -> float:
    return time.monotonic() * 1000


class MinimumInterleaveRate:
    """
    Keeps an interleaved channel at or above a minimum byte rate.

    The transport calls ``add_data()`` for every chunk it writes, padding
    included. Every ``window_size_ms / 2`` the tracker drops samples older
    than the window, and if fewer than ``minimum_rate * window_size_ms /
    1000`` bytes remain it calls ``on_pad`` once with a random buffer that
    closes the gap (rounded up to the chunk width).

    Polling is driven by ``loop.call_later`` on the event loop that was
    running when ``start()`` was called. ``start``, ``stop`` and
    ``add_data`` are synchronous and must be called from that loop.

    State machine: stopped -> start() -> running -> stop() -> stopped.
    Calling an operation in the wrong state raises PreconditionViolation.
    Stopping discards the history.

    Example:
        >>> tracker = MinimumInterleaveRate(channel.write_padding, 1000, 2000)
        >>> tracker.start()
        >>> tracker.add_data(len(chunk))
        >>> ...
        >>> tracker.stop()
    """

    def __init__(
        self,
        on_pad: PaddingSink,
        minimum_rate: float,
        window_size_ms: float,
        *,
        chunk_width: int = PADDING_CHUNK_WIDTH,
        clock: Callable[[], float] | None = None,
        rng: random.Random | None = None,
        metrics: InterleaveMetrics | None = None,
        name: str = "interleave",
    ):
        """
        Initialize the tracker. Polling does not start until ``start()``.

        Args:
            on_pad: Called with each padding buffer; should enqueue, not block
            minimum_rate: Floor rate to maintain, in bytes per second
            window_size_ms: Window over which the rate is measured, in ms
            chunk_width: Width of each random padding chunk, in bytes
            clock: Monotonic clock in milliseconds (defaults to time.monotonic)
            rng: Random source for padding bytes
            metrics: Optional metrics sink for polls and padding
            name: Label for log lines and metrics

        Raises:
            ConfigurationError: If minimum_rate or window_size_ms is not
                positive, or chunk_width is out of range
        """
        self._config = InterleaveRateConfig.create(
            minimum_rate=minimum_rate,
            window_size_ms=window_size_ms,
            chunk_width=chunk_width,
        )
        self._on_pad = on_pad
        self._clock = clock or _monotonic_ms
        self._rng = rng or random.Random()
        self._metrics = metrics
        self._name = name

        self._history = SampleHistory()
        self._timer: asyncio.TimerHandle | None = None

    @classmethod
    def from_config(
        cls,
        on_pad: PaddingSink,
        config: InterleaveRateConfig,
        **kwargs: Any,
    ) -> MinimumInterleaveRate:
        """Create a tracker from a validated config."""
        return cls(
            on_pad,
            config.minimum_rate,
            config.window_size_ms,
            chunk_width=config.chunk_width,
            **kwargs,
        )

    @property
    def config(self) -> InterleaveRateConfig:
        return self._config

    @property
    def name(self) -> str:
        return self._name

    @property
    def metrics(self) -> InterleaveMetrics | None:
        return self._metrics

    def _state(self) -> str:
        return "running" if self._timer is not None else "stopped"

    # === Lifecycle ===

    def start(self) -> None:
        """
        Start tracking and begin polling every half window.

        Raises:
            PreconditionViolation: If the tracker is already running
            RuntimeError: If no event loop is running in this thread
        """
        if self._timer is not None or len(self._history) != 0:
            raise PreconditionViolation("start", self._state())

        self._schedule_poll(asyncio.get_running_loop())
        if self._metrics:
            self._metrics.record_running(True)
        logger.debug(
            f"Started interleave rate tracker {self._name} "
            f"(minimum_rate={self._config.minimum_rate}B/s, "
            f"window={self._config.window_size_ms}ms)"
        )

    def stop(self) -> None:
        """
        Stop tracking and discard the history.

        Raises:
            PreconditionViolation: If the tracker is not running
        """
        if self._timer is None:
            raise PreconditionViolation("stop", self._state())

        self._timer.cancel()
        self._timer = None
        self._history.clear()
        if self._metrics:
            self._metrics.record_running(False)
        logger.debug(f"Stopped interleave rate tracker {self._name}")

    def is_running(self) -> bool:
        """Whether the tracker is currently polling."""
        return self._timer is not None

    def __enter__(self) -> Self:
        self.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        if self.is_running():
            self.stop()

    # === Data ===

    def add_data(self, size: int) -> None:
        """
        Tell the tracker that ``size`` bytes were written to the interleave.

        Padding written on behalf of ``on_pad`` must be reported here too,
        otherwise later windows will pad again.

        Raises:
            PreconditionViolation: If the tracker is not running
            ValueError: If size is not a non-negative int
        """
        if self._timer is None:
            raise PreconditionViolation("add_data", self._state())
        if isinstance(size, bool) or not isinstance(size, int):
            raise ValueError(f"Data size must be an int, got {size!r}")
        if size < 0:
            raise ValueError(f"Data size must be non-negative, got {size}")

        self._history.append(self._clock(), size)
        if self._metrics:
            self._metrics.record_data(size)

    # === Polling ===

    def _schedule_poll(self, loop: asyncio.AbstractEventLoop) -> None:
        self._timer = loop.call_later(
            self._config.poll_interval_ms / 1000, self._on_timer, loop
        )

    def _on_timer(self, loop: asyncio.AbstractEventLoop) -> None:
        # Reschedule first so a failing poll never ends the polling.
        self._schedule_poll(loop)
        try:
            self._poll()
        except Exception:
            logger.exception(f"Poll failed for interleave {self._name}")

    def _poll(self) -> int:
        """
        Check the window and emit padding if the rate is too low.

        A sink that raises is logged and counted as a padding error; the
        exception does not propagate.

        Returns:
            The number of padding bytes delivered to the sink (0 if none).
        """
        now = self._clock()
        self._history.prune_before(now - self._config.window_size_ms)
        total_size = self._history.total_size()
        if self._metrics:
            self._metrics.record_poll(total_size)

        minimum_size = self._config.minimum_size
        if minimum_size <= total_size:
            return 0

        length = padding_length(minimum_size - total_size, self._config.chunk_width)
        buffer = generate_padding(length, self._config.chunk_width, self._rng)
        try:
            self._on_pad(buffer)
        except Exception:
            logger.exception(f"Padding sink failed for interleave {self._name}")
            if self._metrics:
                self._metrics.record_padding_error()
            return 0

        if self._metrics:
            self._metrics.record_padding(length)
        return length

    def get_stats(self) -> dict[str, Any]:
        """
        Get a snapshot of the tracker state.

        Returns:
            Dictionary with tracker statistics.
        """
        return {
            "name": self._name,
            "running": self.is_running(),
            "samples": len(self._history),
            "window_bytes": self._history.total_size(),
            "minimum_size": self._config.minimum_size,
            "minimum_rate": self._config.minimum_rate,
            "window_size_ms": self._config.window_size_ms,
            "chunk_width": self._config.chunk_width,
        }


__all__ = ["MinimumInterleaveRate"]
