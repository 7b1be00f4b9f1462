# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Clock synchronized to a remote reference time.

The client fetches the server's notion of "now" once and keeps the offset
to its own wall clock. This is a one-shot calibration: drift after
construction is not corrected, which is good enough to align playback to
within a second but not for precise long-running timing.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from datetime import datetime
from email.utils import parsedate_to_datetime

import httpx

from ..exceptions import ParseError, ReferenceTimeError

logger = logging.getLogger(__name__)


def _wall_clock_ms() -> int:
    return time.time_ns() // 1_000_000


def parse_reference_time(value: str) -> int:
    """
    Parse an absolute timestamp into milliseconds since the epoch.

    Supports:
        - ISO 8601 (e.g., 2026-10-18T12:00:00Z, 2026-10-18T12:00:00.250+02:00)
        - RFC 2822 / HTTP-date (e.g., Sun, 18 Oct 2026 12:00:00 GMT)

    ISO values without an offset are taken as local time.

    Raises:
        ParseError: If the value is not a recognized timestamp
    """
    text = value.strip() if isinstance(value, str) else ""
    if not text:
        raise ParseError(str(value))

    try:
        dt = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        try:
            dt = parsedate_to_datetime(text)
        except (TypeError, ValueError, IndexError) as e:
            raise ParseError(value) from e
        if dt is None:
            raise ParseError(value)

    return round(dt.timestamp() * 1000)


class SynchronizedClock:
    """
    Estimate of a remote clock, calibrated once at construction.

    Example:
        >>> clock = SynchronizedClock(server_info["now"])
        >>> clock.now()  # remote time in ms since the epoch
    """

    def __init__(
        self,
        reference_time: str,
        *,
        wall_clock: Callable[[], int] | None = None,
    ):
        """
        Calibrate against ``reference_time``.

        Args:
            reference_time: The remote clock's reading, as a timestamp string
            wall_clock: Local clock in ms since the epoch (defaults to time.time)

        Raises:
            ParseError: If reference_time is not a valid timestamp
        """
        self._wall_clock = wall_clock or _wall_clock_ms
        reference_ms = parse_reference_time(reference_time)
        self._offset = self._wall_clock() - reference_ms
        logger.info(f"Clock offset: {self._offset} ms")

    @classmethod
    async def from_url(
        cls,
        url: str,
        *,
        timeout: float = 10.0,
        wall_clock: Callable[[], int] | None = None,
    ) -> SynchronizedClock:
        """Fetch the reference time from ``url`` and calibrate against it."""
        reference_time = await fetch_reference_time(url, timeout=timeout)
        return cls(reference_time, wall_clock=wall_clock)

    @property
    def offset(self) -> int:
        """Local clock minus remote clock, in ms."""
        return self._offset

    def now(self) -> int:
        """Current remote time estimate, in ms since the epoch."""
        return self._wall_clock() - self._offset


async def fetch_reference_time(url: str, *, timeout: float = 10.0) -> str:
    """
    Fetch a reference timestamp string from a server status resource.

    Raises:
        ReferenceTimeError: If the request fails or returns an error status
    """
    try:
        async with httpx.AsyncClient(timeout=timeout) as c:
            r = await c.get(url)
            r.raise_for_status()
            return r.text.strip()
    except httpx.HTTPStatusError as e:
        raise ReferenceTimeError(f"Reference time server returned an error: {e}", url) from e
    except httpx.HTTPError as e:
        raise ReferenceTimeError(f"Failed to fetch reference time: {e}", url) from e


__all__ = ["SynchronizedClock", "fetch_reference_time", "parse_reference_time"]
