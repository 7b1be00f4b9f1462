# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Exception classes for the interleave rate library.

This module defines the exception hierarchy used throughout the library.
All exceptions inherit from InterleaveRateError, making it easy to catch
every library-originated error with a single except clause.
"""

from __future__ import annotations

from typing import Any


class InterleaveRateError(Exception):
    """Base exception for all interleave rate errors.

    Example:
        try:
            tracker = MinimumInterleaveRate(sink, rate, window)
        except InterleaveRateError as e:
            logger.error(f"Interleave rate error: {e}")
    """

    pass


class ConfigurationError(InterleaveRateError):
    """Raised when configuration is invalid.

    This exception is raised at construction time when the minimum rate,
    window size or padding chunk width is out of range.

    Example:
        try:
            tracker = MinimumInterleaveRate(sink, minimum_rate=0, window_size_ms=1000)
        except ConfigurationError as e:
            logger.error(f"Invalid tracker configuration: {e}")
            raise SystemExit(1)
    """

    pass


class PreconditionViolation(InterleaveRateError):
    """Raised when a tracker operation is called in the wrong run-state.

    Calling ``start()`` on a running tracker, or ``stop()``/``add_data()``
    on a stopped one, is a programming error. It is never caught inside the
    library and should not be retried by callers.

    Attributes:
        operation: The operation that was attempted (e.g. "start").
        state: The run-state the tracker was in ("running" or "stopped").
    """

    def __init__(self, operation: str, state: str, message: str | None = None):
        super().__init__(
            message or f"Cannot call {operation}() while tracker is {state}"
        )
        self.operation = operation
        self.state = state


class ParseError(InterleaveRateError):
    """Raised when a reference time string is not a valid timestamp.

    Attributes:
        value: The string that failed to parse.
    """

    def __init__(self, value: str, message: str | None = None):
        super().__init__(message or f"Invalid reference time: {value!r}")
        self.value = value


class ReferenceTimeError(InterleaveRateError):
    """Raised when the reference time could not be fetched from a server.

    Attributes:
        url: The URL that was requested.
    """

    def __init__(self, message: str, url: str | None = None):
        super().__init__(message)
        self.url = url


class AbortError(InterleaveRateError):
    """Raised by the wait primitives when their abort signal fires.

    Cancellation is an expected outcome for callers that pass a signal, so
    match on the type rather than on the message:

    Example:
        try:
            await sleep(5.0, signal)
        except AbortError:
            return  # unwind quietly
    """

    name = "AbortError"

    def __init__(self, message: str = "The operation was aborted", reason: Any = None):
        super().__init__(message)
        self.reason = reason


__all__ = [
    "AbortError",
    "ConfigurationError",
    "InterleaveRateError",
    "ParseError",
    "PreconditionViolation",
    "ReferenceTimeError",
]
