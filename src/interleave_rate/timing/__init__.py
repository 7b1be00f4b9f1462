# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Timing and cancellation primitives for streaming clients.

Classes:
    SynchronizedClock: Local estimate of a remote reference clock.
    AbortController: Owner side of an abort signal.
    AbortSignal: Cancellation flag passed to the wait primitives.

Functions:
    abortable: Race a callback-style operation against an abort signal.
    sleep: Cancellable sleep.
    wait_for_event: Cancellable wait for a named event.
    parse_reference_time: Parse a timestamp string to epoch milliseconds.
    fetch_reference_time: Fetch a reference timestamp over HTTP.
"""

from .abort import AbortController, AbortSignal
from .clock import SynchronizedClock, fetch_reference_time, parse_reference_time
from .waits import abortable, sleep, wait_for_event

__all__ = [
    "AbortController",
    "AbortSignal",
    "SynchronizedClock",
    "abortable",
    "fetch_reference_time",
    "parse_reference_time",
    "sleep",
    "wait_for_event",
]
