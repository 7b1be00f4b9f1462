# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Cancellable wait primitives.

Every blocking wait in a streaming client goes through one of these so
that cancellation behaves the same everywhere: when the AbortSignal fires
first the wait raises AbortError, and the listeners it registered are
removed on every path (completion, abort, rejection, or cancellation of
the awaiting task).

Functions:
    abortable: Adapt a callback-style operation into an abortable awaitable.
    sleep: Sleep that ends early with AbortError when the signal fires.
    wait_for_event: Wait for a named event on an event source.
"""

from __future__ import annotations

import asyncio
import functools
import logging
from collections.abc import Callable
from typing import Any

from ..exceptions import AbortError
from ..protocols.events import EventSourceProtocol
from .abort import AbortSignal

logger = logging.getLogger(__name__)

Fulfill = Callable[..., None]
Reject = Callable[[BaseException], None]
Teardown = Callable[[], Any]
Setup = Callable[[Fulfill, Reject], Teardown | None]


def _reject_aborted(reject: Reject, signal: AbortSignal) -> None:
    reject(AbortError(reason=signal.reason))


async def abortable(setup: Setup, signal: AbortSignal | None = None) -> Any:
    """
    Run a callback-style operation, racing it against ``signal``.

    ``setup(fulfill, reject)`` starts the operation, which later calls
    ``fulfill(value)`` or ``reject(exc)``. Only the first settlement counts.
    ``setup`` may return a teardown callable for operation-specific
    resources; it runs exactly once, after the race is decided.

    Args:
        setup: Starts the operation
        signal: Optional abort signal

    Returns:
        The value passed to ``fulfill``.

    Raises:
        AbortError: If the signal is already aborted (``setup`` is not
            called) or fires before the operation settles
    """
    if signal is not None:
        signal.raise_if_aborted()

    loop = asyncio.get_running_loop()
    future: asyncio.Future[Any] = loop.create_future()

    def fulfill(value: Any = None) -> None:
        if not future.done():
            future.set_result(value)

    def reject(exc: BaseException) -> None:
        if not future.done():
            future.set_exception(exc)

    on_abort: Callable[[], None] | None = None
    if signal is not None:
        on_abort = functools.partial(_reject_aborted, reject, signal)
        signal.add_listener(on_abort)

    teardown: Teardown | None = None
    try:
        teardown = setup(fulfill, reject)
        return await future
    finally:
        if signal is not None and on_abort is not None:
            signal.remove_listener(on_abort)
        if teardown is not None:
            teardown()


async def sleep(seconds: float, signal: AbortSignal | None = None) -> None:
    """
    Sleep for ``seconds``, or until ``signal`` fires.

    Cancellation is immediate: an abort during the sleep cancels the timer
    and raises at once. The signal is checked again on wake-up, so an abort
    landing after the timer fired but before this coroutine resumed still
    raises.

    Raises:
        AbortError: If the signal is or becomes aborted
    """

    def setup(fulfill: Fulfill, reject: Reject) -> Teardown:
        handle = asyncio.get_running_loop().call_later(max(0.0, seconds), fulfill)
        return handle.cancel

    await abortable(setup, signal)
    if signal is not None:
        signal.raise_if_aborted()


async def wait_for_event(
    event: str,
    source: EventSourceProtocol,
    signal: AbortSignal | None = None,
) -> Any:
    """
    Wait until ``source`` emits ``event``.

    Returns:
        The event's argument if it carried exactly one, a tuple of them if
        it carried several, or None if it carried none.

    Raises:
        AbortError: If the signal fires before the event
    """

    def setup(fulfill: Fulfill, reject: Reject) -> Teardown:
        def on_event(*args: Any) -> None:
            if not args:
                fulfill(None)
            elif len(args) == 1:
                fulfill(args[0])
            else:
                fulfill(args)

        def teardown() -> None:
            source.off(event, on_event)
            logger.debug(f"Removed {event!r} listener")

        source.on(event, on_event)
        return teardown

    return await abortable(setup, signal)


__all__ = ["abortable", "sleep", "wait_for_event"]
