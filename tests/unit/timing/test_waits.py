"""
Unit tests for the cancellable wait primitives.

Tests cover:
- abortable(): fulfilment, rejection, abort racing, teardown exactly once
- sleep(): normal completion, pre-aborted and mid-sleep aborts
- wait_for_event(): event delivery, abort, listener cleanup on every path
"""

from __future__ import annotations

import asyncio
import time
from typing import Any
from unittest.mock import Mock

import pytest

from interleave_rate.exceptions import AbortError
from interleave_rate.protocols.events import EventEmitter
from interleave_rate.timing.abort import AbortController
from interleave_rate.timing.waits import abortable, sleep, wait_for_event


class TestAbortable:
    """Tests for abortable()."""

    @pytest.mark.asyncio
    async def test_resolves_with_fulfilled_value(self) -> None:
        loop = asyncio.get_running_loop()

        def setup(fulfill: Any, reject: Any) -> None:
            loop.call_soon(fulfill, 42)

        assert await abortable(setup) == 42

    @pytest.mark.asyncio
    async def test_synchronous_fulfil(self) -> None:
        assert await abortable(lambda fulfill, reject: fulfill("now")) == "now"

    @pytest.mark.asyncio
    async def test_rejection_propagates(self) -> None:
        loop = asyncio.get_running_loop()

        def setup(fulfill: Any, reject: Any) -> None:
            loop.call_soon(reject, ValueError("bad"))

        with pytest.raises(ValueError, match="bad"):
            await abortable(setup)

    @pytest.mark.asyncio
    async def test_first_settlement_wins(self) -> None:
        def setup(fulfill: Any, reject: Any) -> None:
            fulfill(1)
            fulfill(2)
            reject(RuntimeError("late"))

        assert await abortable(setup) == 1

    @pytest.mark.asyncio
    async def test_pre_aborted_signal_skips_setup(self) -> None:
        controller = AbortController()
        controller.abort()
        setup = Mock()

        with pytest.raises(AbortError):
            await abortable(setup, controller.signal)

        setup.assert_not_called()

    @pytest.mark.asyncio
    async def test_abort_wins_race(self) -> None:
        controller = AbortController()
        teardown = Mock()
        loop = asyncio.get_running_loop()
        loop.call_later(0.01, controller.abort, "cancelled")

        with pytest.raises(AbortError) as exc_info:
            await abortable(lambda fulfill, reject: teardown, controller.signal)

        assert exc_info.value.reason == "cancelled"
        teardown.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_listener_removed_after_success(self) -> None:
        controller = AbortController()
        teardown = Mock()

        def setup(fulfill: Any, reject: Any) -> Mock:
            asyncio.get_running_loop().call_soon(fulfill, "ok")
            return teardown

        assert await abortable(setup, controller.signal) == "ok"

        assert controller.signal.listener_count == 0
        teardown.assert_called_once_with()

        # A late abort has no effect
        controller.abort()
        teardown.assert_called_once_with()

    @pytest.mark.asyncio
    async def test_listener_removed_after_rejection(self) -> None:
        controller = AbortController()

        with pytest.raises(KeyError):
            await abortable(
                lambda fulfill, reject: reject(KeyError("x")), controller.signal
            )

        assert controller.signal.listener_count == 0

    @pytest.mark.asyncio
    async def test_listener_removed_when_setup_raises(self) -> None:
        controller = AbortController()

        def setup(fulfill: Any, reject: Any) -> None:
            raise OSError("no socket")

        with pytest.raises(OSError):
            await abortable(setup, controller.signal)

        assert controller.signal.listener_count == 0

    @pytest.mark.asyncio
    async def test_task_cancellation_cleans_up(self) -> None:
        controller = AbortController()
        teardown = Mock()

        task = asyncio.create_task(
            abortable(lambda fulfill, reject: teardown, controller.signal)
        )
        await asyncio.sleep(0)
        assert controller.signal.listener_count == 1

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert controller.signal.listener_count == 0
        teardown.assert_called_once_with()


class TestSleep:
    """Tests for sleep()."""

    @pytest.mark.asyncio
    async def test_sleeps_for_duration(self) -> None:
        start = time.monotonic()
        await sleep(0.05)
        assert time.monotonic() - start >= 0.04

    @pytest.mark.asyncio
    async def test_completes_with_unaborted_signal(self) -> None:
        controller = AbortController()

        await sleep(0.01, controller.signal)

        assert controller.signal.listener_count == 0

    @pytest.mark.asyncio
    async def test_pre_aborted_signal_raises_immediately(self) -> None:
        controller = AbortController()
        controller.abort()

        start = time.monotonic()
        with pytest.raises(AbortError):
            await sleep(1.0, controller.signal)
        assert time.monotonic() - start < 0.5

    @pytest.mark.asyncio
    async def test_abort_mid_sleep_raises_early(self) -> None:
        controller = AbortController()
        asyncio.get_running_loop().call_later(0.2, controller.abort)

        start = time.monotonic()
        with pytest.raises(AbortError):
            await sleep(1.0, controller.signal)
        elapsed = time.monotonic() - start

        assert 0.15 <= elapsed < 0.9
        assert controller.signal.listener_count == 0

    @pytest.mark.asyncio
    async def test_negative_duration_completes(self) -> None:
        await sleep(-1)

    @pytest.mark.asyncio
    async def test_abort_after_timer_fired_before_resume_raises(self) -> None:
        controller = AbortController()
        loop = asyncio.get_running_loop()

        task = asyncio.create_task(sleep(0.01, controller.signal))
        await asyncio.sleep(0)
        loop.call_later(0.011, controller.abort, "late")
        # Block the loop so both timers come due in the same iteration.
        time.sleep(0.05)

        with pytest.raises(AbortError) as exc_info:
            await task

        assert exc_info.value.reason == "late"
        assert controller.signal.listener_count == 0


class TestWaitForEvent:
    """Tests for wait_for_event()."""

    @pytest.mark.asyncio
    async def test_resolves_with_single_argument(self) -> None:
        emitter = EventEmitter()
        asyncio.get_running_loop().call_soon(emitter.emit, "playing", 12.5)

        assert await wait_for_event("playing", emitter) == 12.5
        assert emitter.listener_count("playing") == 0

    @pytest.mark.asyncio
    async def test_resolves_none_without_arguments(self) -> None:
        emitter = EventEmitter()
        asyncio.get_running_loop().call_soon(emitter.emit, "sourceopen")

        assert await wait_for_event("sourceopen", emitter) is None

    @pytest.mark.asyncio
    async def test_resolves_tuple_for_many_arguments(self) -> None:
        emitter = EventEmitter()
        asyncio.get_running_loop().call_soon(emitter.emit, "add", "a", 1)

        assert await wait_for_event("add", emitter) == ("a", 1)

    @pytest.mark.asyncio
    async def test_ignores_other_events(self) -> None:
        emitter = EventEmitter()
        loop = asyncio.get_running_loop()
        loop.call_soon(emitter.emit, "paused")
        loop.call_later(0.01, emitter.emit, "ended", "done")

        assert await wait_for_event("ended", emitter) == "done"

    @pytest.mark.asyncio
    async def test_abort_removes_event_listener(self) -> None:
        emitter = EventEmitter()
        controller = AbortController()
        asyncio.get_running_loop().call_later(0.01, controller.abort)

        with pytest.raises(AbortError):
            await wait_for_event("ended", emitter, controller.signal)

        assert emitter.listener_count("ended") == 0
        assert controller.signal.listener_count == 0

    @pytest.mark.asyncio
    async def test_pre_aborted_signal_never_subscribes(self) -> None:
        emitter = Mock()
        controller = AbortController()
        controller.abort()

        with pytest.raises(AbortError):
            await wait_for_event("ended", emitter, controller.signal)

        emitter.on.assert_not_called()
        emitter.off.assert_not_called()

    @pytest.mark.asyncio
    async def test_event_after_completion_is_harmless(self) -> None:
        emitter = EventEmitter()
        controller = AbortController()
        asyncio.get_running_loop().call_soon(emitter.emit, "ended")

        await wait_for_event("ended", emitter, controller.signal)

        assert emitter.emit("ended") == 0
        controller.abort()

    @pytest.mark.asyncio
    async def test_task_cancellation_removes_listener(self) -> None:
        emitter = EventEmitter()

        task = asyncio.create_task(wait_for_event("ended", emitter))
        await asyncio.sleep(0)
        assert emitter.listener_count("ended") == 1

        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task

        assert emitter.listener_count("ended") == 0

    @pytest.mark.asyncio
    async def test_uses_on_and_off_with_same_handler(self) -> None:
        source = Mock()
        task = asyncio.create_task(wait_for_event("playing", source))
        await asyncio.sleep(0)

        handler = source.on.call_args.args[1]
        handler()
        await task

        source.off.assert_called_once_with("playing", handler)
