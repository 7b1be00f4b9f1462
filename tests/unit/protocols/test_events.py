"""
Unit tests for EventEmitter and the protocol definitions.
"""

from __future__ import annotations

from unittest.mock import Mock

from interleave_rate.protocols import (
    EventEmitter,
    EventSourceProtocol,
    PaddingWriterProtocol,
)


class TestEventEmitter:
    """Tests for EventEmitter."""

    def test_emit_calls_handlers_in_order(self) -> None:
        emitter = EventEmitter()
        calls: list[str] = []
        emitter.on("add", lambda b: calls.append(f"first:{b}"))
        emitter.on("add", lambda b: calls.append(f"second:{b}"))

        assert emitter.emit("add", "x") == 2
        assert calls == ["first:x", "second:x"]

    def test_emit_without_handlers(self) -> None:
        assert EventEmitter().emit("nothing") == 0

    def test_off_removes_handler(self) -> None:
        emitter = EventEmitter()
        handler = Mock()
        emitter.on("finish", handler)

        emitter.off("finish", handler)
        emitter.emit("finish")

        handler.assert_not_called()
        assert emitter.listener_count("finish") == 0

    def test_off_unknown_handler_is_ignored(self) -> None:
        EventEmitter().off("finish", Mock())

    def test_once_fires_once(self) -> None:
        emitter = EventEmitter()
        handler = Mock()
        emitter.once("finish", handler)

        emitter.emit("finish", 1)
        emitter.emit("finish", 2)

        handler.assert_called_once_with(1)

    def test_handler_may_unsubscribe_during_emit(self) -> None:
        emitter = EventEmitter()
        other = Mock()

        def first() -> None:
            emitter.off("tick", first)

        emitter.on("tick", first)
        emitter.on("tick", other)

        emitter.emit("tick")
        emitter.emit("tick")

        assert other.call_count == 2
        assert emitter.listener_count("tick") == 1

    def test_failing_handler_does_not_block_others(self) -> None:
        emitter = EventEmitter()
        other = Mock()
        emitter.on("tick", Mock(side_effect=RuntimeError("boom")))
        emitter.on("tick", other)

        emitter.emit("tick")

        other.assert_called_once()


class TestProtocols:
    """Runtime checks for the protocol classes."""

    def test_event_emitter_is_event_source(self) -> None:
        assert isinstance(EventEmitter(), EventSourceProtocol)

    def test_plain_object_is_not_event_source(self) -> None:
        assert not isinstance(object(), EventSourceProtocol)

    def test_callable_is_padding_writer(self) -> None:
        class Writer:
            def __call__(self, buffer: bytes) -> None:
                pass

        assert isinstance(Writer(), PaddingWriterProtocol)
