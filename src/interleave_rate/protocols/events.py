# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for event sources, and a minimal synchronous emitter."""

from __future__ import annotations

import logging
from collections import defaultdict
from collections.abc import Callable
from typing import Any, Protocol, runtime_checkable

logger = logging.getLogger(__name__)

EventHandler = Callable[..., Any]


@runtime_checkable
class EventSourceProtocol(Protocol):
    """
    Protocol for objects that emit named events.

    ``wait_for_event()`` subscribes with ``on`` and always unsubscribes with
    ``off`` using the same handler object.
    """

    def on(self, event: str, handler: EventHandler) -> None:
        """Register ``handler`` to be called each time ``event`` fires."""
        ...

    def off(self, event: str, handler: EventHandler) -> None:
        """Unregister ``handler``. Unknown handlers are ignored."""
        ...


class EventEmitter:
    """
    Synchronous named-event emitter.

    Handlers run in registration order inside ``emit``. A handler that
    raises is logged and does not prevent the remaining handlers from
    running.

    Example:
        >>> emitter = EventEmitter()
        >>> emitter.on("playing", lambda: print("playing"))
        >>> emitter.emit("playing")
        playing
    """

    def __init__(self) -> None:
        self._handlers: dict[str, list[EventHandler]] = defaultdict(list)

    def on(self, event: str, handler: EventHandler) -> None:
        self._handlers[event].append(handler)

    def off(self, event: str, handler: EventHandler) -> None:
        handlers = self._handlers.get(event, [])
        if handler in handlers:
            handlers.remove(handler)
            if not handlers:
                del self._handlers[event]

    def once(self, event: str, handler: EventHandler) -> EventHandler:
        """
        Register a handler that is removed after its first call.

        Returns:
            The wrapper actually registered, for use with ``off``.
        """

        def wrapper(*args: Any) -> Any:
            self.off(event, wrapper)
            return handler(*args)

        self.on(event, wrapper)
        return wrapper

    def emit(self, event: str, *args: Any) -> int:
        """
        Call every handler registered for ``event`` with ``args``.

        Returns:
            Number of handlers called.
        """
        # Copy so handlers may unsubscribe while we iterate
        handlers = list(self._handlers.get(event, ()))
        for handler in handlers:
            try:
                handler(*args)
            except Exception:
                logger.exception(f"Event handler for {event!r} raised")
        return len(handlers)

    def listener_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))


__all__ = ["EventEmitter", "EventHandler", "EventSourceProtocol"]
