# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Abort signals for cancellable waits.

An AbortController owns an AbortSignal. Waits are handed the signal; the
owner of the controller calls ``abort()`` to abandon them. A signal aborts
at most once and each listener is called at most once.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ..exceptions import AbortError

logger = logging.getLogger(__name__)

AbortListener = Callable[[], Any]


class AbortSignal:
    """
    Observable "this operation has been abandoned" flag.

    Listeners registered with ``add_listener`` fire once, when the signal is
    aborted. Registering on an already-aborted signal does not fire the
    listener, so callers check ``aborted`` first.
    """

    def __init__(self) -> None:
        self._aborted = False
        self._reason: Any = None
        self._listeners: list[AbortListener] = []

    @property
    def aborted(self) -> bool:
        return self._aborted

    @property
    def reason(self) -> Any:
        return self._reason

    def add_listener(self, listener: AbortListener) -> None:
        if not self._aborted:
            self._listeners.append(listener)

    def remove_listener(self, listener: AbortListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def raise_if_aborted(self) -> None:
        """Raise AbortError if the signal has been aborted."""
        if self._aborted:
            raise AbortError(reason=self._reason)

    def _abort(self, reason: Any) -> None:
        if self._aborted:
            return
        self._aborted = True
        self._reason = reason
        listeners, self._listeners = self._listeners, []
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("Abort listener raised")


class AbortController:
    """
    Owner side of an AbortSignal.

    Example:
        >>> controller = AbortController()
        >>> task = asyncio.create_task(sleep(10, controller.signal))
        >>> controller.abort("player closed")
    """

    def __init__(self) -> None:
        self._signal = AbortSignal()

    @property
    def signal(self) -> AbortSignal:
        return self._signal

    def abort(self, reason: Any = None) -> None:
        """Abort the signal. Calls after the first are no-ops."""
        if not self._signal.aborted:
            logger.debug(f"Aborting signal (reason={reason!r})")
        self._signal._abort(reason)


__all__ = ["AbortController", "AbortListener", "AbortSignal"]
