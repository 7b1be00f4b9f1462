# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""Protocol for the sink that receives padding from a rate tracker."""

from collections.abc import Callable
from typing import Protocol, runtime_checkable

PaddingSink = Callable[[bytes], None]
"""Plain-callable form of a padding sink."""


@runtime_checkable
class PaddingWriterProtocol(Protocol):
    """
    Protocol for transports that accept padding.

    The rate tracker calls the sink synchronously from its poll callback,
    so implementations should enqueue the buffer for writing rather than
    perform blocking I/O. The written buffer must then be reported back to
    the tracker with ``add_data()``.
    """

    def __call__(self, buffer: bytes) -> None:
        """Queue ``buffer`` for writing to the interleave."""
        ...
