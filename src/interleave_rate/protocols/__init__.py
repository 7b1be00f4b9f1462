# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Protocol definitions for the collaborators of this library.

Available protocols:
- PaddingWriterProtocol: Interface for transports that accept padding
- EventSourceProtocol: Interface for objects that emit named events

Supporting types:
- PaddingSink: Callable form of a padding sink
- EventEmitter: Minimal synchronous EventSourceProtocol implementation
"""

from .events import EventEmitter, EventHandler, EventSourceProtocol
from .padding import PaddingSink, PaddingWriterProtocol

__all__ = [
    "EventEmitter",
    "EventHandler",
    "EventSourceProtocol",
    "PaddingSink",
    "PaddingWriterProtocol",
]
