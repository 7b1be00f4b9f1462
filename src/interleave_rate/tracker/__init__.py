# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Minimum interleave rate tracking.

Classes:
    MinimumInterleaveRate: Tracks bytes written to an interleave and emits
        padding when the rate over the trailing window drops below a floor.
    SampleHistory: Time-ordered rolling history of deliveries.
    Sample: A single (time, size) delivery record.

Functions:
    padding_length: Round a deficit up to the padding chunk width.
    generate_padding: Produce non-compressible random padding.
"""

from .history import Sample, SampleHistory
from .padding import generate_padding, padding_length
from .rate import MinimumInterleaveRate

__all__ = [
    "MinimumInterleaveRate",
    "Sample",
    "SampleHistory",
    "generate_padding",
    "padding_length",
]
