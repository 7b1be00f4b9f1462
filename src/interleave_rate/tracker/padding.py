# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Padding generation for the interleave rate tracker.

Padding must not be compressible, otherwise a compressing hop between the
server and the client would shrink it and the floor rate would not be met
on the wire. Each chunk is therefore an independent uniform random draw.
"""

from __future__ import annotations

import math
import random

from ..config import PADDING_CHUNK_WIDTH

_default_rng = random.Random()


def padding_length(deficit: float, chunk_width: int = PADDING_CHUNK_WIDTH) -> int:
    """
    Smallest multiple of ``chunk_width`` that is >= ``deficit``.

    Returns 0 when there is no deficit.

    Example:
        >>> padding_length(1500)
        1500
        >>> padding_length(1501)
        1504
    """
    if deficit <= 0:
        return 0
    return math.ceil(deficit / chunk_width) * chunk_width


def generate_padding(
    length: int,
    chunk_width: int = PADDING_CHUNK_WIDTH,
    rng: random.Random | None = None,
) -> bytes:
    """
    Generate ``length`` bytes of random padding.

    Args:
        length: Buffer length; must be a non-negative multiple of chunk_width
        chunk_width: Bytes per independently drawn chunk
        rng: Random source (defaults to the module-level generator)

    Raises:
        ValueError: If length is negative or not a multiple of chunk_width
    """
    if length < 0 or length % chunk_width:
        raise ValueError(
            f"Padding length {length} is not a non-negative multiple of {chunk_width}"
        )

    rng = rng or _default_rng
    bits = 8 * chunk_width
    return b"".join(
        rng.getrandbits(bits).to_bytes(chunk_width, "little")
        for _ in range(length // chunk_width)
    )


__all__ = ["generate_padding", "padding_length"]
