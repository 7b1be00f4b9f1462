# Copyright 2026 Seth Bang
# SPDX-License-Identifier: Apache-2.0
"""
Configuration for the minimum interleave rate tracker.

This module provides the validated, immutable parameter set for a tracker.
Values are checked by pydantic and any failure is surfaced as
ConfigurationError so callers only need to handle the library's own
exception hierarchy.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .exceptions import ConfigurationError

DEFAULT_WINDOW_SIZE_MS = 1000
"""Window over which the rate is evaluated when none is configured, in ms."""

PADDING_CHUNK_WIDTH = 4
"""Width of each independently random padding chunk, in bytes."""

MAX_CHUNK_WIDTH = 8


class InterleaveRateConfig(BaseModel):
    """
    Parameters of a minimum interleave rate tracker.

    Immutable once built. Use ``InterleaveRateConfig.create()`` (or the
    tracker constructor) to get ConfigurationError instead of pydantic's
    ValidationError on bad input.
    """

    model_config = ConfigDict(frozen=True)

    minimum_rate: float = Field(gt=0)
    """Floor rate to maintain, in bytes per second."""

    window_size_ms: float = Field(gt=0)
    """Trailing window over which the rate is measured, in milliseconds."""

    chunk_width: int = Field(default=PADDING_CHUNK_WIDTH, ge=1, le=MAX_CHUNK_WIDTH)
    """Padding is generated in random chunks of this many bytes."""

    @classmethod
    def create(cls, **kwargs: Any) -> InterleaveRateConfig:
        """Build a config, raising ConfigurationError on invalid values."""
        try:
            return cls(**kwargs)
        except ValidationError as e:
            details = "; ".join(
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}"
                for err in e.errors()
            )
            raise ConfigurationError(
                f"Invalid interleave rate configuration: {details}"
            ) from e

    @classmethod
    def from_optional(
        cls,
        minimum_rate: float | None,
        window_size_ms: float | None = None,
    ) -> InterleaveRateConfig | None:
        """
        Build a config from optional server settings.

        A missing or zero minimum rate means the floor is disabled, in which
        case no tracker should be created and None is returned.
        """
        if not minimum_rate:
            return None
        return cls.create(
            minimum_rate=minimum_rate,
            window_size_ms=(
                DEFAULT_WINDOW_SIZE_MS if window_size_ms is None else window_size_ms
            ),
        )

    @property
    def minimum_size(self) -> float:
        """Bytes that must be seen within one window."""
        return self.minimum_rate * self.window_size_ms / 1000

    @property
    def poll_interval_ms(self) -> float:
        """Polling cadence: half the window."""
        return self.window_size_ms / 2


__all__ = [
    "DEFAULT_WINDOW_SIZE_MS",
    "MAX_CHUNK_WIDTH",
    "PADDING_CHUNK_WIDTH",
    "InterleaveRateConfig",
]
