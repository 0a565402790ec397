"""Sentiment bands attached to scores.

Living in the domain layer lets the score model, the loaders and the CLI
share a single vocabulary without importing adapters.
"""

from __future__ import annotations

from enum import Enum


class Sentiment(str, Enum):
    """Sentiment band a score value belongs to."""

    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    POSITIVE = "positive"

    @classmethod
    def for_builtin_value(cls, value: float) -> "Sentiment":
        """Canonical banding used by the built-in score scale (0-10)."""

        if value <= 3:
            return cls.NEGATIVE
        if value <= 7:
            return cls.NEUTRAL
        return cls.POSITIVE
