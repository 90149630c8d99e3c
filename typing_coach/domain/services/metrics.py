"""Speed, accuracy and star rating calculations.

Everything in this module is a pure function of its arguments.
"""

import math
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from ..entities.star_rating import StarRatingPolicy

MS_PER_MINUTE = 60_000
CHARACTERS_PER_WORD = 5
MIN_ELAPSED_MS = 1

DEFAULT_STAR_POLICY = StarRatingPolicy()


class SessionMetrics(BaseModel):
    """Core metrics derived from counts and elapsed time."""

    model_config = ConfigDict(frozen=True)

    wpm: int = Field(ge=0)
    cpm: int = Field(ge=0)
    accuracy: int = Field(ge=0, le=100)
    error_rate: float = Field(ge=0.0, le=1.0)
    star_rating: int = Field(ge=0, le=5)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positive values."""
    return int(math.floor(value + 0.5))


def _minutes(elapsed_ms: int) -> float:
    return max(elapsed_ms, MIN_ELAPSED_MS) / MS_PER_MINUTE


def _check_non_negative(**values: int) -> None:
    for name, value in values.items():
        if value < 0:
            raise ValueError(f"{name} must be non-negative, got {value}")


def words_per_minute(correct_count: int, elapsed_ms: int) -> int:
    """Correct characters divided by five, per minute."""
    _check_non_negative(correct_count=correct_count, elapsed_ms=elapsed_ms)
    return round_half_up((correct_count / CHARACTERS_PER_WORD) / _minutes(elapsed_ms))


def characters_per_minute(correct_count: int, elapsed_ms: int) -> int:
    _check_non_negative(correct_count=correct_count, elapsed_ms=elapsed_ms)
    return round_half_up(correct_count / _minutes(elapsed_ms))


def accuracy_percent(correct_count: int, error_count: int) -> int:
    """Share of correct keystrokes as a whole percentage.

    A session without keystrokes has an accuracy of 0.
    """
    _check_non_negative(correct_count=correct_count, error_count=error_count)
    return round_half_up(100 * correct_count / max(1, correct_count + error_count))


def error_rate(accuracy: int) -> float:
    return round(1 - accuracy / 100, 4)


def star_rating(wpm: int, accuracy: int, policy: Optional[StarRatingPolicy] = None) -> int:
    """Stars earned for a speed and accuracy against a lesson policy.

    Returns the highest band whose accuracy and speed thresholds are both
    met, or 0 when none is. Because bands are nested the result never
    decreases when wpm or accuracy increase.
    """
    policy = policy or DEFAULT_STAR_POLICY
    for band in policy.bands:
        if accuracy >= band.min_accuracy and wpm >= band.min_speed_ratio * policy.target_wpm:
            return band.stars
    return 0


def calculate_metrics(
    correct_count: int,
    error_count: int,
    elapsed_ms: int,
    policy: Optional[StarRatingPolicy] = None,
) -> SessionMetrics:
    """Compute all core metrics for a session.

    Args:
        correct_count: Correctly typed characters.
        error_count: Mistyped characters.
        elapsed_ms: Typing time in milliseconds.
        policy: Star rating thresholds; the defaults are used when omitted.

    Returns:
        SessionMetrics: wpm, cpm, accuracy, error rate and star rating.
    """
    wpm = words_per_minute(correct_count, elapsed_ms)
    accuracy = accuracy_percent(correct_count, error_count)
    return SessionMetrics(
        wpm=wpm,
        cpm=characters_per_minute(correct_count, elapsed_ms),
        accuracy=accuracy,
        error_rate=error_rate(accuracy),
        star_rating=star_rating(wpm, accuracy, policy),
    )
