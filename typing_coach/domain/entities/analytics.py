"""Analytics snapshot entities."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .session_record import TypingSessionRecord


class LessonAggregate(BaseModel):
    """Aggregated results for every attempt of one lesson."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    lesson_id: str
    lesson_title: str
    attempts: int = Field(ge=1)
    average_wpm: int = Field(ge=0)
    average_accuracy: int = Field(ge=0, le=100)
    best_stars: int = Field(ge=0, le=5)


class AnalyticsSnapshot(BaseModel):
    """Rolling statistics over the stored session history.

    A snapshot always describes at least one session; an empty history is
    reported as ``None`` rather than a zero-filled snapshot.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    total_sessions: int = Field(ge=1)
    total_duration_ms: int = Field(ge=0)
    average_wpm: int = Field(ge=0)
    average_accuracy: int = Field(ge=0, le=100)
    best_wpm: int = Field(ge=0)
    best_accuracy: int = Field(ge=0, le=100)
    star_counts: dict[int, int]
    recent_sessions: list[TypingSessionRecord]
    window_days: int = Field(ge=0)
    sessions_in_window: list[TypingSessionRecord]
    lesson_summary: list[LessonAggregate]
