"""Aggregation of stored session records into analytics snapshots."""

import logging
from typing import Optional, Sequence

from ..entities.analytics import AnalyticsSnapshot, LessonAggregate
from ..entities.session_record import TypingSessionRecord
from ..interfaces.clock import Clock
from ..interfaces.session_repository import SessionRepository
from .metrics import round_half_up

logger = logging.getLogger(__name__)

MS_PER_DAY = 86_400_000
DEFAULT_RECENT_LIMIT = 8
DEFAULT_WINDOW_DAYS = 7


def sessions_in_window(
    records: Sequence[TypingSessionRecord],
    days: int,
    now_ms: int,
) -> list[TypingSessionRecord]:
    """Records stored within the last ``days`` days, order preserved."""
    since = now_ms - days * MS_PER_DAY
    return [record for record in records if record.timestamp >= since]


def aggregate(
    records: Sequence[TypingSessionRecord],
    now_ms: int,
    recent_limit: int = DEFAULT_RECENT_LIMIT,
    window_days: int = DEFAULT_WINDOW_DAYS,
) -> Optional[AnalyticsSnapshot]:
    """Summarize a session history.

    Args:
        records: Records ordered most recent first.
        now_ms: Reference time for the rolling window.
        recent_limit: Number of records kept in ``recent_sessions``.
        window_days: Size of the rolling window in days.

    Returns:
        The snapshot, or None when there are no records. Callers must treat
        None as "no data yet" rather than as zero performance.
    """
    if not records:
        return None

    total_wpm = 0
    total_accuracy = 0
    total_duration = 0
    best_wpm = 0
    best_accuracy = 0
    star_counts = {stars: 0 for stars in range(6)}
    # Insertion order keeps ties in first-seen (most recent) order after sorting
    lessons: dict[str, dict] = {}

    for record in records:
        summary = record.summary
        total_wpm += summary.wpm
        total_accuracy += summary.accuracy
        total_duration += summary.duration_ms
        best_wpm = max(best_wpm, summary.wpm)
        best_accuracy = max(best_accuracy, summary.accuracy)
        star_counts[min(5, max(0, summary.star_rating))] += 1

        lesson = lessons.setdefault(
            record.lesson_id,
            {"title": record.lesson_title, "attempts": 0, "wpm": 0, "accuracy": 0, "best_stars": 0},
        )
        lesson["attempts"] += 1
        lesson["wpm"] += summary.wpm
        lesson["accuracy"] += summary.accuracy
        lesson["best_stars"] = max(lesson["best_stars"], summary.star_rating)

    total_sessions = len(records)
    lesson_summary = [
        LessonAggregate(
            lesson_id=lesson_id,
            lesson_title=value["title"],
            attempts=value["attempts"],
            average_wpm=round_half_up(value["wpm"] / value["attempts"]),
            average_accuracy=round_half_up(value["accuracy"] / value["attempts"]),
            best_stars=value["best_stars"],
        )
        for lesson_id, value in lessons.items()
    ]
    lesson_summary.sort(key=lambda item: item.attempts, reverse=True)

    return AnalyticsSnapshot(
        total_sessions=total_sessions,
        total_duration_ms=total_duration,
        average_wpm=round_half_up(total_wpm / total_sessions),
        average_accuracy=round_half_up(total_accuracy / total_sessions),
        best_wpm=best_wpm,
        best_accuracy=best_accuracy,
        star_counts=star_counts,
        recent_sessions=list(records[:recent_limit]),
        window_days=window_days,
        sessions_in_window=sessions_in_window(records, window_days, now_ms),
        lesson_summary=lesson_summary,
    )


class AnalyticsAggregator:
    """Computes analytics snapshots from a session repository on demand."""

    def __init__(
        self,
        repository: SessionRepository,
        clock: Clock,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ):
        self.repository = repository
        self.clock = clock
        self.recent_limit = recent_limit
        self.window_days = window_days

    def snapshot(self) -> Optional[AnalyticsSnapshot]:
        records = self.repository.list_records()
        if not records:
            logger.debug("No session records yet; analytics unavailable")
        return aggregate(records, self.clock.now_ms(), self.recent_limit, self.window_days)
