"""Tests for analytics aggregation."""

import pytest

from typing_coach.domain.entities import SessionSummary, TypingSessionRecord
from typing_coach.domain.services import AnalyticsAggregator, aggregate, sessions_in_window
from typing_coach.domain.services.analytics import MS_PER_DAY
from typing_coach.infrastructure.in_memory_key_value_store import InMemoryKeyValueStore
from typing_coach.infrastructure.key_value_session_repository import KeyValueSessionRepository

NOW = 1_700_000_000_000


class FixedClock:
    def now_ms(self) -> int:
        return NOW


def record(record_id, lesson_id, wpm, accuracy, stars, days_ago=0, duration_ms=60_000):
    return TypingSessionRecord(
        id=record_id,
        lesson_id=lesson_id,
        lesson_title=f"Lesson {lesson_id}",
        summary=SessionSummary(
            duration_ms=duration_ms,
            wpm=wpm,
            cpm=wpm * 5,
            accuracy=accuracy,
            error_rate=round(1 - accuracy / 100, 4),
            star_rating=stars,
        ),
        timestamp=NOW - days_ago * MS_PER_DAY,
    )


@pytest.fixture
def history():
    """Three sessions, most recent first."""
    return [
        record("r3", "tj-002", wpm=20, accuracy=95, stars=4),
        record("r2", "tj-001", wpm=15, accuracy=90, stars=3, days_ago=3),
        record("r1", "tj-001", wpm=10, accuracy=85, stars=2, days_ago=10),
    ]


def test_empty_history_has_no_snapshot():
    assert aggregate([], now_ms=NOW) is None


def test_global_aggregates(history):
    snapshot = aggregate(history, now_ms=NOW)

    assert snapshot.total_sessions == 3
    assert snapshot.total_duration_ms == 180_000
    assert snapshot.average_wpm == 15
    assert snapshot.average_accuracy == 90
    assert snapshot.best_wpm == 20
    assert snapshot.best_accuracy == 95
    assert snapshot.star_counts == {0: 0, 1: 0, 2: 1, 3: 1, 4: 1, 5: 0}


def test_averages_round_half_up():
    snapshot = aggregate(
        [record("a", "tj-001", wpm=10, accuracy=90, stars=3), record("b", "tj-001", wpm=11, accuracy=91, stars=3)],
        now_ms=NOW,
    )

    assert snapshot.average_wpm == 11
    assert snapshot.average_accuracy == 91


def test_rolling_window(history):
    snapshot = aggregate(history, now_ms=NOW, window_days=7)

    assert [item.id for item in snapshot.sessions_in_window] == ["r3", "r2"]
    assert snapshot.window_days == 7


def test_sessions_in_window_boundary(history):
    assert [item.id for item in sessions_in_window(history, days=10, now_ms=NOW)] == ["r3", "r2", "r1"]
    assert sessions_in_window(history, days=0, now_ms=NOW)[0].id == "r3"


def test_recent_sessions_are_limited(history):
    snapshot = aggregate(history, now_ms=NOW, recent_limit=2)

    assert [item.id for item in snapshot.recent_sessions] == ["r3", "r2"]


def test_lesson_summary_sorted_by_attempts(history):
    snapshot = aggregate(history, now_ms=NOW)

    first, second = snapshot.lesson_summary
    assert first.lesson_id == "tj-001"
    assert first.attempts == 2
    assert first.average_wpm == 13
    assert first.average_accuracy == 88
    assert first.best_stars == 3
    assert second.lesson_id == "tj-002"
    assert second.attempts == 1


def test_lesson_summary_ties_keep_most_recent_first():
    snapshot = aggregate(
        [record("b", "tj-002", 10, 90, 3), record("a", "tj-001", 10, 90, 3)],
        now_ms=NOW,
    )

    assert [item.lesson_id for item in snapshot.lesson_summary] == ["tj-002", "tj-001"]


class TestAnalyticsAggregator:
    """Tests for AnalyticsAggregator."""

    @pytest.fixture
    def repository(self):
        return KeyValueSessionRepository(InMemoryKeyValueStore(), clock=FixedClock())

    def test_no_data_yet(self, repository):
        assert AnalyticsAggregator(repository, FixedClock()).snapshot() is None

    def test_snapshot_reads_the_repository(self, repository, history):
        repository.replace_all(history)

        snapshot = AnalyticsAggregator(repository, FixedClock(), recent_limit=1, window_days=5).snapshot()

        assert snapshot.total_sessions == 3
        assert len(snapshot.recent_sessions) == 1
        assert len(snapshot.sessions_in_window) == 2
