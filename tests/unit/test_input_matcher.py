"""Tests for InputMatcher."""

import pytest

from typing_coach.domain.entities import ActiveSession, TypingRules
from typing_coach.domain.exceptions import NoActiveSession
from typing_coach.domain.services.input_matcher import BACKSPACE, InputMatcher, normalize_key


def make_session(text: str = "cat", started_at: int = 0) -> ActiveSession:
    return ActiveSession(session_id="session-1", lesson_id="tj-001", target_text=text, started_at=started_at)


@pytest.fixture
def session():
    return make_session()


@pytest.fixture
def matcher(session):
    matcher = InputMatcher()
    matcher.attach(session)
    return matcher


def assert_counts_consistent(session: ActiveSession):
    assert session.correct_count + session.error_count == session.characters_typed
    assert 0 <= session.cursor_index <= len(session.target_text)


class TestNormalizeKey:
    """Tests for key name normalization."""

    def test_single_characters_are_kept(self):
        assert normalize_key("a") == "a"
        assert normalize_key("A") == "A"
        assert normalize_key(" ") == " "

    def test_named_keys_map_to_characters(self):
        assert normalize_key("Enter") == "\n"
        assert normalize_key("Tab") == "\t"
        assert normalize_key("Space") == " "

    def test_backspace_names(self):
        assert normalize_key("Backspace") == BACKSPACE
        assert normalize_key("\b") == BACKSPACE

    def test_modifier_keys_are_ignored(self):
        assert normalize_key("Shift") is None
        assert normalize_key("ArrowLeft") is None


class TestMatching:
    """Tests for matching keys against the target text."""

    def test_correct_keys_advance_the_cursor(self, matcher, session):
        result = matcher.feed("c", 1000)

        assert result.is_correct is True
        assert result.cursor_index == 1
        assert result.completed is False
        assert session.correct_count == 1
        assert session.error_count == 0

    def test_wrong_key_counts_an_error_and_holds_the_cursor(self, matcher, session):
        matcher.feed("c", 1000)
        result = matcher.feed("x", 2000)

        assert result.is_correct is False
        assert result.cursor_index == 1
        assert session.error_count == 1
        assert_counts_consistent(session)

    def test_repeated_wrong_keys_each_count_without_block_on_error(self, matcher, session):
        matcher.feed("x", 1000)
        matcher.feed("y", 1100)

        assert session.error_count == 2
        assert session.cursor_index == 0

    def test_typing_the_whole_text_completes(self, matcher, session):
        matcher.feed("c", 1000)
        matcher.feed("a", 2000)
        result = matcher.feed("t", 3000)

        assert result.completed is True
        assert session.is_finished
        assert session.correct_count == 3

    def test_mistake_then_correct_text(self, matcher, session):
        for timestamp, key in enumerate("cxat", start=1):
            matcher.feed(key, timestamp * 1000)

        assert session.correct_count == 3
        assert session.error_count == 1
        assert session.characters_typed == 4
        assert session.is_finished

    def test_ignored_keys_change_nothing(self, matcher, session):
        result = matcher.feed("Shift", 500)

        assert result.is_correct is None
        assert session.characters_typed == 0
        assert matcher.events == []

    def test_named_keys_are_matched(self):
        session = make_session("a\tb\n")
        matcher = InputMatcher()
        matcher.attach(session)

        for key in ("a", "Tab", "b", "Enter"):
            matcher.feed(key, 100)

        assert session.correct_count == 4
        assert session.is_finished

    def test_keys_after_the_end_are_not_compared(self, matcher, session):
        for key in "cat":
            matcher.feed(key, 100)

        result = matcher.feed("s", 200)

        assert result.is_correct is None
        assert session.characters_typed == 3

    def test_feed_without_session_raises(self):
        matcher = InputMatcher()

        with pytest.raises(NoActiveSession):
            matcher.feed("a", 0)

    def test_feed_after_session_stopped_raises(self, matcher, session):
        session.is_running = False

        with pytest.raises(NoActiveSession):
            matcher.feed("c", 100)


class TestBlockOnError:
    """Tests for the block_on_error rule."""

    @pytest.fixture
    def blocking_matcher(self, session):
        matcher = InputMatcher(TypingRules(block_on_error=True))
        matcher.attach(session)
        return matcher

    def test_wrong_keys_are_swallowed_until_corrected(self, blocking_matcher, session):
        blocking_matcher.feed("x", 100)
        result = blocking_matcher.feed("y", 200)

        assert result.is_correct is False
        assert session.error_count == 1
        assert session.characters_typed == 1
        assert len(blocking_matcher.events) == 1

    def test_expected_key_releases_the_block(self, blocking_matcher, session):
        blocking_matcher.feed("x", 100)
        blocking_matcher.feed("c", 200)
        blocking_matcher.feed("z", 300)

        assert session.cursor_index == 1
        assert session.correct_count == 1
        assert session.error_count == 2

    def test_backspace_releases_the_block(self, blocking_matcher, session):
        blocking_matcher.feed("x", 100)
        blocking_matcher.feed("Backspace", 200)
        blocking_matcher.feed("y", 300)

        assert session.error_count == 1
        assert session.characters_typed == 1
        assert_counts_consistent(session)


class TestAdvanceOnError:
    """Tests for the advance_on_error rule."""

    def test_cursor_moves_past_mistakes(self, session):
        matcher = InputMatcher(TypingRules(advance_on_error=True))
        matcher.attach(session)

        matcher.feed("x", 100)
        matcher.feed("a", 200)
        result = matcher.feed("t", 300)

        assert result.completed is True
        assert session.correct_count == 2
        assert session.error_count == 1

    def test_block_on_error_takes_precedence(self, session):
        matcher = InputMatcher(TypingRules(advance_on_error=True, block_on_error=True))
        matcher.attach(session)

        matcher.feed("x", 100)

        assert session.cursor_index == 0


class TestBackspace:
    """Tests for backspace handling."""

    def test_backspace_reverses_a_correct_key(self, matcher, session):
        matcher.feed("c", 100)
        result = matcher.feed("Backspace", 200)

        assert result.is_correct is None
        assert result.cursor_index == 0
        assert session.correct_count == 0
        assert session.characters_typed == 0

    def test_backspace_reverses_an_error_without_moving_the_cursor(self, matcher, session):
        matcher.feed("c", 100)
        matcher.feed("x", 200)
        matcher.feed("Backspace", 300)

        assert session.cursor_index == 1
        assert session.error_count == 0
        assert session.correct_count == 1
        assert_counts_consistent(session)

    def test_backspace_on_empty_input_is_a_no_op(self, matcher, session):
        result = matcher.feed("Backspace", 100)

        assert result.cursor_index == 0
        assert session.characters_typed == 0
        assert matcher.events == []

    def test_backspace_disabled(self, session):
        matcher = InputMatcher(TypingRules(allow_backspace=False))
        matcher.attach(session)
        matcher.feed("c", 100)

        matcher.feed("Backspace", 200)

        assert session.cursor_index == 1
        assert session.correct_count == 1

    def test_counts_stay_consistent_over_mixed_input(self, matcher, session):
        for key in ["c", "x", "Backspace", "a", "Backspace", "Backspace", "c", "a", "q", "t"]:
            matcher.feed(key, 100)
            assert_counts_consistent(session)


class TestEventLog:
    """Tests for the keystroke event log."""

    def test_events_record_latency_and_cursor(self):
        session = make_session(started_at=1000)
        matcher = InputMatcher()
        matcher.attach(session)

        matcher.feed("c", 1200)
        matcher.feed("x", 1500)

        first, second = matcher.events
        assert first.latency_ms == 200
        assert first.cursor_index == 0
        assert first.is_correct is True
        assert second.latency_ms == 300
        assert second.cursor_index == 1
        assert second.is_correct is False

    def test_detach_returns_and_clears_the_log(self, matcher):
        matcher.feed("c", 100)

        events = matcher.detach()

        assert len(events) == 1
        assert matcher.events == []
        assert matcher.session is None
