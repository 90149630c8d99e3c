"""Domain services for the typing coach application."""

from .analytics import AnalyticsAggregator, aggregate, sessions_in_window
from .curriculum import (
    CurriculumRecommender,
    complete_lesson,
    initial_curriculum_state,
    reduce_curriculum,
    select_lesson,
    select_track,
)
from .input_matcher import InputMatcher, normalize_key
from .keystroke_analysis import KeystrokeAnalysis, analyze_keystrokes
from .metrics import SessionMetrics, calculate_metrics, star_rating
from .session_state_machine import TypingSessionMachine

__all__ = [
    "AnalyticsAggregator",
    "aggregate",
    "sessions_in_window",
    "CurriculumRecommender",
    "complete_lesson",
    "initial_curriculum_state",
    "reduce_curriculum",
    "select_lesson",
    "select_track",
    "InputMatcher",
    "normalize_key",
    "KeystrokeAnalysis",
    "analyze_keystrokes",
    "SessionMetrics",
    "calculate_metrics",
    "star_rating",
    "TypingSessionMachine",
]
