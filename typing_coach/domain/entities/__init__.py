"""Domain entities for the typing coach application."""

from .analytics import AnalyticsSnapshot, LessonAggregate
from .curriculum import (
    CurriculumState,
    Lesson,
    LessonDifficulty,
    LessonProgress,
    LessonTrack,
)
from .events import (
    CompleteLesson,
    CurriculumAction,
    EndSessionEvent,
    RecordKeystrokeEvent,
    ResetSessionEvent,
    SelectLesson,
    SelectTrack,
    SessionEnded,
    SessionEvent,
    StartSessionEvent,
    TickEvent,
)
from .lesson_content import (
    ChallengeModule,
    DrillModule,
    ExerciseModule,
    LessonContent,
    QuizModule,
)
from .session_record import TypingSessionRecord
from .session_summary import FingerUsageStat, HesitationStat, KeyStat, SessionSummary
from .star_rating import DEFAULT_STAR_BANDS, StarBand, StarRatingPolicy
from .typing_event import KeyAction, TypingEvent
from .typing_session import (
    ActiveSession,
    KeystrokeResult,
    SessionEndReason,
    SessionStatus,
    TypingRules,
)

__all__ = [
    # Session entities
    "ActiveSession",
    "KeystrokeResult",
    "SessionEndReason",
    "SessionStatus",
    "TypingRules",
    # Keystroke entities
    "KeyAction",
    "TypingEvent",
    # Summary entities
    "SessionSummary",
    "HesitationStat",
    "FingerUsageStat",
    "KeyStat",
    "TypingSessionRecord",
    # Star rating configuration
    "StarBand",
    "StarRatingPolicy",
    "DEFAULT_STAR_BANDS",
    # Curriculum entities
    "Lesson",
    "LessonDifficulty",
    "LessonTrack",
    "LessonProgress",
    "CurriculumState",
    "LessonContent",
    "DrillModule",
    "ExerciseModule",
    "ChallengeModule",
    "QuizModule",
    # Analytics entities
    "AnalyticsSnapshot",
    "LessonAggregate",
    # Event entities
    "SessionEvent",
    "StartSessionEvent",
    "RecordKeystrokeEvent",
    "TickEvent",
    "EndSessionEvent",
    "ResetSessionEvent",
    "SessionEnded",
    "CurriculumAction",
    "SelectTrack",
    "SelectLesson",
    "CompleteLesson",
]
