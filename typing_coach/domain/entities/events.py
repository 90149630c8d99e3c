"""Event entities for typing sessions and the curriculum."""

from dataclasses import dataclass
from typing import Optional

from .session_summary import SessionSummary
from .star_rating import StarRatingPolicy
from .typing_session import SessionEndReason


class SessionEvent:
    """Base class for events dispatched to the session state machine."""

    pass


@dataclass
class StartSessionEvent(SessionEvent):
    """Event to start a session on a lesson text."""

    lesson_id: str
    text: str
    timestamp: int
    star_policy: Optional[StarRatingPolicy] = None


@dataclass
class RecordKeystrokeEvent(SessionEvent):
    """Event carrying one key press."""

    key: str
    timestamp: int


@dataclass
class TickEvent(SessionEvent):
    """Event to advance the session clock."""

    timestamp: int


@dataclass
class EndSessionEvent(SessionEvent):
    """Event to close the running session."""

    reason: SessionEndReason = SessionEndReason.COMPLETED
    timestamp: Optional[int] = None


@dataclass
class ResetSessionEvent(SessionEvent):
    """Event to discard the running session without a summary."""

    pass


@dataclass
class SessionEnded:
    """Notification sent to listeners when a session closes with a summary."""

    session_id: str
    lesson_id: str
    reason: SessionEndReason
    summary: SessionSummary


class CurriculumAction:
    """Base class for curriculum reducer actions."""

    pass


@dataclass
class SelectTrack(CurriculumAction):
    """Select a track and jump to its first lesson."""

    track_id: str


@dataclass
class SelectLesson(CurriculumAction):
    """Select a lesson."""

    lesson_id: str


@dataclass
class CompleteLesson(CurriculumAction):
    """Record a finished lesson and refresh the recommendations."""

    lesson_id: str
    summary: SessionSummary
