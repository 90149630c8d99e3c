"""Typing Coach Controller for handling business logic and coordination."""

import logging
import threading
from typing import Optional

from ..domain.entities import (
    AnalyticsSnapshot,
    CurriculumState,
    KeystrokeResult,
    LessonTrack,
    SelectLesson,
    SelectTrack,
    SessionEndReason,
    SessionEnded,
    SessionSummary,
    StarRatingPolicy,
    TypingSessionRecord,
)
from ..domain.interfaces.clock import Clock
from ..domain.interfaces.lesson_catalog import LessonCatalog
from ..domain.interfaces.session_repository import SessionRepository
from ..domain.services import (
    AnalyticsAggregator,
    CurriculumRecommender,
    TypingSessionMachine,
    complete_lesson,
    initial_curriculum_state,
    reduce_curriculum,
)
from ..domain.services.analytics import DEFAULT_RECENT_LIMIT, DEFAULT_WINDOW_DAYS

logger = logging.getLogger(__name__)


class TypingCoachController:
    """
    Controller for coordinating typing coach operations.

    This controller is injected with all necessary collaborators and handles
    the business logic for each endpoint, keeping the API layer thin.
    Completed sessions are stored and fed to the curriculum as soon as the
    session machine reports them.
    """

    def __init__(
        self,
        machine: TypingSessionMachine,
        session_repository: SessionRepository,
        lesson_catalog: LessonCatalog,
        clock: Clock,
        star_policy: Optional[StarRatingPolicy] = None,
        recent_limit: int = DEFAULT_RECENT_LIMIT,
        window_days: int = DEFAULT_WINDOW_DAYS,
    ):
        """
        Initialize the controller with injected dependencies.

        Args:
            machine: Session state machine owning the active session
            session_repository: Repository for completed session records
            lesson_catalog: Catalog of tracks, lessons and lesson texts
            clock: Source of timestamps when callers do not provide one
            star_policy: Base star policy; its target speed is replaced by each lesson's
            recent_limit: Number of recent sessions in analytics snapshots
            window_days: Rolling analytics window in days
        """
        self.machine = machine
        self.session_repository = session_repository
        self.lesson_catalog = lesson_catalog
        self.clock = clock
        self.star_policy = star_policy or StarRatingPolicy()
        self.analytics = AnalyticsAggregator(session_repository, clock, recent_limit, window_days)

        self._curriculum = initial_curriculum_state(lesson_catalog.list_tracks())
        self._curriculum_lock = threading.Lock()
        self.last_record: Optional[TypingSessionRecord] = None

        self.machine.add_listener(self._on_session_ended)
        logger.info("TypingCoachController initialized with collaborators")

    # ===== Sessions =====

    def start_session(self, lesson_id: str, text: Optional[str] = None, now_ms: Optional[int] = None) -> str:
        """
        Start a typing session on a lesson.

        Args:
            lesson_id: Catalog id of the lesson
            text: Text to type; the lesson's practice text when omitted
            now_ms: Start timestamp; the clock's time when omitted

        Returns:
            The new session id.

        Raises:
            InvalidLesson: If the lesson is unknown or has no practice text.
            SessionAlreadyActive: If a session is already running.
        """
        lesson = self.lesson_catalog.get_lesson(lesson_id)
        if text is None:
            text = self.lesson_catalog.get_lesson_text(lesson_id)
        policy = self.star_policy.with_target(lesson.target_wpm)
        return self.machine.start_session(lesson_id, text, self._now(now_ms), star_policy=policy)

    def record_keystroke(self, key: str, timestamp: Optional[int] = None) -> KeystrokeResult:
        """Feed a key; the last key of the text ends and stores the session like end_session."""
        return self.machine.record_keystroke(key, self._now(timestamp))

    def tick(self, timestamp: Optional[int] = None) -> None:
        self.machine.tick(self._now(timestamp))

    def end_session(self, reason: SessionEndReason, timestamp: Optional[int] = None) -> SessionSummary:
        """
        End the running session; only completed sessions are stored.

        Raises:
            NoActiveSession: If no session is running.
            Exception: Whatever the session repository raises when the
                completed session cannot be written. The session is still
                ended and its summary is in ``last_summary``.
        """
        return self.machine.end_session(reason, timestamp)

    def reset_session(self) -> None:
        self.machine.reset_session()

    @property
    def last_summary(self) -> Optional[SessionSummary]:
        """Summary of the most recently ended session."""
        return self.machine.last_summary

    def get_session_state(self) -> dict:
        state = self.machine.get_session_state()
        summary = self.last_summary
        state["last_summary"] = summary.model_dump(mode="json", by_alias=True) if summary else None
        return state

    # ===== Analytics and history =====

    def get_analytics(self) -> Optional[AnalyticsSnapshot]:
        """
        Get the analytics snapshot of the stored history.

        Returns:
            The snapshot, or None when no session has been completed yet.
        """
        return self.analytics.snapshot()

    def get_history(self) -> list[TypingSessionRecord]:
        return self.session_repository.list_records()

    def clear_history(self) -> None:
        self.session_repository.clear()

    # ===== Curriculum =====

    def list_tracks(self) -> list[LessonTrack]:
        return self.lesson_catalog.list_tracks()

    def get_recommendations(self, track_id: str, lesson_id: str, summary: SessionSummary) -> list[str]:
        """
        Recommend the next lesson(s) after a session.

        Args:
            track_id: Track the lesson belongs to
            lesson_id: Lesson that was just completed
            summary: Summary of that session

        Returns:
            Lesson ids to attempt next; empty once the course is complete.

        Raises:
            InvalidLesson: If the track or lesson is unknown.
        """
        track = self.lesson_catalog.get_track(track_id)
        recommender = CurriculumRecommender(self.lesson_catalog.list_tracks())
        return recommender.recommend(track, lesson_id, summary)

    def get_curriculum(self) -> CurriculumState:
        with self._curriculum_lock:
            return self._curriculum

    def select_track(self, track_id: str) -> CurriculumState:
        return self._apply(SelectTrack(track_id))

    def select_lesson(self, lesson_id: str) -> CurriculumState:
        return self._apply(SelectLesson(lesson_id))

    def reload_catalog(self) -> CurriculumState:
        """Pick up tracks added to the catalog after start-up, keeping progress."""
        with self._curriculum_lock:
            self._sync_tracks()
            return self._curriculum

    def get_health_status(self) -> dict:
        """
        Get application health status.

        Returns:
            Dict containing health status information
        """
        return {
            "status": "healthy",
            "session": self.machine.status.value,
            "providers": {
                "session_repository": type(self.session_repository).__name__,
                "lesson_catalog": type(self.lesson_catalog).__name__,
                "clock": type(self.clock).__name__,
            },
        }

    # ===== Helpers =====

    def _apply(self, action) -> CurriculumState:
        with self._curriculum_lock:
            self._curriculum = reduce_curriculum(self._curriculum, action)
            return self._curriculum

    def _sync_tracks(self) -> None:
        # Caller holds _curriculum_lock.
        self._curriculum = self._curriculum.model_copy(update={"tracks": tuple(self.lesson_catalog.list_tracks())})

    def _now(self, timestamp: Optional[int]) -> int:
        return self.clock.now_ms() if timestamp is None else timestamp

    def _on_session_ended(self, ended: SessionEnded) -> None:
        if ended.reason != SessionEndReason.COMPLETED:
            logger.info(f"Session {ended.session_id} was abandoned; nothing stored")
            return

        lesson = self.lesson_catalog.get_lesson(ended.lesson_id)
        track = self.lesson_catalog.find_track_for_lesson(ended.lesson_id)
        self.last_record = self.session_repository.record_session(
            lesson_id=lesson.id,
            lesson_title=lesson.title,
            summary=ended.summary,
            track_id=track.id,
            track_name=track.name,
        )

        with self._curriculum_lock:
            self._sync_tracks()
            self._curriculum = complete_lesson(self._curriculum, lesson.id, ended.summary)
            recommended = list(self._curriculum.recommended_lesson_ids)
        logger.info(f"Session {ended.session_id} stored; recommended next: {recommended or 'course complete'}")
