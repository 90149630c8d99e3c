"""Typing session state machine."""

import logging
import threading
import uuid
from typing import Callable, Optional

from ..entities.events import (
    EndSessionEvent,
    RecordKeystrokeEvent,
    ResetSessionEvent,
    SessionEnded,
    SessionEvent,
    StartSessionEvent,
    TickEvent,
)
from ..entities.session_summary import SessionSummary
from ..entities.star_rating import StarRatingPolicy
from ..entities.typing_event import TypingEvent
from ..entities.typing_session import (
    ActiveSession,
    KeystrokeResult,
    SessionEndReason,
    SessionStatus,
    TypingRules,
)
from ..exceptions import NoActiveSession, SessionAlreadyActive
from ..interfaces.clock import IdGenerator
from .input_matcher import InputMatcher
from .keystroke_analysis import (
    DEFAULT_BURST_WINDOW,
    DEFAULT_HESITATION_THRESHOLD_MS,
    analyze_keystrokes,
)
from .metrics import calculate_metrics

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionEnded], None]


def _uuid4_id() -> str:
    return str(uuid.uuid4())


class TypingSessionMachine:
    """
    Owns the single active typing session of a learner.

    States: idle -> running -> (completed | abandoned) -> idle.

    Every operation is turned into a session event and dispatched under one
    re-entrant lock, so timer ticks and keystrokes coming from different
    threads are applied one at a time.
    """

    def __init__(
        self,
        rules: Optional[TypingRules] = None,
        id_generator: Optional[IdGenerator] = None,
        star_policy: Optional[StarRatingPolicy] = None,
        hesitation_threshold_ms: int = DEFAULT_HESITATION_THRESHOLD_MS,
        burst_window: int = DEFAULT_BURST_WINDOW,
    ):
        self.rules = rules or TypingRules()
        self.status = SessionStatus.IDLE
        self.session: Optional[ActiveSession] = None
        self.last_outcome: Optional[SessionStatus] = None
        self.last_summary: Optional[SessionSummary] = None

        self._id_generator = id_generator or _uuid4_id
        self._default_policy = star_policy or StarRatingPolicy()
        self._session_policy = self._default_policy
        self._hesitation_threshold_ms = hesitation_threshold_ms
        self._burst_window = burst_window
        self._matcher = InputMatcher(self.rules)
        self._listeners: list[SessionListener] = []
        self._lock = threading.RLock()

    # ===== Public API =====

    def start_session(
        self,
        lesson_id: str,
        text: str,
        now: int,
        star_policy: Optional[StarRatingPolicy] = None,
    ) -> str:
        """
        Start a session on a target text.

        Args:
            lesson_id: Lesson the text belongs to
            text: Text the learner has to type
            now: Millisecond timestamp of the start
            star_policy: Lesson-specific star thresholds

        Returns:
            The new session id.

        Raises:
            SessionAlreadyActive: If a session is already running.
            ValueError: If the text is empty.
        """
        return self.dispatch(StartSessionEvent(lesson_id, text, now, star_policy))

    def record_keystroke(self, key: str, timestamp: int) -> KeystrokeResult:
        """Feed a key press; finishing the text ends the session as completed."""
        return self.dispatch(RecordKeystrokeEvent(key, timestamp))

    def tick(self, now: int) -> None:
        """Advance the elapsed time of the running session."""
        self.dispatch(TickEvent(now))

    def end_session(self, reason: SessionEndReason, now: Optional[int] = None) -> SessionSummary:
        """Close the running session and return its summary."""
        return self.dispatch(EndSessionEvent(reason, now))

    def reset_session(self) -> None:
        """Discard the running session without producing a summary."""
        self.dispatch(ResetSessionEvent())

    def add_listener(self, listener: SessionListener) -> None:
        """Register a callback notified whenever a session ends with a summary.

        Every listener is called even when an earlier one fails. The first
        failure is re-raised to the caller once the machine is back to Idle.
        """
        self._listeners.append(listener)

    @property
    def is_running(self) -> bool:
        return self.status == SessionStatus.RUNNING

    @property
    def events(self) -> list[TypingEvent]:
        """Event log of the running session."""
        with self._lock:
            return list(self._matcher.events)

    def get_session_state(self) -> dict:
        """Get the current session state as a dictionary."""
        with self._lock:
            state = {
                "status": self.status.value,
                "last_outcome": self.last_outcome.value if self.last_outcome else None,
                "session": None,
            }
            if self.session is not None:
                state["session"] = self.session.model_dump(by_alias=True)
            return state

    # ===== Event dispatch =====

    def dispatch(self, event: SessionEvent):
        """Apply one event to the machine and return the handler's result."""
        with self._lock:
            if isinstance(event, StartSessionEvent):
                return self._handle_start(event)
            elif isinstance(event, RecordKeystrokeEvent):
                return self._handle_keystroke(event)
            elif isinstance(event, TickEvent):
                return self._handle_tick(event)
            elif isinstance(event, EndSessionEvent):
                return self._handle_end(event)
            elif isinstance(event, ResetSessionEvent):
                return self._handle_reset()
            raise TypeError(f"Unknown session event type: {type(event).__name__}")

    # ===== Event Handlers =====

    def _handle_start(self, event: StartSessionEvent) -> str:
        if self.is_running:
            raise SessionAlreadyActive(self.session.session_id)
        if not event.text:
            raise ValueError("Cannot start a session on an empty text")

        session_id = self._id_generator()
        self.session = ActiveSession(
            session_id=session_id,
            lesson_id=event.lesson_id,
            target_text=event.text,
            started_at=event.timestamp,
        )
        self._session_policy = event.star_policy or self._default_policy
        self._matcher.attach(self.session)
        self.status = SessionStatus.RUNNING

        logger.info(
            f"Started session {session_id} for lesson {event.lesson_id} "
            f"({len(event.text)} characters)"
        )
        return session_id

    def _handle_keystroke(self, event: RecordKeystrokeEvent) -> KeystrokeResult:
        session = self._require_running("keystroke")
        result = self._matcher.feed(event.key, event.timestamp)
        self._advance_clock(session, event.timestamp)

        if result.completed:
            logger.info(f"Session {session.session_id} reached the end of the text")
            self._handle_end(EndSessionEvent(SessionEndReason.COMPLETED))
        return result

    def _handle_tick(self, event: TickEvent) -> None:
        session = self._require_running("tick")
        self._advance_clock(session, event.timestamp)

    def _handle_end(self, event: EndSessionEvent) -> SessionSummary:
        session = self._require_running("end session")
        if event.timestamp is not None:
            self._advance_clock(session, event.timestamp)

        events = self._matcher.detach()
        summary = self._summarize(session, events)

        session.is_running = False
        self.session = None
        self.status = SessionStatus.IDLE
        self.last_outcome = (
            SessionStatus.COMPLETED if event.reason == SessionEndReason.COMPLETED else SessionStatus.ABANDONED
        )
        self.last_summary = summary

        logger.info(
            f"Session {session.session_id} ended ({event.reason.value}): "
            f"{summary.wpm} wpm, {summary.accuracy}% accuracy, {summary.star_rating} stars"
        )
        self._notify(SessionEnded(session.session_id, session.lesson_id, event.reason, summary))
        return summary

    def _handle_reset(self) -> None:
        if self.session is not None:
            logger.info(f"Discarding session {self.session.session_id} without a summary")
            self.session.is_running = False
        self._matcher.detach()
        self.session = None
        if self.status == SessionStatus.RUNNING:
            self.last_outcome = SessionStatus.ABANDONED
        self.status = SessionStatus.IDLE

    # ===== Helpers =====

    def _advance_clock(self, session: ActiveSession, now: int) -> None:
        # Out-of-order timestamps never move the clock backwards.
        session.elapsed_ms = max(session.elapsed_ms, now - session.started_at)

    def _summarize(self, session: ActiveSession, events: list[TypingEvent]) -> SessionSummary:
        metrics = calculate_metrics(
            session.correct_count,
            session.error_count,
            session.elapsed_ms,
            self._session_policy,
        )
        analysis = analyze_keystrokes(
            events,
            session.target_text,
            hesitation_threshold_ms=self._hesitation_threshold_ms,
            burst_window=self._burst_window,
        )
        return SessionSummary(
            duration_ms=session.elapsed_ms,
            wpm=metrics.wpm,
            cpm=metrics.cpm,
            accuracy=metrics.accuracy,
            error_rate=metrics.error_rate,
            star_rating=metrics.star_rating,
            streak=analysis.streak,
            burst_speed=analysis.burst_speed,
            hesitation_stats=analysis.hesitation_stats,
            finger_usage=analysis.finger_usage,
            heatmap=analysis.heatmap,
        )

    def _notify(self, ended: SessionEnded) -> None:
        failure: Optional[Exception] = None
        for listener in self._listeners:
            try:
                listener(ended)
            except Exception as e:
                logger.error(f"Session listener failed for session {ended.session_id}: {e}", exc_info=True)
                if failure is None:
                    failure = e
        if failure is not None:
            raise failure

    def _require_running(self, operation: str) -> ActiveSession:
        if not self.is_running or self.session is None:
            raise NoActiveSession(operation)
        return self.session
