"""Keystroke matching against a session's target text."""

import logging
from dataclasses import dataclass
from typing import Optional

from ..entities.typing_event import KeyAction, TypingEvent
from ..entities.typing_session import ActiveSession, KeystrokeResult, TypingRules
from ..exceptions import NoActiveSession

logger = logging.getLogger(__name__)

BACKSPACE = "\b"
BACKSPACE_KEYS = frozenset({"Backspace", BACKSPACE})
NAMED_KEYS = {
    "Enter": "\n",
    "Return": "\n",
    "Tab": "\t",
    "Space": " ",
    "Spacebar": " ",
}


def normalize_key(key: str) -> Optional[str]:
    """Map a key name to the character it types.

    Returns BACKSPACE for backspace keys and None for keys that do not type
    anything (modifiers, arrows, function keys).
    """
    if key in BACKSPACE_KEYS:
        return BACKSPACE
    if key in NAMED_KEYS:
        return NAMED_KEYS[key]
    if len(key) == 1:
        return key
    return None


@dataclass
class _Contribution:
    """What one accepted keystroke added to the session counters."""

    is_correct: bool
    advanced: bool


class InputMatcher:
    """
    Compares keystrokes against the target text of the attached session.

    The matcher owns:
    - Cursor movement and correct/error counting on the session
    - The undo stack used by backspace
    - The keystroke event log of the session

    It keeps ``correct_count + error_count == characters_typed`` after every
    keystroke, including backspaces.
    """

    def __init__(self, rules: Optional[TypingRules] = None):
        self.rules = rules or TypingRules()
        self.session: Optional[ActiveSession] = None
        self.events: list[TypingEvent] = []
        self._contributions: list[_Contribution] = []
        self._awaiting_correction = False
        self._last_keystroke_at: Optional[int] = None

    def attach(self, session: ActiveSession) -> None:
        """Start matching keystrokes for a new session."""
        self.session = session
        self.events = []
        self._contributions = []
        self._awaiting_correction = False
        self._last_keystroke_at = None

    def detach(self) -> list[TypingEvent]:
        """Stop matching and hand back the session's event log."""
        events = self.events
        self.session = None
        self.events = []
        self._contributions = []
        self._awaiting_correction = False
        self._last_keystroke_at = None
        return events

    def feed(self, key: str, timestamp_ms: int) -> KeystrokeResult:
        """
        Match one key against the character under the cursor.

        Args:
            key: Key name or character, e.g. "a", "Enter", "Backspace".
            timestamp_ms: Millisecond timestamp of the key press.

        Returns:
            KeystrokeResult with the correctness, new cursor and completion flag.

        Raises:
            NoActiveSession: If no running session is attached.
        """
        session = self._require_running()
        character = normalize_key(key)

        if character is None:
            logger.debug(f"Ignoring non-typing key {key!r} in session {session.session_id}")
            return self._result(None)

        if character == BACKSPACE:
            return self._backspace(key, timestamp_ms)

        expected = session.expected_character
        if expected is None:
            return self._result(None)

        is_correct = character == expected

        if not is_correct and self._awaiting_correction:
            logger.debug(
                f"Session {session.session_id}: blocked {key!r} while waiting for "
                f"correction at index {session.cursor_index}"
            )
            return self._result(False)

        advanced = is_correct or (self.rules.advance_on_error and not self.rules.block_on_error)
        typed_at = session.cursor_index

        session.characters_typed += 1
        if is_correct:
            session.correct_count += 1
        else:
            session.error_count += 1
        if advanced:
            session.cursor_index += 1

        self._awaiting_correction = not is_correct and self.rules.block_on_error
        self._contributions.append(_Contribution(is_correct=is_correct, advanced=advanced))
        self._record(key, timestamp_ms, is_correct, typed_at)

        return self._result(is_correct)

    def _backspace(self, key: str, timestamp_ms: int) -> KeystrokeResult:
        """Reverse the most recent accepted keystroke."""
        session = self.session
        if not self.rules.allow_backspace or not self._contributions:
            return self._result(None)

        last = self._contributions.pop()
        session.characters_typed -= 1
        if last.is_correct:
            session.correct_count -= 1
        else:
            session.error_count -= 1
        if last.advanced:
            session.cursor_index -= 1

        previous = self._contributions[-1] if self._contributions else None
        self._awaiting_correction = (
            self.rules.block_on_error
            and previous is not None
            and not previous.is_correct
            and not previous.advanced
        )
        self._record(key, timestamp_ms, None, session.cursor_index)

        return self._result(None)

    def _record(self, key: str, timestamp_ms: int, is_correct: Optional[bool], cursor_index: int) -> None:
        reference = self._last_keystroke_at if self._last_keystroke_at is not None else self.session.started_at
        self.events.append(
            TypingEvent(
                timestamp=timestamp_ms,
                key=key,
                action=KeyAction.KEYDOWN,
                is_correct=is_correct,
                latency_ms=max(0, timestamp_ms - reference),
                cursor_index=cursor_index,
            )
        )
        self._last_keystroke_at = timestamp_ms

    def _result(self, is_correct: Optional[bool]) -> KeystrokeResult:
        return KeystrokeResult(
            is_correct=is_correct,
            cursor_index=self.session.cursor_index,
            completed=self.session.is_finished,
        )

    def _require_running(self) -> ActiveSession:
        if self.session is None or not self.session.is_running:
            raise NoActiveSession("keystroke")
        return self.session
