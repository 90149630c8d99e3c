"""Domain exceptions for the typing coach application."""


class TypingCoachError(Exception):
    """Base class for typing coach errors."""


class NoActiveSession(TypingCoachError):
    """Raised when a keystroke, tick or end is requested while no session is running."""

    def __init__(self, operation: str = "operation"):
        super().__init__(f"Cannot perform {operation}: no typing session is running")
        self.operation = operation


class SessionAlreadyActive(TypingCoachError):
    """Raised when a session is started while another one is still running."""

    def __init__(self, session_id: str):
        super().__init__(f"Session {session_id} is already running")
        self.session_id = session_id


class InvalidLesson(TypingCoachError, ValueError):
    """Raised when a lesson or track id is not part of the catalog."""

    def __init__(self, lesson_id: str, kind: str = "Lesson"):
        super().__init__(f"{kind} with id {lesson_id} not found")
        self.lesson_id = lesson_id


class CorruptPersistedData(TypingCoachError):
    """Raised when persisted session records cannot be decoded.

    The session store always recovers from this error by treating the
    history as empty; it never reaches callers of ``list_records``.
    """

    def __init__(self, key: str, reason: str):
        super().__init__(f"Persisted data under {key!r} is corrupt: {reason}")
        self.key = key
        self.reason = reason
