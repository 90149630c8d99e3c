"""Active typing session entities."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SessionStatus(str, Enum):
    """Session state machine states."""
    IDLE = "idle"
    RUNNING = "running"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class SessionEndReason(str, Enum):
    """Why a running session was closed."""
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class TypingRules(BaseModel):
    """Keystroke matching rules for a session.

    ``block_on_error`` holds the cursor on a mistyped character and swallows
    further wrong keys until the error is corrected. ``advance_on_error``
    moves past a mistyped character instead; it has no effect while
    ``block_on_error`` is set.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    allow_backspace: bool = True
    block_on_error: bool = False
    advance_on_error: bool = False


class ActiveSession(BaseModel):
    """The one session a learner is currently typing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    session_id: str
    lesson_id: str
    target_text: str = Field(min_length=1)
    cursor_index: int = Field(default=0, ge=0)
    correct_count: int = Field(default=0, ge=0)
    error_count: int = Field(default=0, ge=0)
    characters_typed: int = Field(default=0, ge=0)
    started_at: int = Field(ge=0, description="Milliseconds timestamp when typing started")
    elapsed_ms: int = Field(default=0, ge=0)
    is_running: bool = True

    @property
    def expected_character(self) -> Optional[str]:
        """Character under the cursor, or None once the text is finished."""
        if self.cursor_index >= len(self.target_text):
            return None
        return self.target_text[self.cursor_index]

    @property
    def is_finished(self) -> bool:
        return self.cursor_index == len(self.target_text)


class KeystrokeResult(BaseModel):
    """Outcome of feeding one key to the matcher.

    ``is_correct`` is None for keys that are not compared against the
    text (backspace, ignored modifier keys).
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    is_correct: Optional[bool]
    cursor_index: int
    completed: bool = False
