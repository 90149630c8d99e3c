"""Keystroke event entities."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class KeyAction(str, Enum):
    """Kind of keyboard activity recorded in a session log."""
    KEYDOWN = "keydown"
    KEYUP = "keyup"
    AUTOSCROLL = "autoscroll"


class TypingEvent(BaseModel):
    """A single recorded keystroke.

    Events are immutable once recorded and belong to the event log of the
    session that produced them.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    timestamp: int = Field(ge=0, description="Milliseconds timestamp of the keystroke")
    key: str
    action: KeyAction = KeyAction.KEYDOWN
    is_correct: Optional[bool] = None
    latency_ms: Optional[int] = Field(default=None, ge=0)
    cursor_index: Optional[int] = Field(default=None, ge=0)
