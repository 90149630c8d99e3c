"""Persisted session record entity."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .session_summary import SessionSummary


class TypingSessionRecord(BaseModel):
    """A completed session as stored in the session history.

    Records are serialized with camelCase keys so the persisted blob keeps
    the same shape whichever backend holds it.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    lesson_id: str
    lesson_title: str
    track_id: Optional[str] = None
    track_name: Optional[str] = None
    summary: SessionSummary
    timestamp: int = Field(ge=0, description="Milliseconds timestamp when the record was stored")
