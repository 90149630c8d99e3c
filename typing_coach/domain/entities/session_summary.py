"""Session summary entities."""

from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class HesitationStat(BaseModel):
    """Inter-key pause statistics for a session."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    average_ms: int = Field(ge=0)
    longest_ms: int = Field(ge=0)
    occurrences: int = Field(ge=0, description="Pauses longer than the hesitation threshold")


class FingerUsageStat(BaseModel):
    """Key presses attributed to one finger."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    finger: Literal["thumb", "index", "middle", "ring", "pinky"]
    hand: Literal["left", "right"]
    presses: int = Field(default=0, ge=0)
    errors: int = Field(default=0, ge=0)


class KeyStat(BaseModel):
    """Presses and errors for a single key of the heatmap."""

    model_config = ConfigDict(frozen=True)

    presses: int = Field(default=0, ge=0)
    errors: int = Field(default=0, ge=0)


class SessionSummary(BaseModel):
    """Immutable metrics produced once per finished session."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        json_schema_extra={
            "example": {
                "durationMs": 3000,
                "wpm": 12,
                "cpm": 60,
                "accuracy": 100,
                "errorRate": 0.0,
                "starRating": 2,
                "streak": 3,
            }
        },
    )

    duration_ms: int = Field(ge=0)
    wpm: int = Field(ge=0)
    cpm: int = Field(ge=0)
    accuracy: int = Field(ge=0, le=100)
    error_rate: float = Field(ge=0.0, le=1.0)
    star_rating: int = Field(ge=0, le=5)
    streak: int = Field(default=0, ge=0, description="Longest run of consecutive correct keystrokes")
    burst_speed: Optional[int] = Field(default=None, ge=0)
    hesitation_stats: Optional[HesitationStat] = None
    finger_usage: Optional[list[FingerUsageStat]] = None
    heatmap: Optional[dict[str, KeyStat]] = None
