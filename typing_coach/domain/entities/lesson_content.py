"""Lesson content entities."""

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class DrillModule(BaseModel):
    """A short pattern typed several times in a row."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    type: Literal["drill"] = "drill"
    id: str
    title: str
    text: str = Field(min_length=1)
    repetitions: int = Field(default=1, ge=1)

    def practice_segments(self) -> list[str]:
        return [self.text] * self.repetitions


class ExerciseModule(BaseModel):
    """Blocks of phrases typed once each."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    type: Literal["exercise"] = "exercise"
    id: str
    title: str
    text_blocks: tuple[tuple[str, ...], ...] = ()

    def practice_segments(self) -> list[str]:
        return [line for block in self.text_blocks for line in block if line]


class ChallengeModule(BaseModel):
    """A timed speed challenge. It carries no text of its own."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    type: Literal["challenge"] = "challenge"
    id: str
    title: str
    target_wpm: int = Field(alias="targetWPM", ge=1)
    duration_sec: int = Field(ge=1)

    def practice_segments(self) -> list[str]:
        return []


class QuizModule(BaseModel):
    """A short test; every prompt in the pool is typed once."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    type: Literal["test"] = "test"
    id: str
    title: str
    question_pool: tuple[str, ...] = ()

    def practice_segments(self) -> list[str]:
        return [question for question in self.question_pool if question]


LessonModule = Annotated[
    Union[DrillModule, ExerciseModule, ChallengeModule, QuizModule],
    Field(discriminator="type"),
]


class LessonContent(BaseModel):
    """Typing material referenced by a lesson's ``content_ref``."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    locale: str = "en-US"
    keyboard_layout: str = "qwerty"
    hand_mode: Optional[Literal["left", "right", "both"]] = None
    modules: tuple[LessonModule, ...] = ()

    def practice_text(self) -> str:
        """Join every module's segments into the text typed for the lesson."""
        segments: list[str] = []
        for module in self.modules:
            segments.extend(module.practice_segments())
        return " ".join(segments)
