"""Curriculum entities: lessons, tracks and learner progress."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class LessonDifficulty(BaseModel):
    """Difficulty profile of a lesson.

    ``speed`` doubles as the lesson's target words per minute.
    """

    model_config = ConfigDict(frozen=True)

    speed: int = Field(ge=1)
    accuracy: int = Field(ge=0)
    complexity: int = Field(ge=0)


class Lesson(BaseModel):
    """A single lesson in a track."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    title: str = Field(min_length=1, max_length=200)
    estimated_minutes: int = Field(default=5, ge=1)
    tags: tuple[str, ...] = ()
    content_ref: Optional[str] = None
    difficulty: LessonDifficulty
    skill_attributes: tuple[str, ...] = ()

    @property
    def target_wpm(self) -> int:
        return self.difficulty.speed


class LessonTrack(BaseModel):
    """An ordered sequence of lessons grouped by skill theme and difficulty."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    id: str = Field(min_length=1)
    name: str = Field(min_length=1)
    description: str = ""
    skill_branch: str = "fundamentals"
    difficulty_index: int = Field(default=0, ge=0)
    prerequisites: tuple[str, ...] = ()
    lessons: tuple[Lesson, ...] = ()

    def index_of(self, lesson_id: str) -> Optional[int]:
        """Position of a lesson in this track, or None if it is not part of it."""
        for index, lesson in enumerate(self.lessons):
            if lesson.id == lesson_id:
                return index
        return None

    def contains(self, lesson_id: str) -> bool:
        return self.index_of(lesson_id) is not None


class LessonProgress(BaseModel):
    """Best result and attempt count for one lesson."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    best_stars: int = Field(default=0, ge=0, le=5)
    attempts: int = Field(default=0, ge=0)


class CurriculumState(BaseModel):
    """Learner-facing curriculum state.

    The state is immutable; the curriculum reducer returns updated copies.
    ``completed`` only ever grows.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    tracks: tuple[LessonTrack, ...] = ()
    selected_track_id: Optional[str] = None
    selected_lesson_id: Optional[str] = None
    completed: dict[str, LessonProgress] = Field(default_factory=dict)
    recommended_lesson_ids: tuple[str, ...] = ()
