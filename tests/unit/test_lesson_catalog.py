"""Tests for LocalLessonCatalog and lesson content."""

import pytest

from typing_coach.domain.entities import (
    ChallengeModule,
    DrillModule,
    ExerciseModule,
    Lesson,
    LessonContent,
    LessonDifficulty,
    LessonTrack,
    QuizModule,
)
from typing_coach.domain.exceptions import InvalidLesson
from typing_coach.infrastructure.local_lesson_catalog import LocalLessonCatalog


@pytest.fixture
def catalog():
    return LocalLessonCatalog()


class TestLessonContent:
    """Tests for composing practice text from content modules."""

    def test_drill_is_repeated(self):
        drill = DrillModule(id="d", title="Drill", text="jf", repetitions=3)

        assert drill.practice_segments() == ["jf", "jf", "jf"]

    def test_exercise_blocks_are_flattened(self):
        exercise = ExerciseModule(id="e", title="Exercise", text_blocks=(("a b", "c d"), ("e f",)))

        assert exercise.practice_segments() == ["a b", "c d", "e f"]

    def test_challenge_has_no_text(self):
        challenge = ChallengeModule(id="c", title="Challenge", target_wpm=25, duration_sec=60)

        assert challenge.practice_segments() == []

    def test_modules_are_parsed_by_type(self):
        content = LessonContent.model_validate(
            {
                "id": "content-x",
                "keyboardLayout": "qwerty",
                "modules": [
                    {"type": "drill", "id": "d", "title": "Drill", "text": "kd", "repetitions": 2},
                    {"type": "challenge", "id": "c", "title": "Speed", "targetWPM": 25, "durationSec": 60},
                    {"type": "test", "id": "t", "title": "Quiz", "questionPool": ["try"]},
                ],
            }
        )

        assert isinstance(content.modules[0], DrillModule)
        assert isinstance(content.modules[1], ChallengeModule)
        assert content.modules[1].target_wpm == 25
        assert isinstance(content.modules[2], QuizModule)
        assert content.practice_text() == "kd kd try"


class TestLocalLessonCatalog:
    """Tests for the built-in course."""

    def test_tracks_in_catalog_order(self, catalog):
        assert [track.id for track in catalog.list_tracks()] == ["typing-jungle", "typing-jungle-junior"]

    def test_get_track(self, catalog):
        track = catalog.get_track("typing-jungle")

        assert [lesson.id for lesson in track.lessons] == ["tj-001", "tj-002", "tj-003"]

    def test_get_lesson(self, catalog):
        lesson = catalog.get_lesson("tj-002")

        assert lesson.content_ref == "content-tj-002"
        assert lesson.target_wpm == 15

    def test_find_track_for_lesson(self, catalog):
        assert catalog.find_track_for_lesson("tjj-001").id == "typing-jungle-junior"

    def test_unknown_ids(self, catalog):
        with pytest.raises(InvalidLesson, match="Track with id nowhere not found"):
            catalog.get_track("nowhere")
        with pytest.raises(InvalidLesson, match="Lesson with id tj-999 not found"):
            catalog.get_lesson("tj-999")
        with pytest.raises(InvalidLesson):
            catalog.get_lesson_text("tj-999")

    def test_lesson_text_repeats_drills(self, catalog):
        text = catalog.get_lesson_text("tj-001")

        assert text.startswith("jf jf jf fj jf jf jf jf jf fj jf jf")
        assert text.endswith("jfj fff jfj fff jjj fff")

    def test_challenge_modules_add_no_text(self, catalog):
        assert catalog.get_lesson_text("tj-002") == " ".join(["kd kd kd dk dk"] * 4)

    def test_quiz_prompts_are_typed(self, catalog):
        assert catalog.get_lesson_text("tj-003").endswith("type try try type you try type try true")

    def test_add_track_and_content(self, catalog):
        track = LessonTrack(
            id="numbers",
            name="Number Row",
            lessons=(
                Lesson(
                    id="nr-001",
                    title="Numbers",
                    content_ref="content-nr-001",
                    difficulty=LessonDifficulty(speed=12, accuracy=20, complexity=15),
                ),
            ),
        )
        catalog.add_track(track)
        catalog.add_content(
            LessonContent(id="content-nr-001", modules=(DrillModule(id="d", title="Digits", text="123"),))
        )

        assert catalog.list_tracks()[-1].id == "numbers"
        assert catalog.get_lesson_text("nr-001") == "123"

    def test_add_track_replaces_same_id(self, catalog):
        catalog.add_track(LessonTrack(id="typing-jungle", name="Renamed"))

        assert catalog.list_tracks()[0].name == "Renamed"
        assert len(catalog.list_tracks()) == 2

    def test_lesson_without_content(self):
        catalog = LocalLessonCatalog(
            tracks=[
                LessonTrack(
                    id="t",
                    name="T",
                    lessons=(Lesson(id="l", title="L", difficulty=LessonDifficulty(speed=5, accuracy=0, complexity=0)),),
                )
            ],
            contents=[],
        )

        with pytest.raises(InvalidLesson, match="Content for lesson with id l not found"):
            catalog.get_lesson_text("l")
