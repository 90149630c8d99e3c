"""Local in-memory implementation of LessonCatalog."""

from typing import Dict, Optional

from ..domain.entities.curriculum import Lesson, LessonDifficulty, LessonTrack
from ..domain.entities.lesson_content import (
    ChallengeModule,
    DrillModule,
    ExerciseModule,
    LessonContent,
    QuizModule,
)
from ..domain.exceptions import InvalidLesson
from ..domain.interfaces.lesson_catalog import LessonCatalog


def _default_tracks() -> list[LessonTrack]:
    return [
        LessonTrack(
            id="typing-jungle",
            name="Typing Jungle",
            description="Standard touch-typing course, from the home keys out to the full keyboard.",
            skill_branch="fundamentals",
            difficulty_index=20,
            lessons=(
                Lesson(
                    id="tj-001",
                    title="Home Keys J and F",
                    estimated_minutes=5,
                    tags=("home-row", "accuracy"),
                    content_ref="content-tj-001",
                    difficulty=LessonDifficulty(speed=10, accuracy=20, complexity=5),
                    skill_attributes=("home-row", "posture"),
                ),
                Lesson(
                    id="tj-002",
                    title="Reach Keys K and D",
                    estimated_minutes=6,
                    tags=("home-row", "index-finger"),
                    content_ref="content-tj-002",
                    difficulty=LessonDifficulty(speed=15, accuracy=25, complexity=10),
                    skill_attributes=("home-row", "index-finger"),
                ),
                Lesson(
                    id="tj-003",
                    title="Top Row Letters",
                    estimated_minutes=8,
                    tags=("top-row", "dexterity"),
                    content_ref="content-tj-003",
                    difficulty=LessonDifficulty(speed=20, accuracy=30, complexity=20),
                    skill_attributes=("top-row", "reach"),
                ),
            ),
        ),
        LessonTrack(
            id="typing-jungle-junior",
            name="Jungle Junior",
            description="A playful course for young learners with short sentences and stories.",
            skill_branch="fundamentals",
            difficulty_index=10,
            lessons=(
                Lesson(
                    id="tjj-001",
                    title="Animal Friends",
                    estimated_minutes=4,
                    tags=("home-row", "story"),
                    content_ref="content-tjj-001",
                    difficulty=LessonDifficulty(speed=8, accuracy=18, complexity=5),
                    skill_attributes=("home-row", "story"),
                ),
            ),
        ),
    ]


def _default_contents() -> list[LessonContent]:
    return [
        LessonContent(
            id="content-tj-001",
            modules=(
                DrillModule(id="drill-jf-1", title="Home key repetition", text="jf jf jf fj jf jf", repetitions=4),
                ExerciseModule(
                    id="exercise-jf-phrases",
                    title="Short phrases",
                    text_blocks=(("jfj fff jfj", "fff jjj fff"),),
                ),
            ),
        ),
        LessonContent(
            id="content-tj-002",
            hand_mode="both",
            modules=(
                DrillModule(id="drill-kd-1", title="Reach key drill", text="kd kd kd dk dk", repetitions=4),
                ChallengeModule(id="challenge-kd-speed", title="Speed challenge", target_wpm=25, duration_sec=60),
            ),
        ),
        LessonContent(
            id="content-tj-003",
            modules=(
                ExerciseModule(
                    id="exercise-top-row",
                    title="Top row combinations",
                    text_blocks=(("rty uyt ytr", "tyu yru try"),),
                ),
                QuizModule(
                    id="test-top-row",
                    title="Top row quiz",
                    question_pool=("type try try", "type you try", "type try true"),
                ),
            ),
        ),
        LessonContent(
            id="content-tjj-001",
            modules=(
                ExerciseModule(
                    id="exercise-animal-friends",
                    title="Animal friends",
                    text_blocks=(("a cat and a dog", "a fish and a frog"),),
                ),
            ),
        ),
    ]


class LocalLessonCatalog(LessonCatalog):
    """Local implementation of the LessonCatalog protocol.

    Keeps tracks and lesson contents in memory, pre-populated with the
    Typing Jungle course. Useful for testing and development purposes.
    """

    def __init__(self, tracks: Optional[list[LessonTrack]] = None, contents: Optional[list[LessonContent]] = None):
        """Initialize the catalog.

        Args:
            tracks: Tracks in catalog order; the built-in course when omitted.
            contents: Lesson contents; the built-in contents when omitted.
        """
        self._tracks: list[LessonTrack] = list(tracks) if tracks is not None else _default_tracks()
        source = contents if contents is not None else _default_contents()
        self._contents: Dict[str, LessonContent] = {content.id: content for content in source}

    def list_tracks(self) -> list[LessonTrack]:
        return list(self._tracks)

    def get_track(self, track_id: str) -> LessonTrack:
        for track in self._tracks:
            if track.id == track_id:
                return track
        raise InvalidLesson(track_id, kind="Track")

    def get_lesson(self, lesson_id: str) -> Lesson:
        track = self.find_track_for_lesson(lesson_id)
        return track.lessons[track.index_of(lesson_id)]

    def find_track_for_lesson(self, lesson_id: str) -> LessonTrack:
        for track in self._tracks:
            if track.contains(lesson_id):
                return track
        raise InvalidLesson(lesson_id)

    def get_lesson_text(self, lesson_id: str) -> str:
        """Compose the practice text of a lesson from its content modules.

        Raises:
            InvalidLesson: If the lesson is unknown or has no typable content.
        """
        lesson = self.get_lesson(lesson_id)
        content = self._contents.get(lesson.content_ref or "")
        text = content.practice_text() if content else ""
        if not text:
            raise InvalidLesson(lesson_id, kind="Content for lesson")
        return text

    def add_track(self, track: LessonTrack) -> None:
        """Add a track at the end of the catalog, or replace one with the same id.

        Args:
            track: The track to add or update.
        """
        for index, existing in enumerate(self._tracks):
            if existing.id == track.id:
                self._tracks[index] = track
                return
        self._tracks.append(track)

    def add_content(self, content: LessonContent) -> None:
        """Add or update lesson content.

        Args:
            content: The content to add or update.
        """
        self._contents[content.id] = content
