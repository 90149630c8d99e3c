"""Lesson recommendation and curriculum state transitions."""

import logging
from typing import Optional, Sequence

from ..entities.curriculum import CurriculumState, LessonProgress, LessonTrack
from ..entities.events import CompleteLesson, CurriculumAction, SelectLesson, SelectTrack
from ..entities.session_summary import SessionSummary
from ..exceptions import InvalidLesson

logger = logging.getLogger(__name__)

REMEDIATION_MIN_STARS = 3
REMEDIATION_MIN_ACCURACY = 90


class CurriculumRecommender:
    """Chooses the next lesson after a session.

    ``recommend`` is deterministic: the same track, lesson and summary always
    give the same list. An empty list means the learner has passed the last
    lesson of the last track.
    """

    def __init__(
        self,
        tracks: Sequence[LessonTrack],
        min_stars: int = REMEDIATION_MIN_STARS,
        min_accuracy: int = REMEDIATION_MIN_ACCURACY,
    ):
        self.tracks = tuple(tracks)
        self.min_stars = min_stars
        self.min_accuracy = min_accuracy

    def needs_remediation(self, summary: SessionSummary) -> bool:
        return summary.star_rating < self.min_stars or summary.accuracy < self.min_accuracy

    def recommend(self, track: LessonTrack, current_lesson_id: str, summary: SessionSummary) -> list[str]:
        """
        Recommend the lesson(s) to attempt after ``current_lesson_id``.

        Args:
            track: Track the lesson belongs to
            current_lesson_id: Lesson that was just completed
            summary: Summary of the completed session

        Returns:
            The same lesson for remediation, the next lesson of the track, the
            first lesson of the next track, or an empty list once the course
            is complete.

        Raises:
            InvalidLesson: If the lesson is not in the track or the track is
                not in the catalog.
        """
        index = track.index_of(current_lesson_id)
        if index is None:
            raise InvalidLesson(current_lesson_id)

        if self.needs_remediation(summary):
            return [current_lesson_id]

        if index + 1 < len(track.lessons):
            return [track.lessons[index + 1].id]

        next_track = self._next_track(track.id)
        if next_track is not None:
            return [next_track.lessons[0].id]

        logger.info(f"Lesson {current_lesson_id} was the last lesson of the course")
        return []

    def is_course_complete(self, track: LessonTrack, current_lesson_id: str, summary: SessionSummary) -> bool:
        return not self.recommend(track, current_lesson_id, summary)

    def _next_track(self, track_id: str) -> Optional[LessonTrack]:
        """First track after ``track_id`` in catalog order that has lessons."""
        position = next((i for i, track in enumerate(self.tracks) if track.id == track_id), None)
        if position is None:
            raise InvalidLesson(track_id, kind="Track")
        for candidate in self.tracks[position + 1:]:
            if candidate.lessons:
                return candidate
        return None


def initial_curriculum_state(tracks: Sequence[LessonTrack]) -> CurriculumState:
    """Curriculum state with the first lesson of the first track selected."""
    tracks = tuple(tracks)
    first_track = tracks[0] if tracks else None
    first_lesson = first_track.lessons[0] if first_track and first_track.lessons else None
    return CurriculumState(
        tracks=tracks,
        selected_track_id=first_track.id if first_track else None,
        selected_lesson_id=first_lesson.id if first_lesson else None,
        completed={},
        recommended_lesson_ids=(first_lesson.id,) if first_lesson else (),
    )


def _find_track(state: CurriculumState, track_id: str) -> LessonTrack:
    for track in state.tracks:
        if track.id == track_id:
            return track
    raise InvalidLesson(track_id, kind="Track")


def _find_track_for_lesson(state: CurriculumState, lesson_id: str) -> LessonTrack:
    for track in state.tracks:
        if track.contains(lesson_id):
            return track
    raise InvalidLesson(lesson_id)


def select_track(state: CurriculumState, track_id: str) -> CurriculumState:
    track = _find_track(state, track_id)
    update = {"selected_track_id": track.id}
    if track.lessons:
        update["selected_lesson_id"] = track.lessons[0].id
    return state.model_copy(update=update)


def select_lesson(state: CurriculumState, lesson_id: str) -> CurriculumState:
    _find_track_for_lesson(state, lesson_id)
    return state.model_copy(update={"selected_lesson_id": lesson_id})


def complete_lesson(state: CurriculumState, lesson_id: str, summary: SessionSummary) -> CurriculumState:
    """Record a finished lesson: running best stars, attempt count, new recommendations."""
    track = _find_track_for_lesson(state, lesson_id)
    previous = state.completed.get(lesson_id, LessonProgress())
    completed = dict(state.completed)
    completed[lesson_id] = LessonProgress(
        best_stars=max(previous.best_stars, summary.star_rating),
        attempts=previous.attempts + 1,
    )
    recommended = CurriculumRecommender(state.tracks).recommend(track, lesson_id, summary)
    return state.model_copy(
        update={"completed": completed, "recommended_lesson_ids": tuple(recommended)}
    )


def reduce_curriculum(state: CurriculumState, action: CurriculumAction) -> CurriculumState:
    """Apply a curriculum action and return the new state."""
    if isinstance(action, SelectTrack):
        return select_track(state, action.track_id)
    elif isinstance(action, SelectLesson):
        return select_lesson(state, action.lesson_id)
    elif isinstance(action, CompleteLesson):
        return complete_lesson(state, action.lesson_id, action.summary)
    raise TypeError(f"Unknown curriculum action: {type(action).__name__}")
