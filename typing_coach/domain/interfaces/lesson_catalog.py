"""Lesson catalog protocol."""

from typing import Protocol, runtime_checkable

from ..entities.curriculum import Lesson, LessonTrack


@runtime_checkable
class LessonCatalog(Protocol):
    """Protocol for the read-only lesson and track catalog.

    Every lookup raises InvalidLesson for ids the catalog does not know.
    """

    def list_tracks(self) -> list[LessonTrack]:
        """List all tracks in catalog order.

        Returns:
            list[LessonTrack]: The ordered tracks.
        """
        ...

    def get_track(self, track_id: str) -> LessonTrack:
        """Retrieve a track by id.

        Raises:
            InvalidLesson: If the track is not found.
        """
        ...

    def get_lesson(self, lesson_id: str) -> Lesson:
        """Retrieve a lesson by id.

        Raises:
            InvalidLesson: If the lesson is not found.
        """
        ...

    def find_track_for_lesson(self, lesson_id: str) -> LessonTrack:
        """Retrieve the track a lesson belongs to.

        Raises:
            InvalidLesson: If no track contains the lesson.
        """
        ...

    def get_lesson_text(self, lesson_id: str) -> str:
        """Compose the practice text for a lesson.

        Raises:
            InvalidLesson: If the lesson or its content is not found.
        """
        ...
