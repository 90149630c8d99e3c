"""
Set up a sample lesson in the local catalog and run the backend server.

This script:
1. Adds a "Number Row" track and its content to the LocalLessonCatalog
2. Plays a short practice session so the history and analytics have data
3. Starts the FastAPI backend server
"""

import sys
from pathlib import Path

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from typing_coach.application.api import app, controller
from typing_coach.domain.entities import (
    DrillModule,
    Lesson,
    LessonContent,
    LessonDifficulty,
    LessonTrack,
)


def setup_sample_data():
    """Add a sample track and complete one session on it."""

    print("=" * 60)
    print("Setting up sample data...")
    print("=" * 60)

    # 1. Add a sample track with one lesson
    track = LessonTrack(
        id="number-row",
        name="Number Row",
        description="Digits typed without looking at the keyboard.",
        difficulty_index=30,
        lessons=(
            Lesson(
                id="nr-001",
                title="Digits 1 to 5",
                content_ref="content-nr-001",
                difficulty=LessonDifficulty(speed=12, accuracy=30, complexity=25),
            ),
        ),
    )
    controller.lesson_catalog.add_track(track)
    controller.lesson_catalog.add_content(
        LessonContent(
            id="content-nr-001",
            modules=(DrillModule(id="drill-digits", title="Digits", text="12 34 5", repetitions=2),),
        )
    )
    controller.reload_catalog()
    print(f"\n✓ Added track: {track.name}")
    print(f"  - Lesson: {track.lessons[0].id} ({track.lessons[0].title})")

    # 2. Play a session on the first built-in lesson
    controller.start_session("tj-001", text="jf fj", now_ms=0)
    for offset, key in enumerate("jf fj", start=1):
        controller.record_keystroke(key, offset * 400)
    summary = controller.last_summary
    print("\n✓ Completed a session on tj-001")
    print(f"  - WPM: {summary.wpm}, accuracy: {summary.accuracy}%, stars: {summary.star_rating}")
    print(f"  - Recommended next: {list(controller.get_curriculum().recommended_lesson_ids)}")

    print("\n" + "=" * 60)
    print("Sample data setup complete!")
    print("=" * 60)
    print("\nYou can now:")
    print("1. List tracks: GET http://localhost:8000/tracks")
    print("2. Start a session: POST http://localhost:8000/sessions {\"lessonId\": \"nr-001\"}")
    print("3. Inspect analytics: GET http://localhost:8000/analytics")
    print("\n" + "=" * 60 + "\n")


def run_server():
    """Run the FastAPI server."""
    import uvicorn

    # Setup sample data first
    setup_sample_data()

    # Start the server
    print("Starting FastAPI server on http://localhost:8000")
    print("Press Ctrl+C to stop\n")

    uvicorn.run(
        app,
        host="0.0.0.0",
        port=8000,
        log_level="info"
    )


if __name__ == "__main__":
    run_server()
