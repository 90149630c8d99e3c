"""FastAPI application entry point."""

import logging
from typing import Optional

from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from .config import Settings, settings
from .controller import TypingCoachController
from ..domain.entities import SessionEndReason, SessionSummary
from ..domain.exceptions import InvalidLesson, TypingCoachError
from ..domain.interfaces.key_value_store import KeyValueStore
from ..domain.services import TypingSessionMachine
from ..infrastructure.dynamodb_key_value_store import DynamoDBKeyValueStore
from ..infrastructure.file_key_value_store import FileKeyValueStore
from ..infrastructure.in_memory_key_value_store import InMemoryKeyValueStore
from ..infrastructure.key_value_session_repository import KeyValueSessionRepository
from ..infrastructure.local_lesson_catalog import LocalLessonCatalog
from ..infrastructure.system_clock import SystemClock

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def build_key_value_store(config: Settings) -> KeyValueStore:
    """Create the blob store selected by ``storage_backend``."""
    if config.storage_backend == "file":
        return FileKeyValueStore(config.storage_dir)
    elif config.storage_backend == "dynamodb":
        return DynamoDBKeyValueStore(config.records_table_name, region_name=config.aws_region)
    return InMemoryKeyValueStore()


def build_controller(config: Settings) -> TypingCoachController:
    """Wire a controller and its collaborators from settings."""
    store = build_key_value_store(config)
    logger.info(f"Using {type(store).__name__} for session history")
    machine = TypingSessionMachine(
        rules=config.typing_rules(),
        star_policy=config.star_policy(),
        hesitation_threshold_ms=config.hesitation_threshold_ms,
        burst_window=config.burst_window,
    )
    return TypingCoachController(
        machine=machine,
        session_repository=KeyValueSessionRepository(
            store,
            storage_key=config.storage_key,
            max_records=config.max_records,
        ),
        lesson_catalog=LocalLessonCatalog(),
        clock=SystemClock(),
        star_policy=config.star_policy(),
        recent_limit=config.recent_sessions_limit,
        window_days=config.analytics_window_days,
    )


# Create FastAPI app instance
app = FastAPI(
    title=settings.app_name,
    version=settings.app_version,
    debug=settings.debug,
)

# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Initialize controller with injected dependencies
controller = build_controller(settings)


def get_controller() -> TypingCoachController:
    return controller


# ===== Request models =====


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StartSessionRequest(_Request):
    lesson_id: str
    text: Optional[str] = None
    timestamp: Optional[int] = Field(default=None, ge=0)


class KeystrokeRequest(_Request):
    key: str = Field(min_length=1)
    timestamp: Optional[int] = Field(default=None, ge=0)


class TickRequest(_Request):
    timestamp: Optional[int] = Field(default=None, ge=0)


class EndSessionRequest(_Request):
    reason: SessionEndReason
    timestamp: Optional[int] = Field(default=None, ge=0)


class RecommendationRequest(_Request):
    track_id: str
    lesson_id: str
    summary: SessionSummary


class SelectTrackRequest(_Request):
    track_id: str


class SelectLessonRequest(_Request):
    lesson_id: str


# ===== Error mapping =====


@app.exception_handler(InvalidLesson)
async def invalid_lesson_handler(request: Request, exc: InvalidLesson):
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


@app.exception_handler(TypingCoachError)
async def session_conflict_handler(request: Request, exc: TypingCoachError):
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content={"detail": str(exc)})


@app.exception_handler(ValueError)
async def bad_input_handler(request: Request, exc: ValueError):
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": str(exc)})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    logger.debug(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"detail": "Invalid request body"})


# ===== Routes =====


@app.get("/health")
def health_check(coach: TypingCoachController = Depends(get_controller)):
    """Health check endpoint."""
    return coach.get_health_status()


@app.get("/tracks")
def get_tracks(coach: TypingCoachController = Depends(get_controller)):
    """List the lesson tracks of the catalog in order."""
    return {"tracks": coach.list_tracks()}


@app.post("/sessions", status_code=status.HTTP_201_CREATED)
def start_session(body: StartSessionRequest, coach: TypingCoachController = Depends(get_controller)):
    """Start a typing session.

    The lesson's practice text is used unless the body carries its own
    ``text``. Fails with 409 while another session is running.
    """
    session_id = coach.start_session(body.lesson_id, text=body.text, now_ms=body.timestamp)
    return {"sessionId": session_id, "lessonId": body.lesson_id}


@app.get("/sessions/active")
def get_active_session(coach: TypingCoachController = Depends(get_controller)):
    return coach.get_session_state()


@app.post("/sessions/keystrokes")
def record_keystroke(body: KeystrokeRequest, coach: TypingCoachController = Depends(get_controller)):
    """Feed one key press to the running session.

    The response tells whether the key matched and, when it finished the
    text, carries the session summary.
    """
    result = coach.record_keystroke(body.key, body.timestamp)
    response = {"result": result, "summary": None}
    if result.completed:
        response["summary"] = coach.last_summary
    return response


@app.post("/sessions/tick")
def tick(body: TickRequest, coach: TypingCoachController = Depends(get_controller)):
    coach.tick(body.timestamp)
    return coach.get_session_state()


@app.post("/sessions/end")
def end_session(body: EndSessionRequest, coach: TypingCoachController = Depends(get_controller)):
    summary = coach.end_session(body.reason, body.timestamp)
    return {"summary": summary, "reason": body.reason.value}


@app.post("/sessions/reset")
def reset_session(coach: TypingCoachController = Depends(get_controller)):
    coach.reset_session()
    return coach.get_session_state()


@app.get("/analytics")
def get_analytics(coach: TypingCoachController = Depends(get_controller)):
    """Analytics over the stored history; ``analytics`` is null until a session is completed."""
    return {"analytics": coach.get_analytics()}


@app.post("/recommendations")
def get_recommendations(body: RecommendationRequest, coach: TypingCoachController = Depends(get_controller)):
    lesson_ids = coach.get_recommendations(body.track_id, body.lesson_id, body.summary)
    return {"lessonIds": lesson_ids, "courseComplete": not lesson_ids}


@app.get("/curriculum")
def get_curriculum(coach: TypingCoachController = Depends(get_controller)):
    return coach.get_curriculum()


@app.post("/curriculum/track")
def select_track(body: SelectTrackRequest, coach: TypingCoachController = Depends(get_controller)):
    return coach.select_track(body.track_id)


@app.post("/curriculum/lesson")
def select_lesson(body: SelectLessonRequest, coach: TypingCoachController = Depends(get_controller)):
    return coach.select_lesson(body.lesson_id)


@app.get("/history")
def get_history(coach: TypingCoachController = Depends(get_controller)):
    return {"records": coach.get_history()}


@app.delete("/history", status_code=status.HTTP_204_NO_CONTENT)
def clear_history(coach: TypingCoachController = Depends(get_controller)):
    coach.clear_history()
