"""Domain interfaces for the typing coach application."""

from .clock import Clock, IdGenerator
from .key_value_store import KeyValueStore
from .lesson_catalog import LessonCatalog
from .session_repository import SessionRepository

__all__ = ["Clock", "IdGenerator", "KeyValueStore", "LessonCatalog", "SessionRepository"]
