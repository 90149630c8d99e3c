"""Infrastructure layer components."""

from .dynamodb_key_value_store import DynamoDBKeyValueStore
from .file_key_value_store import FileKeyValueStore
from .in_memory_key_value_store import InMemoryKeyValueStore
from .key_value_session_repository import KeyValueSessionRepository
from .local_lesson_catalog import LocalLessonCatalog
from .system_clock import SystemClock

__all__ = [
    "DynamoDBKeyValueStore",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueSessionRepository",
    "LocalLessonCatalog",
    "SystemClock",
]
