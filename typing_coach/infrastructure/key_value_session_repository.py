"""Session Repository backed by a key-value blob store."""

import json
import logging
import threading
import uuid
from typing import Any, Dict, Optional

from pydantic import ValidationError

from ..domain.entities.session_record import TypingSessionRecord
from ..domain.entities.session_summary import SessionSummary
from ..domain.exceptions import CorruptPersistedData
from ..domain.interfaces.clock import Clock, IdGenerator
from ..domain.interfaces.key_value_store import KeyValueStore
from ..domain.interfaces.session_repository import SessionRepository
from .system_clock import SystemClock

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "typing-analytics-records"
MAX_RECORDS = 250


class KeyValueSessionRepository(SessionRepository):
    """Bounded session history stored as one JSON array blob.

    The blob holds camelCase records, newest first, never more than
    ``max_records`` of them. Writes within this process are serialized by a
    lock; separate processes sharing the same blob are last-writer-wins.
    """

    def __init__(
        self,
        store: KeyValueStore,
        storage_key: str = DEFAULT_STORAGE_KEY,
        max_records: int = MAX_RECORDS,
        id_generator: Optional[IdGenerator] = None,
        clock: Optional[Clock] = None,
    ):
        """Initialize the repository.

        Args:
            store: Blob store holding the record list.
            storage_key: Key of the record list in the store.
            max_records: History cap; the oldest records are evicted first.
            id_generator: Source of record ids (random UUIDs by default).
            clock: Source of record timestamps (system clock by default).
        """
        if max_records < 1:
            raise ValueError("max_records must be at least 1")
        self.store = store
        self.storage_key = storage_key
        self.max_records = max_records
        self._id_generator = id_generator or (lambda: str(uuid.uuid4()))
        self._clock = clock or SystemClock()
        self._lock = threading.Lock()

    def append(self, record: TypingSessionRecord) -> None:
        """Add a record to the front of the history and trim the tail.

        Args:
            record: The completed session record.
        """
        with self._lock:
            records = [record, *self._load()]
            self._save(records)
        logger.debug(f"Stored session record {record.id} for lesson {record.lesson_id}")

    def record_session(
        self,
        lesson_id: str,
        lesson_title: str,
        summary: SessionSummary,
        track_id: Optional[str] = None,
        track_name: Optional[str] = None,
    ) -> TypingSessionRecord:
        record = TypingSessionRecord(
            id=self._id_generator(),
            lesson_id=lesson_id,
            lesson_title=lesson_title,
            track_id=track_id,
            track_name=track_name,
            summary=summary,
            timestamp=self._clock.now_ms(),
        )
        self.append(record)
        return record

    def list_records(self) -> list[TypingSessionRecord]:
        """List stored records, most recent first.

        Returns:
            list[TypingSessionRecord]: The history; empty when the blob is
            missing or corrupt.
        """
        with self._lock:
            return self._load()

    def replace_all(self, records: list[TypingSessionRecord]) -> None:
        with self._lock:
            self._save(list(records))

    def clear(self) -> None:
        """Remove the whole history."""
        with self._lock:
            self.store.delete(self.storage_key)
        logger.info(f"Cleared session history under {self.storage_key!r}")

    # ===== Serialization =====

    def _load(self) -> list[TypingSessionRecord]:
        raw = self.store.get(self.storage_key)
        if raw is None:
            return []
        try:
            return self._decode(raw)[: self.max_records]
        except CorruptPersistedData as e:
            logger.warning(f"{e}; treating session history as empty")
            return []

    def _save(self, records: list[TypingSessionRecord]) -> None:
        trimmed = records[: self.max_records]
        self.store.set(self.storage_key, self._encode(trimmed))

    def _encode(self, records: list[TypingSessionRecord]) -> str:
        return json.dumps(
            [record.model_dump(mode="json", by_alias=True, exclude_none=True) for record in records]
        )

    def _decode(self, raw: str) -> list[TypingSessionRecord]:
        """Parse a blob into records.

        Raises:
            CorruptPersistedData: If the blob is not a JSON array.
        """
        try:
            items: Any = json.loads(raw)
        except ValueError as e:
            raise CorruptPersistedData(self.storage_key, f"invalid JSON ({e})") from e

        if not isinstance(items, list):
            raise CorruptPersistedData(self.storage_key, f"expected a list, got {type(items).__name__}")

        records = []
        for position, item in enumerate(items):
            try:
                records.append(TypingSessionRecord.model_validate(item))
            except ValidationError as e:
                logger.warning(
                    f"Skipping invalid session record at position {position} "
                    f"under {self.storage_key!r}: {e.error_count()} error(s)"
                )
        return records

    def get_storage_info(self) -> Dict[str, Any]:
        """Describe where and how the history is stored."""
        return {
            "backend": type(self.store).__name__,
            "storage_key": self.storage_key,
            "max_records": self.max_records,
        }
