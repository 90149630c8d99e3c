"""Session Repository interface."""

from typing import Optional, Protocol, runtime_checkable

from ..entities.session_record import TypingSessionRecord
from ..entities.session_summary import SessionSummary


@runtime_checkable
class SessionRepository(Protocol):
    """Protocol defining the interface for the session history store.

    The history is append-only and bounded: records are kept newest first
    and the oldest ones are evicted once the cap is reached.
    """

    def append(self, record: TypingSessionRecord) -> None:
        """Add a record to the front of the history.

        Args:
            record: The completed session record.
        """
        ...

    def record_session(
        self,
        lesson_id: str,
        lesson_title: str,
        summary: SessionSummary,
        track_id: Optional[str] = None,
        track_name: Optional[str] = None,
    ) -> TypingSessionRecord:
        """Build a record with a fresh id and timestamp and append it.

        Returns:
            TypingSessionRecord: The stored record.
        """
        ...

    def list_records(self) -> list[TypingSessionRecord]:
        """List stored records, most recent first.

        Never raises on missing or corrupt persisted data; returns an empty
        list instead.
        """
        ...

    def replace_all(self, records: list[TypingSessionRecord]) -> None:
        """Replace the whole history, e.g. with records loaded from a mirror.

        Args:
            records: Records ordered most recent first.
        """
        ...

    def clear(self) -> None:
        """Remove every stored record."""
        ...
