"""Local in-memory implementation of KeyValueStore."""

from typing import Dict, Optional

from ..domain.interfaces.key_value_store import KeyValueStore


class InMemoryKeyValueStore(KeyValueStore):
    """Local in-memory implementation of the KeyValueStore protocol.

    Stores blobs in a dictionary for testing and development purposes.
    """

    def __init__(self):
        """Initialize the store with an empty dictionary."""
        self._blobs: Dict[str, str] = {}

    def get(self, key: str) -> Optional[str]:
        return self._blobs.get(key)

    def set(self, key: str, value: str) -> None:
        self._blobs[key] = value

    def delete(self, key: str) -> None:
        self._blobs.pop(key, None)
