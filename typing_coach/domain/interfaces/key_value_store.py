"""Key-value blob store protocol."""

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """Protocol for the persistence collaborator.

    Values are opaque text blobs. Implementations can use different storage
    backends (in-memory, local files, DynamoDB, etc.).
    """

    def get(self, key: str) -> Optional[str]:
        """Read the blob stored under a key.

        Args:
            key: The storage key.

        Returns:
            Optional[str]: The stored blob, or None if the key is missing.
        """
        ...

    def set(self, key: str, value: str) -> None:
        """Store a blob under a key, replacing any previous value.

        Args:
            key: The storage key.
            value: The blob to store.
        """
        ...

    def delete(self, key: str) -> None:
        """Remove a key. Removing a missing key is not an error.

        Args:
            key: The storage key.
        """
        ...
