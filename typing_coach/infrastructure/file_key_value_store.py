"""Local file system implementation of KeyValueStore."""

import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Optional, Union

from ..domain.interfaces.key_value_store import KeyValueStore

logger = logging.getLogger(__name__)

_VALID_KEY = re.compile(r"^[A-Za-z0-9._-]+$")


class FileKeyValueStore(KeyValueStore):
    """Stores each key as a JSON file inside a directory.

    Writes go through a temporary file and an atomic rename, so a reader
    never sees a half-written blob.
    """

    def __init__(self, base_path: Union[str, Path] = ".typing-coach"):
        """Initialize the file store.

        Args:
            base_path: Directory holding the blob files. Created on first write.
        """
        self.base_path = Path(base_path)

    def _path_for(self, key: str) -> Path:
        if not _VALID_KEY.match(key):
            raise ValueError(f"Invalid storage key: {key!r}")
        return self.base_path / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        # Undecodable bytes are kept as replacement characters and surface
        # as a parse error in the caller.
        return path.read_text(encoding="utf-8", errors="replace")

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        self.base_path.mkdir(parents=True, exist_ok=True)
        fd, temp_name = tempfile.mkstemp(dir=self.base_path, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(value)
            os.replace(temp_name, path)
        except OSError:
            logger.error(f"Failed to write {path}", exc_info=True)
            Path(temp_name).unlink(missing_ok=True)
            raise

    def delete(self, key: str) -> None:
        self._path_for(key).unlink(missing_ok=True)
