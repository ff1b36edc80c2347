"""
Key-value storage backends for the persisted session collections.

Each store (history, saved queries) owns exactly one key. Values are JSON
text; backends do not interpret them.

Backends:
  - MemoryStorage: process-local dict, used by tests and ephemeral sessions.
  - JsonFileStorage: one ``<key>.json`` file per key, written atomically
    (tempfile + os.replace) under a lock so writers to one key never overlap.
"""

import os
import re
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from threading import Lock
from typing import Dict, Optional, Union

from querybench.errors import PersistenceError
from querybench.utils.log_utils import get_logger

logger = get_logger(__name__)

_KEY_PATTERN = re.compile(r"^[A-Za-z0-9_.-]+$")


class KeyValueStorage(ABC):
    """Minimal string key-value interface the stores persist through."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        """Return the stored value, or None when the key is absent."""

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store value under key, replacing any previous value."""

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove key if present."""


class MemoryStorage(KeyValueStorage):
    """In-memory storage."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self._lock = Lock()
        self._values: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            return self._values.get(key)

    def set(self, key: str, value: str) -> None:
        with self._lock:
            self._values[key] = value

    def delete(self, key: str) -> None:
        with self._lock:
            self._values.pop(key, None)


class JsonFileStorage(KeyValueStorage):
    """File-per-key storage rooted at a data directory."""

    def __init__(self, data_dir: Union[str, Path]) -> None:
        self._lock = Lock()
        self.data_dir = Path(data_dir)
        self.data_dir.mkdir(parents=True, exist_ok=True)

    def _path_for(self, key: str) -> Path:
        if not _KEY_PATTERN.match(key):
            raise PersistenceError(f"Invalid storage key: {key!r}")
        return self.data_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path_for(key)
        if not path.exists():
            return None
        try:
            with open(path, "r", encoding="utf-8") as f:
                return f.read()
        except OSError as e:
            raise PersistenceError(f"Failed to read {path}: {e}") from e

    def set(self, key: str, value: str) -> None:
        path = self._path_for(key)
        with self._lock:
            fd, tmp_path = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_path, path)
            except OSError as e:
                try:
                    os.unlink(tmp_path)
                except OSError:
                    pass
                raise PersistenceError(f"Failed to write {path}: {e}") from e
        logger.debug(f"[Storage] Wrote {len(value)} bytes to {path.name}")

    def delete(self, key: str) -> None:
        path = self._path_for(key)
        with self._lock:
            try:
                path.unlink()
            except FileNotFoundError:
                return
            except OSError as e:
                raise PersistenceError(f"Failed to delete {path}: {e}") from e
