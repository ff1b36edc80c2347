"""
Query History Persistence - Bounded, newest-first log of execution attempts.

Provides:
- Prepend-and-truncate append (newest entry always at index 0)
- Full-collection write-through to a KeyValueStorage key on every mutation
- Tolerant load: a missing or malformed payload reads as an empty history
"""
import json
import uuid
from datetime import datetime, timezone
from typing import List, Optional

import pydantic

from querybench.core.constants import HISTORY_LIMIT, HISTORY_STORAGE_KEY
from querybench.domain.models import HistoryEntry
from querybench.errors import PersistenceError
from querybench.storage.kv import KeyValueStorage
from querybench.utils.log_utils import get_logger

logger = get_logger(__name__)

_entries_adapter = pydantic.TypeAdapter(List[HistoryEntry])


class HistoryStore:
    """
    Bounded execution history persisted under a single storage key.

    Entries are kept in insertion order, newest first, and are never
    re-sorted. Only clear() removes entries explicitly; append() drops the
    oldest entries beyond max_entries.
    """

    def __init__(
        self,
        storage: KeyValueStorage,
        key: str = HISTORY_STORAGE_KEY,
        max_entries: int = HISTORY_LIMIT,
    ):
        self._storage = storage
        self._key = key
        self._max_entries = max_entries
        self._entries: List[HistoryEntry] = []
        self.load_all()

    def append(self, entry: HistoryEntry) -> HistoryEntry:
        """Prepend an entry, trim to the limit and persist.

        The in-memory history only changes once the write has succeeded.
        """
        entries = ([entry] + self._entries)[: self._max_entries]
        self._save(entries)
        self._entries = entries
        return entry

    def record(
        self,
        query_text: str,
        success: bool,
        execution_time_ms: Optional[int] = None,
        timestamp: Optional[datetime] = None,
    ) -> HistoryEntry:
        """Create a fresh entry for one execution attempt and append it."""
        entry = HistoryEntry(
            id=str(uuid.uuid4()),
            query_text=query_text,
            timestamp=timestamp or datetime.now(timezone.utc),
            execution_time_ms=execution_time_ms if success else None,
            success=success,
        )
        return self.append(entry)

    def list(self) -> List[HistoryEntry]:
        """Current entries, newest first."""
        return list(self._entries)

    def get(self, entry_id: str) -> Optional[HistoryEntry]:
        """Get a specific history entry by ID."""
        for entry in self._entries:
            if entry.id == entry_id:
                return entry
        return None

    def clear(self) -> None:
        """Remove every entry and persist the empty history."""
        self._save([])
        self._entries = []
        logger.info("[HistoryStore] History cleared")

    def __len__(self) -> int:
        return len(self._entries)

    def _save(self, entries: List[HistoryEntry]) -> None:
        """Write the full collection back. Failures propagate to the caller."""
        payload = json.dumps([entry.to_dict() for entry in entries])
        self._storage.set(self._key, payload)

    def load_all(self) -> List[HistoryEntry]:
        """Reload from storage and return the entries, newest first.

        A missing or unreadable payload yields an empty history; the failure
        is logged and never raised.
        """
        try:
            raw = self._storage.get(self._key)
            # json.loads accepts the \uXXXX escapes json.dumps writes for lone surrogates
            self._entries = _entries_adapter.validate_python(json.loads(raw)) if raw is not None else []
        except (PersistenceError, ValueError) as e:
            logger.warning(f"[HistoryStore] Failed to load persisted data: {e}")
            self._entries = []
        return list(self._entries)
