"""
Saved Query Persistence - Searchable catalog of named queries.

Every mutation writes the whole catalog back to its storage key before
returning. Records are identified by a uuid4 id assigned on save.
"""
import json
import uuid
from datetime import datetime, timezone
from typing import List, Optional

import pydantic

from querybench.core.constants import DEFAULT_SAVED_CATEGORY, SAVED_QUERIES_STORAGE_KEY
from querybench.domain.models import SavedQuery, SavedQueryPartition
from querybench.errors import PersistenceError, ValidationError
from querybench.storage.kv import KeyValueStorage
from querybench.utils.log_utils import get_logger

logger = get_logger(__name__)

_queries_adapter = pydantic.TypeAdapter(List[SavedQuery])


class SavedQueryStore:
    """
    Persisted catalog of saved queries.

    Catalog order is save order. Names are not deduplicated.
    """

    def __init__(self, storage: KeyValueStorage, key: str = SAVED_QUERIES_STORAGE_KEY):
        self._storage = storage
        self._key = key
        self._queries: List[SavedQuery] = []
        self.load_all()

    # =========================================================================
    # Mutations
    # =========================================================================

    def save(
        self,
        name: str,
        query_text: str,
        category: str = DEFAULT_SAVED_CATEGORY,
    ) -> SavedQuery:
        """Append a new saved query built from the editor text."""
        if not name or not name.strip():
            raise ValidationError("Please enter a query name")

        query = SavedQuery(
            id=str(uuid.uuid4()),
            name=name,
            query_text=query_text,
            category=category or DEFAULT_SAVED_CATEGORY,
            is_favorite=False,
            is_shared=False,
            shared_by=None,
            created_at=datetime.now(timezone.utc),
        )
        self._commit(self._queries + [query])
        logger.info(f"[SavedQueryStore] Saved query '{name}' ({query.id})")
        return query

    def toggle_favorite(self, query_id: str) -> Optional[SavedQuery]:
        """Flip is_favorite on one record. Returns None if the id is unknown."""
        query = self.get(query_id)
        if query is None:
            return None
        return self._replace(query.model_copy(update={"is_favorite": not query.is_favorite}))

    def toggle_shared(self, query_id: str) -> Optional[SavedQuery]:
        """Flip the local is_shared flag. shared_by is left untouched."""
        query = self.get(query_id)
        if query is None:
            return None
        return self._replace(query.model_copy(update={"is_shared": not query.is_shared}))

    def delete(self, query_id: str) -> bool:
        """Remove a record. Returns False if nothing matched."""
        remaining = [q for q in self._queries if q.id != query_id]
        if len(remaining) == len(self._queries):
            return False
        self._commit(remaining)
        return True

    def _replace(self, updated: SavedQuery) -> SavedQuery:
        self._commit([updated if q.id == updated.id else q for q in self._queries])
        return updated

    # =========================================================================
    # Reads
    # =========================================================================

    def get(self, query_id: str) -> Optional[SavedQuery]:
        for query in self._queries:
            if query.id == query_id:
                return query
        return None

    def list(self) -> List[SavedQuery]:
        return list(self._queries)

    def search(self, term: str = "") -> List[SavedQuery]:
        """Case-insensitive substring match on name or query text."""
        needle = (term or "").lower()
        return [
            q for q in self._queries
            if needle in q.name.lower() or needle in q.query_text.lower()
        ]

    def partition(self, term: str = "") -> SavedQueryPartition:
        """
        Split the filtered catalog into mine/shared/all.

        Membership is decided by shared_by alone; the is_shared toggle does
        not move a record into the shared view.
        """
        filtered = self.search(term)
        return SavedQueryPartition(
            mine=[q for q in filtered if q.shared_by is None],
            shared=[q for q in filtered if q.shared_by is not None],
            all=filtered,
        )

    def __len__(self) -> int:
        return len(self._queries)

    # =========================================================================
    # Persistence
    # =========================================================================

    def _commit(self, queries: List[SavedQuery]) -> None:
        """Persist the new catalog, then adopt it. A failed write leaves memory as it was."""
        payload = json.dumps([q.to_dict() for q in queries])
        self._storage.set(self._key, payload)
        self._queries = queries

    def load_all(self) -> List[SavedQuery]:
        """Reload the catalog; a missing or unreadable payload yields []."""
        try:
            raw = self._storage.get(self._key)
            self._queries = _queries_adapter.validate_python(json.loads(raw)) if raw is not None else []
        except (PersistenceError, ValueError) as e:
            logger.warning(f"[SavedQueryStore] Failed to load persisted data: {e}")
            self._queries = []
        return list(self._queries)
