"""
Unit tests for HistoryStore.

Covers ordering, the 50-entry bound, persistence round-trips and tolerant
loading of damaged payloads.
"""

import json
from datetime import datetime, timedelta, timezone

import pytest

from querybench.core.constants import HISTORY_PREVIEW_LENGTH, HISTORY_STORAGE_KEY
from querybench.domain.models import HistoryEntry
from querybench.errors import PersistenceError
from querybench.session.history.persistence import HistoryStore
from querybench.storage.kv import MemoryStorage

BASE_TIME = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)


def make_entry(n: int, success: bool = True) -> HistoryEntry:
    return HistoryEntry(
        id=f"entry-{n}",
        query_text=f"SELECT {n}",
        timestamp=BASE_TIME + timedelta(seconds=n),
        execution_time_ms=1000 + n if success else None,
        success=success,
    )


class TestHistoryStore:
    """Tests for HistoryStore append/clear/load."""

    def test_append_prepends(self, history):
        """Should place the newest entry first."""
        history.append(make_entry(1))
        history.append(make_entry(2))

        assert [e.id for e in history.list()] == ["entry-2", "entry-1"]

    def test_bounded_to_fifty_newest(self, history):
        """Should keep only the 50 newest entries."""
        for n in range(1, 61):
            history.append(make_entry(n))

        entries = history.list()
        assert len(entries) == 50
        assert entries[0].id == "entry-60"
        assert entries[-1].id == "entry-11"

    def test_order_is_insertion_not_timestamp(self, history):
        """Entries are never re-sorted by timestamp."""
        history.append(make_entry(5))
        history.append(make_entry(1))

        assert [e.id for e in history.list()] == ["entry-1", "entry-5"]

    def test_record_builds_entry(self, history):
        """Should build an entry with id and UTC timestamp."""
        entry = history.record("SELECT 1", success=True, execution_time_ms=1234)

        assert entry.id
        assert entry.timestamp.tzinfo is not None
        assert history.get(entry.id) == entry

    def test_record_drops_duration_on_failure(self, history):
        """Should drop the duration for failed runs."""
        entry = history.record("invalid", success=False, execution_time_ms=900)
        assert entry.execution_time_ms is None

    def test_record_ids_unique(self, history):
        """Should assign a fresh id to each record."""
        ids = {history.record(f"SELECT {n}", success=True).id for n in range(20)}
        assert len(ids) == 20

    def test_clear_persists_immediately(self, storage, history):
        """Should persist the empty history on clear."""
        history.append(make_entry(1))
        history.clear()

        assert history.list() == []
        assert json.loads(storage.get(HISTORY_STORAGE_KEY)) == []
        assert HistoryStore(storage).load_all() == []

    def test_every_append_persists(self, storage, history):
        """Should write the collection on every append."""
        history.append(make_entry(1))
        payload = json.loads(storage.get(HISTORY_STORAGE_KEY))

        assert payload[0]["queryText"] == "SELECT 1"
        assert payload[0]["executionTimeMs"] == 1001
        assert payload[0]["timestamp"].startswith("2026-03-01T09:30:01")

    def test_failed_entry_omits_duration_in_payload(self, storage, history):
        """Should omit executionTimeMs for failed entries."""
        history.append(make_entry(1, success=False))
        payload = json.loads(storage.get(HISTORY_STORAGE_KEY))

        assert "executionTimeMs" not in payload[0]
        assert payload[0]["success"] is False

    def test_round_trip(self, storage, history):
        """Should reload the same entries in the same order."""
        for n in range(1, 8):
            history.append(make_entry(n, success=n % 3 != 0))

        reloaded = HistoryStore(storage).load_all()

        assert [e.to_dict() for e in reloaded] == [e.to_dict() for e in history.list()]
        assert reloaded[0].timestamp == BASE_TIME + timedelta(seconds=7)

    def test_round_trip_with_lone_surrogate(self, storage, history):
        """Should reload every entry when one query text holds an unpaired surrogate."""
        history.record("SELECT 1", success=True, execution_time_ms=1000)
        history.record("SELECT '\ud800'", success=True, execution_time_ms=1000)

        reloaded = HistoryStore(storage).list()

        assert [e.query_text for e in reloaded] == ["SELECT '\ud800'", "SELECT 1"]

    def test_preview_truncates(self):
        """Should truncate long text to 100 characters plus ellipsis."""
        entry = make_entry(1).model_copy(update={"query_text": "x" * 150})
        assert entry.preview() == "x" * 100 + "..."
        assert make_entry(2).preview() == "SELECT 2"

    def test_preview_length_defaults_to_setting(self):
        """Should truncate at HISTORY_PREVIEW_LENGTH by default."""
        entry = make_entry(1).model_copy(update={"query_text": "y" * (HISTORY_PREVIEW_LENGTH + 1)})
        assert entry.preview() == "y" * HISTORY_PREVIEW_LENGTH + "..."


class TestHistoryLoadFailures:
    """Damaged payloads degrade to an empty history."""

    def test_missing_key(self):
        """Should load an empty history when nothing is stored."""
        assert HistoryStore(MemoryStorage()).load_all() == []

    def test_malformed_json(self):
        """Should load an empty history from malformed JSON."""
        storage = MemoryStorage({HISTORY_STORAGE_KEY: "{not json"})
        assert HistoryStore(storage).load_all() == []

    def test_wrong_shape(self):
        """Should load an empty history when the payload is not a list."""
        storage = MemoryStorage({HISTORY_STORAGE_KEY: json.dumps({"entries": []})})
        assert HistoryStore(storage).load_all() == []

    def test_bad_timestamp(self):
        """Should load an empty history when a timestamp is unparseable."""
        payload = [{"id": "1", "queryText": "SELECT 1", "timestamp": "yesterday", "success": True}]
        storage = MemoryStorage({HISTORY_STORAGE_KEY: json.dumps(payload)})
        assert HistoryStore(storage).load_all() == []

    def test_store_usable_after_failed_load(self):
        """Should accept new entries after a failed load."""
        storage = MemoryStorage({HISTORY_STORAGE_KEY: "garbage"})
        store = HistoryStore(storage)
        store.append(make_entry(1))

        assert [e.id for e in HistoryStore(storage).load_all()] == ["entry-1"]


class TestHistoryWriteFailures:
    """A failed write leaves both memory and storage as they were."""

    def test_append_failure_keeps_previous_entries(self, failing_storage):
        """Should raise and keep the in-memory history unchanged."""
        store = HistoryStore(failing_storage)
        store.append(make_entry(1))
        before = failing_storage.get(HISTORY_STORAGE_KEY)

        failing_storage.fail_writes = True
        with pytest.raises(PersistenceError):
            store.append(make_entry(2))

        assert [e.id for e in store.list()] == ["entry-1"]
        assert failing_storage.get(HISTORY_STORAGE_KEY) == before

    def test_append_failure_at_limit_drops_nothing(self, failing_storage):
        """Should not trim the oldest entry when the write fails."""
        store = HistoryStore(failing_storage, max_entries=3)
        for n in range(1, 4):
            store.append(make_entry(n))

        failing_storage.fail_writes = True
        with pytest.raises(PersistenceError):
            store.append(make_entry(4))

        assert [e.id for e in store.list()] == ["entry-3", "entry-2", "entry-1"]

    def test_clear_failure_keeps_entries(self, failing_storage):
        """Should keep every entry when the cleared history cannot be written."""
        store = HistoryStore(failing_storage)
        store.append(make_entry(1))

        failing_storage.fail_writes = True
        with pytest.raises(PersistenceError):
            store.clear()

        assert len(store) == 1
