"""
Unit tests for progress document transport.
"""

import json

import pytest

from src.core.errors import PersistenceFailure
from src.progress.persistence import JsonFilePersistence, MemoryPersistence
from src.progress.store import ProgressStore


class TestJsonFilePersistence:
    """Test the JSON file backend."""

    def test_missing_file_loads_none(self, tmp_path):
        assert JsonFilePersistence(tmp_path / "progress.json").load() is None

    def test_save_then_load(self, tmp_path):
        persistence = JsonFilePersistence(tmp_path / "nested" / "progress.json")
        assert persistence.save({"version": 1, "groups": {}})
        assert persistence.load() == {"version": 1, "groups": {}}

    def test_save_leaves_no_temp_files(self, tmp_path):
        persistence = JsonFilePersistence(tmp_path / "progress.json")
        persistence.save({"a": 1})
        persistence.save({"a": 2})
        assert [p.name for p in tmp_path.iterdir()] == ["progress.json"]

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "progress.json"
        path.write_text("{broken", encoding="utf-8")
        with pytest.raises(PersistenceFailure) as exc_info:
            JsonFilePersistence(path).load()
        assert exc_info.value.path == path

    def test_non_object_document(self, tmp_path):
        path = tmp_path / "progress.json"
        path.write_text("[]", encoding="utf-8")
        with pytest.raises(PersistenceFailure):
            JsonFilePersistence(path).load()

    def test_unserializable_document(self, tmp_path):
        persistence = JsonFilePersistence(tmp_path / "progress.json")
        with pytest.raises(PersistenceFailure):
            persistence.save({"bad": object()})
        assert list(tmp_path.iterdir()) == []

    def test_store_over_corrupt_file_recovers(self, tmp_path, summary_factory):
        path = tmp_path / "progress.json"
        path.write_text("not json", encoding="utf-8")
        store = ProgressStore(persistence=JsonFilePersistence(path))
        assert store.warnings
        store.record_attempt("hand-strength", summary_factory("hand-strength", 100))
        saved = json.loads(path.read_text(encoding="utf-8"))
        assert saved["groups"]["foundations"]["units"]["hand-strength"]["completed"] is True

    def test_default_path_comes_from_settings(self, tmp_progress_path, summary_factory):
        store = ProgressStore()
        store.record_attempt("hand-strength", summary_factory("hand-strength", 100))
        assert tmp_progress_path.exists()


class TestMemoryPersistence:
    """Test the in-memory backend."""

    def test_copies_in_and_out(self):
        original = {"groups": {"a": 1}}
        persistence = MemoryPersistence(original)
        original["groups"]["a"] = 2
        loaded = persistence.load()
        assert loaded == {"groups": {"a": 1}}
        loaded["groups"]["a"] = 3
        assert persistence.load() == {"groups": {"a": 1}}

    def test_empty(self):
        assert MemoryPersistence().load() is None
