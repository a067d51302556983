"""
Tests for the JSON key-value store.
"""
import json
import pytest
from unittest.mock import patch

from tipview.store import KeyValueStore, StorageError


class TestKeyValueStore:
    """Tests for KeyValueStore."""

    def test_get_missing_file(self, kv_store):
        """Test reading before anything is written."""
        assert kv_store.get("TipHistory") is None
        assert kv_store.get("TipHistory", []) == []

    def test_set_and_get(self, kv_store):
        kv_store.set("TipHistory", ["a", "b"])
        kv_store.set("isDarkMode", True)

        assert kv_store.get("TipHistory") == ["a", "b"]
        assert kv_store.get("isDarkMode") is True

    def test_remove_deletes_key(self, kv_store):
        """Test that remove drops the key instead of writing an empty value."""
        kv_store.set("TipHistory", [1, 2])
        kv_store.set("other", "kept")
        kv_store.remove("TipHistory")

        with open(kv_store.path, encoding="utf-8") as f:
            data = json.load(f)
        assert "TipHistory" not in data
        assert data["other"] == "kept"

    def test_remove_missing_key(self, kv_store):
        kv_store.remove("TipHistory")
        assert not kv_store.path.exists()

    def test_malformed_document(self, kv_store):
        """Test that a corrupt file raises StorageError on read."""
        kv_store.path.write_text("{not json", encoding="utf-8")

        with pytest.raises(StorageError):
            kv_store.get("TipHistory")

    def test_non_object_document(self, kv_store):
        kv_store.path.write_text("[1, 2, 3]", encoding="utf-8")

        with pytest.raises(StorageError):
            kv_store.get("TipHistory")

    def test_set_replaces_corrupt_document(self, kv_store):
        kv_store.path.write_text("garbage", encoding="utf-8")
        kv_store.set("TipHistory", [])

        assert kv_store.get("TipHistory") == []

    def test_write_failure(self, kv_store):
        """Test that I/O errors surface as StorageError."""
        with patch("tipview.store.os.replace", side_effect=OSError("disk full")):
            with pytest.raises(StorageError):
                kv_store.set("TipHistory", [])

        assert not kv_store.path.exists()

    def test_creates_parent_directory(self, tmp_path):
        store = KeyValueStore(str(tmp_path / "nested" / "dir" / "store.json"))
        store.set("k", 1)

        assert store.get("k") == 1
