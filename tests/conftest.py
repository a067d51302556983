"""
Pytest configuration and fixtures.
"""
import pytest
import sys
import os

# Add the parent directory to path so we can import the app
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from tipview import history as history_module
from tipview.history import HistoryStore
from tipview.store import KeyValueStore


@pytest.fixture
def kv_store(tmp_path):
    """A key-value store in a temporary directory."""
    return KeyValueStore(str(tmp_path / "store.json"))


@pytest.fixture
def history_store(kv_store, monkeypatch):
    """An empty history store installed as the global instance."""
    store = HistoryStore(kv_store)
    monkeypatch.setattr(history_module, "_history_store", store)
    return store
