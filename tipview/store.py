"""
Local key-value persistence backed by a single JSON document.
"""
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any, Dict

from .config import STORE_PATH

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the store cannot be read or written."""
    pass


class KeyValueStore:
    """JSON-file key-value store. The whole document is rewritten on every change."""

    def __init__(self, path: str = STORE_PATH):
        """
        Initialize the store.

        Args:
            path: Location of the JSON document
        """
        self.path = Path(path)

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under key, or default if absent."""
        return self._read().get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        data = self._read_for_update()
        data[key] = value
        self._write(data)

    def remove(self, key: str) -> None:
        """Delete key from the store. Missing keys are ignored."""
        data = self._read_for_update()
        if key not in data:
            return
        del data[key]
        self._write(data)

    def _read(self) -> Dict[str, Any]:
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError, RecursionError) as e:
            raise StorageError(f"Cannot read store {self.path}: {e}")

        if not isinstance(data, dict):
            raise StorageError(f"Store {self.path} is not a JSON object")
        return data

    def _read_for_update(self) -> Dict[str, Any]:
        # A corrupt document must not block new writes
        try:
            return self._read()
        except StorageError as e:
            logger.warning(f"Discarding unreadable store: {e}")
            return {}

    def _write(self, data: Dict[str, Any]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=str(self.path.parent), prefix=".tipview-", suffix=".tmp"
            )
            try:
                with os.fdopen(fd, 'w', encoding='utf-8') as f:
                    json.dump(data, f, indent=2, ensure_ascii=False)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.unlink(tmp_path)
                raise
        except (OSError, TypeError, ValueError) as e:
            raise StorageError(f"Cannot write store {self.path}: {e}")
