from __future__ import annotations

import re
import threading
from pathlib import Path

from detailerdash.application.exceptions import PersistenceError
from detailerdash.application.ports.key_value_store import KeyValueStorePort

_UNSAFE_CHARS = re.compile(r"[^A-Za-z0-9._-]")


class JsonFileKeyValueStore(KeyValueStorePort):
    """Stores each key as ``<data_dir>/<key>.json``, written atomically via a temp file."""

    def __init__(self, data_dir: str = "./data/store") -> None:
        self._data_dir = Path(data_dir)
        self._data_dir.mkdir(parents=True, exist_ok=True)
        self._locks: dict[str, threading.Lock] = {}
        self._lock_lock = threading.Lock()  # Lock for managing locks dict

    def _get_lock(self, key: str) -> threading.Lock:
        """Get or create a lock for a key."""
        with self._lock_lock:
            if key not in self._locks:
                self._locks[key] = threading.Lock()
            return self._locks[key]

    def _get_file_path(self, key: str) -> Path:
        return self._data_dir / f"{_UNSAFE_CHARS.sub('_', key)}.json"

    def load(self, key: str) -> bytes | None:
        file_path = self._get_file_path(key)
        with self._get_lock(key):
            if not file_path.exists():
                return None
            try:
                return file_path.read_bytes()
            except OSError as e:
                raise PersistenceError(f"Failed to read {file_path}: {e}") from e

    def save(self, key: str, data: bytes) -> None:
        file_path = self._get_file_path(key)
        temp_path = file_path.with_suffix(".json.tmp")
        with self._get_lock(key):
            try:
                with open(temp_path, "wb") as f:
                    f.write(data)
                # Atomic rename
                temp_path.replace(file_path)
            except OSError as e:
                if temp_path.exists():
                    try:
                        temp_path.unlink()
                    except OSError:
                        pass
                raise PersistenceError(f"Failed to write {file_path}: {e}") from e
