from __future__ import annotations

import threading

from detailerdash.application.exceptions import PersistenceError
from detailerdash.application.ports.key_value_store import KeyValueStorePort


class MemoryKeyValueStore(KeyValueStorePort):
    def __init__(self, initial: dict[str, bytes] | None = None) -> None:
        self._data: dict[str, bytes] = dict(initial or {})
        self._lock = threading.Lock()
        self.fail_saves = False
        self.fail_loads = False
        self.save_count = 0

    def load(self, key: str) -> bytes | None:
        if self.fail_loads:
            raise PersistenceError(f"Simulated load failure for {key!r}")
        with self._lock:
            return self._data.get(key)

    def save(self, key: str, data: bytes) -> None:
        if self.fail_saves:
            raise PersistenceError(f"Simulated save failure for {key!r}")
        with self._lock:
            self._data[key] = bytes(data)
            self.save_count += 1
