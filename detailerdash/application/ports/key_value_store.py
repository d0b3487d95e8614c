from abc import ABC, abstractmethod


class KeyValueStorePort(ABC):
    @abstractmethod
    def load(self, key: str) -> bytes | None:
        """Return the bytes stored under key, or None if nothing was saved yet."""
        raise NotImplementedError

    @abstractmethod
    def save(self, key: str, data: bytes) -> None:
        """Replace the bytes stored under key. Must either fully apply or raise."""
        raise NotImplementedError
