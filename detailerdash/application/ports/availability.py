from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime


class AvailabilityPolicy(ABC):
    @abstractmethod
    def is_available(self, start: datetime, end: datetime) -> bool:
        """Decide whether the candidate slot [start, end) can be offered."""
        raise NotImplementedError
