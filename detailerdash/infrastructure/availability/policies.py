from __future__ import annotations

import random
from datetime import datetime

from detailerdash.application.ports.availability import AvailabilityPolicy
from detailerdash.application.use_cases.booking_ledger import BookingLedger


class AlwaysAvailablePolicy(AvailabilityPolicy):
    def is_available(self, start: datetime, end: datetime) -> bool:
        return True


class RandomAvailabilityPolicy(AvailabilityPolicy):
    """Placeholder policy: each slot is independently open with probability ``ratio``."""

    def __init__(self, rng: random.Random | None = None, ratio: float = 0.8) -> None:
        if not 0.0 <= ratio <= 1.0:
            raise ValueError(f"ratio must be within [0, 1], got {ratio}")
        self._rng = rng or random.Random()
        self._ratio = ratio

    def is_available(self, start: datetime, end: datetime) -> bool:
        return self._rng.random() < self._ratio


class LedgerAvailabilityPolicy(AvailabilityPolicy):
    """Closes slots that overlap a booked appointment, otherwise defers to ``base``."""

    def __init__(self, ledger: BookingLedger, business_id: str, base: AvailabilityPolicy | None = None) -> None:
        self._ledger = ledger
        self._business_id = business_id
        self._base = base or AlwaysAvailablePolicy()

    def is_available(self, start: datetime, end: datetime) -> bool:
        for appointment in self._ledger.list_for_business(self._business_id):
            if appointment.overlaps(start, end):
                return False
        return self._base.is_available(start, end)
