from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, tzinfo
from typing import Iterator

from detailerdash.application.exceptions import ValidationError
from detailerdash.application.ports.availability import AvailabilityPolicy


@dataclass(frozen=True)
class TimeSlot:
    start: datetime
    end: datetime
    available: bool


class SlotCalendar:
    def __init__(
        self,
        policy: AvailabilityPolicy,
        timezone: tzinfo,
        open_hour: int = 9,
        close_hour: int = 17,
        granularity_minutes: int = 30,
    ) -> None:
        if not 0 <= open_hour < close_hour <= 24:
            raise ValueError(f"Invalid operating window {open_hour}-{close_hour}")
        if granularity_minutes <= 0:
            raise ValueError("granularity_minutes must be positive")
        self._policy = policy
        self._timezone = timezone
        self._open_hour = open_hour
        self._close_hour = close_hour
        self._granularity = timedelta(minutes=granularity_minutes)

    def slots(self, day: date, duration_minutes: int) -> Iterator[TimeSlot]:
        """Yield every candidate start for the day whose end stays inside closing time."""
        if duration_minutes <= 0:
            raise ValidationError(f"Service duration must be positive, got {duration_minutes}", ["duration"])
        duration = timedelta(minutes=duration_minutes)
        current = datetime.combine(day, time(hour=self._open_hour), tzinfo=self._timezone)
        if self._close_hour == 24:
            closing = datetime.combine(day + timedelta(days=1), time(), tzinfo=self._timezone)
        else:
            closing = datetime.combine(day, time(hour=self._close_hour), tzinfo=self._timezone)

        while current + duration <= closing:
            slot_end = current + duration
            yield TimeSlot(start=current, end=slot_end, available=self._policy.is_available(current, slot_end))
            current += self._granularity

    def available_starts(self, day: date, duration_minutes: int) -> list[datetime]:
        return [slot.start for slot in self.slots(day, duration_minutes) if slot.available]
