from __future__ import annotations

from dataclasses import dataclass, fields


@dataclass
class BookingContext:
    """Booking details accumulated across conversation turns.

    Fields are only ever replaced by a newer match; nothing is cleared
    except through ``reset``.
    """

    vehicle_year: str | None = None
    vehicle_make: str | None = None
    vehicle_model: str | None = None
    vehicle_color: str | None = None
    service_preference: str | None = None  # service name
    preferred_date: str | None = None  # "Friday", "tomorrow", "next week", "this weekend"
    preferred_time: str | None = None  # "morning", "afternoon", "evening"

    @property
    def has_vehicle_info(self) -> bool:
        return bool(self.vehicle_make or self.vehicle_model or self.vehicle_year)

    @property
    def vehicle_description(self) -> str:
        parts = [self.vehicle_color, self.vehicle_year, self.vehicle_make, self.vehicle_model]
        return " ".join(part for part in parts if part)

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, None)
