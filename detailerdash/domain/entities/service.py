from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum


class ServiceCategory(str, Enum):
    detailing = "detailing"
    wash = "wash"
    ceramic = "ceramic"
    paint = "paint"
    interior = "interior"
    other = "other"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]


_CATEGORY_LABELS = {
    ServiceCategory.detailing: "Detailing",
    ServiceCategory.wash: "Wash",
    ServiceCategory.ceramic: "Ceramic Coating",
    ServiceCategory.paint: "Paint Correction",
    ServiceCategory.interior: "Interior",
    ServiceCategory.other: "Other",
}


def format_cents(cents: int) -> str:
    return f"${cents / 100:.2f}"


def format_duration(minutes: int) -> str:
    hours, rest = divmod(minutes, 60)
    if hours and rest:
        return f"{hours}h {rest}m"
    if hours:
        return f"{hours}h"
    return f"{rest}m"


@dataclass(frozen=True)
class Service:
    name: str
    description: str
    duration_minutes: int
    base_price_cents: int
    category: ServiceCategory = ServiceCategory.other
    id: str = field(default_factory=lambda: str(uuid.uuid4()))

    def __post_init__(self) -> None:
        if self.duration_minutes <= 0:
            raise ValueError(f"Service duration must be positive, got {self.duration_minutes}")
        if self.base_price_cents < 0:
            raise ValueError(f"Service price must not be negative, got {self.base_price_cents}")

    @property
    def display_price(self) -> str:
        return format_cents(self.base_price_cents)

    @property
    def display_duration(self) -> str:
        return format_duration(self.duration_minutes)
