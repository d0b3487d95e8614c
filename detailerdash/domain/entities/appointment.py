from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from detailerdash.domain.entities.service import Service, format_cents


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


@dataclass(frozen=True)
class Customer:
    first_name: str
    last_name: str
    email: str
    phone: str

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"


@dataclass(frozen=True)
class Vehicle:
    year: str
    make: str
    model: str
    color: str | None = None

    @property
    def display_name(self) -> str:
        parts = [self.year, self.make, self.model]
        if self.color:
            parts.insert(0, self.color)
        return " ".join(parts)


@dataclass(frozen=True)
class BookingRequest:
    service: Service
    start: datetime
    customer: Customer
    vehicle: Vehicle
    business_id: str
    business_name: str = ""
    notes: str | None = None

    @property
    def dedupe_key(self) -> tuple[datetime, str]:
        return (self.start, normalize_email(self.customer.email))


@dataclass(frozen=True)
class AppointmentItem:
    name: str
    price_cents: int

    @property
    def display_price(self) -> str:
        return format_cents(self.price_cents)


@dataclass(frozen=True)
class Appointment:
    id: str
    service: Service
    start: datetime
    end: datetime
    customer: Customer
    vehicle: Vehicle
    items: tuple[AppointmentItem, ...]
    business_id: str
    business_name: str = ""
    notes: str | None = None

    @property
    def total_cents(self) -> int:
        return sum(item.price_cents for item in self.items)

    @property
    def display_total(self) -> str:
        return format_cents(self.total_cents)

    @property
    def dedupe_key(self) -> tuple[datetime, str]:
        return (self.start, normalize_email(self.customer.email))

    def is_past(self, now: datetime) -> bool:
        return self.end < now

    def overlaps(self, start: datetime, end: datetime) -> bool:
        return start < self.end and self.start < end

    @property
    def list_header_text(self) -> str:
        time_text = self.start.strftime("%I:%M %p").lstrip("0")
        return f"{self.start.strftime('%a, %b')} {self.start.day} • {time_text} • {self.service.name}"
