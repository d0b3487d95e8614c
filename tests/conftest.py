from __future__ import annotations

import random
from datetime import datetime, timezone

import pytest

from detailerdash.application.use_cases.booking_ledger import BookingLedger
from detailerdash.application.use_cases.slot_calendar import SlotCalendar
from detailerdash.domain.entities.appointment import BookingRequest, Customer, Vehicle
from detailerdash.domain.entities.service import Service
from detailerdash.infrastructure.availability.policies import AlwaysAvailablePolicy
from detailerdash.infrastructure.catalog.service_catalog_data import DEMO_SERVICES
from detailerdash.infrastructure.notifications.sinks import RecordingNotificationSink
from detailerdash.infrastructure.store.memory_store import MemoryKeyValueStore


@pytest.fixture
def services() -> list[Service]:
    return list(DEMO_SERVICES)


@pytest.fixture
def full_detail(services) -> Service:
    return next(s for s in services if s.name == "Full Detail")


@pytest.fixture
def express_wash(services) -> Service:
    return next(s for s in services if s.name == "Express Wash")


@pytest.fixture
def store() -> MemoryKeyValueStore:
    return MemoryKeyValueStore()


@pytest.fixture
def notifier() -> RecordingNotificationSink:
    return RecordingNotificationSink()


@pytest.fixture
def ledger(store, notifier) -> BookingLedger:
    return BookingLedger(store=store, notifier=notifier)


@pytest.fixture
def calendar() -> SlotCalendar:
    return SlotCalendar(policy=AlwaysAvailablePolicy(), timezone=timezone.utc)


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def make_request():
    def _make(
        service: Service,
        start: datetime,
        email: str = "jane@example.com",
        business_id: str = "biz-1",
    ) -> BookingRequest:
        return BookingRequest(
            service=service,
            start=start,
            customer=Customer(first_name="Jane", last_name="Doe", email=email, phone="555-0100"),
            vehicle=Vehicle(year="2020", make="Honda", model="Civic", color="Red"),
            business_id=business_id,
            business_name="Shine Bros",
        )

    return _make
