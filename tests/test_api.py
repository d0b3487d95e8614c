from __future__ import annotations

import random
from datetime import timezone

import pytest
from fastapi.testclient import TestClient

from detailerdash.application.use_cases.booking_ledger import BookingLedger
from detailerdash.application.use_cases.slot_calendar import SlotCalendar
from detailerdash.infrastructure.availability.policies import AlwaysAvailablePolicy, LedgerAvailabilityPolicy
from detailerdash.infrastructure.catalog.service_catalog_store import StaticServiceCatalog
from detailerdash.infrastructure.notifications.sinks import RecordingNotificationSink
from detailerdash.infrastructure.store.memory_store import MemoryKeyValueStore
from detailerdash.infrastructure.store.session_registry import SessionRegistry
from detailerdash.main import app
from detailerdash.wiring.dependencies import (
    get_calendar,
    get_ledger,
    get_service_catalog,
    get_session_registry,
)


@pytest.fixture
def client():
    ledger = BookingLedger(store=MemoryKeyValueStore(), notifier=RecordingNotificationSink())
    catalog = StaticServiceCatalog()
    registry = SessionRegistry(rng_factory=lambda: random.Random(0))

    def calendar_for(business_id: str) -> SlotCalendar:
        policy = LedgerAvailabilityPolicy(ledger, business_id, base=AlwaysAvailablePolicy())
        return SlotCalendar(policy=policy, timezone=timezone.utc)

    app.dependency_overrides[get_ledger] = lambda: ledger
    app.dependency_overrides[get_service_catalog] = lambda: catalog
    app.dependency_overrides[get_calendar] = calendar_for
    app.dependency_overrides[get_session_registry] = lambda: registry
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _booking(**overrides) -> dict:
    payload = {
        "business_id": "demo",
        "service_id": "full-detail",
        "start": "2030-06-03T10:00:00+00:00",
        "customer": {"first_name": "Jane", "last_name": "Doe", "email": "jane@example.com", "phone": "555-0100"},
        "vehicle": {"year": "2020", "make": "Honda", "model": "Civic", "color": "Red"},
    }
    payload.update(overrides)
    return payload


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


def test_list_services(client):
    resp = client.get("/api/v1/businesses/demo/services")

    assert resp.status_code == 200
    body = resp.json()
    assert body[0]["name"] == "Full Detail"
    assert body[0]["display_price"] == "$150.00"


def test_list_slots(client):
    resp = client.get("/api/v1/businesses/demo/slots", params={"day": "2030-06-03", "service_id": "full-detail"})

    assert resp.status_code == 200
    slots = resp.json()
    assert len(slots) == 11
    assert all(slot["available"] for slot in slots)


def test_list_slots_unknown_service(client):
    resp = client.get("/api/v1/businesses/demo/slots", params={"day": "2030-06-03", "service_id": "nope"})

    assert resp.status_code == 404


def test_create_appointment_is_idempotent_by_header(client):
    first = client.post("/api/v1/appointments", json=_booking(), headers={"Idempotency-Key": "key-1"})
    second = client.post("/api/v1/appointments", json=_booking(), headers={"Idempotency-Key": "key-1"})

    assert first.status_code == 201
    assert second.status_code == 201
    assert first.json()["id"] == second.json()["id"] == "key-1"
    assert first.json()["end"] == "2030-06-03T13:00:00Z"
    assert len(client.get("/api/v1/businesses/demo/appointments").json()) == 1


def test_booked_time_closes_slots(client):
    client.post("/api/v1/appointments", json=_booking(request_id="req-1"))

    slots = client.get(
        "/api/v1/businesses/demo/slots", params={"day": "2030-06-03", "service_id": "express-wash"}
    ).json()

    closed = [slot["start"] for slot in slots if not slot["available"]]
    assert closed[0] == "2030-06-03T10:00:00Z"
    assert len(closed) == 6


def test_overlapping_booking_is_a_conflict(client):
    client.post("/api/v1/appointments", json=_booking(request_id="req-1"))
    other = _booking(request_id="req-2", start="2030-06-03T11:00:00+00:00")
    other["customer"] = dict(other["customer"], email="bob@example.com")

    resp = client.post("/api/v1/appointments", json=other)

    assert resp.status_code == 409


def test_booking_without_request_id_is_rejected(client):
    resp = client.post("/api/v1/appointments", json=_booking())

    assert resp.status_code == 422
    assert resp.json()["detail"]["missing_fields"] == ["request id"]


def test_booking_with_naive_start_is_rejected(client):
    resp = client.post("/api/v1/appointments", json=_booking(request_id="req-1", start="2030-06-03T10:00:00"))

    assert resp.status_code == 422


def test_booking_unknown_service(client):
    resp = client.post("/api/v1/appointments", json=_booking(request_id="req-1", service_id="nope"))

    assert resp.status_code == 404


def test_cancel_removes_from_listings_and_replay_conflicts(client):
    created = client.post("/api/v1/appointments", json=_booking(request_id="req-1")).json()

    assert client.delete(f"/api/v1/appointments/{created['id']}").status_code == 204
    assert client.delete(f"/api/v1/appointments/{created['id']}").status_code == 204

    assert client.get("/api/v1/businesses/demo/appointments").json() == []
    assert client.get("/api/v1/customers/jane@example.com/appointments").json() == []
    assert client.post("/api/v1/appointments", json=_booking(request_id="req-1")).status_code == 409


def test_customer_listing_normalizes_email(client):
    client.post("/api/v1/appointments", json=_booking(request_id="req-1"))

    resp = client.get("/api/v1/customers/JANE@example.com/appointments")

    assert [a["id"] for a in resp.json()] == ["req-1"]


def test_assistant_conversation(client):
    created = client.post("/api/v1/assistant/sessions", json={"business_id": "demo"})
    assert created.status_code == 201
    session_id = created.json()["session_id"]
    assert len(created.json()["messages"]) == 1

    turn = client.post(f"/api/v1/assistant/sessions/{session_id}/messages", json={"text": "How much is a full detail?"})

    assert turn.status_code == 200
    body = turn.json()
    assert body["strategy"] == "suggested_price"
    assert body["intents"] == ["pricing", "services"]
    assert body["draft"]["service"]["name"] == "Full Detail"

    blank = client.post(f"/api/v1/assistant/sessions/{session_id}/messages", json={"text": "  "})
    assert blank.json()["reply"] is None

    session = client.get(f"/api/v1/assistant/sessions/{session_id}").json()
    assert len(session["messages"]) == 3

    cleared = client.delete(f"/api/v1/assistant/sessions/{session_id}/messages")
    assert cleared.status_code == 200
    assert len(cleared.json()["messages"]) == 1


def test_unknown_session(client):
    resp = client.post("/api/v1/assistant/sessions/missing/messages", json={"text": "hi"})

    assert resp.status_code == 404


def test_closed_session_is_gone(client):
    session_id = client.post("/api/v1/assistant/sessions", json={"business_id": "demo"}).json()["session_id"]

    assert client.delete(f"/api/v1/assistant/sessions/{session_id}").status_code == 204
    assert client.delete(f"/api/v1/assistant/sessions/{session_id}").status_code == 204
    assert client.get(f"/api/v1/assistant/sessions/{session_id}").status_code == 404


class _CountingCatalog(StaticServiceCatalog):
    def __init__(self) -> None:
        super().__init__()
        self.lookups: list[tuple[str, str]] = []

    def get_service(self, business_id: str, service_id: str):
        self.lookups.append((business_id, service_id))
        return super().get_service(business_id, service_id)


def test_service_lookups_go_through_catalog(client):
    catalog = _CountingCatalog()
    app.dependency_overrides[get_service_catalog] = lambda: catalog

    client.get("/api/v1/businesses/demo/slots", params={"day": "2030-06-03", "service_id": "express-wash"})
    client.post("/api/v1/appointments", json=_booking(request_id="req-1"))

    assert catalog.lookups == [("demo", "express-wash"), ("demo", "full-detail")]
