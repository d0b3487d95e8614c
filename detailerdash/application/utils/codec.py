from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from detailerdash.domain.entities.appointment import (
    Appointment,
    AppointmentItem,
    Customer,
    Vehicle,
)
from detailerdash.domain.entities.service import Service, ServiceCategory

SNAPSHOT_VERSION = 1


def serialize_service(service: Service) -> dict[str, Any]:
    return {
        "id": service.id,
        "name": service.name,
        "description": service.description,
        "duration_minutes": service.duration_minutes,
        "base_price_cents": service.base_price_cents,
        "category": service.category.value,
    }


def deserialize_service(data: dict[str, Any]) -> Service:
    return Service(
        id=str(data["id"]),
        name=data["name"],
        description=data.get("description", ""),
        duration_minutes=int(data["duration_minutes"]),
        base_price_cents=int(data["base_price_cents"]),
        category=ServiceCategory(data.get("category", ServiceCategory.other.value)),
    )


def serialize_appointment(appointment: Appointment) -> dict[str, Any]:
    customer = appointment.customer
    vehicle = appointment.vehicle
    return {
        "id": appointment.id,
        "service": serialize_service(appointment.service),
        "start": appointment.start.isoformat(),
        "end": appointment.end.isoformat(),
        "customer": {
            "first_name": customer.first_name,
            "last_name": customer.last_name,
            "email": customer.email,
            "phone": customer.phone,
        },
        "vehicle": {
            "year": vehicle.year,
            "make": vehicle.make,
            "model": vehicle.model,
            "color": vehicle.color,
        },
        "items": [{"name": item.name, "price_cents": item.price_cents} for item in appointment.items],
        "notes": appointment.notes,
        "business_id": appointment.business_id,
        "business_name": appointment.business_name,
    }


def deserialize_appointment(data: dict[str, Any]) -> Appointment:
    customer = data["customer"]
    vehicle = data["vehicle"]
    return Appointment(
        id=data["id"],
        service=deserialize_service(data["service"]),
        start=datetime.fromisoformat(data["start"]),
        end=datetime.fromisoformat(data["end"]),
        customer=Customer(
            first_name=customer["first_name"],
            last_name=customer["last_name"],
            email=customer["email"],
            phone=customer["phone"],
        ),
        vehicle=Vehicle(
            year=vehicle["year"],
            make=vehicle["make"],
            model=vehicle["model"],
            color=vehicle.get("color"),
        ),
        items=tuple(
            AppointmentItem(name=item["name"], price_cents=int(item["price_cents"]))
            for item in data.get("items", [])
        ),
        notes=data.get("notes"),
        business_id=data["business_id"],
        business_name=data.get("business_name", ""),
    )


def encode_ledger(appointments: tuple[Appointment, ...], processed_request_ids: frozenset[str]) -> bytes:
    payload = {
        "version": SNAPSHOT_VERSION,
        "appointments": [serialize_appointment(a) for a in appointments],
        "processed_request_ids": sorted(processed_request_ids),
    }
    return json.dumps(payload, ensure_ascii=False).encode("utf-8")


def decode_ledger(raw: bytes) -> tuple[tuple[Appointment, ...], frozenset[str]]:
    """Decode a ledger snapshot. Raises ValueError/KeyError/TypeError on malformed data."""
    data = json.loads(raw.decode("utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Ledger snapshot must be a JSON object")
    appointments = tuple(deserialize_appointment(a) for a in data.get("appointments", []))
    processed = frozenset(str(r) for r in data.get("processed_request_ids", []))
    return appointments, processed


def encode_services(services: list[Service]) -> bytes:
    return json.dumps([serialize_service(s) for s in services], ensure_ascii=False).encode("utf-8")


def decode_services(raw: bytes) -> list[Service]:
    data = json.loads(raw.decode("utf-8"))
    if not isinstance(data, list):
        raise ValueError("Service list must be a JSON array")
    return [deserialize_service(item) for item in data]
