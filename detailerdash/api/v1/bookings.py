from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Header, HTTPException, Query, Response

from detailerdash.api.v1.errors import to_http_error
from detailerdash.api.v1.schemas import (
    AppointmentSchema,
    CreateAppointmentRequestSchema,
    ServiceSchema,
    SlotSchema,
)
from detailerdash.application.exceptions import BookingError
from detailerdash.application.ports.service_catalog import ServiceCatalogPort
from detailerdash.application.use_cases.booking_ledger import BookingLedger
from detailerdash.application.use_cases.slot_calendar import SlotCalendar
from detailerdash.core.config import settings
from detailerdash.domain.entities.appointment import BookingRequest, Customer, Vehicle
from detailerdash.domain.entities.service import Service
from detailerdash.wiring.dependencies import get_calendar, get_ledger, get_service_catalog

router = APIRouter()
logger = logging.getLogger(__name__)


def _list_services(catalog: ServiceCatalogPort, business_id: str):
    try:
        return catalog.list_services(business_id)
    except BookingError as e:
        raise to_http_error(e)


def _get_service(catalog: ServiceCatalogPort, business_id: str, service_id: str) -> Service:
    try:
        service = catalog.get_service(business_id, service_id)
    except BookingError as e:
        raise to_http_error(e)
    if service is None:
        raise HTTPException(status_code=404, detail=f"Unknown service {service_id}")
    return service


@router.get("/businesses/{business_id}/services", response_model=list[ServiceSchema])
def list_services(
    business_id: str,
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
):
    return [ServiceSchema.from_entity(s) for s in _list_services(catalog, business_id)]


@router.get("/businesses/{business_id}/slots", response_model=list[SlotSchema])
def list_slots(
    business_id: str,
    day: date = Query(...),
    service_id: str = Query(...),
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
    calendar: SlotCalendar = Depends(get_calendar),
):
    service = _get_service(catalog, business_id, service_id)
    try:
        return [SlotSchema.from_entity(slot) for slot in calendar.slots(day, service.duration_minutes)]
    except BookingError as e:
        raise to_http_error(e)


@router.post("/appointments", response_model=AppointmentSchema, status_code=201)
def create_appointment(
    req: CreateAppointmentRequestSchema,
    idempotency_key: str | None = Header(None, alias="Idempotency-Key"),
    ledger: BookingLedger = Depends(get_ledger),
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
):
    business_id = req.business_id or settings.DEFAULT_BUSINESS_ID
    request_id = req.request_id or idempotency_key or ""

    service = _get_service(catalog, business_id, req.service_id)

    booking = BookingRequest(
        service=service,
        start=req.start,
        customer=Customer(**req.customer.model_dump()),
        vehicle=Vehicle(**req.vehicle.model_dump()),
        business_id=business_id,
        business_name=settings.BUSINESS_NAME,
        notes=req.notes,
    )
    try:
        appointment = ledger.create_appointment(booking, request_id)
    except BookingError as e:
        logger.info("Booking rejected", extra={"request_id": request_id, "reason": str(e)})
        raise to_http_error(e)

    return AppointmentSchema.from_entity(appointment)


@router.delete("/appointments/{appointment_id}", status_code=204)
def cancel_appointment(
    appointment_id: str,
    ledger: BookingLedger = Depends(get_ledger),
) -> Response:
    try:
        ledger.cancel_appointment(appointment_id)
    except BookingError as e:
        raise to_http_error(e)
    return Response(status_code=204)


@router.get("/businesses/{business_id}/appointments", response_model=list[AppointmentSchema])
def list_business_appointments(
    business_id: str,
    upcoming: bool = Query(False),
    ledger: BookingLedger = Depends(get_ledger),
):
    if upcoming:
        appointments = ledger.upcoming_for_business(business_id)
    else:
        appointments = ledger.list_for_business(business_id)
    return [AppointmentSchema.from_entity(a) for a in appointments]


@router.get("/customers/{email}/appointments", response_model=list[AppointmentSchema])
def list_customer_appointments(
    email: str,
    ledger: BookingLedger = Depends(get_ledger),
):
    return [AppointmentSchema.from_entity(a) for a in ledger.list_for_customer(email)]
