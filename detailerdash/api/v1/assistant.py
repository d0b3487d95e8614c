from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from detailerdash.api.v1.errors import to_http_error
from detailerdash.api.v1.schemas import (
    CreateSessionRequestSchema,
    SendMessageRequestSchema,
    SessionSchema,
    TurnSchema,
)
from detailerdash.application.exceptions import BookingError
from detailerdash.application.ports.service_catalog import ServiceCatalogPort
from detailerdash.core.config import settings
from detailerdash.infrastructure.store.session_registry import SessionHandle, SessionRegistry
from detailerdash.wiring.dependencies import get_service_catalog, get_session_registry

router = APIRouter()


def _get_handle(registry: SessionRegistry, session_id: str) -> SessionHandle:
    try:
        return registry.get(session_id)
    except BookingError as e:
        raise to_http_error(e)


@router.post("/sessions", response_model=SessionSchema, status_code=201)
def create_session(
    req: CreateSessionRequestSchema | None = None,
    registry: SessionRegistry = Depends(get_session_registry),
    catalog: ServiceCatalogPort = Depends(get_service_catalog),
):
    business_id = (req.business_id if req else None) or settings.DEFAULT_BUSINESS_ID
    try:
        services = catalog.list_services(business_id)
    except BookingError as e:
        raise to_http_error(e)
    handle = registry.create(business_id, settings.BUSINESS_NAME, services)
    return SessionSchema.from_entity(handle.session, handle.business_id)


@router.get("/sessions/{session_id}", response_model=SessionSchema)
def get_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    handle = _get_handle(registry, session_id)
    with handle.lock:
        return SessionSchema.from_entity(handle.session, handle.business_id)


@router.post("/sessions/{session_id}/messages", response_model=TurnSchema)
def send_message(
    session_id: str,
    req: SendMessageRequestSchema,
    registry: SessionRegistry = Depends(get_session_registry),
):
    handle = _get_handle(registry, session_id)
    with handle.lock:
        result = handle.session.send(req.text)
        draft = handle.session.booking_draft()
    return TurnSchema.from_result(result, draft)


@router.delete("/sessions/{session_id}/messages", response_model=SessionSchema)
def clear_chat(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    handle = _get_handle(registry, session_id)
    with handle.lock:
        handle.session.reset()
        return SessionSchema.from_entity(handle.session, handle.business_id)


@router.delete("/sessions/{session_id}", status_code=204)
def close_session(
    session_id: str,
    registry: SessionRegistry = Depends(get_session_registry),
):
    registry.close(session_id)
    return Response(status_code=204)
