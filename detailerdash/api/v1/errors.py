from __future__ import annotations

from fastapi import HTTPException

from detailerdash.application.exceptions import (
    BookingError,
    NotFoundError,
    PersistenceError,
    RequestCancelledError,
    SlotConflictError,
    ValidationError,
)


def to_http_error(e: BookingError) -> HTTPException:
    if isinstance(e, ValidationError):
        return HTTPException(status_code=422, detail={"message": str(e), "missing_fields": e.missing_fields})
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, (SlotConflictError, RequestCancelledError)):
        return HTTPException(status_code=409, detail=str(e))
    if isinstance(e, PersistenceError):
        return HTTPException(status_code=503, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))
