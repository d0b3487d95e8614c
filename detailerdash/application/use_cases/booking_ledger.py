from __future__ import annotations

import logging
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable

from detailerdash.application.exceptions import (
    PersistenceError,
    RequestCancelledError,
    SlotConflictError,
    ValidationError,
)
from detailerdash.application.ports.key_value_store import KeyValueStorePort
from detailerdash.application.ports.notifications import NotificationSinkPort
from detailerdash.application.utils.codec import decode_ledger, encode_ledger
from detailerdash.domain.entities.appointment import (
    Appointment,
    AppointmentItem,
    BookingRequest,
    normalize_email,
)


class BookingLedger:
    """Single source of truth for appointments.

    Appointments live in one immutable tuple. Writers build the next tuple
    under ``_lock``, persist it together with the processed request ids, and
    only then swap it in, so readers always see a committed snapshot and the
    customer and business projections can never disagree.
    """

    def __init__(
        self,
        store: KeyValueStorePort,
        notifier: NotificationSinkPort,
        store_key: str = "appointments",
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._notifier = notifier
        self._store_key = store_key
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)
        self._appointments, self._processed = self._load()

    def create_appointment(self, request: BookingRequest, request_id: str) -> Appointment:
        """
        Create the appointment for a booking request, at most once.

        Order of checks:
        1. (start, customer email) already booked -> return that appointment.
        2. request_id already processed -> return the appointment it created,
           or raise RequestCancelledError if that appointment was cancelled.
        3. overlap with another appointment of the same business -> SlotConflictError.
        4. otherwise create, persist and publish a new appointment with id == request_id.
        """
        _validate_request(request, request_id)

        with self._lock:
            appointments = self._appointments

            dedupe_key = request.dedupe_key
            for existing in appointments:
                if existing.dedupe_key == dedupe_key:
                    self._logger.info(
                        "Duplicate booking matched existing appointment",
                        extra={"appointment_id": existing.id, "request_id": request_id},
                    )
                    return existing

            if request_id in self._processed:
                existing = _find(appointments, request_id)
                if existing is not None:
                    self._logger.info(
                        "Replayed request returned existing appointment",
                        extra={"appointment_id": existing.id, "request_id": request_id},
                    )
                    return existing
                raise RequestCancelledError(request_id)

            end = request.start + timedelta(minutes=request.service.duration_minutes)
            for existing in appointments:
                if existing.business_id == request.business_id and existing.overlaps(request.start, end):
                    raise SlotConflictError(
                        f"{request.start.isoformat()} overlaps appointment {existing.id} "
                        f"for business {request.business_id}"
                    )

            appointment = Appointment(
                id=request_id,
                service=request.service,
                start=request.start,
                end=end,
                customer=request.customer,
                vehicle=request.vehicle,
                items=(AppointmentItem(name=request.service.name, price_cents=request.service.base_price_cents),),
                business_id=request.business_id,
                business_name=request.business_name,
                notes=request.notes,
            )
            next_appointments = appointments + (appointment,)
            next_processed = self._processed | {request_id}
            self._persist(next_appointments, next_processed)
            self._appointments = next_appointments
            self._processed = next_processed

        self._logger.info(
            "Appointment created",
            extra={"appointment_id": appointment.id, "business_id": appointment.business_id},
        )
        self._notify("appointment_created", appointment)
        return appointment

    def cancel_appointment(self, appointment_id: str) -> bool:
        """Remove an appointment. Returns False (and changes nothing) for unknown ids."""
        with self._lock:
            target = _find(self._appointments, appointment_id)
            if target is None:
                self._logger.debug("Cancel ignored for unknown appointment", extra={"appointment_id": appointment_id})
                return False
            remaining = tuple(a for a in self._appointments if a.id != appointment_id)
            self._persist(remaining, self._processed)
            self._appointments = remaining

        self._logger.info(
            "Appointment cancelled",
            extra={"appointment_id": target.id, "business_id": target.business_id},
        )
        self._notify("appointment_cancelled", target)
        return True

    def get(self, appointment_id: str) -> Appointment | None:
        return _find(self._appointments, appointment_id)

    def list_for_customer(self, email: str) -> list[Appointment]:
        wanted = normalize_email(email)
        snapshot = self._appointments
        return sorted((a for a in snapshot if normalize_email(a.customer.email) == wanted), key=_by_start)

    def list_for_business(self, business_id: str) -> list[Appointment]:
        snapshot = self._appointments
        return sorted((a for a in snapshot if a.business_id == business_id), key=_by_start)

    def upcoming_for_business(self, business_id: str, now: datetime | None = None) -> list[Appointment]:
        current = now or self._clock()
        return [a for a in self.list_for_business(business_id) if not a.is_past(current)]

    @property
    def processed_request_ids(self) -> frozenset[str]:
        return self._processed

    def __len__(self) -> int:
        return len(self._appointments)

    def _load(self) -> tuple[tuple[Appointment, ...], frozenset[str]]:
        try:
            raw = self._store.load(self._store_key)
        except PersistenceError:
            raise
        except Exception as e:
            raise PersistenceError(f"Failed to load {self._store_key!r}: {e}") from e

        if raw is None:
            return (), frozenset()
        try:
            return decode_ledger(raw)
        except (ValueError, KeyError, TypeError) as e:
            raise PersistenceError(f"Stored ledger {self._store_key!r} is corrupt: {e}") from e

    def _persist(self, appointments: tuple[Appointment, ...], processed: frozenset[str]) -> None:
        data = encode_ledger(appointments, processed)
        try:
            self._store.save(self._store_key, data)
        except PersistenceError:
            self._logger.error("Ledger save failed", extra={"reason": self._store_key})
            raise
        except Exception as e:
            self._logger.error("Ledger save failed", extra={"reason": str(e)})
            raise PersistenceError(f"Failed to save {self._store_key!r}: {e}") from e

    def _notify(self, event: str, appointment: Appointment) -> None:
        try:
            getattr(self._notifier, event)(appointment.business_id, appointment.id)
        except Exception as e:
            self._logger.warning(
                "Notification delivery failed",
                extra={"appointment_id": appointment.id, "reason": f"{event}: {e}"},
            )


def _validate_request(request: BookingRequest, request_id: str) -> None:
    missing: list[str] = []
    if not (request_id or "").strip():
        missing.append("request id")
    if not normalize_email(request.customer.email):
        missing.append("email")
    if not (request.business_id or "").strip():
        missing.append("business")
    if missing:
        raise ValidationError(f"Missing booking fields: {', '.join(missing)}", missing)
    if request.start.tzinfo is None:
        raise ValidationError("Booking start must be timezone-aware", ["time"])


def _find(appointments: tuple[Appointment, ...], appointment_id: str) -> Appointment | None:
    for appointment in appointments:
        if appointment.id == appointment_id:
            return appointment
    return None


def _by_start(appointment: Appointment) -> datetime:
    return appointment.start
