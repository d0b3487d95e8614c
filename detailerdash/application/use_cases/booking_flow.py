from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from datetime import date, datetime
from typing import Callable

from detailerdash.application.exceptions import ValidationError
from detailerdash.application.use_cases.booking_ledger import BookingLedger
from detailerdash.application.use_cases.conversation_session import BookingDraft
from detailerdash.application.use_cases.slot_calendar import SlotCalendar
from detailerdash.application.utils.date_parser import map_vague_time_to_range, resolve_date_preference
from detailerdash.domain.entities.appointment import Appointment, BookingRequest, Customer, Vehicle
from detailerdash.domain.entities.service import Service


@dataclass
class BookingForm:
    service: Service | None = None
    day: date | None = None
    start: datetime | None = None
    first_name: str = ""
    last_name: str = ""
    email: str = ""
    phone: str = ""
    vehicle_year: str = ""
    vehicle_make: str = ""
    vehicle_model: str = ""
    vehicle_color: str = ""
    notes: str = ""
    preferred_time: str | None = None


def sanitize_year(year: str) -> str:
    return "".join(ch for ch in (year or "") if ch.isdigit())


class BookingFlow:
    """One booking attempt: collects the form, offers slots and submits to the ledger.

    The request id is minted on the first submit and reused on every retry
    until ``reset``, so a resubmitted form never books twice.
    """

    def __init__(
        self,
        ledger: BookingLedger,
        calendar: SlotCalendar,
        business_id: str,
        business_name: str,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self._ledger = ledger
        self._calendar = calendar
        self._business_id = business_id
        self._business_name = business_name
        self._id_factory = id_factory or (lambda: str(uuid.uuid4()))
        self._request_id: str | None = None
        self._logger = logging.getLogger(__name__)
        self.form = BookingForm()

    @property
    def request_id(self) -> str | None:
        return self._request_id

    def prefill(self, draft: BookingDraft, today: date) -> None:
        """Copy what the assistant extracted into empty form fields."""
        form = self.form
        if draft.service and form.service is None:
            form.service = draft.service
        form.vehicle_year = form.vehicle_year or (draft.vehicle_year or "")
        form.vehicle_make = form.vehicle_make or (draft.vehicle_make or "")
        form.vehicle_model = form.vehicle_model or (draft.vehicle_model or "")
        form.vehicle_color = form.vehicle_color or (draft.vehicle_color or "")
        if form.day is None:
            form.day = resolve_date_preference(draft.preferred_date, today)
        form.preferred_time = form.preferred_time or draft.preferred_time

    def load_available_slots(self) -> list[datetime]:
        form = self.form
        if form.day is None or form.service is None:
            return []
        starts = self._calendar.available_starts(form.day, form.service.duration_minutes)
        window = map_vague_time_to_range(form.preferred_time)
        if window:
            start_hour, end_hour = window
            preferred = [s for s in starts if start_hour <= s.hour < end_hour]
            if preferred:
                return preferred
        return starts

    def validation_errors(self) -> list[str]:
        form = self.form
        errors: list[str] = []
        if form.service is None:
            errors.append("service")
        if not form.first_name.strip():
            errors.append("first name")
        if not form.last_name.strip():
            errors.append("last name")
        if not form.email.strip():
            errors.append("email")
        if not form.phone.strip():
            errors.append("phone")
        if not form.vehicle_make.strip():
            errors.append("vehicle make")
        if not form.vehicle_model.strip():
            errors.append("vehicle model")
        if len(sanitize_year(form.vehicle_year)) < 4:
            errors.append("vehicle year")
        if form.start is None:
            errors.append("time")
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.validation_errors()

    def confirmation_message(self) -> str:
        errors = self.validation_errors()
        if errors:
            return f"Please enter {', '.join(errors)} to continue."
        start = self.form.start
        time_text = start.strftime("%I:%M %p").lstrip("0")
        return (
            f"Are you sure you want to book an appointment on {start.strftime('%b')} {start.day}, {start.year}, "
            f"{time_text} for {self.form.service.name}"
        )

    def book(self) -> Appointment:
        errors = self.validation_errors()
        if errors:
            raise ValidationError(f"Please enter {', '.join(errors)} to continue.", errors)

        if self._request_id is None:
            self._request_id = self._id_factory()

        form = self.form
        request = BookingRequest(
            service=form.service,
            start=form.start,
            customer=Customer(
                first_name=form.first_name.strip(),
                last_name=form.last_name.strip(),
                email=form.email.strip(),
                phone=form.phone.strip(),
            ),
            vehicle=Vehicle(
                year=sanitize_year(form.vehicle_year),
                make=form.vehicle_make.strip(),
                model=form.vehicle_model.strip(),
                color=form.vehicle_color.strip() or None,
            ),
            business_id=self._business_id,
            business_name=self._business_name,
            notes=form.notes.strip() or None,
        )
        self._logger.info("Submitting booking", extra={"request_id": self._request_id, "business_id": self._business_id})
        return self._ledger.create_appointment(request, self._request_id)

    def reset(self) -> None:
        self.form = BookingForm()
        self._request_id = None
