from __future__ import annotations

import itertools
from datetime import date, datetime, time, timezone

import pytest

from detailerdash.application.exceptions import PersistenceError, ValidationError
from detailerdash.application.use_cases.booking_flow import BookingFlow, sanitize_year
from detailerdash.application.use_cases.conversation_session import BookingDraft

MONDAY = date(2030, 6, 3)


@pytest.fixture
def flow(ledger, calendar) -> BookingFlow:
    counter = itertools.count(1)
    return BookingFlow(ledger, calendar, "biz-1", "Shine Bros", id_factory=lambda: f"req-{next(counter)}")


def _draft(service, preferred_date="tomorrow", preferred_time="afternoon") -> BookingDraft:
    return BookingDraft(
        service=service,
        vehicle_year="2019",
        vehicle_make="Toyota",
        vehicle_model="Camry",
        vehicle_color=None,
        preferred_date=preferred_date,
        preferred_time=preferred_time,
    )


def _fill_customer(flow: BookingFlow) -> None:
    flow.form.first_name = "Jane"
    flow.form.last_name = "Doe"
    flow.form.email = "jane@example.com"
    flow.form.phone = "555-0100"


def test_empty_form_lists_missing_fields_in_order(flow):
    assert flow.validation_errors() == [
        "service",
        "first name",
        "last name",
        "email",
        "phone",
        "vehicle make",
        "vehicle model",
        "vehicle year",
        "time",
    ]
    assert flow.confirmation_message().startswith("Please enter service, first name")


def test_year_is_sanitized_to_digits():
    assert sanitize_year("20-19") == "2019"
    assert sanitize_year("'98") == "98"
    assert sanitize_year("") == ""


def test_short_year_is_invalid(flow, full_detail):
    flow.prefill(_draft(full_detail), MONDAY)
    flow.form.vehicle_year = "'19"

    assert "vehicle year" in flow.validation_errors()


def test_prefill_from_draft(flow, full_detail):
    flow.prefill(_draft(full_detail), MONDAY)

    assert flow.form.service == full_detail
    assert flow.form.day == date(2030, 6, 4)
    assert (flow.form.vehicle_year, flow.form.vehicle_make, flow.form.vehicle_model) == ("2019", "Toyota", "Camry")
    assert flow.form.preferred_time == "afternoon"


def test_prefill_keeps_what_the_customer_typed(flow, full_detail, express_wash):
    flow.form.service = express_wash
    flow.form.vehicle_make = "Honda"

    flow.prefill(_draft(full_detail), MONDAY)

    assert flow.form.service == express_wash
    assert flow.form.vehicle_make == "Honda"


def test_slots_follow_preferred_time_of_day(flow, full_detail):
    flow.prefill(_draft(full_detail), MONDAY)

    starts = flow.load_available_slots()

    assert [s.time() for s in starts] == [time(12, 0), time(12, 30), time(13, 0), time(13, 30), time(14, 0)]


def test_slots_fall_back_when_preferred_window_is_empty(flow, full_detail):
    flow.prefill(_draft(full_detail, preferred_time="evening"), MONDAY)

    starts = flow.load_available_slots()

    assert len(starts) == 11
    assert starts[0].time() == time(9, 0)


def test_no_slots_without_service_or_day(flow):
    assert flow.load_available_slots() == []


def test_confirmation_message(flow, full_detail):
    flow.prefill(_draft(full_detail), MONDAY)
    _fill_customer(flow)
    flow.form.start = datetime(2030, 6, 4, 12, 0, tzinfo=timezone.utc)

    assert flow.is_valid
    assert flow.confirmation_message() == (
        "Are you sure you want to book an appointment on Jun 4, 2030, 12:00 PM for Full Detail"
    )


def test_invalid_form_never_reaches_ledger(flow, ledger):
    with pytest.raises(ValidationError) as exc_info:
        flow.book()

    assert exc_info.value.missing_fields[0] == "service"
    assert flow.request_id is None
    assert len(ledger) == 0


def test_resubmitting_reuses_request_id(flow, ledger, full_detail):
    flow.prefill(_draft(full_detail), MONDAY)
    _fill_customer(flow)
    flow.form.start = flow.load_available_slots()[0]

    first = flow.book()
    second = flow.book()

    assert first == second
    assert flow.request_id == "req-1"
    assert len(ledger) == 1
    assert first.vehicle.year == "2019"


def test_retry_after_store_failure_keeps_request_id(flow, ledger, store, full_detail):
    flow.prefill(_draft(full_detail), MONDAY)
    _fill_customer(flow)
    flow.form.start = flow.load_available_slots()[0]
    store.fail_saves = True

    with pytest.raises(PersistenceError):
        flow.book()
    assert flow.request_id == "req-1"

    store.fail_saves = False
    assert flow.book().id == "req-1"


def test_reset_starts_a_new_attempt(flow, ledger, full_detail):
    flow.prefill(_draft(full_detail), MONDAY)
    _fill_customer(flow)
    flow.form.start = datetime(2030, 6, 4, 9, 0, tzinfo=timezone.utc)
    flow.book()

    flow.reset()
    assert flow.request_id is None
    assert flow.form.service is None

    flow.prefill(_draft(full_detail), MONDAY)
    _fill_customer(flow)
    flow.form.start = datetime(2030, 6, 4, 13, 0, tzinfo=timezone.utc)
    second = flow.book()

    assert second.id == "req-2"
    assert len(ledger) == 2
