from __future__ import annotations

import random
from datetime import date, datetime, time, timedelta, timezone

import pytest

from detailerdash.application.exceptions import ValidationError
from detailerdash.application.use_cases.slot_calendar import SlotCalendar
from detailerdash.infrastructure.availability.policies import (
    AlwaysAvailablePolicy,
    LedgerAvailabilityPolicy,
    RandomAvailabilityPolicy,
)

DAY = date(2030, 6, 3)


def test_sixty_minute_slots_never_end_after_closing(calendar):
    slots = list(calendar.slots(DAY, 60))
    closing = datetime.combine(DAY, time(17, 0), tzinfo=timezone.utc)

    assert all(slot.end <= closing for slot in slots)
    assert slots[0].start.time() == time(9, 0)
    assert slots[-1].start.time() == time(16, 0)
    assert len(slots) == 15


def test_slots_step_by_granularity(calendar):
    starts = [slot.start for slot in calendar.slots(DAY, 30)]

    assert len(starts) == 16
    assert all(b - a == timedelta(minutes=30) for a, b in zip(starts, starts[1:]))
    assert starts[-1].time() == time(16, 30)


def test_service_longer_than_day_has_no_slots(calendar):
    assert list(calendar.slots(DAY, 9 * 60)) == []


def test_full_day_service_fits_exactly_once(calendar):
    slots = list(calendar.slots(DAY, 8 * 60))

    assert len(slots) == 1
    assert slots[0].start.time() == time(9, 0)


def test_non_positive_duration_is_rejected(calendar):
    with pytest.raises(ValidationError):
        list(calendar.slots(DAY, 0))


def test_invalid_operating_window_is_rejected():
    with pytest.raises(ValueError):
        SlotCalendar(policy=AlwaysAvailablePolicy(), timezone=timezone.utc, open_hour=17, close_hour=9)


def test_custom_window_and_granularity():
    calendar = SlotCalendar(
        policy=AlwaysAvailablePolicy(),
        timezone=timezone.utc,
        open_hour=8,
        close_hour=10,
        granularity_minutes=45,
    )

    starts = [slot.start.time() for slot in calendar.slots(DAY, 30)]

    assert starts == [time(8, 0), time(8, 45), time(9, 30)]


def test_seeded_random_policy_is_reproducible():
    def availability(seed: int) -> list[bool]:
        policy = RandomAvailabilityPolicy(rng=random.Random(seed))
        calendar = SlotCalendar(policy=policy, timezone=timezone.utc)
        return [slot.available for slot in calendar.slots(DAY, 30)]

    assert availability(7) == availability(7)


def test_random_policy_ratio_extremes():
    closed = SlotCalendar(policy=RandomAvailabilityPolicy(rng=random.Random(1), ratio=0.0), timezone=timezone.utc)
    opened = SlotCalendar(policy=RandomAvailabilityPolicy(rng=random.Random(1), ratio=1.0), timezone=timezone.utc)

    assert closed.available_starts(DAY, 30) == []
    assert len(opened.available_starts(DAY, 30)) == 16


def test_random_policy_rejects_bad_ratio():
    with pytest.raises(ValueError):
        RandomAvailabilityPolicy(ratio=1.5)


def test_booked_appointments_close_overlapping_slots(ledger, express_wash, full_detail, make_request):
    booked_start = datetime.combine(DAY, time(10, 0), tzinfo=timezone.utc)
    ledger.create_appointment(make_request(full_detail, booked_start), "req-1")
    calendar = SlotCalendar(policy=LedgerAvailabilityPolicy(ledger, "biz-1"), timezone=timezone.utc)

    closed = [slot.start.time() for slot in calendar.slots(DAY, express_wash.duration_minutes) if not slot.available]

    assert closed == [time(10, 0), time(10, 30), time(11, 0), time(11, 30), time(12, 0), time(12, 30)]


def test_other_business_bookings_do_not_close_slots(ledger, full_detail, make_request):
    booked_start = datetime.combine(DAY, time(10, 0), tzinfo=timezone.utc)
    ledger.create_appointment(make_request(full_detail, booked_start, business_id="biz-2"), "req-1")
    calendar = SlotCalendar(policy=LedgerAvailabilityPolicy(ledger, "biz-1"), timezone=timezone.utc)

    assert len(calendar.available_starts(DAY, 30)) == 16
