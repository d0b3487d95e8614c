from __future__ import annotations

from datetime import date, timedelta

VAGUE_TIME_RANGES = {
    "morning": (9, 12),
    "afternoon": (12, 17),
    "evening": (17, 20),
}

DAY_NAMES = {
    "monday": 0,
    "tuesday": 1,
    "wednesday": 2,
    "thursday": 3,
    "friday": 4,
    "saturday": 5,
    "sunday": 6,
}


def resolve_date_preference(preference: str | None, reference_date: date) -> date | None:
    """Turn an extracted date preference ("Friday", "tomorrow", ...) into a concrete date."""
    if not preference:
        return None
    normalized = preference.lower().strip()

    if normalized == "today":
        return reference_date

    if normalized == "tomorrow":
        return reference_date + timedelta(days=1)

    if normalized == "next week":
        return reference_date + timedelta(days=7 - reference_date.weekday())

    if normalized in ("this weekend", "weekend"):
        days_ahead = (5 - reference_date.weekday()) % 7
        return reference_date + timedelta(days=days_ahead)

    day_num = DAY_NAMES.get(normalized)
    if day_num is not None:
        days_ahead = (day_num - reference_date.weekday()) % 7
        if days_ahead == 0:
            days_ahead = 7
        return reference_date + timedelta(days=days_ahead)

    return None


def map_vague_time_to_range(vague_time: str | None) -> tuple[int, int] | None:
    """Map vague time description to hour range. Returns (start_hour, end_hour) or None."""
    if not vague_time:
        return None
    return VAGUE_TIME_RANGES.get(vague_time.lower().strip())
