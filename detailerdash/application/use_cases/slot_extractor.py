from __future__ import annotations

import re
from dataclasses import dataclass, field

from detailerdash.application.utils.message_rules import (
    CATEGORY_KEYWORDS,
    contains_any,
    find_word,
    normalize_utterance,
)
from detailerdash.domain.entities.booking_context import BookingContext
from detailerdash.domain.entities.service import Service, ServiceCategory

YEAR_PATTERN = re.compile(r"\b(?:19|20)\d{2}\b")

# Checked in order; the first make found wins.
CAR_MAKES = (
    "honda",
    "toyota",
    "ford",
    "chevrolet",
    "chevy",
    "bmw",
    "mercedes-benz",
    "mercedes",
    "benz",
    "audi",
    "tesla",
    "nissan",
    "mazda",
    "subaru",
    "volkswagen",
    "vw",
    "hyundai",
    "kia",
    "lexus",
    "acura",
    "jeep",
    "dodge",
    "ram",
    "gmc",
    "cadillac",
    "buick",
    "porsche",
    "jaguar",
    "land rover",
    "range rover",
    "infiniti",
    "volvo",
    "mitsubishi",
    "chrysler",
    "lincoln",
    "genesis",
    "mini",
    "fiat",
    "alfa romeo",
    "maserati",
    "ferrari",
    "lamborghini",
    "bentley",
    "rivian",
    "lucid",
    "polestar",
)

MAKE_ALIASES = {
    "chevy": "Chevrolet",
    "vw": "Volkswagen",
    "bmw": "BMW",
    "gmc": "GMC",
    "mercedes": "Mercedes-Benz",
    "mercedes-benz": "Mercedes-Benz",
    "benz": "Mercedes-Benz",
    "range rover": "Land Rover",
    "mini": "MINI",
}

COLORS = (
    "black",
    "white",
    "silver",
    "gray",
    "grey",
    "red",
    "blue",
    "green",
    "yellow",
    "orange",
    "brown",
    "gold",
    "beige",
    "tan",
    "purple",
    "maroon",
    "burgundy",
    "navy",
    "charcoal",
)

TIMES_OF_DAY = ("morning", "afternoon", "evening")

WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

# Checked after weekdays; a match here replaces a weekday from the same message.
RELATIVE_DATES = (
    ("tomorrow", "tomorrow"),
    ("next week", "next week"),
    ("weekend", "this weekend"),
)

_MODEL_STOP_WORDS = frozenset(
    {
        "a", "an", "and", "are", "at", "but", "car", "for", "from", "has", "have", "i", "in", "is",
        "it", "its", "my", "needs", "need", "of", "on", "or", "please", "suv", "that", "the", "to",
        "truck", "van", "vehicle", "was", "which", "with", "detail", "wash", "coating", "interior",
    }
)


@dataclass(frozen=True)
class ExtractionResult:
    suggestions: list[Service] = field(default_factory=list)
    exact_service_match: bool = False
    matched_category: ServiceCategory | None = None
    updated_fields: tuple[str, ...] = ()


class SlotExtractor:
    """Pulls vehicle, service and date/time preferences out of a customer message.

    Each rule is independent and stops at its first match; a rule that finds
    nothing leaves the corresponding context field untouched.
    """

    def __init__(self, services: list[Service]) -> None:
        self._services = list(services)

    def extract(self, text: str, context: BookingContext) -> ExtractionResult:
        normalized = normalize_utterance(text)
        if not normalized:
            return ExtractionResult()

        updated: list[str] = []

        year = extract_year(normalized)
        if year:
            context.vehicle_year = year
            updated.append("vehicle_year")

        make_keyword = find_word(normalized, CAR_MAKES)
        if make_keyword:
            context.vehicle_make = canonical_make(make_keyword)
            updated.append("vehicle_make")
            model = _model_after(normalized, make_keyword)
            if model:
                context.vehicle_model = model
                updated.append("vehicle_model")

        color = find_word(normalized, COLORS)
        if color:
            context.vehicle_color = color.capitalize()
            updated.append("vehicle_color")

        suggestions, exact, category = self._match_services(normalized)
        if suggestions:
            context.service_preference = suggestions[0].name
            updated.append("service_preference")

        time_of_day = find_word(normalized, TIMES_OF_DAY, whole_word=False)
        if time_of_day:
            context.preferred_time = time_of_day
            updated.append("preferred_time")

        preferred_date = extract_date_preference(normalized)
        if preferred_date:
            context.preferred_date = preferred_date
            updated.append("preferred_date")

        return ExtractionResult(
            suggestions=suggestions,
            exact_service_match=exact,
            matched_category=category,
            updated_fields=tuple(updated),
        )

    def _match_services(self, normalized: str) -> tuple[list[Service], bool, ServiceCategory | None]:
        exact: list[Service] = []
        for service in self._services:
            name = normalize_utterance(service.name)
            if name and name in normalized and all(s.id != service.id for s in exact):
                exact.append(service)
        if exact:
            return exact, True, None

        for category, keywords in CATEGORY_KEYWORDS:
            if contains_any(normalized, keywords):
                return [s for s in self._services if s.category == category], False, category
        return [], False, None


def extract_year(normalized: str) -> str | None:
    match = YEAR_PATTERN.search(normalized)
    return match.group(0) if match else None


def canonical_make(keyword: str) -> str:
    if keyword in MAKE_ALIASES:
        return MAKE_ALIASES[keyword]
    return " ".join(part.capitalize() for part in keyword.split())


def extract_date_preference(normalized: str) -> str | None:
    preferred = None
    weekday = find_word(normalized, WEEKDAYS, whole_word=False)
    if weekday:
        preferred = weekday.capitalize()
    for keyword, value in RELATIVE_DATES:
        if find_word(normalized, (keyword,), whole_word=False):
            preferred = value
            break
    return preferred


def _model_after(normalized: str, make_keyword: str) -> str | None:
    match = re.search(rf"(?<![a-z0-9]){re.escape(make_keyword)}\s+([a-z0-9][a-z0-9-]*)", normalized)
    if not match:
        return None
    token = match.group(1)
    if token in _MODEL_STOP_WORDS or token in COLORS or YEAR_PATTERN.fullmatch(token):
        return None
    if any(ch.isdigit() for ch in token) or "-" in token or len(token) <= 3:
        return token.upper()
    return token.capitalize()
