from __future__ import annotations

import re

from detailerdash.domain.entities.service import ServiceCategory

GREETING_WORDS = (
    "hi",
    "hello",
    "hey",
    "hiya",
    "howdy",
    "yo",
    "sup",
    "greetings",
)

GREETING_PHRASES = (
    "good morning",
    "good afternoon",
    "good evening",
    "what's up",
    "whats up",
)

SERVICE_KEYWORDS = (
    "services",
    "what do you offer",
    "do you offer",
    "offerings",
    "options",
    "packages",
    "menu",
    "what do you do",
    "what can you do",
)

# Catalog-level subjects that only read as a services question when asked about price or time.
CATALOG_SUBJECTS = ("full detail",)

PRICE_KEYWORDS = (
    "price",
    "pricing",
    "prices",
    "cost",
    "costs",
    "how much",
    "rate",
    "rates",
    "charge",
    "fee",
    "expensive",
    "cheap",
    "afford",
    "$",
    "dollar",
    "dollars",
)

DURATION_KEYWORDS = (
    "how long",
    "duration",
    "how much time",
    "how many hours",
    "how many minutes",
    "time does it take",
    "takes",
    "long does",
)

BOOKING_KEYWORDS = (
    "book",
    "schedule",
    "appointment",
    "reserve",
    "reservation",
    "slot",
    "come in",
    "drop off",
)

# Only booking intent when the utterance also names a day or time.
AVAILABILITY_KEYWORDS = (
    "availability",
    "available",
    "opening",
    "openings",
)

WHEN_KEYWORDS = (
    "today",
    "tomorrow",
    "tonight",
    "next week",
    "weekend",
    "morning",
    "afternoon",
    "evening",
    "monday",
    "tuesday",
    "wednesday",
    "thursday",
    "friday",
    "saturday",
    "sunday",
)

# Ordered: the first problem keyword found decides the category.
PROBLEM_KEYWORDS: tuple[tuple[str, ServiceCategory], ...] = (
    ("scratch", ServiceCategory.paint),
    ("swirl", ServiceCategory.paint),
    ("oxidiz", ServiceCategory.paint),
    ("faded", ServiceCategory.paint),
    ("dull", ServiceCategory.paint),
    ("chip", ServiceCategory.paint),
    ("stain", ServiceCategory.interior),
    ("odor", ServiceCategory.interior),
    ("smell", ServiceCategory.interior),
    ("spill", ServiceCategory.interior),
    ("pet hair", ServiceCategory.interior),
    ("crumbs", ServiceCategory.interior),
    ("water spot", ServiceCategory.ceramic),
    ("bird dropping", ServiceCategory.ceramic),
    ("sap", ServiceCategory.ceramic),
    ("dirty", ServiceCategory.wash),
    ("mud", ServiceCategory.wash),
    ("dust", ServiceCategory.wash),
    ("pollen", ServiceCategory.wash),
    ("salt", ServiceCategory.wash),
    ("grime", ServiceCategory.detailing),
    ("filthy", ServiceCategory.detailing),
)

_CLOCK_TIME = re.compile(r"\b\d{1,2}(:\d{2})? ?(am|pm)\b")

# Ordered keyword groups for the category fallback of service extraction.
CATEGORY_KEYWORDS: tuple[tuple[ServiceCategory, tuple[str, ...]], ...] = (
    (ServiceCategory.detailing, ("detail", "full clean")),
    (ServiceCategory.wash, ("wash", "quick clean")),
    (ServiceCategory.ceramic, ("ceramic", "coating", "protect")),
    (ServiceCategory.paint, ("paint correction", "scratch", "swirl")),
    (ServiceCategory.interior, ("interior", "inside", "upholstery")),
)


def normalize_utterance(text: str) -> str:
    """Lower-case, trim and collapse whitespace."""
    return re.sub(r"\s+", " ", (text or "").lower()).strip()


def contains_any(normalized: str, keywords: tuple[str, ...]) -> bool:
    """Keyword match anchored at a word start, so "book" matches "booking" but "rate" misses "accurate"."""
    return any(re.search(rf"(?<![a-z0-9]){re.escape(keyword)}", normalized) for keyword in keywords)


def find_word(normalized: str, keywords: tuple[str, ...], whole_word: bool = True) -> str | None:
    """Return the first keyword, in list order, found at a word start (and ending one if whole_word)."""
    tail = r"(?![a-z0-9])" if whole_word else ""
    for keyword in keywords:
        if re.search(rf"(?<![a-z0-9]){re.escape(keyword)}{tail}", normalized):
            return keyword
    return None


def is_greeting(normalized: str) -> bool:
    tokens = normalized.split()
    if not tokens or len(tokens) > 3:
        return False
    words = {token.strip("!?.,") for token in tokens}
    return bool(words & set(GREETING_WORDS)) or contains_any(normalized, GREETING_PHRASES)


def asks_about_services(normalized: str) -> bool:
    if contains_any(normalized, SERVICE_KEYWORDS):
        return True
    asks_price_or_time = has_explicit_price_intent(normalized) or asks_about_duration(normalized)
    return asks_price_or_time and contains_any(normalized, CATALOG_SUBJECTS)


def has_explicit_price_intent(normalized: str) -> bool:
    return contains_any(normalized, PRICE_KEYWORDS)


def asks_about_duration(normalized: str) -> bool:
    return contains_any(normalized, DURATION_KEYWORDS)


def names_a_time(normalized: str) -> bool:
    return contains_any(normalized, WHEN_KEYWORDS) or bool(_CLOCK_TIME.search(normalized))


def is_booking_request(normalized: str) -> bool:
    if contains_any(normalized, BOOKING_KEYWORDS):
        return True
    return contains_any(normalized, AVAILABILITY_KEYWORDS) and names_a_time(normalized)


def detect_problem(normalized: str) -> tuple[str, ServiceCategory] | None:
    for keyword, category in PROBLEM_KEYWORDS:
        if re.search(rf"(?<![a-z0-9]){re.escape(keyword)}", normalized):
            return keyword, category
    return None
