from __future__ import annotations

from detailerdash.application.utils.message_rules import (
    asks_about_duration,
    asks_about_services,
    detect_problem,
    has_explicit_price_intent,
    is_booking_request,
    is_greeting,
    normalize_utterance,
)
from detailerdash.domain.entities.chat import Intent

_RULES = (
    (Intent.greeting, is_greeting),
    (Intent.services, asks_about_services),
    (Intent.pricing, has_explicit_price_intent),
    (Intent.duration, asks_about_duration),
    (Intent.booking, is_booking_request),
    (Intent.problem_report, lambda text: detect_problem(text) is not None),
)


def classify_intents(text: str) -> frozenset[Intent]:
    """Return every intent whose keywords appear in the utterance. Never raises."""
    normalized = normalize_utterance(text)
    if not normalized:
        return frozenset()
    return frozenset(intent for intent, matches in _RULES if matches(normalized))


class IntentClassifier:
    def classify(self, text: str) -> frozenset[Intent]:
        return classify_intents(text)
