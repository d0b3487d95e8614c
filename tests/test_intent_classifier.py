from __future__ import annotations

import pytest

from detailerdash.application.use_cases.intent_classifier import IntentClassifier, classify_intents
from detailerdash.domain.entities.chat import Intent


def test_price_question_about_named_service_has_two_intents():
    assert classify_intents("How much is a full detail?") == {Intent.services, Intent.pricing}


@pytest.mark.parametrize(
    "text, expected",
    [
        ("hi", {Intent.greeting}),
        ("Hey!", {Intent.greeting}),
        ("good morning", {Intent.greeting}),
        ("what services do you offer", {Intent.services}),
        ("what are your prices", {Intent.pricing}),
        ("how long does a wash take", {Intent.duration}),
        ("I want to book an appointment", {Intent.booking}),
        ("what services do you have available?", {Intent.services}),
        ("any openings friday afternoon?", {Intent.booking}),
        ("are you available at 3pm", {Intent.booking}),
        ("tell me about the express wash service", frozenset()),
        ("I want a full detail", frozenset()),
        ("there's a scratch on my door", {Intent.problem_report}),
        ("my seats smell like a wet dog", {Intent.problem_report}),
    ],
)
def test_single_intent_utterances(text, expected):
    assert classify_intents(text) == expected


def test_empty_and_blank_input_have_no_intents():
    assert classify_intents("") == frozenset()
    assert classify_intents("   \n ") == frozenset()


def test_long_messages_are_not_greetings():
    assert Intent.greeting not in classify_intents("hi there I was wondering about my truck")


def test_keywords_only_match_at_word_start():
    # "accurate" contains "rate"
    assert classify_intents("that is accurate") == frozenset()
    assert Intent.booking in classify_intents("can I schedule for friday")
    assert Intent.booking in classify_intents("booking for two cars")


def test_multiple_intents_are_all_reported():
    intents = IntentClassifier().classify("Hi, how much and how long for a ceramic coating? I'd like to book")

    assert intents == {Intent.pricing, Intent.duration, Intent.booking}


def test_classification_is_case_and_whitespace_insensitive():
    assert classify_intents("  HOW   MUCH  ") == classify_intents("how much")
