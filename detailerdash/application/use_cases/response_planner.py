from __future__ import annotations

import random
from dataclasses import dataclass, field

from detailerdash.application.utils.message_rules import detect_problem, normalize_utterance
from detailerdash.domain.entities.booking_context import BookingContext
from detailerdash.domain.entities.chat import Intent
from detailerdash.domain.entities.service import Service, format_cents, format_duration

MAX_LISTED_SERVICES = 5

DEFAULT_PROMPTS = (
    "I can help you find the right service for your vehicle. Tell me about your car or what it needs.",
    "Not sure where to start? Tell me your vehicle's year, make and model and I'll suggest a service.",
    "Ask me about our services, pricing or how long an appointment takes, or say \"book\" to schedule.",
)

STRATEGY_SUGGESTED_PRICE = "suggested_price"
STRATEGY_SUGGESTED_DURATION = "suggested_duration"
STRATEGY_BOOKING = "booking"
STRATEGY_PRICE_RANGE = "price_range"
STRATEGY_DURATION_GUIDANCE = "duration_guidance"
STRATEGY_SERVICES_LIST = "services_list"
STRATEGY_VEHICLE_SUGGESTION = "vehicle_suggestion"
STRATEGY_SERVICE_DETAIL = "service_detail"
STRATEGY_VEHICLE_ACK = "vehicle_ack"
STRATEGY_GREETING = "greeting"
STRATEGY_PROBLEM_SUGGESTION = "problem_suggestion"
STRATEGY_DEFAULT = "default"


@dataclass(frozen=True)
class PlannedResponse:
    strategy: str
    text: str
    ready_to_book: bool = False
    suggestions: list[Service] = field(default_factory=list)


class ResponsePlanner:
    """Picks exactly one reply strategy from the intents, context and suggestions of a turn.

    Rules are evaluated top to bottom and the first whose predicate holds wins,
    so a message that asks about both services and price about a specific
    service gets the price answer rather than the catalog listing.
    """

    def __init__(self, services: list[Service], business_name: str, rng: random.Random | None = None) -> None:
        self._services = list(services)
        self._business_name = business_name
        self._rng = rng or random.Random()

    def plan(
        self,
        intents: frozenset[Intent],
        context: BookingContext,
        suggestions: list[Service],
        text: str = "",
    ) -> PlannedResponse:
        if suggestions and Intent.pricing in intents:
            return PlannedResponse(STRATEGY_SUGGESTED_PRICE, self._suggested_price(suggestions), False, suggestions)
        if suggestions and Intent.duration in intents:
            return PlannedResponse(STRATEGY_SUGGESTED_DURATION, self._suggested_duration(suggestions), False, suggestions)
        if Intent.booking in intents:
            return PlannedResponse(STRATEGY_BOOKING, self._booking(context, suggestions), bool(suggestions), suggestions)
        if Intent.pricing in intents:
            return PlannedResponse(STRATEGY_PRICE_RANGE, self._price_range())
        if Intent.duration in intents:
            return PlannedResponse(STRATEGY_DURATION_GUIDANCE, self._duration_guidance())
        if Intent.services in intents:
            return PlannedResponse(STRATEGY_SERVICES_LIST, self._services_list())
        if suggestions and context.has_vehicle_info:
            return PlannedResponse(
                STRATEGY_VEHICLE_SUGGESTION, self._vehicle_suggestion(context, suggestions), False, suggestions
            )
        if suggestions:
            return PlannedResponse(STRATEGY_SERVICE_DETAIL, _service_detail(suggestions[0]), False, suggestions)
        if context.has_vehicle_info:
            return PlannedResponse(STRATEGY_VEHICLE_ACK, self._vehicle_ack(context))
        if Intent.greeting in intents:
            return PlannedResponse(STRATEGY_GREETING, self._greeting())
        if Intent.problem_report in intents:
            problem = detect_problem(normalize_utterance(text))
            if problem:
                keyword, category = problem
                matches = [s for s in self._services if s.category == category]
                return PlannedResponse(
                    STRATEGY_PROBLEM_SUGGESTION, _problem_suggestion(keyword, category.label, matches), False, matches
                )
        return PlannedResponse(STRATEGY_DEFAULT, self._rng.choice(DEFAULT_PROMPTS))

    def _suggested_price(self, suggestions: list[Service]) -> str:
        lines = [f"**{s.name}** is **{s.display_price}** and takes about {s.display_duration}." for s in suggestions]
        return _join_blocks(["\n".join(lines), "Would you like to book?"])

    def _suggested_duration(self, suggestions: list[Service]) -> str:
        lines = [f"**{s.name}** takes about **{s.display_duration}** ({s.display_price})." for s in suggestions]
        return _join_blocks(["\n".join(lines), "Would you like to pick a time?"])

    def _booking(self, context: BookingContext, suggestions: list[Service]) -> str:
        blocks: list[str] = []
        if context.has_vehicle_info:
            blocks.append(f"Let's get your {context.vehicle_description} booked!")
        else:
            blocks.append("Let's get you booked!")

        if suggestions:
            picks = ", ".join(f"**{s.name}** ({s.display_price}, {s.display_duration})" for s in suggestions)
            blocks.append(f"Based on what you've told me, I'd go with {picks}.")
            preference = _preference_text(context)
            if preference:
                blocks.append(f"I'll look for openings {preference}.")
            blocks.append("Tap **Start Booking** to pick a time.")
        elif self._services:
            names = ", ".join(s.name for s in self._services[:MAX_LISTED_SERVICES])
            blocks.append(f"Which service would you like? We offer {names}.")
        else:
            blocks.append("Which service would you like to book?")
        return _join_blocks(blocks)

    def _price_range(self) -> str:
        if not self._services:
            return "Pricing depends on the service. Tell me what your vehicle needs and I'll find the right option."
        prices = [s.base_price_cents for s in self._services]
        low, high = min(prices), max(prices)
        if low == high:
            return f"All of our services are **{format_cents(low)}**. Which one are you interested in?"
        return (
            f"Our services range from **{format_cents(low)}** to **{format_cents(high)}**. "
            "Tell me which service you're interested in for an exact price."
        )

    def _duration_guidance(self) -> str:
        if not self._services:
            return "Appointment length depends on the service. Tell me what you need and I'll give you an estimate."
        durations = [s.duration_minutes for s in self._services]
        low, high = min(durations), max(durations)
        if low == high:
            return f"Our appointments take about {format_duration(low)}."
        return (
            f"Most appointments take between {format_duration(low)} and {format_duration(high)}, "
            "depending on the service. Tell me which one you're interested in for an exact time."
        )

    def _services_list(self) -> str:
        if not self._services:
            return f"{self._business_name} hasn't listed any services yet."
        shown = self._services[:MAX_LISTED_SERVICES]
        lines = [f"• **{s.name}** – {s.display_price} – {s.description}" for s in shown]
        blocks = [f"Here's what {self._business_name} offers:", "\n".join(lines)]
        overflow = len(self._services) - len(shown)
        if overflow > 0:
            blocks.append(f"…plus {overflow} more service{'s' if overflow != 1 else ''}.")
        blocks.append("Which one sounds right for your vehicle?")
        return _join_blocks(blocks)

    def _vehicle_suggestion(self, context: BookingContext, suggestions: list[Service]) -> str:
        first = suggestions[0]
        blocks = [f"For your {context.vehicle_description}, we suggest:", _service_detail(first)]
        if len(suggestions) > 1:
            others = ", ".join(s.name for s in suggestions[1:])
            blocks.append(f"Other options: {others}.")
        blocks.append("Would you like to book?")
        return _join_blocks(blocks)

    def _vehicle_ack(self, context: BookingContext) -> str:
        return (
            f"Thanks! I've noted your **{context.vehicle_description}**. "
            "What kind of service are you looking for?"
        )

    def _greeting(self) -> str:
        return (
            f"Hi there! Welcome to {self._business_name}. "
            "I can help you find the right service and get you booked. What are you looking for today?"
        )


def _service_detail(service: Service) -> str:
    return f"**{service.name}**: {service.description}\nPrice: {service.display_price} · Duration: {service.display_duration}"


def _problem_suggestion(keyword: str, category_label: str, matches: list[Service]) -> str:
    if not matches:
        return (
            f"For {keyword} problems we'd normally recommend {category_label}, "
            "but it isn't on the menu here yet. Ask me about our other services!"
        )
    blocks = [f"Sorry to hear about the {keyword}. Our {category_label} services can take care of that:"]
    blocks.extend(_service_detail(s) for s in matches)
    blocks.append("Would you like to book?")
    return _join_blocks(blocks)


def _preference_text(context: BookingContext) -> str:
    parts = []
    if context.preferred_date:
        parts.append(context.preferred_date if context.preferred_date[0].islower() else f"on {context.preferred_date}")
    if context.preferred_time:
        parts.append(f"in the {context.preferred_time}")
    return " ".join(parts)


def _join_blocks(blocks: list[str]) -> str:
    return "\n\n".join(block.strip() for block in blocks if block and block.strip())
