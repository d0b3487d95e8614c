from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field

from detailerdash.application.use_cases.intent_classifier import IntentClassifier
from detailerdash.application.use_cases.response_planner import PlannedResponse, ResponsePlanner
from detailerdash.application.use_cases.slot_extractor import SlotExtractor
from detailerdash.domain.entities.booking_context import BookingContext
from detailerdash.domain.entities.chat import ChatMessage, Intent
from detailerdash.domain.entities.service import Service

# Follow-ups like "how much is it?" reuse the services suggested earlier.
_CARRY_OVER_INTENTS = frozenset({Intent.pricing, Intent.duration, Intent.booking})


@dataclass(frozen=True)
class TurnResult:
    reply: ChatMessage
    strategy: str
    intents: frozenset[Intent]
    ready_to_book: bool
    suggestions: list[Service] = field(default_factory=list)


@dataclass(frozen=True)
class BookingDraft:
    """What the assistant learned, handed to the booking form as prefill."""

    service: Service | None
    vehicle_year: str | None
    vehicle_make: str | None
    vehicle_model: str | None
    vehicle_color: str | None
    preferred_date: str | None
    preferred_time: str | None


class ConversationSession:
    def __init__(
        self,
        business_name: str,
        services: list[Service],
        rng: random.Random | None = None,
        session_id: str | None = None,
    ) -> None:
        self.session_id = session_id
        self._business_name = business_name
        self._services = list(services)
        self._classifier = IntentClassifier()
        self._extractor = SlotExtractor(self._services)
        self._planner = ResponsePlanner(self._services, business_name, rng=rng)
        self._context = BookingContext()
        self._suggested: list[Service] = []
        self._messages: list[ChatMessage] = [ChatMessage(sender="assistant", content=self._welcome())]
        self._logger = logging.getLogger(__name__)

    @property
    def messages(self) -> list[ChatMessage]:
        return list(self._messages)

    @property
    def context(self) -> BookingContext:
        return self._context

    @property
    def suggested_services(self) -> list[Service]:
        return list(self._suggested)

    def send(self, text: str) -> TurnResult | None:
        """Run one turn. Blank input is ignored and returns None."""
        trimmed = (text or "").strip()
        if not trimmed:
            return None

        self._messages.append(ChatMessage(sender="user", content=trimmed))

        intents = self._classifier.classify(trimmed)
        extraction = self._extractor.extract(trimmed, self._context)

        suggestions = extraction.suggestions
        if suggestions:
            self._remember(suggestions, replace=not extraction.exact_service_match)
        elif intents & _CARRY_OVER_INTENTS:
            suggestions = list(self._suggested)

        planned: PlannedResponse = self._planner.plan(intents, self._context, suggestions, trimmed)
        if planned.suggestions and not suggestions:
            self._remember(planned.suggestions, replace=True)

        reply = ChatMessage(sender="assistant", content=planned.text)
        self._messages.append(reply)
        self._logger.info(
            "Assistant turn planned",
            extra={
                "session_id": self.session_id,
                "strategy": planned.strategy,
                "intents": ",".join(sorted(i.value for i in intents)),
            },
        )
        return TurnResult(
            reply=reply,
            strategy=planned.strategy,
            intents=intents,
            ready_to_book=planned.ready_to_book,
            suggestions=list(planned.suggestions),
        )

    def reset(self) -> None:
        self._context.reset()
        self._suggested = []
        self._messages = [
            ChatMessage(
                sender="assistant",
                content=f"Hi! I'm your booking assistant for {self._business_name}. How can I help you today?",
            )
        ]

    def booking_draft(self) -> BookingDraft:
        service = None
        if self._context.service_preference:
            service = next((s for s in self._services if s.name == self._context.service_preference), None)
        if service is None and self._suggested:
            service = self._suggested[0]
        return BookingDraft(
            service=service,
            vehicle_year=self._context.vehicle_year,
            vehicle_make=self._context.vehicle_make,
            vehicle_model=self._context.vehicle_model,
            vehicle_color=self._context.vehicle_color,
            preferred_date=self._context.preferred_date,
            preferred_time=self._context.preferred_time,
        )

    def _remember(self, services: list[Service], replace: bool) -> None:
        if replace:
            self._suggested = list(services)
            return
        for service in services:
            if all(s.id != service.id for s in self._suggested):
                self._suggested.append(service)

    def _welcome(self) -> str:
        return (
            f"Hi! I'm your booking assistant for {self._business_name}. I can help you:\n\n"
            "• Find the right service for your vehicle\n"
            "• Answer questions about our services\n"
            "• Schedule an appointment\n\n"
            "What can I help you with today?"
        )
