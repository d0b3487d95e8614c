from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from detailerdash.application.use_cases.conversation_session import BookingDraft, ConversationSession, TurnResult
from detailerdash.application.use_cases.slot_calendar import TimeSlot
from detailerdash.domain.entities.appointment import Appointment
from detailerdash.domain.entities.chat import ChatMessage
from detailerdash.domain.entities.service import Service, ServiceCategory


class ServiceSchema(BaseModel):
    id: str
    name: str
    description: str
    duration_minutes: int
    base_price_cents: int
    category: ServiceCategory
    display_price: str
    display_duration: str

    @classmethod
    def from_entity(cls, service: Service) -> ServiceSchema:
        return cls(
            id=service.id,
            name=service.name,
            description=service.description,
            duration_minutes=service.duration_minutes,
            base_price_cents=service.base_price_cents,
            category=service.category,
            display_price=service.display_price,
            display_duration=service.display_duration,
        )


class SlotSchema(BaseModel):
    start: datetime
    end: datetime
    available: bool

    @classmethod
    def from_entity(cls, slot: TimeSlot) -> SlotSchema:
        return cls(start=slot.start, end=slot.end, available=slot.available)


class CustomerSchema(BaseModel):
    first_name: str
    last_name: str
    email: str
    phone: str


class VehicleSchema(BaseModel):
    year: str
    make: str
    model: str
    color: str | None = None


class AppointmentItemSchema(BaseModel):
    name: str
    price_cents: int


class CreateAppointmentRequestSchema(BaseModel):
    request_id: str | None = None
    business_id: str | None = None
    service_id: str
    start: datetime
    customer: CustomerSchema
    vehicle: VehicleSchema
    notes: str | None = None


class AppointmentSchema(BaseModel):
    id: str
    business_id: str
    business_name: str
    service: ServiceSchema
    start: datetime
    end: datetime
    customer: CustomerSchema
    vehicle: VehicleSchema
    items: list[AppointmentItemSchema]
    total_cents: int
    display_total: str
    notes: str | None = None

    @classmethod
    def from_entity(cls, appointment: Appointment) -> AppointmentSchema:
        customer = appointment.customer
        vehicle = appointment.vehicle
        return cls(
            id=appointment.id,
            business_id=appointment.business_id,
            business_name=appointment.business_name,
            service=ServiceSchema.from_entity(appointment.service),
            start=appointment.start,
            end=appointment.end,
            customer=CustomerSchema(
                first_name=customer.first_name,
                last_name=customer.last_name,
                email=customer.email,
                phone=customer.phone,
            ),
            vehicle=VehicleSchema(year=vehicle.year, make=vehicle.make, model=vehicle.model, color=vehicle.color),
            items=[AppointmentItemSchema(name=i.name, price_cents=i.price_cents) for i in appointment.items],
            total_cents=appointment.total_cents,
            display_total=appointment.display_total,
            notes=appointment.notes,
        )


class ChatMessageSchema(BaseModel):
    id: str
    sender: str
    content: str
    timestamp: datetime

    @classmethod
    def from_entity(cls, message: ChatMessage) -> ChatMessageSchema:
        return cls(id=message.id, sender=message.sender, content=message.content, timestamp=message.timestamp)


class BookingDraftSchema(BaseModel):
    service: ServiceSchema | None = None
    vehicle_year: str | None = None
    vehicle_make: str | None = None
    vehicle_model: str | None = None
    vehicle_color: str | None = None
    preferred_date: str | None = None
    preferred_time: str | None = None

    @classmethod
    def from_entity(cls, draft: BookingDraft) -> BookingDraftSchema:
        return cls(
            service=ServiceSchema.from_entity(draft.service) if draft.service else None,
            vehicle_year=draft.vehicle_year,
            vehicle_make=draft.vehicle_make,
            vehicle_model=draft.vehicle_model,
            vehicle_color=draft.vehicle_color,
            preferred_date=draft.preferred_date,
            preferred_time=draft.preferred_time,
        )


class CreateSessionRequestSchema(BaseModel):
    business_id: str | None = None


class SessionSchema(BaseModel):
    session_id: str
    business_id: str
    messages: list[ChatMessageSchema]

    @classmethod
    def from_entity(cls, session: ConversationSession, business_id: str) -> SessionSchema:
        return cls(
            session_id=session.session_id,
            business_id=business_id,
            messages=[ChatMessageSchema.from_entity(m) for m in session.messages],
        )


class SendMessageRequestSchema(BaseModel):
    text: str = Field(max_length=2000)


class TurnSchema(BaseModel):
    reply: ChatMessageSchema | None = None
    strategy: str | None = None
    intents: list[str] = Field(default_factory=list)
    ready_to_book: bool = False
    suggestions: list[ServiceSchema] = Field(default_factory=list)
    draft: BookingDraftSchema

    @classmethod
    def from_result(cls, result: TurnResult | None, draft: BookingDraft) -> TurnSchema:
        if result is None:
            return cls(draft=BookingDraftSchema.from_entity(draft))
        return cls(
            reply=ChatMessageSchema.from_entity(result.reply),
            strategy=result.strategy,
            intents=sorted(i.value for i in result.intents),
            ready_to_book=result.ready_to_book,
            suggestions=[ServiceSchema.from_entity(s) for s in result.suggestions],
            draft=BookingDraftSchema.from_entity(draft),
        )
