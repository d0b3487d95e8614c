from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class Intent(str, Enum):
    greeting = "greeting"
    services = "services"
    pricing = "pricing"
    duration = "duration"
    booking = "booking"
    problem_report = "problem_report"


@dataclass(frozen=True)
class ChatMessage:
    sender: str  # "user" | "assistant"
    content: str
    id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
