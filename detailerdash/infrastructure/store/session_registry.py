from __future__ import annotations

import logging
import random
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable

from detailerdash.application.exceptions import NotFoundError
from detailerdash.application.use_cases.conversation_session import ConversationSession
from detailerdash.domain.entities.service import Service


@dataclass(frozen=True)
class SessionHandle:
    session: ConversationSession
    business_id: str
    lock: threading.Lock = field(default_factory=threading.Lock, compare=False)


class SessionRegistry:
    """In-process assistant sessions. Turns on one session are serialized by its lock.

    Sessions idle for longer than idle_ttl_seconds are dropped the next time a
    session is created. A ttl of None keeps sessions until they are closed.
    """

    def __init__(
        self,
        rng_factory: Callable[[], random.Random | None] | None = None,
        idle_ttl_seconds: float | None = 3600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._sessions: dict[str, SessionHandle] = {}
        self._last_seen: dict[str, float] = {}
        self._lock = threading.Lock()
        self._rng_factory = rng_factory or (lambda: None)
        self._idle_ttl = idle_ttl_seconds
        self._clock = clock
        self._logger = logging.getLogger(__name__)

    def create(self, business_id: str, business_name: str, services: list[Service]) -> SessionHandle:
        session_id = str(uuid.uuid4())
        session = ConversationSession(
            business_name=business_name,
            services=services,
            rng=self._rng_factory(),
            session_id=session_id,
        )
        handle = SessionHandle(session=session, business_id=business_id)
        with self._lock:
            self._expire_idle()
            self._sessions[session_id] = handle
            self._last_seen[session_id] = self._clock()
        return handle

    def get(self, session_id: str) -> SessionHandle:
        with self._lock:
            handle = self._sessions.get(session_id)
            if handle is not None:
                self._last_seen[session_id] = self._clock()
        if handle is None:
            raise NotFoundError(f"Unknown assistant session {session_id}")
        return handle

    def close(self, session_id: str) -> bool:
        """Forget a session. Returns False for unknown ids."""
        with self._lock:
            self._last_seen.pop(session_id, None)
            return self._sessions.pop(session_id, None) is not None

    def __len__(self) -> int:
        return len(self._sessions)

    def _expire_idle(self) -> None:
        if self._idle_ttl is None:
            return
        cutoff = self._clock() - self._idle_ttl
        expired = [sid for sid, seen in self._last_seen.items() if seen < cutoff]
        for sid in expired:
            del self._sessions[sid]
            del self._last_seen[sid]
        if expired:
            self._logger.info("Expired idle assistant sessions", extra={"reason": f"count={len(expired)}"})
