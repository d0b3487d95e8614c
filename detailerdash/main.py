import logging

from fastapi import FastAPI

from detailerdash.api.v1.assistant import router as assistant_router
from detailerdash.api.v1.bookings import router as bookings_router
from detailerdash.core.config import settings
from detailerdash.wiring.dependencies import get_notifier

class ContextFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        extras = []
        for key in ("appointment_id", "business_id", "request_id", "session_id", "strategy", "intents", "reason"):
            value = getattr(record, key, None)
            if value not in (None, ""):
                extras.append(f"{key}={value}")
        base = super().format(record)
        if extras:
            return f"{base} | " + " ".join(extras)
        return base


handler = logging.StreamHandler()
handler.setFormatter(ContextFormatter("%(levelname)s:%(name)s:%(message)s"))

root = logging.getLogger()
root.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
root.handlers.clear()
root.addHandler(handler)

app = FastAPI(title="DetailerDash Booking", version="1.0.0")

app.include_router(bookings_router, prefix="/api/v1", tags=["bookings"])
app.include_router(assistant_router, prefix="/api/v1/assistant", tags=["assistant"])


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.on_event("shutdown")
def on_shutdown() -> None:
    get_notifier().close()
