from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor

import httpx

from detailerdash.application.ports.notifications import NotificationSinkPort


class RecordingNotificationSink(NotificationSinkPort):
    """Keeps every event in memory; used by tests and by in-process UI refresh."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, str]] = []
        self._lock = threading.Lock()

    def appointment_created(self, business_id: str, appointment_id: str) -> None:
        with self._lock:
            self.events.append(("appointmentCreated", business_id, appointment_id))

    def appointment_cancelled(self, business_id: str, appointment_id: str) -> None:
        with self._lock:
            self.events.append(("appointmentCancelled", business_id, appointment_id))


class LoggingNotificationSink(NotificationSinkPort):
    def __init__(self) -> None:
        self._logger = logging.getLogger(__name__)

    def appointment_created(self, business_id: str, appointment_id: str) -> None:
        self._logger.info("appointmentCreated", extra={"business_id": business_id, "appointment_id": appointment_id})

    def appointment_cancelled(self, business_id: str, appointment_id: str) -> None:
        self._logger.info("appointmentCancelled", extra={"business_id": business_id, "appointment_id": appointment_id})


class WebhookNotificationSink(NotificationSinkPort):
    """POSTs each event to a subscriber URL.

    Events are queued on a single background worker, so callers never wait on
    the subscriber and events are delivered in the order they were emitted.
    Delivery failures are logged, never raised. Call close() on shutdown to
    flush the queue.
    """

    def __init__(self, url: str, timeout: float = 5.0, client: httpx.Client | None = None) -> None:
        self._url = url
        self._client = client or httpx.Client(timeout=timeout)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="webhook")
        self._closed = False
        self._lock = threading.Lock()
        self._logger = logging.getLogger(__name__)

    def appointment_created(self, business_id: str, appointment_id: str) -> None:
        self._submit("appointmentCreated", business_id, appointment_id)

    def appointment_cancelled(self, business_id: str, appointment_id: str) -> None:
        self._submit("appointmentCancelled", business_id, appointment_id)

    def close(self) -> None:
        with self._lock:
            if self._closed:
                return
            self._closed = True
        self._executor.shutdown(wait=True)
        self._client.close()

    def _submit(self, event: str, business_id: str, appointment_id: str) -> None:
        with self._lock:
            if self._closed:
                self._logger.warning(
                    "Notification dropped after shutdown",
                    extra={"appointment_id": appointment_id, "reason": event},
                )
                return
            self._executor.submit(self._post, event, business_id, appointment_id)

    def _post(self, event: str, business_id: str, appointment_id: str) -> None:
        payload = {"event": event, "business_id": business_id, "appointment_id": appointment_id}
        try:
            resp = self._client.post(self._url, json=payload)
        except httpx.HTTPError as e:
            self._logger.warning(
                "Notification webhook unreachable",
                extra={"appointment_id": appointment_id, "reason": str(e)},
            )
            return
        if resp.status_code >= 400:
            self._logger.warning(
                "Notification webhook rejected event",
                extra={"appointment_id": appointment_id, "reason": f"{event} status={resp.status_code}"},
            )
