from abc import ABC, abstractmethod


class NotificationSinkPort(ABC):
    """Fire-and-forget receiver of appointment change events."""

    @abstractmethod
    def appointment_created(self, business_id: str, appointment_id: str) -> None:
        raise NotImplementedError

    @abstractmethod
    def appointment_cancelled(self, business_id: str, appointment_id: str) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Release delivery resources. Pending events are flushed first."""
        return None
