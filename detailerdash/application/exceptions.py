class BookingError(RuntimeError):
    """Base class for booking failures reported to the caller."""
    pass


class ValidationError(BookingError):
    """Raised when a required booking field is missing or malformed."""

    def __init__(self, message: str, missing_fields: list[str] | None = None) -> None:
        super().__init__(message)
        self.missing_fields = list(missing_fields or [])


class PersistenceError(BookingError):
    """Raised when the key-value store fails to read or write."""
    pass


class NotFoundError(BookingError):
    """Raised when a looked-up service, session or business does not exist."""
    pass


class SlotConflictError(BookingError):
    """Raised when a new appointment would overlap an existing one for the same business."""
    pass


class RequestCancelledError(BookingError):
    """Raised when a request id is replayed after its appointment was cancelled."""

    def __init__(self, request_id: str) -> None:
        super().__init__(f"Request {request_id} was already booked and then cancelled")
        self.request_id = request_id
