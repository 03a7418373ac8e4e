"""
Error kinds raised by the reservation engine.

Every error carries a machine-readable ``kind`` and the HTTP status the API
layer answers with. They subclass ValueError so callers that only know the
model-layer convention ("raise ValueError on bad input") keep working.
"""


class BookingError(ValueError):
    """Base error for reservation engine failures."""

    kind = 'booking_error'
    status = 400

    def __init__(self, message: str, **context):
        super().__init__(message)
        self.context = context

    def to_dict(self) -> dict:
        return {'error': str(self), 'kind': self.kind, **self.context}


class InvalidInput(BookingError):
    """Malformed ids, dates, times or numbers."""

    kind = 'invalid_input'
    status = 400


class InvalidDate(InvalidInput):
    kind = 'invalid_date'


class InvalidTime(InvalidInput):
    kind = 'invalid_time'


class CapacityExceeded(InvalidInput):
    """party_size larger than the cabin capacity (only when enforced)."""

    kind = 'capacity_exceeded'


class NotFound(BookingError):
    """Operation on a nonexistent cabin or reservation."""

    kind = 'not_found'
    status = 404


class ResourceNotFound(NotFound):
    """Booking referenced a cabin that does not exist."""

    kind = 'resource_not_found'


class SlotConflict(BookingError):
    """Candidate interval overlaps an active reservation. Never retried."""

    kind = 'slot_conflict'
    status = 409


class CabinInUse(BookingError):
    kind = 'cabin_in_use'
    status = 409


class InvalidTransition(BookingError):
    kind = 'invalid_transition'
    status = 409


class StorageFailure(BookingError):
    """Transaction or commit failure. Fatal for the current request."""

    kind = 'storage_failure'
    status = 500
