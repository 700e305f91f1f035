class BookingError(Exception):
    """Base class for errors surfaced by the scheduling services."""

    status_code = 400

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail


class ValidationError(BookingError, ValueError):
    """Malformed rule, slot or event type; rejected, never coerced."""

    status_code = 422


class NotFoundError(BookingError):
    status_code = 404


class ConflictError(BookingError):
    """The requested interval overlaps a non-cancelled appointment."""

    status_code = 409
