# decorbook/core/errors.py
# Domain exceptions raised by the services layer; main.py maps them to HTTP responses.


class BookingError(Exception):
    """Base class for booking and payment errors."""

    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(BookingError):
    status_code = 400


class NotFoundError(BookingError):
    status_code = 404


class PermissionDeniedError(BookingError):
    status_code = 403


class ConflictError(BookingError):
    status_code = 409


class PaymentGuardError(BookingError):
    """A payment leg is not in a state that allows creating a transaction."""

    status_code = 400


class InvalidTransition(BookingError):
    """A gateway status cannot be applied to the current order state."""

    status_code = 409


class GatewayError(BookingError):
    """Non-success answer from the payment gateway, passed through to the caller."""

    def __init__(self, message: str, status_code: int = 502, body: str | None = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body
