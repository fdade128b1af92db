"""Service-layer error taxonomy.

Services raise these; the API boundary maps them to HTTP status codes and the
response envelope. Nothing here is retried.
"""


class ServiceError(Exception):
    """Base exception for service layer failures."""

    def __init__(self, message: str, errors: list[str] | None = None):
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(ServiceError):
    """Missing or malformed input."""

    pass


class ConflictError(ServiceError):
    """Requested time slot overlaps an existing appointment."""

    pass


class NotFoundError(ServiceError):
    """Appointment, case, user or backup does not exist."""

    pass


class AuthorizationError(ServiceError):
    """Caller does not own the resource."""

    pass


class InvalidTransitionError(ServiceError):
    """Status change not in the transition table."""

    pass


class PastAppointmentError(ServiceError):
    """Delete attempted on an appointment that has already started."""

    pass
