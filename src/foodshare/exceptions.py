"""Exception hierarchy for reservation operations.

Every error raised by the services derives from ``ReservationError``. The
``retryable`` flag tells callers whether the same request may succeed if
repeated with backoff; the HTTP layer uses ``code`` and ``status_code`` to
build its error response.
"""

from uuid import UUID


class ReservationError(Exception):
    """Base exception for all reservation workflow errors."""

    code = "reservation_error"
    status_code = 400
    retryable = False


class NotFoundError(ReservationError):
    """Raised when a listing, claim or profile does not exist."""

    code = "not_found"
    status_code = 404

    def __init__(self, entity: str, entity_id: UUID):
        super().__init__(f"{entity} {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class AlreadyReservedError(ReservationError):
    """Raised when another active claim already holds the listing.

    Safe to retry: the holding claim may be released.
    """

    code = "already_reserved"
    status_code = 409
    retryable = True

    def __init__(self, listing_id: UUID):
        super().__init__(f"Listing {listing_id} is already reserved")
        self.listing_id = listing_id


class ExpiredError(ReservationError):
    """Raised when a listing is past its expiry timestamp."""

    code = "expired"
    status_code = 410

    def __init__(self, listing_id: UUID):
        super().__init__(f"Listing {listing_id} has expired")
        self.listing_id = listing_id


class InvalidStateError(ReservationError):
    """Raised when an operation is not valid for the current lifecycle state."""

    code = "invalid_state"
    status_code = 409


class StoreTimeoutError(ReservationError):
    """Raised when the backing store does not answer within the timeout.

    Safe to retry with backoff.
    """

    code = "timeout"
    status_code = 503
    retryable = True

    def __init__(self, operation: str, timeout_seconds: float):
        super().__init__(
            f"Store call {operation} did not finish within {timeout_seconds}s"
        )
        self.operation = operation
        self.timeout_seconds = timeout_seconds


class ValidationError(ReservationError):
    """Raised for malformed input such as a negative quantity."""

    code = "validation_error"
    status_code = 422

    def __init__(self, errors: list[str]):
        super().__init__("; ".join(errors))
        self.errors = errors


class AlreadyExistsError(ReservationError):
    """Raised when creating a record whose id is already taken."""

    code = "already_exists"
    status_code = 409

    def __init__(self, entity: str, entity_id: UUID):
        super().__init__(f"{entity} {entity_id} already exists")
        self.entity = entity
        self.entity_id = entity_id


class NotAuthorizedError(ReservationError):
    """Raised when the actor may not perform the operation."""

    code = "not_authorized"
    status_code = 403
