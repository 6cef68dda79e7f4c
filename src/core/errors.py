"""Domain errors raised by the lifecycle engine and stores.

Routers translate these into HTTP responses; nothing below the API layer
knows about status codes.
"""


class DomainError(Exception):
    """Base class for expected, user-facing failures."""


class NotFoundError(DomainError):
    """An operation referenced an identifier absent from its collection."""

    def __init__(self, entity: str, entity_id: object) -> None:
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} not found")


class ValidationError(DomainError):
    """A required field is missing or malformed."""


class TransitionError(DomainError):
    """A service status write does not follow a forward edge."""

    def __init__(self, current: str, requested: str) -> None:
        self.current = current
        self.requested = requested
        super().__init__(f"Invalid transition from {current} to {requested}")


class ConcurrencyConflict(DomainError):
    """The row changed underneath the current operation."""
