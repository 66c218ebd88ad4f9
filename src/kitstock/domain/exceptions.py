"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class InsufficientStockError(ValidationError):
    """A strict (non-clamping) withdrawal asked for more than is on hand."""

    def __init__(self, part_id: int, requested: int, available: int) -> None:
        super().__init__(
            f"Insufficient stock for part #{part_id} "
            f"(need {requested}, have {available})"
        )
        self.part_id = part_id
        self.requested = requested
        self.available = available


class ConcurrentStockUpdateError(DomainException):
    """The stock row kept changing underneath a compare-and-swap update."""
