"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
"""


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """Malformed or missing input, or a broken business rule."""


class NotFoundError(DomainException):
    """A referenced product, rental, client or rental line does not exist."""


class InsufficientStockError(DomainException):
    """Requested quantity exceeds what the ledger has available."""

    def __init__(
        self,
        product_id: int,
        product_name: str,
        requested: int,
        available: int,
    ) -> None:
        self.product_id = product_id
        self.product_name = product_name
        self.requested = requested
        self.available = available
        super().__init__(
            f"Insufficient stock for {product_name} "
            f"(need {requested}, have {available} available)"
        )


class InvalidReturnQuantityError(DomainException):
    """Returned quantity outside ``0..quantity_rented`` for a line."""


class ConflictError(DomainException):
    """A concurrent writer won a unique-key or serialization race.

    The operation was rolled back and may be retried.
    """
