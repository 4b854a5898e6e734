"""Rental aggregate, the core of the domain.

A Rental reserves quantities of one or more products for a client over
an inclusive date range. It owns its RentalLines; products and the client
are only referenced by id.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from rms.domain.exceptions import (
    InvalidReturnQuantityError,
    NotFoundError,
    ValidationError,
)
from rms.domain.model.value_objects import DateRange, Money, Percentage, Quantity


class RentalStatus(Enum):
    PENDING_RETURN = "pending_return"
    COMPLETED = "completed"
    WITH_ISSUES = "with_issues"


# Every status still holds a reservation record; completion only narrows it.
ACTIVE_STATUSES = frozenset(RentalStatus)
CLOSING_STATUSES = frozenset({RentalStatus.COMPLETED, RentalStatus.WITH_ISSUES})


@dataclass
class RentalLine:
    """Per-product reservation inside a rental.

    Invariant: ``0 <= quantity_returned <= quantity_rented``.
    ``quantity_returned`` is only changed by the completion operation.
    """

    product_id: int
    quantity_rented: int
    quantity_returned: int = 0

    @staticmethod
    def new(product_id: int, quantity: int) -> RentalLine:
        return RentalLine(product_id=product_id, quantity_rented=Quantity(quantity).value)

    @property
    def outstanding_quantity(self) -> int:
        return self.quantity_rented - self.quantity_returned

    def committed_quantity(self, status: RentalStatus) -> int:
        """Units of stock this line still occupies under *status*."""
        if status == RentalStatus.PENDING_RETURN:
            return self.quantity_rented
        return self.outstanding_quantity

    def change_quantity(self, quantity: int) -> None:
        new_value = Quantity(quantity).value
        if new_value < self.quantity_returned:
            raise ValidationError(
                f"Cannot rent {new_value} of product #{self.product_id} "
                f"({self.quantity_returned} already returned)"
            )
        self.quantity_rented = new_value

    def check_return(self, quantity: int, product_name: str) -> None:
        if isinstance(quantity, bool) or not isinstance(quantity, int):
            raise InvalidReturnQuantityError(
                f"Returned quantity for {product_name} must be an integer"
            )
        if quantity < 0 or quantity > self.quantity_rented:
            raise InvalidReturnQuantityError(
                f"Returned quantity {quantity} for {product_name} must be "
                f"between 0 and {self.quantity_rented}"
            )

    def record_return(self, quantity: int, product_name: str) -> None:
        """Set (not increment) the returned quantity."""
        self.check_return(quantity, product_name)
        self.quantity_returned = quantity


@dataclass
class Rental:
    """Aggregate root for rentals.

    Use the ``Rental.create()`` factory for new rentals; it enforces all
    business rules. The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted rentals without re-validating.
    """

    id: int | None
    client_id: int
    period: DateRange
    lines: list[RentalLine]
    created_by: str
    status: RentalStatus = RentalStatus.PENDING_RETURN
    notes: str | None = None
    return_notes: str | None = None
    date_returned: datetime | None = None
    is_delivery_by_us: bool = False
    delivery_price: Money = field(default_factory=Money.zero)
    discount: Percentage = field(default_factory=lambda: Percentage.of(0))
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW rentals only) ----------------------------------

    @staticmethod
    def create(
        client_id: int,
        period: DateRange,
        lines: list[RentalLine],
        created_by: str,
        notes: str | None = None,
        is_delivery_by_us: bool = False,
        delivery_price: Money | None = None,
        discount: Percentage | None = None,
    ) -> Rental:
        """Create a new rental in ``pending_return``, enforcing all invariants."""
        if not created_by:
            raise ValidationError("An authenticated actor is required")
        if not lines:
            raise ValidationError("Rental must contain at least one product")
        _check_unique_products(lines)

        rental = Rental(
            id=None,
            client_id=client_id,
            period=period,
            lines=list(lines),
            created_by=created_by,
            notes=notes,
            discount=discount or Percentage.of(0),
        )
        rental.set_delivery(is_delivery_by_us, delivery_price)
        return rental

    # --- Editing --------------------------------------------------------------

    @property
    def is_editable(self) -> bool:
        return self.status != RentalStatus.COMPLETED

    def ensure_editable(self) -> None:
        if not self.is_editable:
            raise ValidationError(
                f"Rental #{self.id} is {self.status.value} and can no longer be edited"
            )

    def set_delivery(self, is_delivery_by_us: bool, delivery_price: Money | None) -> None:
        """The delivery price only means something when we deliver."""
        self.is_delivery_by_us = bool(is_delivery_by_us)
        if self.is_delivery_by_us and delivery_price is not None:
            self.delivery_price = delivery_price
        elif not self.is_delivery_by_us:
            self.delivery_price = Money.zero()

    def line_for(self, product_id: int) -> RentalLine | None:
        for line in self.lines:
            if line.product_id == product_id:
                return line
        return None

    def add_line(self, product_id: int, quantity: int) -> RentalLine:
        if self.line_for(product_id) is not None:
            raise ValidationError(
                f"Product #{product_id} is already part of rental #{self.id}"
            )
        line = RentalLine.new(product_id, quantity)
        self.lines.append(line)
        return line

    def remove_line(self, product_id: int) -> RentalLine:
        line = self._find_line(product_id)
        self.lines.remove(line)
        return line

    def committed_quantity_for(self, product_id: int) -> int:
        line = self.line_for(product_id)
        if line is None:
            return 0
        return line.committed_quantity(self.status)

    # --- State transitions ----------------------------------------------------

    def complete(
        self,
        status: RentalStatus,
        returns: dict[int, int],
        date_returned: datetime | None = None,
        return_notes: str | None = None,
        product_names: dict[int, str] | None = None,
    ) -> None:
        """Record returned quantities and close the rental.

        Re-completing an already closed rental is allowed; it lets staff
        register further partial returns. Every supplied line is validated
        before any of them is touched, so a bad quantity mutates nothing.
        The requested status is stored as-is. A repeat without a return
        date keeps the one recorded first.
        """
        if status not in CLOSING_STATUSES:
            raise ValidationError(
                f"Cannot complete a rental with status '{status.value}'; "
                f"expected one of: completed, with_issues"
            )
        names = product_names or {}

        # Phase 1: validate every line
        staged: list[tuple[RentalLine, int, str]] = []
        for product_id, quantity in returns.items():
            line = self._find_line(product_id)
            name = names.get(product_id, f"product #{product_id}")
            line.check_return(quantity, name)
            staged.append((line, quantity, name))

        # Phase 2: mutate
        for line, quantity, name in staged:
            line.record_return(quantity, name)

        self.status = status
        if date_returned is not None:
            self.date_returned = date_returned
        elif self.date_returned is None:
            self.date_returned = datetime.now(timezone.utc)
        self.return_notes = return_notes

    # --- Computed properties --------------------------------------------------

    @property
    def total_rented(self) -> int:
        return sum(line.quantity_rented for line in self.lines)

    @property
    def total_returned(self) -> int:
        return sum(line.quantity_returned for line in self.lines)

    # --- Internal helpers -----------------------------------------------------

    def _find_line(self, product_id: int) -> RentalLine:
        line = self.line_for(product_id)
        if line is None:
            raise NotFoundError(
                f"Product #{product_id} is not part of rental #{self.id}"
            )
        return line


def _check_unique_products(lines: list[RentalLine]) -> None:
    seen: set[int] = set()
    for line in lines:
        if line.product_id in seen:
            raise ValidationError(
                f"Product #{line.product_id} is listed more than once"
            )
        seen.add(line.product_id)
