"""Product aggregate.

Products live independently of rentals. Their owned capacity
(``total_quantity``) is fixed by inventory management; rentals only
reserve units of it for a period, they never decrement it.
"""

from __future__ import annotations

from dataclasses import dataclass

from rms.domain.exceptions import ValidationError
from rms.domain.model.value_objects import Money


@dataclass
class Product:
    """A rentable product in the catalog.

    Invariant: ``total_quantity >= 0``.
    """

    id: int | None
    code: str
    name: str
    total_quantity: int
    price: Money
    description: str | None = None

    @staticmethod
    def create(
        code: str,
        name: str,
        total_quantity: int,
        price: Money,
        description: str | None = None,
    ) -> Product:
        """Create a new catalog entry, enforcing all invariants."""
        if not code or not code.strip():
            raise ValidationError("Product code is required")
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        _check_total_quantity(total_quantity)
        return Product(
            id=None,
            code=code.strip(),
            name=name.strip(),
            total_quantity=total_quantity,
            price=price,
            description=description,
        )

    def update_details(
        self,
        code: str | None = None,
        name: str | None = None,
        total_quantity: int | None = None,
        price: Money | None = None,
        description: str | None = None,
    ) -> None:
        """Partial edit; ``None`` leaves a field untouched."""
        if code is not None:
            if not code.strip():
                raise ValidationError("Product code cannot be blank")
            self.code = code.strip()
        if name is not None:
            if not name.strip():
                raise ValidationError("Product name cannot be blank")
            self.name = name.strip()
        if total_quantity is not None:
            _check_total_quantity(total_quantity)
            self.total_quantity = total_quantity
        if price is not None:
            self.price = price
        if description is not None:
            self.description = description


def _check_total_quantity(value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError("Total quantity must be an integer")
    if value < 0:
        raise ValidationError("Total quantity cannot be negative")
