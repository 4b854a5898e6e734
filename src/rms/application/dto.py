"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime


# --- Inputs ------------------------------------------------------------------


@dataclass(frozen=True)
class RentalItemSpec:
    """Input: a product and how many units to rent."""

    product_id: int
    quantity: int


@dataclass(frozen=True)
class ClientSpec:
    """Input: an existing client ID, or the details to find-or-create one."""

    client_id: int | None = None
    name: str | None = None
    phone: str | None = None
    dni: str | None = None


@dataclass(frozen=True)
class CreateRentalCommand:

    client: ClientSpec
    start_date: str | date
    end_date: str | date
    items: list[RentalItemSpec]
    notes: str | None = None
    is_delivery_by_us: bool = False
    delivery_price: str | None = None
    discount: str | None = None


@dataclass(frozen=True)
class UpdateRentalCommand:
    """Partial update: ``None`` leaves the field as it is.

    ``items``, when given, is the complete new set of lines.
    """

    client: ClientSpec | None = None
    start_date: str | date | None = None
    end_date: str | date | None = None
    items: list[RentalItemSpec] | None = None
    notes: str | None = None
    is_delivery_by_us: bool | None = None
    delivery_price: str | None = None
    discount: str | None = None


@dataclass(frozen=True)
class ReturnSpec:
    """Input: absolute number of units returned for one product."""

    product_id: int
    quantity_returned: int


@dataclass(frozen=True)
class CompleteRentalCommand:

    status: str
    returns: list[ReturnSpec] = field(default_factory=list)
    date_returned: datetime | None = None
    return_notes: str | None = None


# --- Outputs -----------------------------------------------------------------


@dataclass(frozen=True)
class RentalLineDTO:

    product_id: int
    product_code: str
    product_name: str
    quantity_rented: int
    quantity_returned: int

    @property
    def outstanding(self) -> int:
        return self.quantity_rented - self.quantity_returned


@dataclass(frozen=True)
class RentalDTO:

    id: int
    client_id: int
    client_name: str
    client_dni: str
    start_date: str
    end_date: str
    status: str
    lines: list[RentalLineDTO]
    is_delivery_by_us: bool
    delivery_price: str  # formatted, e.g. "$15.00"
    discount: str  # formatted, e.g. "10%"
    created_by: str
    created_at: str
    notes: str | None = None
    return_notes: str | None = None
    date_returned: str | None = None


@dataclass(frozen=True)
class ProductDTO:

    id: int
    code: str
    name: str
    total_quantity: int
    price: str
    description: str | None = None
    available_quantity: int | None = None


@dataclass(frozen=True)
class ClientDTO:

    id: int
    dni: str
    name: str
    phone: str | None


@dataclass(frozen=True)
class InvoiceLineDTO:

    code: str
    description: str
    quantity: int
    unit_price: str
    line_total: str


@dataclass(frozen=True)
class InvoiceDTO:

    rental_id: int
    client_name: str
    client_dni: str
    client_phone: str
    start_date: str
    end_date: str
    created_by: str
    notes: str
    lines: list[InvoiceLineDTO]
    discount: str
    subtotal: str
    discount_amount: str
    delivery_charge: str
    total: str


@dataclass(frozen=True)
class DashboardDTO:

    pending_rentals: int
    monthly_events: int
    month: str  # e.g. "2025-03"
