"""Invoice value objects produced by the InvoiceAssembler.

An invoice is a priced snapshot of a rental. It is never persisted;
rendering it (text, PDF) is the presentation layer's job.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from rms.domain.model.value_objects import DateRange, Money, Percentage

DELIVERY_LINE_NAME = "Transporte"


class DeliveryFeePolicy(Enum):
    """Where the delivery fee sits relative to the discount.

    AFTER_DISCOUNT: only product lines are discounted; the fee is added
    to the discounted amount as a separate charge.
    BEFORE_DISCOUNT: the fee is a synthetic first line and is discounted
    together with the products.
    """

    AFTER_DISCOUNT = "after_discount"
    BEFORE_DISCOUNT = "before_discount"


@dataclass(frozen=True)
class InvoiceLine:
    code: str
    description: str
    quantity: int
    unit_price: Money

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity


@dataclass(frozen=True)
class Invoice:

    rental_id: int
    client_name: str
    client_dni: str
    client_phone: str
    period: DateRange
    created_by: str
    notes: str
    lines: tuple[InvoiceLine, ...]
    discount: Percentage
    subtotal: Money
    discount_amount: Money
    delivery_charge: Money  # added after the discount; zero under BEFORE_DISCOUNT
    total: Money
    created_at: datetime | None = None
