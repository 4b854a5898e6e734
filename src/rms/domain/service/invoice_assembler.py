"""Domain service: Invoice Assembler.

Pure transformation of a rental, its client and the products it
references into a priced summary. Nothing is read from or written to
a repository here.
"""

from __future__ import annotations

from rms.domain.exceptions import NotFoundError, ValidationError
from rms.domain.model.client import Client
from rms.domain.model.invoice import (
    DELIVERY_LINE_NAME,
    DeliveryFeePolicy,
    Invoice,
    InvoiceLine,
)
from rms.domain.model.product import Product
from rms.domain.model.rental import Rental
from rms.domain.model.value_objects import Money

NO_NOTES = "Sin observaciones."


class InvoiceAssembler:

    def __init__(self, policy: DeliveryFeePolicy = DeliveryFeePolicy.AFTER_DISCOUNT) -> None:
        self._policy = policy

    @property
    def policy(self) -> DeliveryFeePolicy:
        return self._policy

    def build(
        self,
        rental: Rental,
        client: Client,
        products: dict[int, Product],
    ) -> Invoice:
        """Price every line at ``price x quantity_rented``.

        Returned units do not lower the bill.
        """
        if not rental.lines:
            raise ValidationError(f"Rental #{rental.id} has no products to invoice")

        lines: list[InvoiceLine] = []
        for rental_line in rental.lines:
            product = products.get(rental_line.product_id)
            if product is None:
                raise NotFoundError(f"Product #{rental_line.product_id} not found")
            lines.append(
                InvoiceLine(
                    code=product.code,
                    description=product.name,
                    quantity=rental_line.quantity_rented,
                    unit_price=product.price,
                )
            )

        delivery = self._delivery_line(rental)
        delivery_charge = Money.zero()
        if delivery is not None:
            if self._policy is DeliveryFeePolicy.BEFORE_DISCOUNT:
                lines.insert(0, delivery)
            else:
                delivery_charge = delivery.line_total

        subtotal = Money.zero()
        for line in lines:
            subtotal = subtotal + line.line_total

        discount_amount = rental.discount.apply_to(subtotal)
        total = (subtotal - discount_amount + delivery_charge).quantize()

        return Invoice(
            rental_id=rental.id,  # type: ignore[arg-type]
            client_name=client.name,
            client_dni=client.dni,
            client_phone=client.phone or "",
            period=rental.period,
            created_by=rental.created_by,
            notes=rental.notes or NO_NOTES,
            lines=tuple(lines),
            discount=rental.discount,
            subtotal=subtotal.quantize(),
            discount_amount=discount_amount,
            delivery_charge=delivery_charge,
            total=total,
            created_at=rental.created_at,
        )

    @staticmethod
    def _delivery_line(rental: Rental) -> InvoiceLine | None:
        if not rental.is_delivery_by_us or rental.delivery_price.is_zero:
            return None
        return InvoiceLine(
            code="",
            description=DELIVERY_LINE_NAME,
            quantity=1,
            unit_price=rental.delivery_price,
        )
