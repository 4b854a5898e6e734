"""Domain -> DTO mapping shared by the rental, product and client handlers."""

from __future__ import annotations

from rms.application.dto import (
    ClientDTO,
    InvoiceDTO,
    InvoiceLineDTO,
    ProductDTO,
    RentalDTO,
    RentalLineDTO,
)
from rms.domain.model.client import Client
from rms.domain.model.invoice import Invoice
from rms.domain.model.product import Product
from rms.domain.model.rental import Rental

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


def rental_to_dto(
    rental: Rental,
    client: Client | None,
    products: dict[int, Product],
) -> RentalDTO:
    lines = []
    for line in rental.lines:
        product = products.get(line.product_id)
        lines.append(
            RentalLineDTO(
                product_id=line.product_id,
                product_code=product.code if product else "",
                product_name=product.name if product else f"#{line.product_id}",
                quantity_rented=line.quantity_rented,
                quantity_returned=line.quantity_returned,
            )
        )
    return RentalDTO(
        id=rental.id,  # type: ignore[arg-type]
        client_id=rental.client_id,
        client_name=client.name if client else "",
        client_dni=client.dni if client else "",
        start_date=rental.period.start.isoformat(),
        end_date=rental.period.end.isoformat(),
        status=rental.status.value,
        lines=lines,
        is_delivery_by_us=rental.is_delivery_by_us,
        delivery_price=str(rental.delivery_price),
        discount=str(rental.discount),
        created_by=rental.created_by,
        created_at=rental.created_at.strftime(TIMESTAMP_FORMAT),
        notes=rental.notes,
        return_notes=rental.return_notes,
        date_returned=(
            rental.date_returned.strftime(TIMESTAMP_FORMAT)
            if rental.date_returned
            else None
        ),
    )


def product_to_dto(product: Product, available_quantity: int | None = None) -> ProductDTO:
    return ProductDTO(
        id=product.id,  # type: ignore[arg-type]
        code=product.code,
        name=product.name,
        total_quantity=product.total_quantity,
        price=str(product.price),
        description=product.description,
        available_quantity=available_quantity,
    )


def client_to_dto(client: Client) -> ClientDTO:
    return ClientDTO(
        id=client.id,  # type: ignore[arg-type]
        dni=client.dni,
        name=client.name,
        phone=client.phone,
    )


def invoice_to_dto(invoice: Invoice) -> InvoiceDTO:
    return InvoiceDTO(
        rental_id=invoice.rental_id,
        client_name=invoice.client_name,
        client_dni=invoice.client_dni,
        client_phone=invoice.client_phone,
        start_date=invoice.period.start.isoformat(),
        end_date=invoice.period.end.isoformat(),
        created_by=invoice.created_by,
        notes=invoice.notes,
        lines=[
            InvoiceLineDTO(
                code=line.code,
                description=line.description,
                quantity=line.quantity,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
            )
            for line in invoice.lines
        ],
        discount=str(invoice.discount),
        subtotal=str(invoice.subtotal),
        discount_amount=str(invoice.discount_amount),
        delivery_charge=str(invoice.delivery_charge),
        total=str(invoice.total),
    )
