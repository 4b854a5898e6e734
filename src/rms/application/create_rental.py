"""Application service: Create Rental use case.

Orchestrates the Client Resolver, the Inventory Ledger and the Rental
aggregate inside a single unit of work. Either the rental and all of its
lines are committed, or nothing is.
"""

from __future__ import annotations

from loguru import logger

from rms.application.dto import CreateRentalCommand, RentalDTO, RentalItemSpec
from rms.application.mappers import rental_to_dto
from rms.domain.exceptions import (
    ConflictError,
    InsufficientStockError,
    ValidationError,
)
from rms.domain.model.rental import Rental, RentalLine
from rms.domain.model.value_objects import DateRange, Money, Percentage
from rms.domain.repository.unit_of_work import UnitOfWork
from rms.domain.service.client_resolver import ClientResolver
from rms.domain.service.inventory_ledger import InventoryLedger


class CreateRentalHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, command: CreateRentalCommand, actor_id: str) -> RentalDTO:
        """Create a rental in ``pending_return``.

        A ConflictError (a concurrent writer created the same client, or
        the store aborted a serialization race) rolls everything back; the
        whole operation is then retried once against fresh state.
        """
        try:
            return self._create(command, actor_id)
        except ConflictError as exc:
            logger.warning("Rental creation conflicted ({}); retrying once", exc)
            return self._create(command, actor_id)

    def _create(self, command: CreateRentalCommand, actor_id: str) -> RentalDTO:
        # Input validation happens before a transaction is opened.
        period = DateRange.parse(command.start_date, command.end_date)
        lines = self._build_lines(command.items)
        discount = Percentage.of(command.discount)
        delivery_price = (
            Money.of(command.delivery_price) if command.delivery_price is not None else None
        )

        with self._uow as uow:
            client_id = ClientResolver(uow.clients).resolve(
                existing_id=command.client.client_id,
                name=command.client.name,
                phone=command.client.phone,
                dni=command.client.dni,
            )

            ledger = InventoryLedger(uow.products, uow.rentals)
            products = ledger.lock_products([line.product_id for line in lines])

            rental = Rental.create(
                client_id=client_id,
                period=period,
                lines=lines,
                created_by=actor_id,
                notes=command.notes,
                is_delivery_by_us=command.is_delivery_by_us,
                delivery_price=delivery_price,
                discount=discount,
            )

            try:
                ledger.ensure_available(
                    [(products[line.product_id], line.quantity_rented) for line in lines],
                    period,
                )
            except InsufficientStockError as exc:
                logger.warning("Rental rejected for {}: {}", period, exc)
                raise

            uow.rentals.add(rental)
            uow.commit()

            logger.info(
                "Rental #{} created by {} for client #{} ({}, {} line(s))",
                rental.id, actor_id, client_id, period, len(lines),
            )
            client = uow.clients.get_by_id(client_id)
            return rental_to_dto(rental, client, products)

    @staticmethod
    def _build_lines(items: list[RentalItemSpec]) -> list[RentalLine]:
        if not items:
            raise ValidationError("Rental must contain at least one product")
        return [RentalLine.new(item.product_id, item.quantity) for item in items]
