"""Application service: Update Rental use case.

Applies a partial update to an open rental and reconciles its lines
against the submitted set, keyed by product:

- kept lines get their new ``quantity_rented``;
- new lines are created;
- lines left out are deleted, releasing their reservation.

Availability is re-checked with the rental's own reservation left out
of the ledger, for every added line, for every kept line that grows, and
for every line when the rental moves to a different period.
"""

from __future__ import annotations

from loguru import logger

from rms.application.dto import RentalDTO, RentalItemSpec, UpdateRentalCommand
from rms.application.mappers import rental_to_dto
from rms.domain.exceptions import InsufficientStockError, NotFoundError, ValidationError
from rms.domain.model.rental import Rental
from rms.domain.model.value_objects import DateRange, Money, Percentage, Quantity
from rms.domain.repository.unit_of_work import UnitOfWork
from rms.domain.service.client_resolver import ClientResolver
from rms.domain.service.inventory_ledger import InventoryLedger


class UpdateRentalHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        rental_id: int,
        command: UpdateRentalCommand,
        actor_id: str,
    ) -> RentalDTO:
        submitted = self._index_items(command.items) if command.items is not None else None

        with self._uow as uow:
            rental = uow.rentals.get_for_update(rental_id)
            if rental is None:
                raise NotFoundError(f"Rental #{rental_id} not found")
            rental.ensure_editable()

            new_period = DateRange.parse(
                command.start_date or rental.period.start,
                command.end_date or rental.period.end,
            )
            period_changed = new_period != rental.period

            if submitted is None:
                submitted = {line.product_id: line.quantity_rented for line in rental.lines}

            current = {line.product_id: line.quantity_rented for line in rental.lines}
            added = [pid for pid in submitted if pid not in current]
            removed = [pid for pid in current if pid not in submitted]
            grown = [pid for pid in submitted if pid in current and submitted[pid] > current[pid]]
            to_check = list(submitted) if period_changed else added + grown

            ledger = InventoryLedger(uow.products, uow.rentals)
            products = ledger.lock_products(list(submitted))

            # Reconcile lines on the aggregate
            for product_id in removed:
                rental.remove_line(product_id)
            for product_id, quantity in submitted.items():
                line = rental.line_for(product_id)
                if line is None:
                    rental.add_line(product_id, quantity)
                else:
                    line.change_quantity(quantity)

            self._apply_fields(rental, command, new_period, uow)

            try:
                ledger.ensure_available(
                    [
                        (products[pid], rental.committed_quantity_for(pid))
                        for pid in to_check
                    ],
                    new_period,
                    exclude_rental_id=rental.id,
                )
            except InsufficientStockError as exc:
                logger.warning("Update of rental #{} rejected: {}", rental_id, exc)
                raise

            uow.rentals.save(rental)
            uow.commit()

            logger.info(
                "Rental #{} updated by {} (+{} / -{} line(s), period {})",
                rental_id, actor_id, len(added), len(removed), new_period,
            )
            client = uow.clients.get_by_id(rental.client_id)
            return rental_to_dto(rental, client, products)

    # --- Internal helpers -----------------------------------------------------

    @staticmethod
    def _index_items(items: list[RentalItemSpec]) -> dict[int, int]:
        if not items:
            raise ValidationError("Rental must contain at least one product")
        indexed: dict[int, int] = {}
        for item in items:
            if item.product_id in indexed:
                raise ValidationError(
                    f"Product #{item.product_id} is listed more than once"
                )
            indexed[item.product_id] = Quantity(item.quantity).value
        return indexed

    @staticmethod
    def _apply_fields(
        rental: Rental,
        command: UpdateRentalCommand,
        period: DateRange,
        uow: UnitOfWork,
    ) -> None:
        rental.period = period
        if command.client is not None:
            rental.client_id = ClientResolver(uow.clients).resolve(
                existing_id=command.client.client_id,
                name=command.client.name,
                phone=command.client.phone,
                dni=command.client.dni,
            )
        if command.notes is not None:
            rental.notes = command.notes
        if command.discount is not None:
            rental.discount = Percentage.of(command.discount)
        if command.is_delivery_by_us is not None or command.delivery_price is not None:
            rental.set_delivery(
                (
                    command.is_delivery_by_us
                    if command.is_delivery_by_us is not None
                    else rental.is_delivery_by_us
                ),
                Money.of(command.delivery_price) if command.delivery_price is not None else None,
            )
