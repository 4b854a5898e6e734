"""Application service: Complete Rental use case.

Registers returned quantities and closes a rental as ``completed`` or
``with_issues``. The rental and its line rows are locked for the whole
unit of work so two concurrent completions of the same rental are
serialized. Calling it again on a closed rental records further
partial returns.
"""

from __future__ import annotations

from loguru import logger

from rms.application.dto import CompleteRentalCommand, RentalDTO, ReturnSpec
from rms.application.mappers import rental_to_dto
from rms.domain.exceptions import NotFoundError, ValidationError
from rms.domain.model.rental import RentalStatus
from rms.domain.repository.unit_of_work import UnitOfWork


class CompleteRentalHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, rental_id: int, command: CompleteRentalCommand) -> RentalDTO:
        status = self._parse_status(command.status)
        returns = self._index_returns(command.returns)

        with self._uow as uow:
            rental = uow.rentals.get_for_update(rental_id)
            if rental is None:
                raise NotFoundError(f"Rental #{rental_id} not found")

            products = uow.products.get_many([line.product_id for line in rental.lines])
            rental.complete(
                status=status,
                returns=returns,
                date_returned=command.date_returned,
                return_notes=command.return_notes,
                product_names={pid: p.name for pid, p in products.items()},
            )

            uow.rentals.save(rental)
            uow.commit()

            logger.info(
                "Rental #{} closed as {} ({} of {} unit(s) returned)",
                rental_id, status.value, rental.total_returned, rental.total_rented,
            )
            client = uow.clients.get_by_id(rental.client_id)
            return rental_to_dto(rental, client, products)

    @staticmethod
    def _parse_status(raw: str) -> RentalStatus:
        try:
            return RentalStatus(raw)
        except ValueError:
            raise ValidationError(
                f"Unknown rental status '{raw}'; expected completed or with_issues"
            ) from None

    @staticmethod
    def _index_returns(specs: list[ReturnSpec]) -> dict[int, int]:
        returns: dict[int, int] = {}
        for spec in specs:
            if spec.product_id in returns:
                raise ValidationError(
                    f"Product #{spec.product_id} is listed more than once"
                )
            returns[spec.product_id] = spec.quantity_returned
        return returns
