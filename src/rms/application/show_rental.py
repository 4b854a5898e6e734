"""Application service: Show Rental use case (query)."""

from __future__ import annotations

from rms.application.dto import RentalDTO
from rms.application.mappers import rental_to_dto
from rms.domain.exceptions import NotFoundError
from rms.domain.repository.unit_of_work import UnitOfWork


class ShowRentalHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, rental_id: int) -> RentalDTO:
        with self._uow as uow:
            rental = uow.rentals.get_by_id(rental_id)
            if rental is None:
                raise NotFoundError(f"Rental #{rental_id} not found")
            client = uow.clients.get_by_id(rental.client_id)
            products = uow.products.get_many([line.product_id for line in rental.lines])
            return rental_to_dto(rental, client, products)
