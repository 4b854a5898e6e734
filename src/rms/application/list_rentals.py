"""Application service: List Rentals use case (query)."""

from __future__ import annotations

from rms.application.dto import RentalDTO
from rms.application.mappers import rental_to_dto
from rms.application.pagination import Page, Pagination
from rms.domain.exceptions import ValidationError
from rms.domain.model.rental import RentalStatus
from rms.domain.repository.unit_of_work import UnitOfWork


class ListRentalsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        pagination: Pagination,
        status: str | None = None,
    ) -> Page[RentalDTO]:
        """Newest rentals first, optionally only those in *status*."""
        status_filter = self._parse_status(status)

        with self._uow as uow:
            rentals = uow.rentals.list_page(status_filter, pagination.limit, pagination.offset)
            total = uow.rentals.count(status_filter)

            product_ids = {line.product_id for r in rentals for line in r.lines}
            products = uow.products.get_many(sorted(product_ids))
            items = [
                rental_to_dto(r, uow.clients.get_by_id(r.client_id), products)
                for r in rentals
            ]
        return Page(items=items, total=total, page=pagination.page, limit=pagination.limit)

    @staticmethod
    def _parse_status(raw: str | None) -> RentalStatus | None:
        if not raw:
            return None
        try:
            return RentalStatus(raw)
        except ValueError:
            raise ValidationError(f"Unknown rental status '{raw}'") from None
