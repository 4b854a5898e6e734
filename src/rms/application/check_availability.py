"""Application services: availability queries.

- ``CheckAvailabilityHandler``: free units of one product over a window.
- ``SearchAvailableProductsHandler``: paged catalogue search where every
  product is annotated with its availability over the window.
- ``RecalculateAvailabilityHandler``: refresh availability for a set of
  product IDs a client already holds (e.g. after changing the dates).
"""

from __future__ import annotations

from rms.application.dto import ProductDTO
from rms.application.mappers import product_to_dto
from rms.application.pagination import Page, Pagination
from rms.domain.exceptions import ValidationError
from rms.domain.model.value_objects import DateRange
from rms.domain.repository.unit_of_work import UnitOfWork
from rms.domain.service.inventory_ledger import InventoryLedger


class CheckAvailabilityHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int, start_date: str, end_date: str) -> int:
        period = DateRange.parse(start_date, end_date)
        with self._uow as uow:
            ledger = InventoryLedger(uow.products, uow.rentals)
            return ledger.available_quantity(product_id, period)


class SearchAvailableProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        start_date: str,
        end_date: str,
        pagination: Pagination,
        term: str | None = None,
    ) -> Page[ProductDTO]:
        period = DateRange.parse(start_date, end_date)
        term = term.strip() if term and term.strip() else None

        with self._uow as uow:
            products = uow.products.search(term, pagination.limit, pagination.offset)
            total = uow.products.count(term)
            available = InventoryLedger(uow.products, uow.rentals).available_quantities(
                products, period
            )
        items = [product_to_dto(p, available[p.id]) for p in products]  # type: ignore[index]
        return Page(items=items, total=total, page=pagination.page, limit=pagination.limit)


class RecalculateAvailabilityHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, start_date: str, end_date: str, product_ids: list[int]) -> dict[int, int]:
        """Map each requested ID to its availability; unknown IDs map to 0."""
        if not product_ids:
            raise ValidationError("At least one product ID is required")
        period = DateRange.parse(start_date, end_date)

        with self._uow as uow:
            products = uow.products.get_many(list(product_ids))
            available = InventoryLedger(uow.products, uow.rentals).available_quantities(
                list(products.values()), period
            )
        return {pid: available.get(pid, 0) for pid in product_ids}
