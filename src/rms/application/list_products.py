"""Application services: catalogue queries."""

from __future__ import annotations

from rms.application.dto import ProductDTO
from rms.application.mappers import product_to_dto
from rms.application.pagination import Page, Pagination
from rms.domain.exceptions import NotFoundError
from rms.domain.repository.unit_of_work import UnitOfWork


class ListProductsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, pagination: Pagination, term: str | None = None) -> Page[ProductDTO]:
        with self._uow as uow:
            products = uow.products.search(term, pagination.limit, pagination.offset)
            total = uow.products.count(term)
        return Page(
            items=[product_to_dto(p) for p in products],
            total=total,
            page=pagination.page,
            limit=pagination.limit,
        )


class ShowProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int) -> ProductDTO:
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product #{product_id} not found")
        return product_to_dto(product)
