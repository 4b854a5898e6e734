"""Application service: Delete Product use case."""

from __future__ import annotations

from loguru import logger

from rms.domain.exceptions import NotFoundError
from rms.domain.repository.unit_of_work import UnitOfWork


class DeleteProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, product_id: int) -> None:
        """Remove a product from the catalog.

        The store refuses (ConflictError) while any rental line still
        references the product.
        """
        with self._uow as uow:
            if uow.products.get_by_id(product_id) is None:
                raise NotFoundError(f"Product #{product_id} not found")
            uow.products.delete(product_id)
            uow.commit()

        logger.info("Product #{} deleted", product_id)
