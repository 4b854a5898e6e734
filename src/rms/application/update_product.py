"""Application service: Update Product use case."""

from __future__ import annotations

from loguru import logger

from rms.application.dto import ProductDTO
from rms.application.mappers import product_to_dto
from rms.domain.exceptions import NotFoundError
from rms.domain.model.value_objects import Money
from rms.domain.repository.unit_of_work import UnitOfWork


class UpdateProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        product_id: int,
        code: str | None = None,
        name: str | None = None,
        total_quantity: int | None = None,
        price: str | None = None,
        description: str | None = None,
    ) -> ProductDTO:
        """Edit a product; only the supplied fields change.

        Lowering ``total_quantity`` is allowed even below what is currently
        reserved; availability then clamps to zero until rentals return.
        """
        with self._uow as uow:
            product = uow.products.get_by_id(product_id)
            if product is None:
                raise NotFoundError(f"Product #{product_id} not found")

            product.update_details(
                code=code,
                name=name,
                total_quantity=total_quantity,
                price=Money.of(price) if price is not None else None,
                description=description,
            )
            uow.products.save(product)
            uow.commit()

        logger.info("Product #{} updated", product_id)
        return product_to_dto(product)
