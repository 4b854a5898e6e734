"""Application service: Add Product use case."""

from __future__ import annotations

from loguru import logger

from rms.application.dto import ProductDTO
from rms.application.mappers import product_to_dto
from rms.domain.model.product import Product
from rms.domain.model.value_objects import Money
from rms.domain.repository.unit_of_work import UnitOfWork


class AddProductHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(
        self,
        code: str,
        name: str,
        total_quantity: int,
        price: str,
        description: str | None = None,
    ) -> ProductDTO:
        """Add a new product to the catalog."""
        product = Product.create(
            code=code,
            name=name,
            total_quantity=total_quantity,
            price=Money.of(price),
            description=description,
        )
        with self._uow as uow:
            uow.products.add(product)
            uow.commit()

        logger.info("Product #{} '{}' added ({} unit(s))", product.id, product.name, product.total_quantity)
        return product_to_dto(product)
