"""SQLAlchemy implementation of ProductRepository."""

from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from rms.domain.exceptions import ConflictError, NotFoundError
from rms.domain.model.product import Product
from rms.domain.model.value_objects import Money
from rms.domain.repository.product_repository import ProductRepository
from rms.infrastructure.persistence.orm import ProductRow


class SqlProductRepository(ProductRepository):

    def __init__(self, session: Session) -> None:
        self._session = session

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: int) -> Product | None:
        row = self._session.get(ProductRow, product_id)
        return self._to_domain(row) if row else None

    def get_for_update(self, product_id: int) -> Product | None:
        row = self._session.execute(
            select(ProductRow).where(ProductRow.id == product_id).with_for_update()
        ).scalar_one_or_none()
        return self._to_domain(row) if row else None

    def get_many(self, product_ids: list[int]) -> dict[int, Product]:
        if not product_ids:
            return {}
        rows = self._session.execute(
            select(ProductRow).where(ProductRow.id.in_(product_ids))
        ).scalars()
        return {row.id: self._to_domain(row) for row in rows}

    def search(self, term: str | None, limit: int, offset: int) -> list[Product]:
        stmt = (
            self._filtered(select(ProductRow), term)
            .order_by(ProductRow.name.asc(), ProductRow.id.asc())
            .limit(limit)
            .offset(offset)
        )
        return [self._to_domain(row) for row in self._session.execute(stmt).scalars()]

    def count(self, term: str | None = None) -> int:
        stmt = self._filtered(select(func.count()).select_from(ProductRow), term)
        return int(self._session.execute(stmt).scalar_one())

    def add(self, product: Product) -> None:
        row = ProductRow()
        self._apply(row, product)
        self._session.add(row)
        self._flush(f"Could not add product '{product.name}'")
        product.id = row.id

    def save(self, product: Product) -> None:
        row = self._session.get(ProductRow, product.id)
        if row is None:
            raise NotFoundError(f"Product #{product.id} not found")
        self._apply(row, product)
        self._flush(f"Could not save product #{product.id}")

    def delete(self, product_id: int) -> None:
        row = self._session.get(ProductRow, product_id)
        if row is None:
            raise NotFoundError(f"Product #{product_id} not found")
        self._session.delete(row)
        self._flush(f"Product #{product_id} is still referenced by rentals")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _apply(row: ProductRow, product: Product) -> None:
        row.code = product.code
        row.name = product.name
        row.description = product.description
        row.total_quantity = product.total_quantity
        row.price = product.price.amount

    @staticmethod
    def _to_domain(row: ProductRow) -> Product:
        return Product(
            id=row.id,
            code=row.code,
            name=row.name,
            total_quantity=row.total_quantity,
            price=Money.of(row.price),
            description=row.description,
        )

    # --- Helpers --------------------------------------------------------------

    @staticmethod
    def _filtered(stmt, term: str | None):
        if term:
            pattern = f"%{term.strip()}%"
            stmt = stmt.where(
                or_(ProductRow.name.ilike(pattern), ProductRow.code.ilike(pattern))
            )
        return stmt

    def _flush(self, message: str) -> None:
        try:
            self._session.flush()
        except IntegrityError as exc:
            raise ConflictError(message) from exc
