"""Domain service: Inventory Ledger.

Answers "how many units of a product are free over a date range?".
Capacity is never decremented by rentals; availability is derived on
demand from the reservations of every active rental that overlaps the
requested range:

    available = max(total_quantity - committed, 0)

The ledger is read-only. Writers that act on its answer must hold the
product's row lock (``ProductRepository.get_for_update``) for the rest of
their unit of work.
"""

from __future__ import annotations

from rms.domain.exceptions import InsufficientStockError, NotFoundError
from rms.domain.model.product import Product
from rms.domain.model.value_objects import DateRange
from rms.domain.repository.product_repository import ProductRepository
from rms.domain.repository.rental_repository import RentalRepository


class InventoryLedger:

    def __init__(
        self,
        product_repo: ProductRepository,
        rental_repo: RentalRepository,
    ) -> None:
        self._product_repo = product_repo
        self._rental_repo = rental_repo

    def available_quantity(
        self,
        product_id: int,
        period: DateRange,
        exclude_rental_id: int | None = None,
    ) -> int:
        """Free units of *product_id* over *period*.

        ``exclude_rental_id`` leaves one rental's own reservation out of the
        committed sum, so a rental being edited does not block itself.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product #{product_id} not found")
        return self.available_for(product, period, exclude_rental_id)

    def available_for(
        self,
        product: Product,
        period: DateRange,
        exclude_rental_id: int | None = None,
    ) -> int:
        committed = self._rental_repo.committed_quantity(
            product.id, period, exclude_rental_id  # type: ignore[arg-type]
        )
        # Clamp: a lost race may have overbooked the product.
        return max(product.total_quantity - committed, 0)

    def available_quantities(
        self,
        products: list[Product],
        period: DateRange,
    ) -> dict[int, int]:
        """Annotate many products at once (one aggregate query)."""
        ids = [p.id for p in products if p.id is not None]
        committed = self._rental_repo.committed_quantities(ids, period)
        return {
            p.id: max(p.total_quantity - committed.get(p.id, 0), 0)  # type: ignore[misc]
            for p in products
        }

    def lock_products(self, product_ids: list[int]) -> dict[int, Product]:
        """Load and row-lock every product, in ascending ID order.

        A fixed lock order keeps two writers touching the same products
        from deadlocking. Raises NotFoundError for an unknown product
        before anything is reserved.
        """
        locked: dict[int, Product] = {}
        for product_id in sorted(set(product_ids)):
            product = self._product_repo.get_for_update(product_id)
            if product is None:
                raise NotFoundError(f"Product #{product_id} not found")
            locked[product_id] = product
        return locked

    def ensure_available(
        self,
        requirements: list[tuple[Product, int]],
        period: DateRange,
        exclude_rental_id: int | None = None,
    ) -> None:
        """Raise InsufficientStockError for the first product that is short.

        Every requirement is checked before the caller writes anything.
        """
        for product, quantity in requirements:
            available = self.available_for(product, period, exclude_rental_id)
            if quantity > available:
                raise InsufficientStockError(
                    product_id=product.id,  # type: ignore[arg-type]
                    product_name=product.name,
                    requested=quantity,
                    available=available,
                )
