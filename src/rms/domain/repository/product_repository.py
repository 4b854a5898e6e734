"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (SQL, in-memory)
live in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rms.domain.model.product import Product


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: int) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_for_update(self, product_id: int) -> Product | None:
        """Like ``get_by_id`` but locks the product row until commit.

        Rental writers take this lock around their availability check so
        two reservations of the same product are serialized.
        """

    @abstractmethod
    def get_many(self, product_ids: list[int]) -> dict[int, Product]:
        """Return the products that exist among *product_ids*, keyed by ID."""

    @abstractmethod
    def search(self, term: str | None, limit: int, offset: int) -> list[Product]:
        """Products whose name or code contains *term*, ordered by name."""

    @abstractmethod
    def count(self, term: str | None = None) -> int:
        """Number of products ``search`` would return without paging."""

    @abstractmethod
    def add(self, product: Product) -> None:
        """Persist a new product and assign its ID."""

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist changes to an existing product."""

    @abstractmethod
    def delete(self, product_id: int) -> None:
        """Remove a product. Raises ConflictError while rentals reference it."""
