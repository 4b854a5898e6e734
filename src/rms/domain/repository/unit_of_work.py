"""Unit of Work port.

Every multi-step operation (create, update, complete) runs inside one
unit of work: the repositories it exposes share a single transaction
that is committed once at the end, or rolled back if anything raised.

    with uow:
        ...
        uow.commit()
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from rms.domain.repository.client_repository import ClientRepository
from rms.domain.repository.product_repository import ProductRepository
from rms.domain.repository.rental_repository import RentalRepository


class UnitOfWork(ABC):

    products: ProductRepository
    clients: ClientRepository
    rentals: RentalRepository

    def __enter__(self) -> UnitOfWork:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        # A no-op after a successful commit.
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every change since ``__enter__`` durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard every uncommitted change."""
