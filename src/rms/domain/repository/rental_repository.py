"""Abstract repository for Rental aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from rms.domain.model.rental import Rental, RentalStatus
from rms.domain.model.value_objects import DateRange


class RentalRepository(ABC):

    @abstractmethod
    def get_by_id(self, rental_id: int) -> Rental | None:
        """Return a rental (with its lines) by ID, or None if not found."""

    @abstractmethod
    def get_for_update(self, rental_id: int) -> Rental | None:
        """Like ``get_by_id`` but locks the rental and its line rows."""

    @abstractmethod
    def add(self, rental: Rental) -> None:
        """Persist a new rental with its lines and assign its ID."""

    @abstractmethod
    def save(self, rental: Rental) -> None:
        """Persist an existing rental, inserting, updating and deleting
        line rows so they match ``rental.lines`` exactly."""

    @abstractmethod
    def list_page(
        self,
        status: RentalStatus | None,
        limit: int,
        offset: int,
    ) -> list[Rental]:
        """Rentals, newest first, optionally filtered by status."""

    @abstractmethod
    def count(self, status: RentalStatus | None = None) -> int:
        """Number of rentals, optionally filtered by status."""

    @abstractmethod
    def count_starting_within(self, period: DateRange) -> int:
        """Number of rentals whose start date falls inside *period*."""

    @abstractmethod
    def committed_quantity(
        self,
        product_id: int,
        period: DateRange,
        exclude_rental_id: int | None = None,
    ) -> int:
        """Units of *product_id* held by active rentals overlapping *period*.

        A ``pending_return`` line commits its full ``quantity_rented``;
        a closed line commits only ``quantity_rented - quantity_returned``.
        """

    @abstractmethod
    def committed_quantities(
        self,
        product_ids: list[int],
        period: DateRange,
    ) -> dict[int, int]:
        """Bulk form of ``committed_quantity``; missing IDs mean zero."""
