"""Unit tests for the InventoryLedger domain service."""

from datetime import date

import pytest

from rms.domain.exceptions import InsufficientStockError, NotFoundError
from rms.domain.model.product import Product
from rms.domain.model.rental import Rental, RentalLine, RentalStatus
from rms.domain.model.value_objects import DateRange, Money
from rms.domain.service.inventory_ledger import InventoryLedger
from tests.fakes import FakeProductRepository, FakeRentalRepository


def _days(first: int, last: int) -> DateRange:
    return DateRange(date(2025, 3, first), date(2025, 3, last))


def _rental(first: int, last: int, quantity: int, product_id: int = 1) -> Rental:
    return Rental.create(
        client_id=1,
        period=_days(first, last),
        lines=[RentalLine.new(product_id, quantity)],
        created_by="staff",
    )


def _setup(*rentals: Rental, total: int = 10):
    products = FakeProductRepository([
        Product(id=1, code="T-01", name="Table", total_quantity=total, price=Money.of("10")),
        Product(id=2, code="C-01", name="Chair", total_quantity=50, price=Money.of("2")),
    ])
    rental_repo = FakeRentalRepository(list(rentals))
    return InventoryLedger(products, rental_repo), products, rental_repo


class TestAvailableQuantity:

    def test_no_rentals_means_full_stock(self):
        ledger, _, _ = _setup()
        assert ledger.available_quantity(1, _days(1, 5)) == 10

    def test_overlapping_rental_reduces_availability(self):
        ledger, _, _ = _setup(_rental(1, 5, 4))
        assert ledger.available_quantity(1, _days(3, 8)) == 6

    def test_touching_ranges_count_as_overlap(self):
        ledger, _, _ = _setup(_rental(1, 5, 4))
        assert ledger.available_quantity(1, _days(5, 9)) == 6

    def test_disjoint_rental_is_ignored(self):
        ledger, _, _ = _setup(_rental(1, 5, 4))
        assert ledger.available_quantity(1, _days(6, 9)) == 10

    def test_other_products_are_ignored(self):
        ledger, _, _ = _setup(_rental(1, 5, 4, product_id=2))
        assert ledger.available_quantity(1, _days(1, 5)) == 10

    def test_closed_rental_only_holds_unreturned_units(self):
        rental = _rental(1, 5, 10)
        rental.complete(RentalStatus.WITH_ISSUES, {1: 4})
        ledger, _, _ = _setup(rental)
        assert ledger.available_quantity(1, _days(1, 5)) == 4

    def test_completed_rental_with_everything_back_frees_stock(self):
        rental = _rental(1, 5, 10)
        rental.complete(RentalStatus.COMPLETED, {1: 10})
        ledger, _, _ = _setup(rental)
        assert ledger.available_quantity(1, _days(1, 5)) == 10

    def test_overbooking_clamps_to_zero(self):
        ledger, _, _ = _setup(_rental(1, 5, 8), _rental(2, 3, 8))
        assert ledger.available_quantity(1, _days(1, 5)) == 0

    def test_excluded_rental_does_not_count(self):
        own = _rental(1, 5, 7)
        ledger, _, _ = _setup(own)
        assert ledger.available_quantity(1, _days(1, 5), exclude_rental_id=own.id) == 10

    def test_unknown_product(self):
        ledger, _, _ = _setup()
        with pytest.raises(NotFoundError):
            ledger.available_quantity(99, _days(1, 5))


class TestBulkAvailability:

    def test_annotates_every_product(self):
        ledger, products, _ = _setup(_rental(1, 5, 3), _rental(2, 4, 20, product_id=2))
        catalog = products.search(None, 10, 0)
        assert ledger.available_quantities(catalog, _days(1, 5)) == {1: 7, 2: 30}


class TestLocking:

    def test_locks_in_ascending_id_order(self):
        ledger, products, _ = _setup()
        locked = ledger.lock_products([2, 1, 2])
        assert products.locked == [1, 2]
        assert set(locked) == {1, 2}

    def test_unknown_product_fails_before_anything_else(self):
        ledger, _, _ = _setup()
        with pytest.raises(NotFoundError, match="#99"):
            ledger.lock_products([1, 99])


class TestEnsureAvailable:

    def test_enough_stock_passes(self):
        ledger, products, _ = _setup(_rental(1, 5, 4))
        ledger.ensure_available([(products.get_by_id(1), 6)], _days(1, 5))

    def test_shortage_reports_requested_and_available(self):
        ledger, products, _ = _setup(_rental(1, 5, 4))
        with pytest.raises(InsufficientStockError) as excinfo:
            ledger.ensure_available([(products.get_by_id(1), 7)], _days(1, 5))
        assert excinfo.value.product_name == "Table"
        assert excinfo.value.requested == 7
        assert excinfo.value.available == 6
