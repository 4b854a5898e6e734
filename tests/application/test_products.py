"""Integration tests for the product catalogue use cases."""

from datetime import date

import pytest

from rms.application.add_product import AddProductHandler
from rms.application.check_availability import CheckAvailabilityHandler
from rms.application.delete_product import DeleteProductHandler
from rms.application.list_products import ListProductsHandler, ShowProductHandler
from rms.application.pagination import Pagination
from rms.application.update_product import UpdateProductHandler
from rms.domain.exceptions import ConflictError, NotFoundError, ValidationError
from rms.domain.model.product import Product
from rms.domain.model.rental import Rental, RentalLine
from rms.domain.model.value_objects import DateRange, Money
from tests.fakes import FakeUnitOfWork


def _uow(with_rental: bool = False) -> FakeUnitOfWork:
    rentals = []
    if with_rental:
        rentals.append(
            Rental.create(
                client_id=1,
                period=DateRange(date(2025, 3, 1), date(2025, 3, 5)),
                lines=[RentalLine.new(1, 8)],
                created_by="staff",
            )
        )
    return FakeUnitOfWork(
        products=[
            Product(id=1, code="T-01", name="Table", total_quantity=10, price=Money.of("20.00")),
            Product(id=2, code="C-01", name="Chair", total_quantity=50, price=Money.of("5.00")),
        ],
        rentals=rentals,
    )


class TestAddProduct:

    def test_adds_product(self):
        uow = _uow()
        dto = AddProductHandler(uow).handle("L-01", "Lamp", 12, "7.50", "Warm light")
        assert dto.id == 3
        assert dto.price == "$7.50"
        assert uow.products.get_by_id(3).description == "Warm light"
        assert uow.commits == 1

    def test_zero_stock_is_allowed(self):
        dto = AddProductHandler(_uow()).handle("L-01", "Lamp", 0, "7.50")
        assert dto.total_quantity == 0

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            AddProductHandler(_uow()).handle("L-01", "Lamp", -1, "7.50")

    def test_name_required(self):
        with pytest.raises(ValidationError, match="name is required"):
            AddProductHandler(_uow()).handle("L-01", " ", 1, "7.50")

    def test_bad_price(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            AddProductHandler(_uow()).handle("L-01", "Lamp", 1, "cheap")


class TestUpdateProduct:

    def test_only_given_fields_change(self):
        uow = _uow()
        dto = UpdateProductHandler(uow).handle(1, price="25.00")
        assert dto.price == "$25.00"
        assert dto.name == "Table"
        assert dto.total_quantity == 10

    def test_lowering_stock_below_reservations_clamps_availability(self):
        uow = _uow(with_rental=True)
        UpdateProductHandler(uow).handle(1, total_quantity=5)
        assert CheckAvailabilityHandler(uow).handle(1, "2025-03-01", "2025-03-05") == 0

    def test_unknown_product(self):
        with pytest.raises(NotFoundError):
            UpdateProductHandler(_uow()).handle(99, name="Ghost")

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError, match="cannot be blank"):
            UpdateProductHandler(_uow()).handle(1, name="")


class TestDeleteProduct:

    def test_deletes_unreferenced_product(self):
        uow = _uow()
        DeleteProductHandler(uow).handle(2)
        assert uow.products.get_by_id(2) is None

    def test_referenced_product_is_kept(self):
        uow = _uow(with_rental=True)
        with pytest.raises(ConflictError):
            DeleteProductHandler(uow).handle(1)
        assert uow.products.get_by_id(1) is not None

    def test_unknown_product(self):
        with pytest.raises(NotFoundError):
            DeleteProductHandler(_uow()).handle(99)


class TestProductQueries:

    def test_list_is_ordered_by_name(self):
        page = ListProductsHandler(_uow()).handle(Pagination.from_raw())
        assert [p.name for p in page.items] == ["Chair", "Table"]
        assert page.items[0].available_quantity is None

    def test_list_with_term(self):
        page = ListProductsHandler(_uow()).handle(Pagination.from_raw(), term="tab")
        assert [p.code for p in page.items] == ["T-01"]
        assert page.total == 1

    def test_show(self):
        assert ShowProductHandler(_uow()).handle(2).code == "C-01"

    def test_show_unknown(self):
        with pytest.raises(NotFoundError):
            ShowProductHandler(_uow()).handle(99)
