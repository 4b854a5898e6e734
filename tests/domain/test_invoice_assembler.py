"""Unit tests for the InvoiceAssembler domain service."""

from datetime import date

import pytest

from rms.domain.exceptions import NotFoundError
from rms.domain.model.client import Client
from rms.domain.model.invoice import DELIVERY_LINE_NAME, DeliveryFeePolicy
from rms.domain.model.product import Product
from rms.domain.model.rental import Rental, RentalLine, RentalStatus
from rms.domain.model.value_objects import DateRange, Money, Percentage
from rms.domain.service.invoice_assembler import NO_NOTES, InvoiceAssembler

CLIENT = Client(id=1, dni="30111222", name="Ana", phone=None)
PRODUCTS = {
    1: Product(id=1, code="T-01", name="Table", total_quantity=10, price=Money.of("20.00")),
    2: Product(id=2, code="C-01", name="Chair", total_quantity=50, price=Money.of("5.00")),
}


def _rental(discount="10", delivery="15.00", notes=None) -> Rental:
    """Lines total 100.00: 3 tables at 20 plus 8 chairs at 5."""
    rental = Rental.create(
        client_id=1,
        period=DateRange(date(2025, 3, 1), date(2025, 3, 5)),
        lines=[RentalLine.new(1, 3), RentalLine.new(2, 8)],
        created_by="staff",
        notes=notes,
        is_delivery_by_us=delivery is not None,
        delivery_price=Money.of(delivery) if delivery else None,
        discount=Percentage.of(discount),
    )
    rental.id = 42
    return rental


class TestAfterDiscountPolicy:

    def test_delivery_fee_is_not_discounted(self):
        invoice = InvoiceAssembler().build(_rental(), CLIENT, PRODUCTS)
        assert invoice.subtotal == Money.of("100.00")
        assert invoice.discount_amount == Money.of("10.00")
        assert invoice.delivery_charge == Money.of("15.00")
        assert invoice.total == Money.of("105.00")

    def test_delivery_is_not_a_product_line(self):
        invoice = InvoiceAssembler().build(_rental(), CLIENT, PRODUCTS)
        assert [line.description for line in invoice.lines] == ["Table", "Chair"]


class TestBeforeDiscountPolicy:

    def test_delivery_fee_is_discounted_with_products(self):
        assembler = InvoiceAssembler(DeliveryFeePolicy.BEFORE_DISCOUNT)
        invoice = assembler.build(_rental(), CLIENT, PRODUCTS)
        assert invoice.subtotal == Money.of("115.00")
        assert invoice.discount_amount == Money.of("11.50")
        assert invoice.delivery_charge == Money.zero()
        assert invoice.total == Money.of("103.50")

    def test_delivery_is_the_first_line(self):
        assembler = InvoiceAssembler(DeliveryFeePolicy.BEFORE_DISCOUNT)
        first = assembler.build(_rental(), CLIENT, PRODUCTS).lines[0]
        assert first.description == DELIVERY_LINE_NAME
        assert first.quantity == 1
        assert first.unit_price == Money.of("15.00")


class TestInvoiceDetails:

    def test_without_delivery_both_policies_agree(self):
        rental = _rental(delivery=None)
        after = InvoiceAssembler(DeliveryFeePolicy.AFTER_DISCOUNT).build(rental, CLIENT, PRODUCTS)
        before = InvoiceAssembler(DeliveryFeePolicy.BEFORE_DISCOUNT).build(rental, CLIENT, PRODUCTS)
        assert after.total == before.total == Money.of("90.00")

    def test_returned_units_do_not_lower_the_bill(self):
        rental = _rental(discount="0", delivery=None)
        rental.complete(RentalStatus.WITH_ISSUES, {1: 3, 2: 8})
        invoice = InvoiceAssembler().build(rental, CLIENT, PRODUCTS)
        assert invoice.total == Money.of("100.00")

    def test_line_totals(self):
        invoice = InvoiceAssembler().build(_rental(), CLIENT, PRODUCTS)
        assert [line.line_total for line in invoice.lines] == [Money.of("60.00"), Money.of("40.00")]
        assert invoice.lines[0].code == "T-01"

    def test_missing_notes_get_placeholder(self):
        invoice = InvoiceAssembler().build(_rental(), CLIENT, PRODUCTS)
        assert invoice.notes == NO_NOTES

    def test_notes_and_client_details_are_copied(self):
        invoice = InvoiceAssembler().build(_rental(notes="Back door"), CLIENT, PRODUCTS)
        assert invoice.notes == "Back door"
        assert invoice.client_name == "Ana"
        assert invoice.client_dni == "30111222"
        assert invoice.client_phone == ""
        assert invoice.rental_id == 42

    def test_missing_product(self):
        with pytest.raises(NotFoundError, match="#2"):
            InvoiceAssembler().build(_rental(), CLIENT, {1: PRODUCTS[1]})
