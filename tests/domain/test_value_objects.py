"""Unit tests for domain value objects."""

from datetime import date
from decimal import Decimal

import pytest

from rms.domain.exceptions import ValidationError
from rms.domain.model.value_objects import DateRange, Money, Percentage, Quantity


# ── Money ────────────────────────────────────────────────────────────────────


class TestMoney:

    def test_creation(self):
        m = Money(Decimal("10.50"))
        assert m.amount == Decimal("10.50")
        assert m.currency == "ARS"

    def test_of_factory_from_string(self):
        m = Money.of("25.99")
        assert m.amount == Decimal("25.99")

    def test_of_factory_rejects_garbage(self):
        with pytest.raises(ValidationError, match="Invalid money amount"):
            Money.of("abc")

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Money(Decimal("-1"))

    def test_zero_is_allowed(self):
        assert Money.zero().is_zero

    def test_subtraction_going_negative_rejected(self):
        with pytest.raises(ValidationError, match="negative amount"):
            Money.of("5") - Money.of("10")

    def test_multiplication_by_int(self):
        result = Money.of("7.50") * 3
        assert result == Money.of("22.50")

    def test_currency_mismatch_rejected(self):
        with pytest.raises(ValidationError, match="Cannot combine"):
            Money(Decimal("10"), "ARS") + Money(Decimal("5"), "EUR")

    def test_quantize_rounds_half_up(self):
        assert Money.of("10.005").quantize().amount == Decimal("10.01")

    def test_str_formatting(self):
        assert str(Money.of("15")) == "$15.00"
        assert str(Money.of("9.5")) == "$9.50"


# ── Quantity ─────────────────────────────────────────────────────────────────


class TestQuantity:

    def test_valid_quantity(self):
        assert Quantity(5).value == 5

    def test_zero_rejected(self):
        with pytest.raises(ValidationError, match="must be positive"):
            Quantity(0)

    def test_non_integer_rejected(self):
        with pytest.raises(ValidationError, match="must be an integer"):
            Quantity("3")


# ── Percentage ───────────────────────────────────────────────────────────────


class TestPercentage:

    def test_apply_to_money(self):
        assert Percentage.of(10).apply_to(Money.of("115.00")) == Money.of("11.50")

    def test_missing_value_means_zero(self):
        assert Percentage.of(None).value == Decimal("0")

    @pytest.mark.parametrize("raw", ["-1", "100.01", "150"])
    def test_out_of_range_rejected(self, raw):
        with pytest.raises(ValidationError, match="between 0 and 100"):
            Percentage.of(raw)

    def test_str(self):
        assert str(Percentage.of("12.50")) == "12.5%"


# ── DateRange ────────────────────────────────────────────────────────────────


class TestDateRange:

    def test_parse_iso_strings(self):
        r = DateRange.parse("2025-03-01", "2025-03-05")
        assert r.start == date(2025, 3, 1)
        assert r.end == date(2025, 3, 5)

    def test_single_day_range_is_valid(self):
        r = DateRange.parse("2025-03-01", "2025-03-01")
        assert r.start == r.end

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError, match="cannot be before"):
            DateRange.parse("2025-03-05", "2025-03-01")

    def test_missing_dates_rejected(self):
        with pytest.raises(ValidationError, match="required"):
            DateRange.parse("2025-03-05", None)

    def test_bad_format_rejected(self):
        with pytest.raises(ValidationError, match="YYYY-MM-DD"):
            DateRange.parse("05/03/2025", "2025-03-06")

    def test_touching_ranges_overlap(self):
        a = DateRange(date(2025, 3, 1), date(2025, 3, 5))
        b = DateRange(date(2025, 3, 5), date(2025, 3, 9))
        assert a.overlaps(b)
        assert b.overlaps(a)

    def test_disjoint_ranges_do_not_overlap(self):
        a = DateRange(date(2025, 3, 1), date(2025, 3, 5))
        b = DateRange(date(2025, 3, 6), date(2025, 3, 9))
        assert not a.overlaps(b)

    def test_month_of(self):
        r = DateRange.month_of(date(2024, 2, 14))
        assert r.start == date(2024, 2, 1)
        assert r.end == date(2024, 2, 29)
