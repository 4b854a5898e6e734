"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
They encapsulate validation so invalid values can never exist.
"""

from __future__ import annotations

import calendar
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from rms.domain.exceptions import ValidationError

CENTS = Decimal("0.01")


@dataclass(frozen=True)
class Money:
    """Monetary amount with currency.

    Uses Decimal to avoid floating-point rounding errors that would be
    unacceptable in financial calculations.
    """

    amount: Decimal
    currency: str = "ARS"

    def __post_init__(self) -> None:
        if not isinstance(self.amount, Decimal):
            raise ValidationError(
                f"Money amount must be a Decimal, got {type(self.amount).__name__}"
            )
        if self.amount < Decimal("0"):
            raise ValidationError(
                f"Money amount cannot be negative, got {self.amount}"
            )

    # --- Arithmetic helpers ---------------------------------------------------

    def __add__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: Money) -> Money:
        self._assert_same_currency(other)
        result = self.amount - other.amount
        if result < Decimal("0"):
            raise ValidationError("Money subtraction would result in a negative amount")
        return Money(result, self.currency)

    def __mul__(self, factor: int) -> Money:
        if not isinstance(factor, int):
            raise TypeError(f"Can only multiply Money by int, got {type(factor).__name__}")
        return Money(self.amount * factor, self.currency)

    @property
    def is_zero(self) -> bool:
        return self.amount == 0

    def quantize(self) -> Money:
        """Round to cents (half-up)."""
        return Money(self.amount.quantize(CENTS, rounding=ROUND_HALF_UP), self.currency)

    # --- Display --------------------------------------------------------------

    def __str__(self) -> str:
        return f"${self.amount:.2f}"

    # --- Internal helpers -----------------------------------------------------

    def _assert_same_currency(self, other: Money) -> None:
        if self.currency != other.currency:
            raise ValidationError(
                f"Cannot combine {self.currency} with {other.currency}"
            )

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def of(amount: str | float | int | Decimal) -> Money:
        """Convenient factory that coerces to Decimal safely."""
        try:
            return Money(Decimal(str(amount)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid money amount: {amount!r}") from exc

    @staticmethod
    def zero() -> Money:
        return Money(Decimal("0.00"))


@dataclass(frozen=True)
class Quantity:
    """A positive integer quantity.

    Enforces the invariant that you cannot rent zero or negative items.
    """

    value: int

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValidationError(
                f"Quantity must be an integer, got {type(self.value).__name__}"
            )
        if self.value <= 0:
            raise ValidationError("Quantity must be positive")

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Percentage:
    """A percentage between 0 and 100, used for rental discounts."""

    value: Decimal

    def __post_init__(self) -> None:
        if not isinstance(self.value, Decimal):
            raise ValidationError(
                f"Percentage must be a Decimal, got {type(self.value).__name__}"
            )
        if not Decimal("0") <= self.value <= Decimal("100"):
            raise ValidationError(
                f"Percentage must be between 0 and 100, got {self.value}"
            )

    def apply_to(self, money: Money) -> Money:
        """Return this percentage of *money*, rounded to cents."""
        portion = money.amount * self.value / Decimal("100")
        return Money(portion, money.currency).quantize()

    def __str__(self) -> str:
        return f"{self.value.normalize():f}%"

    @staticmethod
    def of(value: str | float | int | Decimal | None) -> Percentage:
        if value is None or value == "":
            return Percentage(Decimal("0"))
        try:
            return Percentage(Decimal(str(value)))
        except (InvalidOperation, ValueError) as exc:
            raise ValidationError(f"Invalid percentage: {value!r}") from exc


@dataclass(frozen=True)
class DateRange:
    """An inclusive range of calendar days.

    Two ranges overlap when each one starts on or before the other ends,
    so a rental ending on day 5 still blocks a rental starting on day 5.
    """

    start: date
    end: date

    def __post_init__(self) -> None:
        if not isinstance(self.start, date) or not isinstance(self.end, date):
            raise ValidationError("Start and end dates are required")
        if self.end < self.start:
            raise ValidationError(
                f"End date {self.end.isoformat()} cannot be before "
                f"start date {self.start.isoformat()}"
            )

    def overlaps(self, other: DateRange) -> bool:
        return self.start <= other.end and self.end >= other.start

    def __str__(self) -> str:
        return f"{self.start.isoformat()} .. {self.end.isoformat()}"

    # --- Factories ------------------------------------------------------------

    @staticmethod
    def parse(start: str | date | None, end: str | date | None) -> DateRange:
        """Build a range from ``YYYY-MM-DD`` strings (or dates)."""
        if not start or not end:
            raise ValidationError("Start and end dates are required")
        return DateRange(_parse_day(start), _parse_day(end))

    @staticmethod
    def month_of(day: date) -> DateRange:
        last = calendar.monthrange(day.year, day.month)[1]
        return DateRange(day.replace(day=1), day.replace(day=last))


def _parse_day(raw: str | date) -> date:
    if isinstance(raw, date):
        return raw
    try:
        return date.fromisoformat(raw.strip())
    except ValueError as exc:
        raise ValidationError(
            f"Invalid date format {raw!r}. Use YYYY-MM-DD."
        ) from exc
