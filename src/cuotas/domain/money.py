"""Exact monetary amounts.

Amounts are kept as ``Decimal`` quantized to minor units (two decimal places
for both supported currencies). Binary floats are rejected on construction so
installment sums reconcile to the contract total exactly.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from enum import Enum

from cuotas.domain.errors import ValidationError

MINOR_UNIT = Decimal("0.01")


class Currency(str, Enum):
    """Supported contract currencies."""

    PEN = "PEN"
    USD = "USD"

    @classmethod
    def parse(cls, value: "str | Currency") -> "Currency":
        """Return the currency for a code, case-insensitive."""
        if isinstance(value, Currency):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            supported = ", ".join(c.value for c in cls)
            raise ValidationError(
                f"Unsupported currency '{value}'. Supported currencies: {supported}"
            )


CURRENCY_SYMBOLS = {
    Currency.PEN: "S/",
    Currency.USD: "$",
}


def _to_decimal(amount: Decimal | int | str) -> Decimal:
    if isinstance(amount, float):
        raise ValidationError("Money amounts must not be built from floats")
    try:
        value = Decimal(amount)
    except (InvalidOperation, TypeError):
        raise ValidationError(f"Invalid amount '{amount}'")
    if not value.is_finite():
        raise ValidationError(f"Invalid amount '{amount}'")
    if value != value.quantize(MINOR_UNIT):
        raise ValidationError(f"Amount {value} has more than two decimal places")
    return value.quantize(MINOR_UNIT)


@dataclass(frozen=True)
class Money:
    """Non-negative amount in a single currency."""

    amount: Decimal
    currency: Currency

    def __post_init__(self):
        amount = _to_decimal(self.amount)
        if amount < 0:
            raise ValidationError(f"Money amount cannot be negative: {amount}")
        object.__setattr__(self, "amount", amount)
        object.__setattr__(self, "currency", Currency.parse(self.currency))

    @classmethod
    def of(cls, amount: Decimal | int | str, currency: "str | Currency") -> "Money":
        """Build Money from a decimal, int or numeric string."""
        return cls(amount=_to_decimal(amount), currency=Currency.parse(currency))

    @classmethod
    def zero(cls, currency: "str | Currency") -> "Money":
        return cls(amount=Decimal("0.00"), currency=Currency.parse(currency))

    @classmethod
    def from_minor_units(cls, minor_units: int, currency: "str | Currency") -> "Money":
        return cls(
            amount=(Decimal(minor_units) * MINOR_UNIT).quantize(MINOR_UNIT),
            currency=Currency.parse(currency),
        )

    @property
    def minor_units(self) -> int:
        """Amount in cents/centimos."""
        return int((self.amount / MINOR_UNIT).to_integral_value())

    def is_zero(self) -> bool:
        return self.amount == 0

    def _check_currency(self, other: "Money") -> None:
        if not isinstance(other, Money):
            raise TypeError(f"Cannot combine Money with {type(other).__name__}")
        if other.currency != self.currency:
            raise ValidationError(
                f"Currency mismatch: {self.currency.value} vs {other.currency.value}"
            )

    def __add__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount + other.amount, self.currency)

    def __sub__(self, other: "Money") -> "Money":
        self._check_currency(other)
        return Money(self.amount - other.amount, self.currency)

    def __mul__(self, factor: int) -> "Money":
        if not isinstance(factor, int) or isinstance(factor, bool):
            raise TypeError("Money can only be multiplied by an integer")
        return Money(self.amount * factor, self.currency)

    __rmul__ = __mul__

    def __lt__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount < other.amount

    def __le__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount <= other.amount

    def __gt__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount > other.amount

    def __ge__(self, other: "Money") -> bool:
        self._check_currency(other)
        return self.amount >= other.amount

    def split_floor(self, parts: int) -> "Money":
        """Return ``floor(self / parts)`` at minor-unit precision."""
        if parts < 1:
            raise ValidationError("Cannot split money into fewer than one part")
        return Money.from_minor_units(self.minor_units // parts, self.currency)

    def format(self) -> str:
        """Format for display, e.g. ``S/ 1,200.00``."""
        return f"{CURRENCY_SYMBOLS[self.currency]} {self.amount:,.2f}"

    def __str__(self) -> str:
        return f"{self.amount:.2f} {self.currency.value}"


def sum_money(amounts, currency: "str | Currency") -> Money:
    """Sum Money values, returning zero in ``currency`` for an empty iterable."""
    total = Money.zero(currency)
    for amount in amounts:
        total = total + amount
    return total


def ratio_percentage(part: int, whole: int) -> int:
    """Return ``round(100 * part / whole)`` half-up, 0 when ``whole`` is 0."""
    if whole <= 0:
        return 0
    value = (Decimal(100) * Decimal(part) / Decimal(whole)).quantize(
        Decimal("1"), rounding=ROUND_HALF_UP
    )
    return int(value)
