"""Exact decimal money used for prices, COD amounts, balances and wallets.

Amounts are persisted as decimal strings and wrapped in ``Money`` for
arithmetic. Floats are rejected outright; every addition and subtraction runs
in a decimal context that traps inexact results, so a balance is never
silently rounded.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Context, Decimal, DecimalException, Inexact, InvalidOperation, Overflow

_CONTEXT = Context(prec=38, traps=[Inexact, InvalidOperation, Overflow])


class MoneyError(ValueError):
    """Raised when a value cannot be represented as an exact amount."""


@dataclass(frozen=True, order=True)
class Money:
    amount: Decimal

    def __post_init__(self):
        if not isinstance(self.amount, Decimal):
            raise MoneyError(f"Money requires a Decimal amount, got {type(self.amount).__name__}")
        if not self.amount.is_finite():
            raise MoneyError(f"Money amount must be finite, got {self.amount}")

    @classmethod
    def of(cls, value) -> Money:
        """Build Money from a Money, Decimal, int or decimal string.

        ``None`` and empty strings read as zero, which is how freshly created
        profiles store their balance.
        """
        if isinstance(value, Money):
            return value
        if isinstance(value, bool) or isinstance(value, float):
            raise MoneyError(f"Refusing implicit conversion of {value!r} to Money")
        if value is None or value == "":
            return cls.zero()
        if isinstance(value, int):
            return cls(Decimal(value))
        if isinstance(value, Decimal):
            return cls(value)
        if isinstance(value, str):
            try:
                return cls(Decimal(value.strip()))
            except InvalidOperation as exc:
                raise MoneyError(f"{value!r} is not a decimal amount") from exc
        raise MoneyError(f"Cannot build Money from {type(value).__name__}")

    @classmethod
    def zero(cls) -> Money:
        return cls(Decimal(0))

    @property
    def is_negative(self) -> bool:
        return self.amount < 0

    def __add__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self._exact(_CONTEXT.add, other)

    def __sub__(self, other: Money) -> Money:
        if not isinstance(other, Money):
            return NotImplemented
        return self._exact(_CONTEXT.subtract, other)

    def _exact(self, operation, other: Money) -> Money:
        try:
            return Money(operation(self.amount, other.amount))
        except DecimalException as exc:
            raise MoneyError(f"{self} and {other} cannot be combined exactly") from exc

    def _significant(self) -> tuple[int, int]:
        """Digit count and exponent with trailing zeros dropped."""
        if self.amount.is_zero():
            return 1, 0
        _, digits, exponent = self.amount.as_tuple()
        count = len(digits)
        while digits[count - 1] == 0:
            count -= 1
            exponent += 1
        return count, exponent

    @property
    def scale(self) -> int:
        """Number of significant decimal places."""
        _, exponent = self._significant()
        return max(-exponent, 0)

    @property
    def integer_digits(self) -> int:
        count, exponent = self._significant()
        return max(count + exponent, 0)

    def __str__(self) -> str:
        return format(self.amount, "f")

    def __repr__(self) -> str:
        return f"Money('{self}')"


def total(amounts) -> Money:
    """Sum an iterable of Money (or anything ``Money.of`` accepts)."""
    result = Money.zero()
    for amount in amounts:
        result = result + Money.of(amount)
    return result
