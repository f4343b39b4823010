"""Unsigned 18-decimal fixed-point numbers.

Fee rates, spread ratios, belief prices and the reward index are all
non-negative decimals with 18 fractional digits, stored as integers scaled
by 10^18. Multiplying an amount by a Ufp always floors.
"""

from __future__ import annotations

from decimal import ROUND_DOWN, Decimal
from typing import ClassVar

from stablepool.safe_int import DivisionByZero, Underflow

__all__ = ["Ufp", "ONE_18"]

ONE_18 = 10**18


class Ufp:
    """18-decimal unsigned fixed-point number stored as int.

    Example: 1.5 is stored as 1_500_000_000_000_000_000
    """

    ONE: ClassVar[int] = ONE_18

    __slots__ = ("value",)
    __hash__ = None  # type: ignore[assignment]  # Unhashable since we define __eq__

    def __init__(self, value: int) -> None:
        """Create Ufp from raw scaled value."""
        if value < 0:
            raise Underflow(f"Ufp cannot be negative: {value}")
        self.value = value

    @classmethod
    def zero(cls) -> Ufp:
        return cls(0)

    @classmethod
    def one(cls) -> Ufp:
        return cls(cls.ONE)

    @classmethod
    def from_decimal(cls, d: Decimal | str) -> Ufp:
        """Create from decimal, truncating digits beyond the 18th.

        Requires non-negative input.
        """
        d = Decimal(d)
        if d < 0:
            raise ValueError(f"Ufp.from_decimal requires non-negative input, got {d}")
        scaled = (d * cls.ONE).quantize(Decimal("1"), rounding=ROUND_DOWN)
        return cls(int(scaled))

    @classmethod
    def from_ratio(cls, numerator: int, denominator: int) -> Ufp:
        """numerator / denominator, floored to 18 decimals.

        Raises:
            DivisionByZero: If denominator is zero
        """
        if denominator == 0:
            raise DivisionByZero(f"Ufp.from_ratio denominator is zero: {numerator} / 0")
        return cls(numerator * cls.ONE // denominator)

    def to_decimal(self) -> Decimal:
        """Convert to Decimal for display."""
        return Decimal(self.value) / Decimal(self.ONE)

    def mul_int(self, amount: int) -> int:
        """Multiply an integer amount, flooring: amount * self."""
        return amount * self.value // self.ONE

    def div_down(self, other: Ufp) -> Ufp:
        """Divide with floor rounding: (a * 10^18) // b"""
        if other.value == 0:
            raise DivisionByZero("Ufp division by zero")
        return Ufp((self.value * self.ONE) // other.value)

    def inv(self) -> Ufp:
        """Return 1 / self, floored."""
        return Ufp.one().div_down(self)

    def complement(self) -> Ufp:
        """Return 1 - self.

        Raises:
            Underflow: If self > 1
        """
        return Ufp.one().sub(self)

    def add(self, other: Ufp) -> Ufp:
        return Ufp(self.value + other.value)

    def sub(self, other: Ufp) -> Ufp:
        """Subtract other from self.

        Raises:
            Underflow: If other > self
        """
        if other.value > self.value:
            raise Underflow(f"Ufp underflow: {self} - {other}")
        return Ufp(self.value - other.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Ufp):
            return NotImplemented
        return self.value == other.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Ufp):
            return NotImplemented
        return self.value < other.value

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Ufp):
            return NotImplemented
        return self.value <= other.value

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Ufp):
            return NotImplemented
        return self.value > other.value

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Ufp):
            return NotImplemented
        return self.value >= other.value

    def __repr__(self) -> str:
        return f"Ufp({self.value})"

    def __str__(self) -> str:
        return str(self.to_decimal())
