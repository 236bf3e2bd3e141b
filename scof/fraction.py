"""Fraction: exact unsigned 8-bit rational numbers for note durations."""

from __future__ import annotations

from dataclasses import dataclass

from scof.errors import ArithmeticDegenerate, FractionOverflowError, NegativeFractionError

U8_MAX = 255


def gcd(a: int, b: int) -> int:
    """
    Iterative greatest common divisor of two non-negative integers.

    Returns the other operand when either one is zero.
    """
    if a == 0:
        return b
    if b == 0:
        return a

    while True:
        a %= b
        if a == 0:
            return b
        b %= a
        if b == 0:
            return a


def _check_u8(value: int, what: str) -> None:
    if not 0 <= value <= U8_MAX:
        raise FractionOverflowError(f"{what} {value} does not fit in 0..{U8_MAX}")


@dataclass(frozen=True)
class Fraction:
    """
    An unsigned fraction, usually of a whole note.

    Values are *not* reduced on construction, so ``Fraction(2, 4)`` keeps its
    spelling and compares unequal to ``Fraction(1, 2)`` with ``==``.  Every
    arithmetic operation returns its result in lowest terms.  Use ``<`` / ``>``
    (cross-multiplication) to compare magnitudes.

    Attributes:
        num: Numerator, 0..255.
        den: Denominator, 1..255.
    """

    num: int
    den: int

    def __post_init__(self) -> None:
        _check_u8(self.num, "numerator")
        _check_u8(self.den, "denominator")
        if self.den == 0:
            raise ArithmeticDegenerate(f"fraction {self.num}/0 has a zero denominator")

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    @classmethod
    def _reduced(cls, num: int, den: int) -> Fraction:
        """Build a fraction in lowest terms from (possibly wide) integers."""
        if den == 0:
            raise ArithmeticDegenerate(f"fraction {num}/0 has a zero denominator")
        if num == 0:
            return cls(0, 1)
        divisor = gcd(num, den)
        num, den = num // divisor, den // divisor
        if num > U8_MAX or den > U8_MAX:
            raise FractionOverflowError(f"result {num}/{den} does not fit in 8 bits")
        return cls(num, den)

    def _common_terms(self, other: Fraction) -> tuple[int, int, int]:
        """Return (self numerator, other numerator, denominator) over a shared denominator."""
        if self.den % other.den == 0:
            return self.num, other.num * (self.den // other.den), self.den
        if other.den % self.den == 0:
            return self.num * (other.den // self.den), other.num, other.den
        return self.num * other.den, other.num * self.den, self.den * other.den

    def _cross(self, other: Fraction) -> tuple[int, int]:
        return self.num * other.den, other.num * self.den

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    @property
    def is_zero(self) -> bool:
        return self.num == 0 and self.den != 0

    def reciprocal(self) -> Fraction:
        """Return 1 / self.

        Raises:
            ArithmeticDegenerate: If self is zero.
        """
        if self.num == 0:
            raise ArithmeticDegenerate("reciprocal of zero")
        return Fraction(self.den, self.num)

    def scale(self, value: int) -> int:
        """Multiply a non-negative integer by this fraction, rounding down."""
        return value * self.num // self.den

    def __add__(self, other: Fraction) -> Fraction:
        if not isinstance(other, Fraction):
            return NotImplemented
        a, b, den = self._common_terms(other)
        return Fraction._reduced(a + b, den)

    def __sub__(self, other: Fraction) -> Fraction:
        if not isinstance(other, Fraction):
            return NotImplemented
        a, b, den = self._common_terms(other)
        if a < b:
            raise NegativeFractionError(f"{self} - {other} is negative")
        return Fraction._reduced(a - b, den)

    def __mul__(self, other: Fraction | int) -> Fraction:
        if isinstance(other, bool):
            return NotImplemented
        if isinstance(other, int):
            if other < 0:
                raise NegativeFractionError(f"{self} * {other} is negative")
            return Fraction._reduced(self.num * other, self.den)
        if not isinstance(other, Fraction):
            return NotImplemented
        return Fraction._reduced(self.num * other.num, self.den * other.den)

    __rmul__ = __mul__

    def __truediv__(self, other: Fraction) -> Fraction:
        if not isinstance(other, Fraction):
            return NotImplemented
        return self * other.reciprocal()

    def __lt__(self, other: Fraction) -> bool:
        if not isinstance(other, Fraction):
            return NotImplemented
        a, b = self._cross(other)
        return a < b

    def __le__(self, other: Fraction) -> bool:
        if not isinstance(other, Fraction):
            return NotImplemented
        a, b = self._cross(other)
        return a <= b

    def __gt__(self, other: Fraction) -> bool:
        if not isinstance(other, Fraction):
            return NotImplemented
        a, b = self._cross(other)
        return a > b

    def __ge__(self, other: Fraction) -> bool:
        if not isinstance(other, Fraction):
            return NotImplemented
        a, b = self._cross(other)
        return a >= b

    def __str__(self) -> str:
        return f"{self.num}/{self.den}"
