"""Checked unsigned integers for pool arithmetic.

Reserve and share math multiplies two u64 quantities before dividing, so the
intermediate width is u128. SafeInt keeps every intermediate inside
[0, 2^128-1] and turns any escape into a PoolError:

    S(a) * S(b)        ArithmeticOverflow past u128
    S(a) - S(b)        ArithmeticUnderflow below zero
    S(a) // S(0)       DivisionByZero
    S(x).to_u64()      ArithmeticOverflow past u64

Wrap operands on the way in and narrow on the way out:

    shares = (S(amount) * S(total_shares) // S(reserve)).to_u64()
"""

from __future__ import annotations

from functools import total_ordering

from cpamm.errors import ArithmeticOverflow, ArithmeticUnderflow, DivisionByZero

UINT64_MAX = 2**64 - 1
UINT128_MAX = 2**128 - 1

_NO_TRUE_DIVISION = "SafeInt does not support true division; use floor division (//)"


def _check_u128(value: int) -> int:
    if value < 0:
        raise ArithmeticUnderflow(f"{value} is below zero")
    if value > UINT128_MAX:
        raise ArithmeticOverflow(f"{value} exceeds u128 max")
    return value


def _operand(x: SafeInt | int) -> int:
    """Raw value of an operand; plain ints are range-checked like SafeInts."""
    if isinstance(x, SafeInt):
        return x._value
    if isinstance(x, int) and not isinstance(x, bool):
        return _check_u128(x)
    raise TypeError(f"SafeInt operand must be int, got {type(x).__name__}")


@total_ordering
class SafeInt:
    """Integer in [0, 2^128-1] whose operators never leave that range silently.

    Mixed SafeInt/int expressions are allowed in either operand order and
    always produce a SafeInt. True division is rejected so float results
    cannot leak into amounts.

    Raises:
        TypeError: On construction from anything but an int or SafeInt
            (bool is rejected)
        ArithmeticUnderflow: On construction from a negative int
        ArithmeticOverflow: On construction from an int above 2^128-1
    """

    __slots__ = ("_value",)

    def __init__(self, value: SafeInt | int) -> None:
        if isinstance(value, SafeInt):
            self._value: int = value._value
        elif isinstance(value, int) and not isinstance(value, bool):
            self._value = _check_u128(value)
        else:
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")

    @classmethod
    def zero(cls) -> SafeInt:
        return cls(0)

    @property
    def value(self) -> int:
        return self._value

    # Arithmetic

    def __add__(self, other: SafeInt | int) -> SafeInt:
        rhs = _operand(other)
        total = self._value + rhs
        if total > UINT128_MAX:
            raise ArithmeticOverflow(f"{self._value} + {rhs} exceeds u128 max")
        return SafeInt(total)

    __radd__ = __add__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        rhs = _operand(other)
        if rhs > self._value:
            raise ArithmeticUnderflow(f"{self._value} - {rhs} = {self._value - rhs}")
        return SafeInt(self._value - rhs)

    def __rsub__(self, other: int) -> SafeInt:
        return SafeInt(other) - self

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        rhs = _operand(other)
        product = self._value * rhs
        if product > UINT128_MAX:
            raise ArithmeticOverflow(f"{self._value} * {rhs} exceeds u128 max")
        return SafeInt(product)

    __rmul__ = __mul__

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        divisor = _operand(other)
        if not divisor:
            raise DivisionByZero(f"{self._value} // 0")
        return SafeInt(self._value // divisor)

    def __rfloordiv__(self, other: int) -> SafeInt:
        return SafeInt(other) // self

    def __mod__(self, other: SafeInt | int) -> SafeInt:
        divisor = _operand(other)
        if not divisor:
            raise DivisionByZero(f"{self._value} % 0")
        return SafeInt(self._value % divisor)

    def __rmod__(self, other: int) -> SafeInt:
        return SafeInt(other) % self

    def __truediv__(self, other: object) -> SafeInt:
        raise TypeError(_NO_TRUE_DIVISION)

    def __rtruediv__(self, other: object) -> SafeInt:
        raise TypeError(_NO_TRUE_DIVISION)

    # Comparison

    def __eq__(self, other: object) -> bool:
        if isinstance(other, SafeInt):
            return self._value == other._value
        if isinstance(other, int) and not isinstance(other, bool):
            return self._value == other
        return NotImplemented

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _operand(other)

    def __hash__(self) -> int:
        return hash(self._value)

    # Conversion

    def __int__(self) -> int:
        return self._value

    __index__ = __int__

    def __bool__(self) -> bool:
        return self._value != 0

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"

    def __str__(self) -> str:
        return str(self._value)

    def to_u64(self) -> int:
        """Narrow to a plain u64 int.

        Raises:
            ArithmeticOverflow: If the value exceeds 2^64-1
        """
        if self._value > UINT64_MAX:
            raise ArithmeticOverflow(f"{self._value} exceeds u64 max")
        return self._value

    def is_u64(self) -> bool:
        return self._value <= UINT64_MAX

    # Named operations

    def min(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(min(self._value, _operand(other)))

    def max(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(max(self._value, _operand(other)))

    def isqrt(self) -> SafeInt:
        """Floor square root, see cpamm.math.isqrt."""
        from cpamm.math import isqrt

        return SafeInt(isqrt(self._value))


S = SafeInt
