"""Integer square root on unsigned 128-bit integers.

Uses Newton's iteration x' = (x + n // x) // 2 starting from (n + 1) // 2.
The sequence decreases monotonically until it reaches floor(sqrt(n)), so the
loop stops on the first step that does not decrease. Converges in O(log n)
iterations and never touches floating point.
"""

from __future__ import annotations

from cpamm.errors import ArithmeticOverflow, ArithmeticUnderflow
from cpamm.safe_int import UINT128_MAX

__all__ = ["isqrt"]


def isqrt(n: int) -> int:
    """Return the largest integer r such that r * r <= n.

    Args:
        n: Value in [0, 2^128-1]

    Returns:
        floor(sqrt(n)); exact for perfect squares

    Raises:
        TypeError: If n is not an int
        ArithmeticUnderflow: If n is negative
        ArithmeticOverflow: If n exceeds 2^128-1
    """
    if not isinstance(n, int) or isinstance(n, bool):
        raise TypeError(f"isqrt requires int, got {type(n).__name__}")
    if n < 0:
        raise ArithmeticUnderflow(f"isqrt of negative value {n}")
    if n > UINT128_MAX:
        raise ArithmeticOverflow(f"isqrt argument {n} exceeds u128 max")

    if n < 2:
        return n

    x = n
    y = (x + 1) // 2
    while y < x:
        x = y
        y = (x + n // x) // 2
    return x
