"""Integer math primitives for pool accounting.

This package provides:
- isqrt: floor square root of an unsigned 128-bit integer (Newton's method)
"""

from cpamm.math.integer_sqrt import isqrt

__all__ = ["isqrt"]
