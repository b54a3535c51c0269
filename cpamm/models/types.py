"""Shared type definitions for pool models.

Identifiers (assets, accounts, mints, pools) are 32-byte values written as
0x-prefixed lowercase hex. Amounts are unsigned 64-bit integers.
"""

from __future__ import annotations

import re
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from cpamm.errors import ArithmeticOverflow, InvalidAmount
from cpamm.safe_int import UINT64_MAX

_ID_RE = re.compile(r"^0x[a-fA-F0-9]{64}$")


def is_valid_id(value: Any) -> bool:
    """Check whether a value is a 0x-prefixed 32-byte hex identifier."""
    return isinstance(value, str) and _ID_RE.match(value) is not None


def normalize_id(value: str, *, validate: bool = False) -> str:
    """Normalize an identifier to lowercase.

    Args:
        value: A 32-byte hex identifier (with or without 0x prefix)
        validate: If True, raises ValueError for invalid identifiers.

    Returns:
        Lowercase identifier with 0x prefix

    Raises:
        ValueError: If validate=True and the identifier is malformed
    """
    normalized = value.lower()
    if not normalized.startswith("0x"):
        normalized = "0x" + normalized
    if validate and not is_valid_id(normalized):
        raise ValueError(f"Invalid identifier: {value} (must be 0x + 64 hex chars)")
    return normalized


def id_to_bytes(value: str) -> bytes:
    """Convert a hex identifier to its 32 raw bytes."""
    return bytes.fromhex(normalize_id(value, validate=True)[2:])


def bytes_to_id(raw: bytes) -> str:
    """Convert 32 raw bytes to a hex identifier."""
    if len(raw) != 32:
        raise ValueError(f"Identifier must be 32 bytes, got {len(raw)}")
    return "0x" + raw.hex()


def require_u64(name: str, value: Any, *, allow_zero: bool = False) -> int:
    """Validate a caller-supplied u64 amount.

    Args:
        name: Parameter name (for error messages)
        value: Value to validate
        allow_zero: Accept zero (used for minimum-output bounds)

    Returns:
        The validated integer

    Raises:
        TypeError: If value is not an int (bool is rejected)
        InvalidAmount: If value is negative, or zero when allow_zero is False
        ArithmeticOverflow: If value exceeds 2^64-1
    """
    if not isinstance(value, int) or isinstance(value, bool):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0 or (value == 0 and not allow_zero):
        raise InvalidAmount(f"{name}={value}")
    if value > UINT64_MAX:
        raise ArithmeticOverflow(f"{name}={value} exceeds u64 max")
    return value


def _validate_id(value: Any) -> str:
    if not is_valid_id(value):
        raise ValueError(f"Invalid identifier: {value!r}")
    return normalize_id(value)


# 32-byte identifier as 0x-prefixed hex (normalized to lowercase)
Identifier = Annotated[str, BeforeValidator(_validate_id)]

# Unsigned 64-bit amount
U64 = Annotated[int, Field(ge=0, le=UINT64_MAX)]
