"""Pool error classes.

Every failure in the pool core is raised as a PoolError subclass. Each class
carries an ErrorCode and the message the on-chain program reports for it.
Errors are terminal for the call that raised them: the operation performs no
state change and the exception propagates unchanged to the caller.
"""

from __future__ import annotations

from enum import Enum
from typing import ClassVar


class ErrorCode(Enum):
    """Stable error identifiers exposed to callers."""

    INVALID_AMOUNT = "invalid_amount"
    DUPLICATE_ASSETS = "duplicate_assets"
    INSUFFICIENT_LIQUIDITY = "insufficient_liquidity"
    SLIPPAGE_EXCEEDED = "slippage_exceeded"
    POOL_ALREADY_EXISTS = "pool_already_exists"
    POOL_NOT_FOUND = "pool_not_found"
    TRANSFER_FAILED = "transfer_failed"
    ARITHMETIC_OVERFLOW = "arithmetic_overflow"
    ARITHMETIC_UNDERFLOW = "arithmetic_underflow"
    DIVISION_BY_ZERO = "division_by_zero"


class PoolError(Exception):
    """Base error for pool operations.

    Attributes:
        code: Stable identifier for the failure kind
        message: Default human-readable message for the failure kind
        detail: Optional context about this particular failure
    """

    code: ClassVar[ErrorCode]
    message: ClassVar[str] = "Pool operation failed"

    def __init__(self, detail: str | None = None) -> None:
        self.detail = detail
        super().__init__(f"{self.message}: {detail}" if detail else self.message)


class InvalidAmount(PoolError):
    """A caller-supplied amount is zero or negative."""

    code = ErrorCode.INVALID_AMOUNT
    message = "Invalid amount provided"


class DuplicateAssets(PoolError):
    """Pool creation with the same asset on both sides."""

    code = ErrorCode.DUPLICATE_ASSETS
    message = "Pool assets must be distinct"


class InsufficientLiquidity(PoolError):
    """The operation would leave the pool degenerate, or mint nothing."""

    code = ErrorCode.INSUFFICIENT_LIQUIDITY
    message = "Insufficient liquidity in the pool"


class SlippageExceeded(PoolError):
    """The computed result is below the caller's stated minimum."""

    code = ErrorCode.SLIPPAGE_EXCEEDED
    message = "Slippage tolerance exceeded"


class PoolAlreadyExists(PoolError):
    """A pool for this asset pair has already been initialized."""

    code = ErrorCode.POOL_ALREADY_EXISTS
    message = "Pool already exists"


class PoolNotFound(PoolError):
    """No pool is registered under the given address or asset pair."""

    code = ErrorCode.POOL_NOT_FOUND
    message = "Pool not found"


class TransferError(PoolError):
    """The balance ledger rejected a transfer, mint or burn."""

    code = ErrorCode.TRANSFER_FAILED
    message = "Transfer failed"


class ArithmeticFault(PoolError, ArithmeticError):
    """Base class for checked-arithmetic failures.

    These always indicate a logic error or an input outside the supported
    range, never an expected condition.
    """

    pass


class ArithmeticOverflow(ArithmeticFault):
    """Result does not fit in the target integer width."""

    code = ErrorCode.ARITHMETIC_OVERFLOW
    message = "Arithmetic overflow"


class ArithmeticUnderflow(ArithmeticFault):
    """Subtraction would produce a negative result."""

    code = ErrorCode.ARITHMETIC_UNDERFLOW
    message = "Arithmetic underflow"


class DivisionByZero(ArithmeticFault):
    """Division or modulo by zero."""

    code = ErrorCode.DIVISION_BY_ZERO
    message = "Division by zero"


__all__ = [
    "ErrorCode",
    "PoolError",
    "InvalidAmount",
    "DuplicateAssets",
    "InsufficientLiquidity",
    "SlippageExceeded",
    "PoolAlreadyExists",
    "PoolNotFound",
    "TransferError",
    "ArithmeticFault",
    "ArithmeticOverflow",
    "ArithmeticUnderflow",
    "DivisionByZero",
]
