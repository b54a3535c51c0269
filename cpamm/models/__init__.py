"""Data models for pool records and views."""

from cpamm.models.pool import POOL_RECORD_SIZE, Pool, PoolRecord, SwapDirection
from cpamm.models.types import (
    U64,
    Identifier,
    is_valid_id,
    normalize_id,
    require_u64,
)
from cpamm.models.views import DepositPreview, PoolInfo, SwapQuote, WithdrawPreview

__all__ = [
    "Pool",
    "PoolRecord",
    "POOL_RECORD_SIZE",
    "SwapDirection",
    "PoolInfo",
    "SwapQuote",
    "DepositPreview",
    "WithdrawPreview",
    "Identifier",
    "U64",
    "is_valid_id",
    "normalize_id",
    "require_u64",
]
