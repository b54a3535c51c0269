"""Pydantic views of pool state and read-only quotes.

These are the shapes handed to a transport layer. None of them carries the
pool's authority capability.
"""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, ConfigDict

from cpamm.constants import SHARE_DECIMALS
from cpamm.models.pool import SwapDirection
from cpamm.models.types import U64, Identifier


class PoolInfo(BaseModel):
    """Snapshot of a pool's identity and live reserves."""

    model_config = ConfigDict(frozen=True)

    address: Identifier
    asset_a_id: Identifier
    asset_b_id: Identifier
    share_mint_id: Identifier
    reserve_a: U64
    reserve_b: U64
    total_shares: U64
    share_decimals: int = SHARE_DECIMALS
    # reserve_b / reserve_a, None while reserve A is empty
    price_ratio: Decimal | None = None


class SwapQuote(BaseModel):
    """Expected result of a swap at the current reserves."""

    model_config = ConfigDict(frozen=True)

    pool: Identifier
    direction: SwapDirection
    amount_in: U64
    amount_out: U64
    fee_amount: U64
    price_impact_bps: int
    effective_price: Decimal
    minimum_received: U64


class DepositPreview(BaseModel):
    """Expected result of a deposit at the current reserves.

    `excess_a` / `excess_b` is the part of the contribution on the
    non-limiting side that is transferred in but not credited with shares.
    """

    model_config = ConfigDict(frozen=True)

    pool: Identifier
    shares: U64
    excess_a: U64 = 0
    excess_b: U64 = 0


class WithdrawPreview(BaseModel):
    """Expected amounts returned for burning a number of shares."""

    model_config = ConfigDict(frozen=True)

    pool: Identifier
    share_amount: U64
    amount_a: U64
    amount_b: U64
