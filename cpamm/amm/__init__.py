"""Pool math: constant-product pricing and LP share accounting."""

from cpamm.amm.constant_product import ConstantProduct, SwapResult, constant_product
from cpamm.amm.liquidity import (
    DepositShares,
    amounts_for_withdrawal,
    deposit_excess,
    initial_shares,
    proportional_shares,
    shares_for_deposit,
)

__all__ = [
    # Swap pricing
    "ConstantProduct",
    "SwapResult",
    "constant_product",
    # Liquidity
    "DepositShares",
    "initial_shares",
    "proportional_shares",
    "shares_for_deposit",
    "deposit_excess",
    "amounts_for_withdrawal",
]
