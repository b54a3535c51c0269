"""Protocol constants for the constant-product pool program.

Centralizes the fee parameters, derivation seeds and integer widths.
"""

from cpamm.safe_int import UINT64_MAX, UINT128_MAX

# Swap fee as an integer fraction (3 / 1000 = 0.3%)
FEE_NUMERATOR = 3
FEE_DENOMINATOR = 1000

# Basis-point denominator used by quotes
BPS_DENOMINATOR = 10_000

# Slippage tolerance applied to quoted minimum outputs (100 bps = 1%)
DEFAULT_QUOTE_SLIPPAGE_BPS = 100

# Decimals of the LP share asset
SHARE_DECIMALS = 6

# Seeds for deterministic address derivation
POOL_SEED = b"pool"
LP_MINT_SEED = b"lp_mint"
POOL_TOKEN_A_SEED = b"pool_token_a"
POOL_TOKEN_B_SEED = b"pool_token_b"

# Program identity mixed into every derived address
DEFAULT_PROGRAM_ID = "0x" + "49" * 32

__all__ = [
    "FEE_NUMERATOR",
    "FEE_DENOMINATOR",
    "BPS_DENOMINATOR",
    "DEFAULT_QUOTE_SLIPPAGE_BPS",
    "SHARE_DECIMALS",
    "POOL_SEED",
    "LP_MINT_SEED",
    "POOL_TOKEN_A_SEED",
    "POOL_TOKEN_B_SEED",
    "DEFAULT_PROGRAM_ID",
    "UINT64_MAX",
    "UINT128_MAX",
]
