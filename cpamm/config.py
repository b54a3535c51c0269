"""Configuration for the pool program."""

from __future__ import annotations

import os
from dataclasses import dataclass

from cpamm.constants import (
    BPS_DENOMINATOR,
    DEFAULT_PROGRAM_ID,
    DEFAULT_QUOTE_SLIPPAGE_BPS,
    FEE_DENOMINATOR,
    FEE_NUMERATOR,
    SHARE_DECIMALS,
)
from cpamm.models.types import is_valid_id, normalize_id


@dataclass(frozen=True)
class PoolConfig:
    """Fee and quoting parameters of a pool program.

    One instance fixes the fee fraction charged by every pool of a program and
    the program id its pool addresses derive from. Quotes take their default
    slippage tolerance from here as well.

    Attributes:
        fee_numerator: Swap fee numerator (default: 3)
        fee_denominator: Swap fee denominator (default: 1000, i.e. 0.3%)
        quote_slippage_bps: Tolerance used for SwapQuote.minimum_received
            (default: 100 = 1%)
        share_decimals: Decimals reported for the LP share asset (default: 6)
        program_id: Identity mixed into every derived pool address
    """

    fee_numerator: int = FEE_NUMERATOR
    fee_denominator: int = FEE_DENOMINATOR
    quote_slippage_bps: int = DEFAULT_QUOTE_SLIPPAGE_BPS
    share_decimals: int = SHARE_DECIMALS
    program_id: str = DEFAULT_PROGRAM_ID

    def __post_init__(self) -> None:
        if self.fee_denominator <= 0:
            raise ValueError(f"fee_denominator must be positive, got {self.fee_denominator}")
        if not 0 <= self.fee_numerator < self.fee_denominator:
            raise ValueError(
                f"fee_numerator must be in [0, {self.fee_denominator}), got {self.fee_numerator}"
            )
        if not 0 <= self.quote_slippage_bps <= BPS_DENOMINATOR:
            raise ValueError(
                f"quote_slippage_bps must be in [0, {BPS_DENOMINATOR}], "
                f"got {self.quote_slippage_bps}"
            )
        if self.share_decimals < 0:
            raise ValueError(f"share_decimals cannot be negative, got {self.share_decimals}")
        program_id = normalize_id(self.program_id)
        if not is_valid_id(program_id):
            raise ValueError(f"Invalid program_id: {self.program_id}")
        object.__setattr__(self, "program_id", program_id)

    @property
    def fee_multiplier(self) -> int:
        """Fee multiplier for swap math (fee_denominator - fee_numerator).

        For the default 3/1000 fee this returns 997.
        """
        return self.fee_denominator - self.fee_numerator

    @classmethod
    def from_env(cls) -> PoolConfig:
        """Build a config from environment variables.

        Configuration via environment variables:
        - CPAMM_FEE_NUMERATOR: Swap fee numerator (default: 3)
        - CPAMM_FEE_DENOMINATOR: Swap fee denominator (default: 1000)
        - CPAMM_QUOTE_SLIPPAGE_BPS: Quote slippage tolerance (default: 100)
        - CPAMM_SHARE_DECIMALS: LP share decimals (default: 6)
        - CPAMM_PROGRAM_ID: Program identity (default: DEFAULT_PROGRAM_ID)

        Raises:
            ValueError: If a variable is not an integer or fails validation
        """
        return cls(
            fee_numerator=int(os.environ.get("CPAMM_FEE_NUMERATOR", str(FEE_NUMERATOR))),
            fee_denominator=int(os.environ.get("CPAMM_FEE_DENOMINATOR", str(FEE_DENOMINATOR))),
            quote_slippage_bps=int(
                os.environ.get("CPAMM_QUOTE_SLIPPAGE_BPS", str(DEFAULT_QUOTE_SLIPPAGE_BPS))
            ),
            share_decimals=int(os.environ.get("CPAMM_SHARE_DECIMALS", str(SHARE_DECIMALS))),
            program_id=os.environ.get("CPAMM_PROGRAM_ID", DEFAULT_PROGRAM_ID),
        )


# Default configuration instance
DEFAULT_POOL_CONFIG = PoolConfig()
