"""Constant-product swap pricing.

The pool uses the constant product formula: x * y = k
With a proportional fee on input amounts (3/1000 = 0.3% by default).
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from cpamm.constants import BPS_DENOMINATOR, FEE_DENOMINATOR, FEE_NUMERATOR
from cpamm.errors import InsufficientLiquidity, SlippageExceeded
from cpamm.safe_int import S


@dataclass(frozen=True)
class SwapResult:
    """Result of pricing a swap against a reserve snapshot."""

    amount_in: int
    amount_out: int
    reserve_in: int
    reserve_out: int

    @property
    def new_reserve_in(self) -> int:
        return self.reserve_in + self.amount_in

    @property
    def new_reserve_out(self) -> int:
        return self.reserve_out - self.amount_out


class ConstantProduct:
    """Constant-product AMM math.

    Formula: amount_out = (amount_in * m * reserve_out) / (reserve_in * d + amount_in * m)

    where m = d - fee_numerator and d = fee_denominator. With the default
    3/1000 fee, m = 997 and d = 1000. All intermediate values are checked
    unsigned 128-bit integers; every division truncates toward zero.
    """

    def __init__(
        self,
        fee_numerator: int = FEE_NUMERATOR,
        fee_denominator: int = FEE_DENOMINATOR,
    ) -> None:
        if fee_denominator <= 0 or not 0 <= fee_numerator < fee_denominator:
            raise ValueError(f"Invalid fee {fee_numerator}/{fee_denominator}")
        self.fee_numerator = fee_numerator
        self.fee_denominator = fee_denominator

    @property
    def fee_multiplier(self) -> int:
        """Share of the input that is priced (997 for a 3/1000 fee)."""
        return self.fee_denominator - self.fee_numerator

    def get_amount_out(self, amount_in: int, reserve_in: int, reserve_out: int) -> int:
        """Calculate output amount using the constant product formula.

        Args:
            amount_in: Input token amount
            reserve_in: Reserve of input token in pool
            reserve_out: Reserve of output token in pool

        Returns:
            Output token amount (floor)

        Raises:
            ArithmeticOverflow: If an intermediate value exceeds u128
            DivisionByZero: If both reserve_in and amount_in are zero
        """
        amount_in_with_fee = S(amount_in) * S(self.fee_multiplier)
        numerator = amount_in_with_fee * S(reserve_out)
        denominator = S(reserve_in) * S(self.fee_denominator) + amount_in_with_fee

        return (numerator // denominator).to_u64()

    def price_swap(
        self,
        amount_in: int,
        reserve_in: int,
        reserve_out: int,
        min_amount_out: int = 0,
    ) -> SwapResult:
        """Price a swap and enforce the slippage and liquidity bounds.

        The slippage bound is checked first, then the output must be strictly
        between zero and the output reserve so a swap can never drain a side.

        Raises:
            SlippageExceeded: If amount_out < min_amount_out
            InsufficientLiquidity: If amount_out == 0 or amount_out >= reserve_out
        """
        amount_out = self.get_amount_out(amount_in, reserve_in, reserve_out)

        if amount_out < min_amount_out:
            raise SlippageExceeded(f"amount_out {amount_out} < minimum {min_amount_out}")
        if amount_out == 0 or amount_out >= reserve_out:
            raise InsufficientLiquidity(
                f"amount_out {amount_out} with reserve_out {reserve_out}"
            )

        return SwapResult(
            amount_in=amount_in,
            amount_out=amount_out,
            reserve_in=reserve_in,
            reserve_out=reserve_out,
        )

    def fee_amount(self, amount_in: int) -> int:
        """Portion of the input retained by the pool as fee (floor)."""
        return ((S(amount_in) * S(self.fee_numerator)) // S(self.fee_denominator)).to_u64()

    @staticmethod
    def price_impact_bps(amount_in: int, reserve_in: int) -> int:
        """Input size relative to the input reserve, in basis points."""
        if reserve_in == 0:
            return BPS_DENOMINATOR
        return ((S(amount_in) * S(BPS_DENOMINATOR)) // S(reserve_in)).value

    @staticmethod
    def apply_slippage(amount_out: int, slippage_bps: int) -> int:
        """Minimum acceptable output for a given slippage tolerance (floor)."""
        return (
            (S(amount_out) * S(BPS_DENOMINATOR - slippage_bps)) // S(BPS_DENOMINATOR)
        ).to_u64()

    @staticmethod
    def effective_price(amount_in: int, amount_out: int) -> Decimal:
        """Output received per unit of input."""
        if amount_in == 0:
            return Decimal(0)
        return Decimal(amount_out) / Decimal(amount_in)


# Default-fee instance
constant_product = ConstantProduct()


__all__ = [
    "ConstantProduct",
    "SwapResult",
    "constant_product",
]
