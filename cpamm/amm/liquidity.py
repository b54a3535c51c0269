"""LP share math for deposits and withdrawals.

Pure functions with explicit rounding: every division truncates toward zero,
so a deposit never mints more shares than the contribution justifies and a
withdrawal never pays out more than the burned shares are worth.
"""

from __future__ import annotations

from dataclasses import dataclass

from cpamm.errors import InsufficientLiquidity
from cpamm.safe_int import S


@dataclass(frozen=True)
class DepositShares:
    """Shares minted for a deposit, and the uncredited part of it.

    Attributes:
        shares: Shares to mint
        excess_a: Amount of asset A contributed beyond the live ratio
        excess_b: Amount of asset B contributed beyond the live ratio
    """

    shares: int
    excess_a: int = 0
    excess_b: int = 0


def initial_shares(amount_a: int, amount_b: int) -> int:
    """Shares for the first deposit: floor(sqrt(amount_a * amount_b)).

    Raises:
        InsufficientLiquidity: If the geometric mean rounds to zero
    """
    shares = (S(amount_a) * S(amount_b)).isqrt().to_u64()
    if shares == 0:
        raise InsufficientLiquidity(f"initial deposit ({amount_a}, {amount_b}) mints no shares")
    return shares


def proportional_shares(amount: int, total_shares: int, reserve: int) -> int:
    """floor(amount * total_shares / reserve) in checked 128-bit width."""
    return ((S(amount) * S(total_shares)) // S(reserve)).to_u64()


def shares_for_deposit(
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> DepositShares:
    """Compute the shares minted for depositing (amount_a, amount_b).

    The first deposit mints the geometric mean of the amounts. Later deposits
    are credited for the limiting side only:
    min(amount_a * T / reserve_a, amount_b * T / reserve_b). The surplus on
    the other side still enters the pool and is reported as excess.

    Raises:
        InsufficientLiquidity: If no shares would be minted
        DivisionByZero: If shares are outstanding but a reserve is empty
        ArithmeticOverflow: If an intermediate value exceeds u128
    """
    if total_shares == 0:
        return DepositShares(shares=initial_shares(amount_a, amount_b))

    shares_from_a = proportional_shares(amount_a, total_shares, reserve_a)
    shares_from_b = proportional_shares(amount_b, total_shares, reserve_b)
    shares = min(shares_from_a, shares_from_b)
    if shares == 0:
        raise InsufficientLiquidity(
            f"deposit ({amount_a}, {amount_b}) too small for reserves ({reserve_a}, {reserve_b})"
        )

    excess_a, excess_b = deposit_excess(amount_a, amount_b, reserve_a, reserve_b)
    return DepositShares(shares=shares, excess_a=excess_a, excess_b=excess_b)


def deposit_excess(
    amount_a: int,
    amount_b: int,
    reserve_a: int,
    reserve_b: int,
) -> tuple[int, int]:
    """Amounts contributed beyond the live reserve ratio, as (excess_a, excess_b).

    At most one side is non-zero. An empty pool accepts any ratio.
    """
    if reserve_a == 0 or reserve_b == 0:
        return 0, 0

    b_matching_a = ((S(amount_a) * S(reserve_b)) // S(reserve_a)).value
    if b_matching_a <= amount_b:
        return 0, amount_b - b_matching_a

    a_matching_b = ((S(amount_b) * S(reserve_a)) // S(reserve_b)).value
    return amount_a - a_matching_b, 0


def amounts_for_withdrawal(
    share_amount: int,
    reserve_a: int,
    reserve_b: int,
    total_shares: int,
) -> tuple[int, int]:
    """Compute (floor(reserve_a * s / T), floor(reserve_b * s / T)).

    Raises:
        InsufficientLiquidity: If no shares are outstanding
        ArithmeticOverflow: If an intermediate value exceeds u128
    """
    if total_shares == 0:
        raise InsufficientLiquidity("pool has no shares outstanding")

    amount_a = ((S(reserve_a) * S(share_amount)) // S(total_shares)).to_u64()
    amount_b = ((S(reserve_b) * S(share_amount)) // S(total_shares)).to_u64()
    return amount_a, amount_b


__all__ = [
    "DepositShares",
    "initial_shares",
    "proportional_shares",
    "shares_for_deposit",
    "deposit_excess",
    "amounts_for_withdrawal",
]
