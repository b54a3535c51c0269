"""Tests for LP share math."""

import pytest

from cpamm.amm.liquidity import (
    DepositShares,
    amounts_for_withdrawal,
    deposit_excess,
    initial_shares,
    proportional_shares,
    shares_for_deposit,
)
from cpamm.errors import ArithmeticOverflow, DivisionByZero, InsufficientLiquidity
from cpamm.safe_int import UINT64_MAX


class TestInitialShares:
    """Tests for the first-deposit geometric mean."""

    def test_square(self):
        assert initial_shares(1000, 1000) == 1000

    def test_one_one(self):
        assert initial_shares(1, 1) == 1

    def test_floors_geometric_mean(self):
        # sqrt(2 * 1000) = 44.7
        assert initial_shares(2, 1000) == 44

    def test_u64_max_pair(self):
        """The full u64 x u64 product is handled without overflow."""
        assert initial_shares(UINT64_MAX, UINT64_MAX) == UINT64_MAX

    def test_zero_product_is_insufficient(self):
        with pytest.raises(InsufficientLiquidity):
            initial_shares(0, 100)


class TestSharesForDeposit:
    """Tests for deposit share computation."""

    def test_first_deposit(self):
        assert shares_for_deposit(1000, 1000, 0, 0, 0) == DepositShares(shares=1000)

    def test_proportional_deposit(self):
        """A deposit at the live ratio is credited in full."""
        result = shares_for_deposit(500, 1000, 1000, 2000, 1414)
        assert result.shares == 707
        assert result.excess_a == 0
        assert result.excess_b == 0

    def test_limiting_side_wins(self):
        """Off-ratio deposits are credited for the smaller side only."""
        # from_a = 100 * 1000 / 1000 = 100, from_b = 500 * 1000 / 1000 = 500
        result = shares_for_deposit(100, 500, 1000, 1000, 1000)
        assert result.shares == 100
        assert result.excess_a == 0
        assert result.excess_b == 400

    def test_excess_on_side_a(self):
        result = shares_for_deposit(500, 100, 1000, 1000, 1000)
        assert result.shares == 100
        assert result.excess_a == 400
        assert result.excess_b == 0

    def test_rounds_down(self):
        # 7 * 1000 / 3000 = 2.33 -> 2
        assert proportional_shares(7, 1000, 3000) == 2

    def test_dust_deposit_is_insufficient(self):
        """A later deposit worth less than one share is rejected."""
        with pytest.raises(InsufficientLiquidity):
            shares_for_deposit(1, 1, 10_000, 10_000, 1)

    def test_corrupt_pool_divides_by_zero(self):
        """Shares outstanding with an empty reserve trips the division guard."""
        with pytest.raises(DivisionByZero):
            shares_for_deposit(100, 100, 0, 1000, 1000)

    def test_share_overflow_is_reported(self):
        """Share counts that do not fit in u64 fail instead of truncating."""
        with pytest.raises(ArithmeticOverflow):
            shares_for_deposit(UINT64_MAX, UINT64_MAX, 1, 1, 2)

    @pytest.mark.parametrize(
        "amount_a,amount_b,reserve_a,reserve_b,total",
        [
            (10, 10, 1000, 1000, 1000),
            (333, 777, 1000, 2000, 1414),
            (1, 10**9, 7, 10**12, 2645),
            (10**6, 3, 10**9, 11, 104_880),
        ],
    )
    def test_never_over_mints(self, amount_a, amount_b, reserve_a, reserve_b, total):
        """Minted shares never claim more than was contributed on either side."""
        shares = shares_for_deposit(amount_a, amount_b, reserve_a, reserve_b, total).shares
        new_total = total + shares
        assert (reserve_a + amount_a) * shares // new_total <= amount_a
        assert (reserve_b + amount_b) * shares // new_total <= amount_b


class TestDepositExcess:
    def test_empty_pool_has_no_excess(self):
        assert deposit_excess(5, 1, 0, 0) == (0, 0)

    def test_exact_ratio(self):
        assert deposit_excess(100, 200, 1000, 2000) == (0, 0)


class TestAmountsForWithdrawal:
    """Tests for withdrawal amounts."""

    def test_full_withdrawal(self):
        assert amounts_for_withdrawal(1000, 1100, 910, 1000) == (1100, 910)

    def test_partial_withdrawal_rounds_down(self):
        # 1100 * 333 / 1000 = 366.3, 910 * 333 / 1000 = 303.03
        assert amounts_for_withdrawal(333, 1100, 910, 1000) == (366, 303)

    def test_no_shares_outstanding(self):
        with pytest.raises(InsufficientLiquidity):
            amounts_for_withdrawal(1, 100, 100, 0)

    def test_large_values(self):
        """Reserve * shares is computed in 128-bit width."""
        assert amounts_for_withdrawal(UINT64_MAX, UINT64_MAX, UINT64_MAX, UINT64_MAX) == (
            UINT64_MAX,
            UINT64_MAX,
        )
