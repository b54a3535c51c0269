"""Pool program: the public operations of the constant-product pool.

AmmProgram is the entry point for callers. It validates inputs, reads live
reserves from the ledger, delegates the math to cpamm.amm, and commits the
resulting transfers, mints and burns as one atomic unit per call.

Callers are trusted to have authenticated `user` and to serialise
operations on the same pool; the program itself holds no locks.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from decimal import Decimal

import structlog

from cpamm.amm.constant_product import ConstantProduct
from cpamm.amm.liquidity import amounts_for_withdrawal, shares_for_deposit
from cpamm.config import DEFAULT_POOL_CONFIG, PoolConfig
from cpamm.constants import BPS_DENOMINATOR
from cpamm.errors import (
    ArithmeticOverflow,
    InsufficientLiquidity,
    PoolAlreadyExists,
    PoolNotFound,
    SlippageExceeded,
)
from cpamm.ledger.base import Ledger
from cpamm.ledger.memory import InMemoryLedger
from cpamm.models.pool import Pool, SwapDirection
from cpamm.models.types import normalize_id, require_u64
from cpamm.models.views import DepositPreview, PoolInfo, SwapQuote, WithdrawPreview
from cpamm.pools.registry import PoolRegistry
from cpamm.safe_int import S

logger = structlog.get_logger()


class AmmProgram:
    """Constant-product pool program over a ledger.

    Args:
        ledger: Balance and share ledger. If None, uses a fresh InMemoryLedger.
        config: Fee and quoting configuration. If None, uses DEFAULT_POOL_CONFIG.
        registry: Pool registry. If None, creates one for config.program_id.
    """

    def __init__(
        self,
        ledger: Ledger | None = None,
        config: PoolConfig | None = None,
        registry: PoolRegistry | None = None,
    ) -> None:
        self.config = config if config is not None else DEFAULT_POOL_CONFIG
        self.ledger: Ledger = ledger if ledger is not None else InMemoryLedger()
        self.registry = registry if registry is not None else PoolRegistry(self.config.program_id)
        self.amm = ConstantProduct(self.config.fee_numerator, self.config.fee_denominator)

    # --- Pool ledger ---

    def initialize(self, asset_a_id: str, asset_b_id: str) -> Pool:
        """Create the pool for an asset pair.

        Allocates the share mint (authority: the pool) and both reserve
        accounts (owner: the pool). The pool starts with no shares.

        Raises:
            DuplicateAssets: If asset_a_id == asset_b_id
            PoolAlreadyExists: If the pair already has a pool
        """
        pool = self.registry.derive_pool(asset_a_id, asset_b_id)
        if pool.address in self.registry:
            raise PoolAlreadyExists(pool.address)

        with self.ledger.atomic():
            self.ledger.create_mint(pool.share_mint_id, pool.address)
            self.ledger.create_account(pool.reserve_a_account, pool.address, pool.asset_a_id)
            self.ledger.create_account(pool.reserve_b_account, pool.address, pool.asset_b_id)
            self.registry.add(pool)

        logger.info(
            "pool_initialized",
            pool=pool.address,
            asset_a=pool.asset_a_id,
            asset_b=pool.asset_b_id,
            share_mint=pool.share_mint_id,
        )
        return pool

    def reserves(self, pool: Pool | str) -> tuple[int, int]:
        """Live reserve balances as (reserve_a, reserve_b)."""
        pool = self._resolve(pool)
        return (
            self.ledger.read_balance(pool.reserve_a_account),
            self.ledger.read_balance(pool.reserve_b_account),
        )

    # --- Liquidity provisioning ---

    def deposit(
        self,
        pool: Pool | str,
        user: str,
        amount_a: int,
        amount_b: int,
        min_shares: int = 0,
    ) -> int:
        """Deposit both assets and mint LP shares to `user`.

        Returns:
            Number of shares minted

        Raises:
            InvalidAmount: If either amount is zero
            InsufficientLiquidity: If the deposit would mint no shares
            SlippageExceeded: If fewer than min_shares would be minted
            ArithmeticOverflow: If total_shares would exceed u64
            TransferError: If the user cannot fund the deposit
        """
        pool = self._resolve(pool)
        user = normalize_id(user, validate=True)
        require_u64("amount_a", amount_a)
        require_u64("amount_b", amount_b)
        require_u64("min_shares", min_shares, allow_zero=True)

        reserve_a, reserve_b = self.reserves(pool)
        minted = shares_for_deposit(amount_a, amount_b, reserve_a, reserve_b, pool.total_shares)
        shares = minted.shares

        if shares < min_shares:
            logger.debug(
                "deposit_rejected",
                pool=pool.address,
                shares=shares,
                min_shares=min_shares,
            )
            raise SlippageExceeded(f"shares {shares} < minimum {min_shares}")

        with self._commit(pool):
            user_a = self.ledger.associated_account(user, pool.asset_a_id)
            user_b = self.ledger.associated_account(user, pool.asset_b_id)
            user_shares = self.ledger.associated_account(user, pool.share_mint_id)

            self.ledger.transfer(user_a, pool.reserve_a_account, amount_a, user)
            self.ledger.transfer(user_b, pool.reserve_b_account, amount_b, user)
            pool.total_shares = (S(pool.total_shares) + S(shares)).to_u64()
            self.ledger.mint(pool.share_mint_id, user_shares, shares, pool.authority)

        logger.info(
            "liquidity_deposited",
            pool=pool.address,
            user=user,
            amount_a=amount_a,
            amount_b=amount_b,
            shares=shares,
            excess_a=minted.excess_a,
            excess_b=minted.excess_b,
        )
        return shares

    def withdraw(
        self,
        pool: Pool | str,
        user: str,
        share_amount: int,
        min_amount_a: int = 0,
        min_amount_b: int = 0,
    ) -> tuple[int, int]:
        """Burn LP shares and return the proportional reserves to `user`.

        Returns:
            Tuple of (amount_a, amount_b) paid out

        Raises:
            InvalidAmount: If share_amount is zero
            InsufficientLiquidity: If the pool has no shares outstanding
            SlippageExceeded: If either amount is below its minimum
            ArithmeticOverflow: If share_amount exceeds total_shares (the counter
                subtraction would wrap)
            TransferError: If the user does not hold share_amount shares
        """
        pool = self._resolve(pool)
        user = normalize_id(user, validate=True)
        require_u64("share_amount", share_amount)
        require_u64("min_amount_a", min_amount_a, allow_zero=True)
        require_u64("min_amount_b", min_amount_b, allow_zero=True)
        if pool.total_shares == 0:
            raise InsufficientLiquidity("pool has no shares outstanding")
        if share_amount > pool.total_shares:
            raise ArithmeticOverflow(
                f"total_shares {pool.total_shares} - {share_amount} would wrap below zero"
            )
        remaining_shares = pool.total_shares - share_amount

        reserve_a, reserve_b = self.reserves(pool)
        amount_a, amount_b = amounts_for_withdrawal(
            share_amount, reserve_a, reserve_b, pool.total_shares
        )

        if amount_a < min_amount_a or amount_b < min_amount_b:
            logger.debug(
                "withdraw_rejected",
                pool=pool.address,
                amount_a=amount_a,
                amount_b=amount_b,
                min_amount_a=min_amount_a,
                min_amount_b=min_amount_b,
            )
            raise SlippageExceeded(
                f"amounts ({amount_a}, {amount_b}) < minimum ({min_amount_a}, {min_amount_b})"
            )

        with self._commit(pool):
            user_a = self.ledger.associated_account(user, pool.asset_a_id)
            user_b = self.ledger.associated_account(user, pool.asset_b_id)
            user_shares = self.ledger.associated_account(user, pool.share_mint_id)

            self.ledger.burn(pool.share_mint_id, user_shares, share_amount, user)
            self.ledger.transfer(pool.reserve_a_account, user_a, amount_a, pool.authority)
            self.ledger.transfer(pool.reserve_b_account, user_b, amount_b, pool.authority)
            pool.total_shares = remaining_shares

        logger.info(
            "liquidity_withdrawn",
            pool=pool.address,
            user=user,
            shares=share_amount,
            amount_a=amount_a,
            amount_b=amount_b,
        )
        return amount_a, amount_b

    # --- Swap pricing ---

    def swap(
        self,
        pool: Pool | str,
        user: str,
        amount_in: int,
        min_amount_out: int,
        direction: SwapDirection | str,
    ) -> int:
        """Swap amount_in of one asset for the other.

        Returns:
            Amount of the output asset paid to `user`

        Raises:
            InvalidAmount: If amount_in is zero
            SlippageExceeded: If the output is below min_amount_out
            InsufficientLiquidity: If the output is zero or would drain the reserve
            ArithmeticOverflow: If the pricing math exceeds u128
            TransferError: If the user cannot fund amount_in
        """
        pool = self._resolve(pool)
        user = normalize_id(user, validate=True)
        direction = SwapDirection(direction)
        require_u64("amount_in", amount_in)
        require_u64("min_amount_out", min_amount_out, allow_zero=True)

        reserve_in_account, reserve_out_account = pool.reserve_accounts(direction)
        asset_in, asset_out = pool.assets(direction)
        reserve_in = self.ledger.read_balance(reserve_in_account)
        reserve_out = self.ledger.read_balance(reserve_out_account)

        try:
            result = self.amm.price_swap(amount_in, reserve_in, reserve_out, min_amount_out)
        except (SlippageExceeded, InsufficientLiquidity) as err:
            logger.debug(
                "swap_rejected",
                pool=pool.address,
                direction=direction.value,
                amount_in=amount_in,
                reason=err.code.value,
            )
            raise

        with self._commit(pool):
            user_in = self.ledger.associated_account(user, asset_in)
            user_out = self.ledger.associated_account(user, asset_out)

            self.ledger.transfer(user_in, reserve_in_account, amount_in, user)
            self.ledger.transfer(reserve_out_account, user_out, result.amount_out, pool.authority)

        logger.info(
            "swap_executed",
            pool=pool.address,
            user=user,
            direction=direction.value,
            amount_in=amount_in,
            amount_out=result.amount_out,
        )
        return result.amount_out

    # --- Read-only views ---

    def get_pool_info(self, pool: Pool | str) -> PoolInfo:
        """Snapshot of the pool's identity, live reserves and share count."""
        pool = self._resolve(pool)
        reserve_a, reserve_b = self.reserves(pool)
        return PoolInfo(
            address=pool.address,
            asset_a_id=pool.asset_a_id,
            asset_b_id=pool.asset_b_id,
            share_mint_id=pool.share_mint_id,
            reserve_a=reserve_a,
            reserve_b=reserve_b,
            total_shares=pool.total_shares,
            share_decimals=self.config.share_decimals,
            price_ratio=Decimal(reserve_b) / Decimal(reserve_a) if reserve_a else None,
        )

    def quote_swap(
        self,
        pool: Pool | str,
        amount_in: int,
        direction: SwapDirection | str,
        slippage_bps: int | None = None,
    ) -> SwapQuote:
        """Quote a swap at the current reserves without executing it.

        `minimum_received` applies `slippage_bps` (default:
        config.quote_slippage_bps) to the quoted output and is suitable as
        min_amount_out for a subsequent swap.

        Raises:
            InvalidAmount: If amount_in is zero
            InsufficientLiquidity: If the swap would output nothing or drain the reserve
            ValueError: If slippage_bps is outside [0, 10000]
        """
        pool = self._resolve(pool)
        direction = SwapDirection(direction)
        require_u64("amount_in", amount_in)
        if slippage_bps is None:
            slippage_bps = self.config.quote_slippage_bps
        if not 0 <= slippage_bps <= BPS_DENOMINATOR:
            raise ValueError(
                f"slippage_bps must be in [0, {BPS_DENOMINATOR}], got {slippage_bps}"
            )

        reserve_in_account, reserve_out_account = pool.reserve_accounts(direction)
        reserve_in = self.ledger.read_balance(reserve_in_account)
        reserve_out = self.ledger.read_balance(reserve_out_account)
        result = self.amm.price_swap(amount_in, reserve_in, reserve_out)

        quote = SwapQuote(
            pool=pool.address,
            direction=direction,
            amount_in=amount_in,
            amount_out=result.amount_out,
            fee_amount=self.amm.fee_amount(amount_in),
            price_impact_bps=self.amm.price_impact_bps(amount_in, reserve_in),
            effective_price=self.amm.effective_price(amount_in, result.amount_out),
            minimum_received=self.amm.apply_slippage(result.amount_out, slippage_bps),
        )
        logger.debug("swap_quoted", pool=pool.address, **quote.model_dump(exclude={"pool"}))
        return quote

    def preview_deposit(self, pool: Pool | str, amount_a: int, amount_b: int) -> DepositPreview:
        """Shares a deposit would mint now, and the part of it left uncredited."""
        pool = self._resolve(pool)
        require_u64("amount_a", amount_a)
        require_u64("amount_b", amount_b)

        reserve_a, reserve_b = self.reserves(pool)
        minted = shares_for_deposit(amount_a, amount_b, reserve_a, reserve_b, pool.total_shares)
        return DepositPreview(
            pool=pool.address,
            shares=minted.shares,
            excess_a=minted.excess_a,
            excess_b=minted.excess_b,
        )

    def preview_withdraw(self, pool: Pool | str, share_amount: int) -> WithdrawPreview:
        """Amounts burning share_amount shares would pay out now."""
        pool = self._resolve(pool)
        require_u64("share_amount", share_amount)

        reserve_a, reserve_b = self.reserves(pool)
        amount_a, amount_b = amounts_for_withdrawal(
            share_amount, reserve_a, reserve_b, pool.total_shares
        )
        return WithdrawPreview(
            pool=pool.address,
            share_amount=share_amount,
            amount_a=amount_a,
            amount_b=amount_b,
        )

    # --- Internals ---

    def _resolve(self, pool: Pool | str) -> Pool:
        """The registered Pool for an address or Pool argument.

        A Pool that is not the registered instance (a derived or copied
        record) is rejected, since its total_shares is not the live counter.
        """
        if not isinstance(pool, Pool):
            return self.registry.require(pool)
        registered = self.registry.require(pool.address)
        if pool is not registered:
            raise PoolNotFound(f"{pool.address} is not the registered pool record")
        return registered

    @contextmanager
    def _commit(self, pool: Pool) -> Iterator[None]:
        """Run a commit sequence; on failure restore the ledger and total_shares."""
        total_shares = pool.total_shares
        with self.ledger.atomic():
            try:
                yield
            except BaseException:
                pool.total_shares = total_shares
                raise


__all__ = ["AmmProgram"]
