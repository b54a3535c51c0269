"""Pool registry: deterministic pool identities and record storage.

Pools are keyed by their derived address. The address depends on the ordered
asset pair, so (A, B) and (B, A) are distinct pools, matching the seeds the
program derives accounts from.
"""

from __future__ import annotations

from collections.abc import Iterator

import structlog

from cpamm.constants import (
    DEFAULT_PROGRAM_ID,
    LP_MINT_SEED,
    POOL_SEED,
    POOL_TOKEN_A_SEED,
    POOL_TOKEN_B_SEED,
)
from cpamm.errors import DuplicateAssets, PoolAlreadyExists, PoolNotFound
from cpamm.ledger.authority import PoolAuthority, derive_address
from cpamm.models.pool import Pool, PoolRecord
from cpamm.models.types import normalize_id

logger = structlog.get_logger()


class PoolRegistry:
    """Registry of pools for one program id.

    The registry derives every account of a pool from its asset pair, keeps
    the Pool records, and is the only place a PoolAuthority is created.
    """

    def __init__(self, program_id: str = DEFAULT_PROGRAM_ID) -> None:
        self.program_id = normalize_id(program_id, validate=True)
        self._pools: dict[str, Pool] = {}

    def derive_pool(self, asset_a_id: str, asset_b_id: str) -> Pool:
        """Build the Pool record for an asset pair without registering it.

        Raises:
            DuplicateAssets: If both ids name the same asset
            ValueError: If an id is malformed
        """
        asset_a = normalize_id(asset_a_id, validate=True)
        asset_b = normalize_id(asset_b_id, validate=True)
        if asset_a == asset_b:
            raise DuplicateAssets(asset_a)

        authority = PoolAuthority(self.program_id, asset_a, asset_b)
        address = authority.address
        return Pool(
            address=address,
            asset_a_id=asset_a,
            asset_b_id=asset_b,
            share_mint_id=derive_address(self.program_id, LP_MINT_SEED, asset_a, asset_b),
            reserve_a_account=derive_address(self.program_id, POOL_TOKEN_A_SEED, address),
            reserve_b_account=derive_address(self.program_id, POOL_TOKEN_B_SEED, address),
            authority=authority,
        )

    def pool_address(self, asset_a_id: str, asset_b_id: str) -> str:
        """Derived address of the pool for an ordered asset pair."""
        return derive_address(
            self.program_id,
            POOL_SEED,
            normalize_id(asset_a_id, validate=True),
            normalize_id(asset_b_id, validate=True),
        )

    def add(self, pool: Pool) -> None:
        """Register a pool.

        Raises:
            PoolAlreadyExists: If a pool with the same address is registered
        """
        if pool.address in self._pools:
            raise PoolAlreadyExists(pool.address)
        self._pools[pool.address] = pool
        logger.debug(
            "pool_registered",
            pool=pool.address,
            asset_a=pool.asset_a_id,
            asset_b=pool.asset_b_id,
        )

    def get(self, address: str) -> Pool | None:
        """Look up a pool by address."""
        return self._pools.get(normalize_id(address))

    def find(self, asset_a_id: str, asset_b_id: str) -> Pool | None:
        """Look up the pool for an ordered asset pair."""
        return self._pools.get(self.pool_address(asset_a_id, asset_b_id))

    def require(self, address: str) -> Pool:
        """Look up a pool by address, failing if it is not registered.

        Raises:
            PoolNotFound: If no pool has this address
        """
        pool = self.get(address)
        if pool is None:
            raise PoolNotFound(address)
        return pool

    def load_record(self, data: bytes) -> Pool:
        """Rebuild and register a pool from its persisted record.

        The authority is re-derived from the asset pair; the record's stored
        authority descriptor and account references must match the derivation.

        Raises:
            ValueError: If the record is malformed or does not match its derivation
            PoolAlreadyExists: If the pool is already registered
        """
        record = PoolRecord.decode(data)
        pool = self.derive_pool(record.asset_a_id, record.asset_b_id)
        expected = (
            pool.share_mint_id,
            pool.reserve_a_account,
            pool.reserve_b_account,
            pool.authority.address,
        )
        stored = (
            record.share_mint_id,
            record.reserve_a_account,
            record.reserve_b_account,
            record.authority_address,
        )
        if expected != stored:
            raise ValueError(f"Pool record for {pool.address} does not match its derivation")

        pool.total_shares = record.total_shares
        self.add(pool)
        return pool

    def __len__(self) -> int:
        return len(self._pools)

    def __iter__(self) -> Iterator[Pool]:
        return iter(self._pools.values())

    def __contains__(self, address: object) -> bool:
        return isinstance(address, str) and normalize_id(address) in self._pools
