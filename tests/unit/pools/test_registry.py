"""Tests for the pool registry."""

import pytest

from cpamm.errors import DuplicateAssets, PoolAlreadyExists, PoolNotFound
from cpamm.ledger import PoolAuthority
from cpamm.models.pool import POOL_RECORD_SIZE, PoolRecord
from cpamm.pools import PoolRegistry
from tests.helpers import PROGRAM_ID, TOKEN_A, TOKEN_B, TOKEN_C


@pytest.fixture
def registry() -> PoolRegistry:
    return PoolRegistry(PROGRAM_ID)


class TestDerivePool:
    """Tests for pool derivation."""

    def test_derivation_is_deterministic(self, registry):
        first = registry.derive_pool(TOKEN_A, TOKEN_B)
        second = PoolRegistry(PROGRAM_ID).derive_pool(TOKEN_A, TOKEN_B)
        assert first == second
        assert first.authority == second.authority

    def test_accounts_are_distinct(self, registry):
        pool = registry.derive_pool(TOKEN_A, TOKEN_B)
        ids = {
            pool.address,
            pool.share_mint_id,
            pool.reserve_a_account,
            pool.reserve_b_account,
        }
        assert len(ids) == 4

    def test_authority_matches_address(self, registry):
        pool = registry.derive_pool(TOKEN_A, TOKEN_B)
        assert isinstance(pool.authority, PoolAuthority)
        assert pool.authority.address == pool.address
        assert pool.address == registry.pool_address(TOKEN_A, TOKEN_B)
        assert pool.total_shares == 0

    def test_pair_order_matters(self, registry):
        assert registry.pool_address(TOKEN_A, TOKEN_B) != registry.pool_address(TOKEN_B, TOKEN_A)

    def test_program_id_matters(self, registry):
        other = PoolRegistry("0x" + "11" * 32)
        assert registry.pool_address(TOKEN_A, TOKEN_B) != other.pool_address(TOKEN_A, TOKEN_B)

    def test_ids_are_normalized(self, registry):
        pool = registry.derive_pool(TOKEN_A.upper().replace("0X", "0x"), TOKEN_B[2:])
        assert pool.asset_a_id == TOKEN_A
        assert pool.asset_b_id == TOKEN_B

    def test_duplicate_assets(self, registry):
        with pytest.raises(DuplicateAssets):
            registry.derive_pool(TOKEN_A, TOKEN_A)

    def test_malformed_id(self, registry):
        with pytest.raises(ValueError):
            registry.derive_pool("0x1234", TOKEN_B)

    def test_authority_repr_is_truncated(self, registry):
        pool = registry.derive_pool(TOKEN_A, TOKEN_B)
        assert pool.address not in repr(pool.authority)
        assert "authority" not in repr(pool)


class TestRegistryStorage:
    """Tests for add and lookup."""

    def test_add_and_lookup(self, registry):
        pool = registry.derive_pool(TOKEN_A, TOKEN_B)
        registry.add(pool)

        assert registry.get(pool.address) is pool
        assert registry.find(TOKEN_A, TOKEN_B) is pool
        assert registry.require(pool.address) is pool
        assert pool.address in registry
        assert len(registry) == 1
        assert list(registry) == [pool]

    def test_missing_pool(self, registry):
        address = registry.pool_address(TOKEN_A, TOKEN_C)
        assert registry.get(address) is None
        assert registry.find(TOKEN_A, TOKEN_C) is None
        assert address not in registry
        with pytest.raises(PoolNotFound):
            registry.require(address)

    def test_add_twice_raises(self, registry):
        registry.add(registry.derive_pool(TOKEN_A, TOKEN_B))
        with pytest.raises(PoolAlreadyExists):
            registry.add(registry.derive_pool(TOKEN_A, TOKEN_B))

    def test_reverse_pair_is_separate_pool(self, registry):
        registry.add(registry.derive_pool(TOKEN_A, TOKEN_B))
        registry.add(registry.derive_pool(TOKEN_B, TOKEN_A))
        assert len(registry) == 2


class TestPoolRecord:
    """Tests for persisted pool records."""

    def test_record_size(self, registry):
        pool = registry.derive_pool(TOKEN_A, TOKEN_B)
        assert len(pool.encode()) == POOL_RECORD_SIZE == 224

    def test_decode_fields(self, registry):
        pool = registry.derive_pool(TOKEN_A, TOKEN_B)
        pool.total_shares = 12_345

        record = PoolRecord.decode(pool.encode())

        assert record.asset_a_id == TOKEN_A
        assert record.asset_b_id == TOKEN_B
        assert record.share_mint_id == pool.share_mint_id
        assert record.total_shares == 12_345
        assert record.authority_address == pool.address

    def test_load_record_into_fresh_registry(self, registry):
        pool = registry.derive_pool(TOKEN_A, TOKEN_B)
        pool.total_shares = 777
        restored_registry = PoolRegistry(PROGRAM_ID)

        restored = restored_registry.load_record(pool.encode())

        assert restored == pool
        assert restored.authority == pool.authority
        assert restored_registry.require(pool.address) is restored

    def test_load_record_from_other_program_fails(self, registry):
        pool = registry.derive_pool(TOKEN_A, TOKEN_B)
        with pytest.raises(ValueError):
            PoolRegistry("0x" + "11" * 32).load_record(pool.encode())

    def test_tampered_record_fails(self, registry):
        data = bytearray(registry.derive_pool(TOKEN_A, TOKEN_B).encode())
        data[64] ^= 0xFF  # first byte of share_mint_id
        with pytest.raises(ValueError):
            PoolRegistry(PROGRAM_ID).load_record(bytes(data))

    def test_wrong_size_fails(self):
        with pytest.raises(ValueError):
            PoolRecord.decode(b"\x00" * 100)
