"""Pool record and swap direction."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING

from eth_abi import decode, encode  # type: ignore[attr-defined]

from cpamm.models.types import bytes_to_id, id_to_bytes

if TYPE_CHECKING:
    from cpamm.ledger.authority import PoolAuthority

# Fixed-size persisted layout: five identifiers, the share counter and the
# authority descriptor. Every field is static, so the record is 7 * 32 bytes.
POOL_RECORD_TYPES = [
    "bytes32",  # asset_a_id
    "bytes32",  # asset_b_id
    "bytes32",  # share_mint_id
    "bytes32",  # reserve_a_account
    "bytes32",  # reserve_b_account
    "uint64",  # total_shares
    "bytes32",  # authority address
]
POOL_RECORD_SIZE = 32 * len(POOL_RECORD_TYPES)


class SwapDirection(str, Enum):
    """Which pooled asset is the swap input."""

    A_TO_B = "a_to_b"
    B_TO_A = "b_to_a"

    @property
    def is_a_to_b(self) -> bool:
        return self is SwapDirection.A_TO_B


@dataclass
class Pool:
    """Ledger record for one asset pair.

    Identity fields are fixed at creation. Reserve balances are not stored
    here; they live in the balance ledger under the two reserve accounts and
    are read fresh by every operation. `total_shares` is the only field the
    pool operations mutate.
    """

    address: str
    asset_a_id: str
    asset_b_id: str
    share_mint_id: str
    reserve_a_account: str
    reserve_b_account: str
    authority: PoolAuthority = field(repr=False, compare=False)
    total_shares: int = 0

    def reserve_accounts(self, direction: SwapDirection) -> tuple[str, str]:
        """Reserve accounts ordered as (input, output) for a swap direction."""
        if direction.is_a_to_b:
            return self.reserve_a_account, self.reserve_b_account
        return self.reserve_b_account, self.reserve_a_account

    def assets(self, direction: SwapDirection) -> tuple[str, str]:
        """Asset ids ordered as (input, output) for a swap direction."""
        if direction.is_a_to_b:
            return self.asset_a_id, self.asset_b_id
        return self.asset_b_id, self.asset_a_id

    def encode(self) -> bytes:
        """Encode the persisted record (fixed size, see POOL_RECORD_TYPES)."""
        return encode(
            POOL_RECORD_TYPES,
            [
                id_to_bytes(self.asset_a_id),
                id_to_bytes(self.asset_b_id),
                id_to_bytes(self.share_mint_id),
                id_to_bytes(self.reserve_a_account),
                id_to_bytes(self.reserve_b_account),
                self.total_shares,
                id_to_bytes(self.authority.address),
            ],
        )


@dataclass(frozen=True)
class PoolRecord:
    """Decoded persisted record, before the authority is re-derived."""

    asset_a_id: str
    asset_b_id: str
    share_mint_id: str
    reserve_a_account: str
    reserve_b_account: str
    total_shares: int
    authority_address: str

    @classmethod
    def decode(cls, data: bytes) -> PoolRecord:
        """Decode a record produced by Pool.encode().

        Raises:
            ValueError: If the data is not exactly one record long
        """
        if len(data) != POOL_RECORD_SIZE:
            raise ValueError(f"Pool record must be {POOL_RECORD_SIZE} bytes, got {len(data)}")
        asset_a, asset_b, share_mint, reserve_a, reserve_b, total_shares, authority = decode(
            POOL_RECORD_TYPES, data
        )
        return cls(
            asset_a_id=bytes_to_id(asset_a),
            asset_b_id=bytes_to_id(asset_b),
            share_mint_id=bytes_to_id(share_mint),
            reserve_a_account=bytes_to_id(reserve_a),
            reserve_b_account=bytes_to_id(reserve_b),
            total_shares=total_shares,
            authority_address=bytes_to_id(authority),
        )
