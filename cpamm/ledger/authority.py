"""Deterministic address derivation and the pool signing capability.

Pool addresses, share mints and reserve accounts are derived from fixed seeds
and the program id, so the same asset pair always maps to the same accounts.
The pool address doubles as the owner of its reserve accounts and the
authority of its share mint; PoolAuthority is the only credential the ledger
accepts for moving value out of them.
"""

from __future__ import annotations

import hashlib

from cpamm.constants import POOL_SEED
from cpamm.models.types import id_to_bytes, normalize_id

_DERIVATION_MARKER = b"ProgramDerivedAddress"


def derive_address(program_id: str, *seeds: bytes | str) -> str:
    """Derive a 32-byte identifier from seeds and the program id.

    Args:
        program_id: Program identity (32-byte hex)
        seeds: Raw byte seeds or hex identifiers, in order

    Returns:
        0x-prefixed hex identifier
    """
    digest = hashlib.sha256()
    for seed in seeds:
        digest.update(id_to_bytes(seed) if isinstance(seed, str) else seed)
    digest.update(id_to_bytes(program_id))
    digest.update(_DERIVATION_MARKER)
    return "0x" + digest.hexdigest()


class PoolAuthority:
    """Signing capability of a single pool.

    Instances are created by the pool registry and held privately by the Pool
    record. The credential never renders its seeds and only compares equal to
    an authority derived from the same program and asset pair.
    """

    __slots__ = ("_address",)

    def __init__(self, program_id: str, asset_a_id: str, asset_b_id: str) -> None:
        self._address = derive_address(program_id, POOL_SEED, asset_a_id, asset_b_id)

    @property
    def address(self) -> str:
        """The pool address this authority signs for."""
        return self._address

    def authorizes(self, owner: str) -> bool:
        """True if this authority may act for accounts owned by `owner`."""
        return normalize_id(owner) == self._address

    def __repr__(self) -> str:
        return f"PoolAuthority({self._address[:10]}...)"

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PoolAuthority):
            return self._address == other._address
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._address)
