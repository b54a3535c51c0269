"""Ledger collaborators: interfaces, authority derivation and an in-memory ledger."""

from cpamm.ledger.authority import PoolAuthority, derive_address
from cpamm.ledger.base import BalanceLedger, Ledger, ShareMint, Signer
from cpamm.ledger.memory import Account, InMemoryLedger

__all__ = [
    "PoolAuthority",
    "derive_address",
    "BalanceLedger",
    "ShareMint",
    "Ledger",
    "Signer",
    "Account",
    "InMemoryLedger",
]
