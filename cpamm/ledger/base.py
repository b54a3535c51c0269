"""Interfaces the pool core consumes from its environment.

The core never stores balances itself. Reserve balances are read from the
balance ledger at the start of every operation, and every movement of value
goes through the ledger's transfer, mint and burn primitives.
"""

from __future__ import annotations

from contextlib import AbstractContextManager
from typing import Protocol, TypeAlias, runtime_checkable

from cpamm.ledger.authority import PoolAuthority

# A signer is either a user identity (already authenticated by the caller)
# or a pool's own authority capability.
Signer: TypeAlias = str | PoolAuthority


@runtime_checkable
class BalanceLedger(Protocol):
    """Account balances and transfers.

    Each call is atomic on its own. `atomic()` groups several calls so that
    either all of them take effect or none does.
    """

    def read_balance(self, account: str) -> int:
        """Return the live balance of an account.

        Raises:
            TransferError: If the account does not exist
        """
        ...

    def transfer(self, source: str, destination: str, amount: int, authority: Signer) -> None:
        """Move `amount` from source to destination.

        Raises:
            TransferError: On unknown accounts, asset mismatch, missing
                authority, insufficient funds or balance overflow
        """
        ...

    def create_account(self, account: str, owner: str, asset_id: str) -> None:
        """Create an empty account holding `asset_id`, owned by `owner`."""
        ...

    def associated_account(self, owner: str, asset_id: str) -> str:
        """Return (creating if needed) the owner's account for an asset."""
        ...

    def atomic(self) -> AbstractContextManager[None]:
        """Context manager that rolls back every change if the block raises."""
        ...


@runtime_checkable
class ShareMint(Protocol):
    """Issuance control for LP share assets."""

    def create_mint(self, mint_id: str, authority: str) -> None:
        """Register a new share asset whose mint authority is `authority`."""
        ...

    def mint(self, mint_id: str, destination: str, amount: int, authority: Signer) -> None:
        """Issue new shares into `destination` under the mint authority."""
        ...

    def burn(self, mint_id: str, source: str, amount: int, authority: Signer) -> None:
        """Destroy shares held in `source`, signed by the account owner."""
        ...

    def supply(self, mint_id: str) -> int:
        """Total outstanding supply of a share asset."""
        ...


@runtime_checkable
class Ledger(BalanceLedger, ShareMint, Protocol):
    """A ledger providing both balances and share issuance."""

    pass
