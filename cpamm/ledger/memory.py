"""In-memory ledger implementing balances and share issuance.

This is the reference collaborator for the pool core: it behaves like a token
program with u64 account balances, owner-signed transfers and
authority-controlled mints. Used by tests and local simulation.
"""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, replace

import structlog

from cpamm.errors import TransferError
from cpamm.ledger.authority import PoolAuthority, derive_address
from cpamm.ledger.base import Signer
from cpamm.models.types import normalize_id
from cpamm.safe_int import UINT64_MAX

logger = structlog.get_logger()

_ASSOCIATED_SEED = b"associated_account"


@dataclass(frozen=True)
class Account:
    """A single balance holding one asset."""

    address: str
    owner: str
    asset_id: str
    balance: int = 0


class InMemoryLedger:
    """Dictionary-backed ledger.

    Accounts are keyed by address. Snapshots taken by `atomic()` cover
    accounts, mints and supplies, so a failed block leaves the ledger
    exactly as it was. Blocks may be nested; an inner failure only rolls back
    the inner block if the outer block handles the exception.
    """

    def __init__(self) -> None:
        self._accounts: dict[str, Account] = {}
        # mint_id -> authority owner address
        self._mints: dict[str, str] = {}
        self._supplies: dict[str, int] = {}

    # --- Accounts ---

    def create_account(self, account: str, owner: str, asset_id: str) -> None:
        account = normalize_id(account, validate=True)
        if account in self._accounts:
            raise TransferError(f"account {account} already exists")
        self._accounts[account] = Account(
            address=account,
            owner=normalize_id(owner, validate=True),
            asset_id=normalize_id(asset_id, validate=True),
        )

    def associated_account(self, owner: str, asset_id: str) -> str:
        address = derive_address(owner, _ASSOCIATED_SEED, asset_id)
        if address not in self._accounts:
            self.create_account(address, owner, asset_id)
        return address

    def get_account(self, account: str) -> Account:
        try:
            return self._accounts[normalize_id(account)]
        except KeyError:
            raise TransferError(f"unknown account {account}") from None

    def read_balance(self, account: str) -> int:
        return self.get_account(account).balance

    def credit(self, account: str, amount: int) -> None:
        """Add funds to an account out of thin air (test faucet)."""
        if amount < 0:
            raise TransferError(f"negative credit amount {amount}")
        acct = self.get_account(account)
        self._set_balance(acct, acct.balance + amount)

    # --- Transfers ---

    def transfer(self, source: str, destination: str, amount: int, authority: Signer) -> None:
        src = self.get_account(source)
        dst = self.get_account(destination)
        if src.asset_id != dst.asset_id:
            raise TransferError(f"asset mismatch: {src.asset_id} -> {dst.asset_id}")
        self._require_signer(src.owner, authority)
        if amount < 0:
            raise TransferError(f"negative transfer amount {amount}")
        if src.balance < amount:
            raise TransferError(f"insufficient funds in {src.address}: {src.balance} < {amount}")
        if src.address == dst.address:
            return
        if dst.balance + amount > UINT64_MAX:
            raise TransferError(f"balance of {dst.address} would exceed u64 max")

        self._set_balance(src, src.balance - amount)
        self._set_balance(dst, dst.balance + amount)
        logger.debug(
            "ledger_transfer",
            source=src.address,
            destination=dst.address,
            asset=src.asset_id,
            amount=amount,
        )

    # --- Share issuance ---

    def create_mint(self, mint_id: str, authority: str) -> None:
        mint_id = normalize_id(mint_id, validate=True)
        if mint_id in self._mints:
            raise TransferError(f"mint {mint_id} already exists")
        self._mints[mint_id] = normalize_id(authority, validate=True)
        self._supplies[mint_id] = 0

    def mint(self, mint_id: str, destination: str, amount: int, authority: Signer) -> None:
        mint_id = normalize_id(mint_id)
        mint_authority = self._require_mint(mint_id)
        self._require_signer(mint_authority, authority)
        dst = self.get_account(destination)
        if dst.asset_id != mint_id:
            raise TransferError(f"account {dst.address} does not hold {mint_id}")
        supply = self._supplies[mint_id] + amount
        if supply > UINT64_MAX:
            raise TransferError(f"supply of {mint_id} would exceed u64 max")

        self._set_balance(dst, dst.balance + amount)
        self._supplies[mint_id] = supply

    def burn(self, mint_id: str, source: str, amount: int, authority: Signer) -> None:
        mint_id = normalize_id(mint_id)
        self._require_mint(mint_id)
        src = self.get_account(source)
        if src.asset_id != mint_id:
            raise TransferError(f"account {src.address} does not hold {mint_id}")
        self._require_signer(src.owner, authority)
        if src.balance < amount:
            raise TransferError(f"insufficient shares in {src.address}: {src.balance} < {amount}")

        self._set_balance(src, src.balance - amount)
        self._supplies[mint_id] -= amount

    def supply(self, mint_id: str) -> int:
        mint_id = normalize_id(mint_id)
        self._require_mint(mint_id)
        return self._supplies[mint_id]

    # --- Atomicity ---

    @contextmanager
    def atomic(self) -> Iterator[None]:
        accounts = dict(self._accounts)
        mints = dict(self._mints)
        supplies = dict(self._supplies)
        try:
            yield
        except BaseException:
            self._accounts = accounts
            self._mints = mints
            self._supplies = supplies
            logger.debug("ledger_rolled_back")
            raise

    # --- Internals ---

    def _require_mint(self, mint_id: str) -> str:
        try:
            return self._mints[mint_id]
        except KeyError:
            raise TransferError(f"unknown mint {mint_id}") from None

    @staticmethod
    def _require_signer(owner: str, authority: Signer) -> None:
        if isinstance(authority, PoolAuthority):
            allowed = authority.authorizes(owner)
        else:
            allowed = normalize_id(authority) == owner
        if not allowed:
            raise TransferError(f"signer is not authorized for owner {owner}")

    def _set_balance(self, account: Account, balance: int) -> None:
        if balance > UINT64_MAX:
            raise TransferError(f"balance of {account.address} would exceed u64 max")
        self._accounts[account.address] = replace(account, balance=balance)
