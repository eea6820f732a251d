"""Ledger Store Protocol — the persistence contract the ledger engine depends on.

Unit tests inject an in-memory fake that conforms to this Protocol.
Infrastructure layer provides the PostgreSQL implementation.

Every method runs inside the caller's transaction; none of them commit.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.domain.models import Account
from src.bk_ledger.domain.models import NewTransaction, Transaction


class LedgerStoreProtocol(Protocol):
    async def get_account_by_number(
        self, db: AsyncSession, account_number: str
    ) -> Account | None: ...

    async def get_accounts_by_owner(
        self, db: AsyncSession, user_id: str
    ) -> list[Account]: ...

    async def get_accounts_by_ids(
        self, db: AsyncSession, account_ids: list[str]
    ) -> dict[str, Account]: ...

    async def lock_accounts(
        self, db: AsyncSession, account_ids: list[str]
    ) -> dict[str, Account]:
        """Row-lock the given accounts in ascending id order and return fresh copies."""
        ...

    async def save_accounts(self, db: AsyncSession, accounts: list[Account]) -> None:
        """Persist the balances of all given accounts as one unit."""
        ...

    async def append_transaction(
        self, db: AsyncSession, txn: NewTransaction
    ) -> Transaction: ...

    async def list_transactions_involving(
        self, db: AsyncSession, account_ids: list[str]
    ) -> list[Transaction]:
        """All transactions whose source or destination is in account_ids, oldest first."""
        ...
