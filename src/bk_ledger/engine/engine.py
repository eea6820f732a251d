"""LedgerEngine — balance mutation and invariant enforcement.

Every mutating operation runs:

    validate amount -> resolve accounts -> authorize
      -> lock (in-process, ascending id) -> SELECT ... FOR UPDATE (ascending id)
      -> re-check funds on the locked rows -> mutate -> append transaction
      -> COMMIT -> release locks

Balances are only ever read for decisions after the row locks are held, and
the commit happens before the in-process locks are released, so no other
operation on the same account can observe or act on a half-applied change.
Any failure rolls the DB transaction back.
"""

import logging
from collections.abc import Awaitable, Callable

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_account.domain.models import Account
from src.bk_common.cents import validate_credit, validate_positive_amount
from src.bk_common.database import storage_errors
from src.bk_common.enums import TransactionType
from src.bk_common.errors import (
    AccountNotFoundError,
    AccountPermissionError,
    InsufficientFundsError,
    InvalidAmountError,
    SameAccountTransferError,
)
from src.bk_gateway.auth.principal import Principal
from src.bk_ledger.domain.models import HistoryEntry, LedgerResult, Transaction
from src.bk_ledger.domain.repository import LedgerStoreProtocol
from src.bk_ledger.domain.transaction_log import TransactionLog
from src.bk_ledger.engine.locks import AccountLockManager
from src.bk_ledger.infrastructure.persistence import LedgerRepository

logger = logging.getLogger(__name__)

_LockedOp = Callable[[dict[str, Account]], Awaitable[LedgerResult]]


class LedgerEngine:
    def __init__(
        self,
        store: LedgerStoreProtocol | None = None,
        locks: AccountLockManager | None = None,
    ) -> None:
        self._store: LedgerStoreProtocol = store or LedgerRepository()
        self._log = TransactionLog(self._store)
        self._locks = locks or AccountLockManager(settings.LEDGER_LOCK_TIMEOUT_SECONDS)

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def deposit(
        self, db: AsyncSession, principal: Principal, account_number: str, amount: int
    ) -> LedgerResult:
        _require_positive(amount)
        async with storage_errors():
            account = await self._resolve_owned(db, principal, account_number)

            async def apply(locked: dict[str, Account]) -> LedgerResult:
                dest = locked[account.id]
                _require_capacity(dest, amount)
                dest.balance += amount
                await self._store.save_accounts(db, [dest])
                txn = await self._log.append(db, TransactionType.DEPOSIT, amount, dest=dest)
                return LedgerResult(transaction=txn, source_balance=0, dest_balance=dest.balance)

            result = await self._run_locked(db, [account.id], apply)

        logger.info("DEPOSIT committed: txn=%d amount=%d", result.transaction.id, amount)
        return result

    async def withdraw(
        self, db: AsyncSession, principal: Principal, account_number: str, amount: int
    ) -> LedgerResult:
        _require_positive(amount)
        async with storage_errors():
            account = await self._resolve_owned(db, principal, account_number)

            async def apply(locked: dict[str, Account]) -> LedgerResult:
                source = locked[account.id]
                _require_funds(source, amount)
                source.balance -= amount
                await self._store.save_accounts(db, [source])
                txn = await self._log.append(db, TransactionType.WITHDRAW, amount, source=source)
                return LedgerResult(transaction=txn, source_balance=source.balance, dest_balance=0)

            result = await self._run_locked(db, [account.id], apply)

        logger.info("WITHDRAW committed: txn=%d amount=%d", result.transaction.id, amount)
        return result

    async def transfer(
        self,
        db: AsyncSession,
        principal: Principal,
        from_account_number: str,
        to_account_number: str,
        amount: int,
    ) -> LedgerResult:
        _require_positive(amount)
        async with storage_errors():
            source_ref = await self._resolve(db, from_account_number)
            dest_ref = await self._resolve(db, to_account_number)
            if not source_ref.is_owned_by(principal.user_id):
                logger.warning("TRANSFER rejected: caller does not own source account")
                raise AccountPermissionError()
            if source_ref.id == dest_ref.id:
                raise SameAccountTransferError()

            async def apply(locked: dict[str, Account]) -> LedgerResult:
                source = locked[source_ref.id]
                dest = locked[dest_ref.id]
                _require_funds(source, amount)
                _require_capacity(dest, amount)
                source.balance -= amount
                dest.balance += amount
                await self._store.save_accounts(db, [source, dest])
                txn = await self._log.append(
                    db, TransactionType.TRANSFER, amount, source=source, dest=dest
                )
                return LedgerResult(
                    transaction=txn, source_balance=source.balance, dest_balance=dest.balance
                )

            result = await self._run_locked(db, [source_ref.id, dest_ref.id], apply)

        logger.info("TRANSFER committed: txn=%d amount=%d", result.transaction.id, amount)
        return result

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_transaction_history(
        self, db: AsyncSession, principal: Principal
    ) -> list[HistoryEntry]:
        """Every transaction touching one of the caller's accounts, oldest first.

        The *_current_balance fields carry the referenced account's balance as
        of now, not as of the transaction; the snapshot lives on the
        Transaction itself.
        """
        async with storage_errors():
            owned = await self._store.get_accounts_by_owner(db, principal.user_id)
            txns = await self._log.list_involving(db, [a.id for a in owned])
            referenced = sorted(
                {
                    account_id
                    for t in txns
                    for account_id in (t.source_account_id, t.dest_account_id)
                    if account_id is not None
                }
            )
            current = await self._store.get_accounts_by_ids(db, referenced) if referenced else {}

        return [_to_history_entry(t, current) for t in sorted(txns, key=lambda t: t.id)]

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _resolve(self, db: AsyncSession, account_number: str) -> Account:
        account = await self._store.get_account_by_number(db, account_number)
        if account is None:
            raise AccountNotFoundError(account_number)
        return account

    async def _resolve_owned(
        self, db: AsyncSession, principal: Principal, account_number: str
    ) -> Account:
        account = await self._resolve(db, account_number)
        if not account.is_owned_by(principal.user_id):
            logger.warning("Rejected: caller does not own the target account")
            raise AccountPermissionError()
        return account

    async def _run_locked(
        self, db: AsyncSession, account_ids: list[str], apply: _LockedOp
    ) -> LedgerResult:
        ordered = sorted(set(account_ids))
        async with self._locks.hold(*ordered):
            try:
                locked = await self._store.lock_accounts(db, ordered)
                result = await apply(locked)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
        return result


def _require_positive(amount: int) -> None:
    try:
        validate_positive_amount(amount)
    except ValueError as exc:
        raise InvalidAmountError(str(exc)) from None


def _require_funds(account: Account, amount: int) -> None:
    if account.balance < amount:
        logger.info("Rejected: insufficient funds (required=%d)", amount)
        raise InsufficientFundsError(required=amount, available=account.balance)


def _require_capacity(account: Account, amount: int) -> None:
    try:
        validate_credit(account.balance, amount)
    except ValueError as exc:
        logger.info("Rejected: credit would overflow balance (amount=%d)", amount)
        raise InvalidAmountError(str(exc)) from None


def _to_history_entry(txn: Transaction, current: dict[str, Account]) -> HistoryEntry:
    source = current.get(txn.source_account_id) if txn.source_account_id else None
    dest = current.get(txn.dest_account_id) if txn.dest_account_id else None
    return HistoryEntry(
        transaction=txn,
        source_account_number=source.account_number if source else None,
        dest_account_number=dest.account_number if dest else None,
        source_current_balance=source.balance if source else 0,
        dest_current_balance=dest.balance if dest else 0,
    )
