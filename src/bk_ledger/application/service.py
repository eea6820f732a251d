"""LedgerApplicationService — thin composition layer over LedgerEngine.

Turns engine results into response schemas. Transaction handling, locking
and invariant checks all live in the engine.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_gateway.auth.principal import Principal
from src.bk_ledger.application.schemas import HistoryItem, TransactionResponse
from src.bk_ledger.engine.engine import LedgerEngine


class LedgerApplicationService:
    def __init__(self, engine: LedgerEngine | None = None) -> None:
        self._engine = engine or LedgerEngine()

    async def deposit(
        self, db: AsyncSession, principal: Principal, account_number: str, amount_cents: int
    ) -> TransactionResponse:
        result = await self._engine.deposit(db, principal, account_number, amount_cents)
        return TransactionResponse.from_result("Deposit successful", result)

    async def withdraw(
        self, db: AsyncSession, principal: Principal, account_number: str, amount_cents: int
    ) -> TransactionResponse:
        result = await self._engine.withdraw(db, principal, account_number, amount_cents)
        return TransactionResponse.from_result("Withdrawal successful", result)

    async def transfer(
        self,
        db: AsyncSession,
        principal: Principal,
        account_from: str,
        account_to: str,
        amount_cents: int,
    ) -> TransactionResponse:
        result = await self._engine.transfer(
            db, principal, account_from, account_to, amount_cents
        )
        return TransactionResponse.from_result("Transfer successful", result)

    async def history(self, db: AsyncSession, principal: Principal) -> list[HistoryItem]:
        entries = await self._engine.get_transaction_history(db, principal)
        return [HistoryItem.from_entry(e) for e in entries]
