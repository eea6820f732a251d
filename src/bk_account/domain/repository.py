"""Repository Protocol — dependency inversion for testability.

Unit tests inject a mock that conforms to this Protocol.
Infrastructure layer provides the real implementation.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.domain.models import Account


class AccountRepositoryProtocol(Protocol):
    async def get_username(self, db: AsyncSession, user_id: str) -> str | None: ...

    async def list_accounts_by_owner(
        self, db: AsyncSession, user_id: str
    ) -> list[Account]: ...

    async def get_account_by_number(
        self, db: AsyncSession, account_number: str
    ) -> Account | None: ...

    async def account_number_exists(
        self, db: AsyncSession, account_number: str
    ) -> bool: ...

    async def create_account(
        self, db: AsyncSession, account_number: str, user_id: str, balance: int
    ) -> Account: ...
