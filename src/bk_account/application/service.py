"""AccountRegistryService — opens accounts and lists the caller's accounts.

The caller's identity arrives as an explicit Principal; nothing here reads
request state. create_account commits its own transaction; reads run without
an explicit transaction.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from config.settings import settings
from src.bk_account.application.schemas import AccountView
from src.bk_account.domain.models import Account
from src.bk_account.domain.repository import AccountRepositoryProtocol
from src.bk_account.infrastructure.persistence import AccountRepository
from src.bk_common.cents import validate_opening_balance
from src.bk_common.database import storage_errors
from src.bk_common.errors import (
    AccountNotFoundError,
    InternalError,
    InvalidAmountError,
    UserNotFoundError,
)
from src.bk_common.id_generator import generate_account_number
from src.bk_gateway.auth.principal import Principal

logger = logging.getLogger(__name__)


class AccountRegistryService:
    def __init__(
        self,
        repo: AccountRepositoryProtocol | None = None,
        max_number_attempts: int | None = None,
    ) -> None:
        self._repo: AccountRepositoryProtocol = repo or AccountRepository()
        self._max_number_attempts = max_number_attempts or settings.ACCOUNT_NUMBER_MAX_ATTEMPTS

    async def _resolve_username(self, db: AsyncSession, principal: Principal) -> str:
        username = await self._repo.get_username(db, principal.user_id)
        if username is None:
            raise UserNotFoundError()
        return username

    async def list_accounts(
        self, db: AsyncSession, principal: Principal
    ) -> list[AccountView]:
        async with storage_errors():
            username = await self._resolve_username(db, principal)
            accounts = await self._repo.list_accounts_by_owner(db, principal.user_id)
        return [_to_view(a, username) for a in accounts]

    async def get_account(
        self, db: AsyncSession, principal: Principal, account_number: str
    ) -> AccountView:
        async with storage_errors():
            account = await self._repo.get_account_by_number(db, account_number)
        # Someone else's account is reported as missing so existence is not leaked
        if account is None or not account.is_owned_by(principal.user_id):
            raise AccountNotFoundError(account_number)
        return _to_view(account, principal.username)

    async def create_account(
        self, db: AsyncSession, principal: Principal, initial_balance: int
    ) -> AccountView:
        try:
            validate_opening_balance(initial_balance)
        except ValueError as exc:
            raise InvalidAmountError(str(exc)) from None

        async with storage_errors():
            try:
                username = await self._resolve_username(db, principal)
                account_number = await self._draw_account_number(db)
                account = await self._repo.create_account(
                    db, account_number, principal.user_id, initial_balance
                )
                await db.commit()
            except Exception:
                await db.rollback()
                raise

        logger.info(
            "Account opened: user=%s opening_balance=%d", principal.username, initial_balance
        )
        return _to_view(account, username)

    async def _draw_account_number(self, db: AsyncSession) -> str:
        """Draw random numbers until an unused one is found (DB UNIQUE is the final guard)."""
        for _ in range(self._max_number_attempts):
            candidate = generate_account_number()
            if not await self._repo.account_number_exists(db, candidate):
                return candidate
            logger.warning("Account number collision, drawing again")
        raise InternalError("Could not allocate an account number")


def _to_view(account: Account, username: str) -> AccountView:
    return AccountView.from_cents(
        account_number=account.account_number,
        balance=account.balance,
        username=username,
    )
