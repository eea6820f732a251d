"""Per-account in-process mutual exclusion.

Locks for one operation are always taken in ascending account-id order, the
same order the store uses for SELECT ... FOR UPDATE, so two transfers moving
funds in opposite directions between the same pair cannot deadlock.
Operations on unrelated accounts never share a lock.

A lock lives only while some task holds or waits for it; the last user to
leave removes it, so the registry does not grow with every account touched.
"""

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager


class AccountLockManager:
    def __init__(self, timeout_seconds: float) -> None:
        self._timeout_seconds = timeout_seconds
        self._locks: dict[str, asyncio.Lock] = {}
        self._users: dict[str, int] = {}

    def _checkout(self, account_id: str) -> asyncio.Lock:
        lock = self._locks.get(account_id)
        if lock is None:
            lock = self._locks[account_id] = asyncio.Lock()
        self._users[account_id] = self._users.get(account_id, 0) + 1
        return lock

    def _checkin(self, account_id: str) -> None:
        remaining = self._users[account_id] - 1
        if remaining:
            self._users[account_id] = remaining
        else:
            del self._users[account_id]
            del self._locks[account_id]

    @asynccontextmanager
    async def hold(self, *account_ids: str) -> AsyncIterator[None]:
        """Hold every given account's lock for the body of the block.

        Raises TimeoutError if all locks cannot be acquired within the timeout;
        locks already taken are released before the error propagates.
        """
        checked_out: list[str] = []
        acquired: list[asyncio.Lock] = []
        try:
            async with asyncio.timeout(self._timeout_seconds):
                for account_id in sorted(set(account_ids)):
                    lock = self._checkout(account_id)
                    checked_out.append(account_id)
                    await lock.acquire()
                    acquired.append(lock)
            yield
        finally:
            for lock in reversed(acquired):
                lock.release()
            for account_id in checked_out:
                self._checkin(account_id)
