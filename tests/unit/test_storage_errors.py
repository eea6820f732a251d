"""storage_errors(): mapping of infrastructure failures to ServiceUnavailableError."""

import pytest
from sqlalchemy.exc import DBAPIError, IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from src.bk_common.database import storage_errors
from src.bk_common.errors import InsufficientFundsError, ServiceUnavailableError


class _PgError(Exception):
    def __init__(self, sqlstate: str) -> None:
        super().__init__(sqlstate)
        self.sqlstate = sqlstate


async def _raise_inside(exc: BaseException) -> None:
    async with storage_errors():
        raise exc


class TestUnavailable:
    @pytest.mark.parametrize(
        "exc",
        [
            OperationalError("SELECT 1", {}, Exception("connection refused")),
            PoolTimeoutError("QueuePool limit reached"),
            TimeoutError(),
        ],
    )
    async def test_transient_failures_become_503(self, exc: BaseException) -> None:
        with pytest.raises(ServiceUnavailableError) as exc_info:
            await _raise_inside(exc)
        assert exc_info.value.__cause__ is exc

    @pytest.mark.parametrize("sqlstate", ["57014", "55P03", "40001", "40P01"])
    async def test_timeout_and_conflict_sqlstates_become_503(self, sqlstate: str) -> None:
        exc = DBAPIError("UPDATE accounts", {}, _PgError(sqlstate))
        with pytest.raises(ServiceUnavailableError):
            await _raise_inside(exc)


class TestPassThrough:
    async def test_business_errors_untouched(self) -> None:
        with pytest.raises(InsufficientFundsError):
            await _raise_inside(InsufficientFundsError(required=2, available=1))

    async def test_integrity_error_untouched(self) -> None:
        exc = IntegrityError("INSERT", {}, _PgError("23505"))
        with pytest.raises(IntegrityError):
            await _raise_inside(exc)

    async def test_no_error_no_effect(self) -> None:
        async with storage_errors():
            value = 1
        assert value == 1
