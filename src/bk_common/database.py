import logging
from collections.abc import AsyncGenerator, AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.exc import DBAPIError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from config.settings import settings
from src.bk_common.errors import ServiceUnavailableError

logger = logging.getLogger(__name__)


class Base(DeclarativeBase):
    """Shared declarative base for all ORM models across modules."""

    pass


_timeout_ms = str(settings.DB_STATEMENT_TIMEOUT_MS)

engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    echo=settings.DEBUG,
    pool_size=settings.DB_POOL_SIZE,
    max_overflow=settings.DB_MAX_OVERFLOW,
    pool_timeout=settings.DB_POOL_TIMEOUT_SECONDS,
    pool_pre_ping=True,
    connect_args={
        # Bounded waits: no statement or row lock blocks a request forever
        "server_settings": {
            "statement_timeout": _timeout_ms,
            "lock_timeout": _timeout_ms,
        },
        "command_timeout": settings.DB_STATEMENT_TIMEOUT_MS / 1000 + 1,
    },
)

async_session_factory = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def get_db_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: yields an AsyncSession, auto-closes after request."""
    async with async_session_factory() as session:
        yield session


@asynccontextmanager
async def storage_errors() -> AsyncIterator[None]:
    """Translate connection loss, pool exhaustion and timeouts into ServiceUnavailableError.

    Business errors (AppError subclasses) and integrity errors pass through untouched.
    """
    try:
        yield
    except (OperationalError, PoolTimeoutError, TimeoutError) as exc:
        logger.warning("Storage unavailable: %s", type(exc).__name__)
        raise ServiceUnavailableError() from exc
    except DBAPIError as exc:
        if _sqlstate(exc) not in _TRANSIENT_SQLSTATES:
            raise
        logger.warning("Storage unavailable: sqlstate=%s", _sqlstate(exc))
        raise ServiceUnavailableError() from exc


# query_canceled (statement_timeout), lock_not_available (lock_timeout),
# serialization_failure, deadlock_detected
_TRANSIENT_SQLSTATES = frozenset({"57014", "55P03", "40001", "40P01"})


def _sqlstate(exc: DBAPIError) -> str | None:
    orig = exc.orig
    return getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
