"""FastAPI dependency: get_current_principal.

Usage in any protected router:
    from src.bk_gateway.auth.dependencies import get_current_principal

    @router.get("/protected")
    async def protected(principal: Principal = Depends(get_current_principal)):
        ...

The returned Principal is handed to the core services explicitly; nothing
below the router reads request-scoped auth state.
"""

import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import get_db_session, storage_errors
from src.bk_common.errors import AccountDisabledError, InvalidCredentialsError
from src.bk_gateway.auth.jwt_handler import decode_token
from src.bk_gateway.auth.principal import Principal
from src.bk_gateway.user.db_models import UserModel

# tokenUrl tells Swagger UI where to get a token (used for the "Authorize" button)
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/v1/auth/login")

# Reusable 401 exception with WWW-Authenticate header (OAuth2 standard)
_CREDENTIALS_EXCEPTION = HTTPException(
    status_code=status.HTTP_401_UNAUTHORIZED,
    detail="Invalid or expired token",
    headers={"WWW-Authenticate": "Bearer"},
)


async def get_current_principal(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db_session),
) -> Principal:
    """Extract and validate the JWT Bearer token, return the caller's Principal.

    Raises HTTP 401 if the token is missing, invalid, expired, or names an unknown user.
    Raises HTTP 403 (AccountDisabledError) if the user is disabled.
    """
    try:
        payload = decode_token(token, expected_type="access")
    except InvalidCredentialsError:
        raise _CREDENTIALS_EXCEPTION from None

    try:
        user_id = uuid.UUID(str(payload.get("sub")))
    except ValueError:
        raise _CREDENTIALS_EXCEPTION from None

    async with storage_errors():
        result = await db.execute(select(UserModel).where(UserModel.id == user_id))
    user = result.scalar_one_or_none()
    if user is None:
        raise _CREDENTIALS_EXCEPTION

    if not user.is_active:
        raise AccountDisabledError()

    return Principal(user_id=str(user.id), username=user.username)
