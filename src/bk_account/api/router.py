"""bk_account REST API — 3 endpoints, all require JWT authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_account.application.schemas import CreateAccountRequest
from src.bk_account.application.service import AccountRegistryService
from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse, get_request_id, success_response
from src.bk_gateway.auth.dependencies import get_current_principal
from src.bk_gateway.auth.principal import Principal

router = APIRouter(prefix="/accounts", tags=["accounts"])

_service = AccountRegistryService()


def get_account_service() -> AccountRegistryService:
    return _service


@router.get("")
async def list_accounts(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AccountRegistryService, Depends(get_account_service)],
    request: Request,
) -> ApiResponse:
    accounts = await service.list_accounts(db, principal)
    resp = success_response([a.model_dump() for a in accounts])
    resp.request_id = get_request_id(request)
    return resp


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_account(
    body: CreateAccountRequest,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AccountRegistryService, Depends(get_account_service)],
    request: Request,
) -> ApiResponse:
    data = await service.create_account(db, principal, body.initial_balance_cents)
    resp = success_response(data.model_dump())
    resp.request_id = get_request_id(request)
    resp.message = "Account created"
    return resp


@router.get("/{account_number}")
async def get_account(
    account_number: str,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[AccountRegistryService, Depends(get_account_service)],
    request: Request,
) -> ApiResponse:
    data = await service.get_account(db, principal, account_number)
    resp = success_response(data.model_dump())
    resp.request_id = get_request_id(request)
    return resp
