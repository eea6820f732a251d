"""bk_ledger REST API — 4 endpoints, all require JWT authentication."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.bk_common.database import get_db_session
from src.bk_common.response import ApiResponse, get_request_id, success_response
from src.bk_gateway.auth.dependencies import get_current_principal
from src.bk_gateway.auth.principal import Principal
from src.bk_ledger.application.schemas import DepositRequest, TransferRequest, WithdrawRequest
from src.bk_ledger.application.service import LedgerApplicationService

router = APIRouter(prefix="/transactions", tags=["transactions"])

# One engine per process: its lock manager must be shared by every request
_service = LedgerApplicationService()


def get_ledger_service() -> LedgerApplicationService:
    return _service


@router.post("/deposit")
async def deposit(
    body: DepositRequest,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
    request: Request,
) -> ApiResponse:
    data = await service.deposit(db, principal, body.account_number, body.amount_cents)
    resp = success_response(data.model_dump())
    resp.request_id = get_request_id(request)
    return resp


@router.post("/withdraw")
async def withdraw(
    body: WithdrawRequest,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
    request: Request,
) -> ApiResponse:
    data = await service.withdraw(db, principal, body.account_number, body.amount_cents)
    resp = success_response(data.model_dump())
    resp.request_id = get_request_id(request)
    return resp


@router.post("/transfer")
async def transfer(
    body: TransferRequest,
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
    request: Request,
) -> ApiResponse:
    data = await service.transfer(
        db, principal, body.account_from, body.account_to, body.amount_cents
    )
    resp = success_response(data.model_dump())
    resp.request_id = get_request_id(request)
    return resp


@router.get("/history")
async def history(
    principal: Annotated[Principal, Depends(get_current_principal)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[LedgerApplicationService, Depends(get_ledger_service)],
    request: Request,
) -> ApiResponse:
    items = await service.history(db, principal)
    resp = success_response([i.model_dump(mode="json") for i in items])
    resp.request_id = get_request_id(request)
    return resp
