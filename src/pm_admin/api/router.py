# src/pm_admin/api/router.py
"""Admin REST API: registry configuration and fee withdrawal.

Owner checks happen in RegistryAdminService against registry_config,
so a rotated owner takes effect on the next request.
"""
from typing import Annotated

from fastapi import APIRouter, Depends, Request
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_admin.application.service import RegistryAdminService
from src.pm_common.database import get_db_session
from src.pm_common.response import ApiResponse, request_success_response
from src.pm_gateway.auth.dependencies import get_caller_id
from src.pm_market.api.dependencies import get_admin_service

router = APIRouter(prefix="/admin", tags=["admin"])


class SetFeeRequest(BaseModel):
    creation_fee_cents: int


class SetResolverRequest(BaseModel):
    resolver: str


class TransferOwnershipRequest(BaseModel):
    new_owner: str


class WithdrawRequest(BaseModel):
    to: str
    amount_cents: int = Field(..., description="Amount to withdraw in cents")


@router.get("/registry")
async def get_registry_info(
    request: Request,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[RegistryAdminService, Depends(get_admin_service)],
) -> ApiResponse:
    result = await service.get_registry_info(db)
    return request_success_response(request, result.model_dump())


@router.put("/fee")
async def set_fee(
    body: SetFeeRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[RegistryAdminService, Depends(get_admin_service)],
) -> ApiResponse:
    result = await service.set_fee(db, caller, body.creation_fee_cents)
    return request_success_response(request, result.model_dump())


@router.put("/resolver")
async def set_resolver(
    body: SetResolverRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[RegistryAdminService, Depends(get_admin_service)],
) -> ApiResponse:
    result = await service.set_resolver(db, caller, body.resolver)
    return request_success_response(request, result.model_dump())


@router.put("/owner")
async def transfer_ownership(
    body: TransferOwnershipRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[RegistryAdminService, Depends(get_admin_service)],
) -> ApiResponse:
    result = await service.transfer_ownership(db, caller, body.new_owner)
    return request_success_response(request, result.model_dump())


@router.post("/withdraw")
async def withdraw(
    body: WithdrawRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[RegistryAdminService, Depends(get_admin_service)],
) -> ApiResponse:
    result = await service.withdraw(db, caller, body.to, body.amount_cents)
    return request_success_response(request, result.model_dump())
