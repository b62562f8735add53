"""pm_market REST endpoints.

POST /markets                         create (any caller, pays the creation fee)
GET  /markets                         list with cursor pagination, newest first
GET  /markets/{market_id}             full record
POST /markets/{market_id}/resolve     resolver only, at or after the deadline
POST /markets/{market_id}/cancel      creator or owner, while OPEN
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.database import get_db_session
from src.pm_common.enums import MarketStatus
from src.pm_common.response import ApiResponse, request_success_response
from src.pm_gateway.auth.dependencies import get_caller_id
from src.pm_market.api.dependencies import get_market_service
from src.pm_market.application.schemas import CreateMarketRequest, ResolveMarketRequest
from src.pm_market.application.service import MarketRegistryService

router = APIRouter(prefix="/markets", tags=["markets"])


@router.post("")
async def create_market(
    body: CreateMarketRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[MarketRegistryService, Depends(get_market_service)],
) -> ApiResponse:
    result = await service.create_market(
        db,
        caller,
        body.question,
        body.description,
        body.outcomes,
        body.resolution_deadline,
        body.paid_amount_cents,
    )
    return request_success_response(request, result.model_dump())


@router.get("")
async def list_markets(
    request: Request,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[MarketRegistryService, Depends(get_market_service)],
    status: MarketStatus | None = Query(None, description="Filter by status. Default: all."),
    creator: str | None = Query(None),
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    result = await service.list_markets(
        db, status.value if status else None, creator, cursor, limit
    )
    return request_success_response(request, result.model_dump())


@router.get("/{market_id}")
async def get_market(
    market_id: int,
    request: Request,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[MarketRegistryService, Depends(get_market_service)],
) -> ApiResponse:
    result = await service.get_market(db, market_id)
    return request_success_response(request, result.model_dump())


@router.post("/{market_id}/resolve")
async def resolve_market(
    market_id: int,
    body: ResolveMarketRequest,
    request: Request,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[MarketRegistryService, Depends(get_market_service)],
) -> ApiResponse:
    result = await service.resolve_market(
        db,
        caller,
        market_id,
        body.outcome_index,
        body.resolution_data,
        body.sources,
        body.confidence,
        body.proof_bytes(),
    )
    return request_success_response(request, result.model_dump())


@router.post("/{market_id}/cancel")
async def cancel_market(
    market_id: int,
    request: Request,
    caller: Annotated[str, Depends(get_caller_id)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    service: Annotated[MarketRegistryService, Depends(get_market_service)],
) -> ApiResponse:
    result = await service.cancel_market(db, caller, market_id)
    return request_success_response(request, result.model_dump())
