"""MarketRegistryService: the market lifecycle state machine.

Mutations (create / resolve / cancel) run inside RegistryWriter.transaction:
lock, check every precondition, write, commit, publish. Reads go straight to
the repository and see the last committed state.
"""

import logging
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_account.domain.repository import ValueTransferProtocol
from src.pm_common.datetime_utils import ClockProtocol
from src.pm_market.application.schemas import (
    MarketDetail,
    MarketListResponse,
    cursor_decode,
    cursor_encode,
)
from src.pm_market.application.writer import RegistryWriter
from src.pm_market.domain.events import MarketCancelled, MarketCreated, MarketResolved
from src.pm_market.domain.lifecycle import (
    apply_cancellation,
    apply_resolution,
    check_cancel,
    check_create,
    check_resolve,
    open_market,
    require_market,
)
from src.pm_market.domain.repository import MarketRepositoryProtocol

logger = logging.getLogger(__name__)


class MarketRegistryService:
    def __init__(
        self,
        repo: MarketRepositoryProtocol,
        writer: RegistryWriter,
        transfer: ValueTransferProtocol,
        clock: ClockProtocol,
    ) -> None:
        self._repo = repo
        self._writer = writer
        self._transfer = transfer
        self._clock = clock

    async def create_market(
        self,
        db: AsyncSession,
        caller: str,
        question: str,
        description: str,
        outcomes: list[str],
        resolution_deadline: datetime,
        paid_amount: int,
    ) -> MarketDetail:
        async with self._writer.transaction(db) as events:
            config = await self._repo.get_config(db, for_update=True)
            now = self._clock.now()
            check_create(config, question, outcomes, resolution_deadline, paid_amount, now)

            # Full payment is kept: overpayment is not refunded.
            await self._transfer.collect(db, caller, paid_amount)

            market = open_market(
                config.market_count + 1,
                caller,
                question,
                description,
                outcomes,
                resolution_deadline,
                now,
            )
            await self._repo.insert_market(db, market)
            config.market_count = market.id
            config.collected_balance += paid_amount
            await self._repo.save_config(db, config)
            events.append(MarketCreated.from_market(market))

        logger.info(
            "Market created: id=%d creator=%s outcomes=%d paid=%d",
            market.id, caller, len(market.outcomes), paid_amount,
        )
        return MarketDetail.from_domain(market)

    async def resolve_market(
        self,
        db: AsyncSession,
        caller: str,
        market_id: int,
        outcome_index: int,
        resolution_data: str,
        sources: list[str],
        confidence: int,
        proof_data: bytes,
    ) -> MarketDetail:
        async with self._writer.transaction(db) as events:
            config = await self._repo.get_config(db, for_update=True)
            market = require_market(
                await self._repo.get_market_by_id(db, market_id, for_update=True),
                market_id,
            )
            now = self._clock.now()
            check_resolve(market, config, caller, outcome_index, now, confidence)

            resolved = apply_resolution(
                market,
                outcome_index,
                resolution_data,
                sources,
                confidence,
                proof_data,
                caller,
                now,
            )
            await self._repo.update_market(db, resolved)
            events.append(MarketResolved.from_market(resolved))

        logger.info(
            "Market resolved: id=%d outcome=%d resolver=%s", market_id, outcome_index, caller
        )
        return MarketDetail.from_domain(resolved)

    async def cancel_market(
        self, db: AsyncSession, caller: str, market_id: int
    ) -> MarketDetail:
        async with self._writer.transaction(db) as events:
            config = await self._repo.get_config(db, for_update=True)
            market = require_market(
                await self._repo.get_market_by_id(db, market_id, for_update=True),
                market_id,
            )
            check_cancel(market, config, caller)

            cancelled = apply_cancellation(market)
            await self._repo.update_market(db, cancelled)
            events.append(
                MarketCancelled(
                    market_id=market_id, cancelled_by=caller, cancelled_at=self._clock.now()
                )
            )

        logger.info("Market cancelled: id=%d by=%s", market_id, caller)
        return MarketDetail.from_domain(cancelled)

    async def get_market(self, db: AsyncSession, market_id: int) -> MarketDetail:
        market = require_market(await self._repo.get_market_by_id(db, market_id), market_id)
        return MarketDetail.from_domain(market)

    async def list_markets(
        self,
        db: AsyncSession,
        status: str | None,
        creator: str | None,
        cursor: str | None,
        limit: int,
    ) -> MarketListResponse:
        cursor_id = cursor_decode(cursor)
        # Fetch limit+1 to detect has_more without COUNT(*)
        markets = await self._repo.list_markets(db, status, creator, cursor_id, limit + 1)
        has_more = len(markets) > limit
        page = markets[:limit]

        items = [MarketDetail.from_domain(m) for m in page]
        next_cursor = cursor_encode(page[-1].id) if has_more and page else None
        return MarketListResponse(items=items, next_cursor=next_cursor, has_more=has_more)
