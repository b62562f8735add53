"""MarketRepository — concrete implementation of MarketRepositoryProtocol.

All queries use raw text() SQL (no ORM).
asyncpg NULL parameter pattern: CAST(:param AS TYPE) IS NULL required for None values.
outcomes / resolution_sources are TEXT[] (asyncpg maps list[str] directly);
proof_data is BYTEA.
"""

import json

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_common.enums import MarketStatus
from src.pm_common.errors import InternalError
from src.pm_market.domain.events import RegistryEvent, event_market_id
from src.pm_market.domain.models import Market, RegistryConfig

# ---------------------------------------------------------------------------
# SQL: registry_config (singleton row, id = 1)
# ---------------------------------------------------------------------------

_GET_CONFIG_SQL = text("""
    SELECT owner_id, resolver_id, creation_fee_cents, market_count, collected_balance
    FROM registry_config
    WHERE id = 1
""")

_GET_CONFIG_FOR_UPDATE_SQL = text("""
    SELECT owner_id, resolver_id, creation_fee_cents, market_count, collected_balance
    FROM registry_config
    WHERE id = 1
    FOR UPDATE
""")

_SAVE_CONFIG_SQL = text("""
    UPDATE registry_config
    SET owner_id = :owner_id,
        resolver_id = :resolver_id,
        creation_fee_cents = :creation_fee_cents,
        market_count = :market_count,
        collected_balance = :collected_balance,
        updated_at = NOW()
    WHERE id = 1
""")

# ---------------------------------------------------------------------------
# SQL: markets
# ---------------------------------------------------------------------------

_MARKET_COLUMNS = """
    id, creator_id, question, description, outcomes,
    created_at, resolution_deadline, status, outcome_index,
    resolution_data, resolution_sources, resolution_confidence, proof_data,
    resolved_at, resolved_by
"""

_GET_MARKET_SQL = text(f"""
    SELECT {_MARKET_COLUMNS}
    FROM markets
    WHERE id = :market_id
""")

_GET_MARKET_FOR_UPDATE_SQL = text(f"""
    SELECT {_MARKET_COLUMNS}
    FROM markets
    WHERE id = :market_id
    FOR UPDATE
""")

_INSERT_MARKET_SQL = text("""
    INSERT INTO markets
        (id, creator_id, question, description, outcomes,
         created_at, resolution_deadline, status)
    VALUES
        (:id, :creator_id, :question, :description, :outcomes,
         :created_at, :resolution_deadline, :status)
""")

# Only OPEN rows are updatable: terminal states never change.
_UPDATE_MARKET_SQL = text("""
    UPDATE markets
    SET status = :status,
        outcome_index = :outcome_index,
        resolution_data = :resolution_data,
        resolution_sources = :resolution_sources,
        resolution_confidence = :resolution_confidence,
        proof_data = :proof_data,
        resolved_at = :resolved_at,
        resolved_by = :resolved_by
    WHERE id = :id AND status = 'OPEN'
    RETURNING id
""")

_LIST_MARKETS_SQL = text(f"""
    SELECT {_MARKET_COLUMNS}
    FROM markets
    WHERE
        (CAST(:status AS TEXT) IS NULL OR status = CAST(:status AS TEXT))
        AND (CAST(:creator AS TEXT) IS NULL OR creator_id = CAST(:creator AS TEXT))
        AND (CAST(:cursor_id AS BIGINT) IS NULL OR id < CAST(:cursor_id AS BIGINT))
    ORDER BY id DESC
    LIMIT :limit
""")

# ---------------------------------------------------------------------------
# SQL: market_events (append-only outbox for indexers)
# ---------------------------------------------------------------------------

_INSERT_EVENT_SQL = text("""
    INSERT INTO market_events (market_id, event_type, payload)
    VALUES (:market_id, :event_type, :payload)
""")

# ---------------------------------------------------------------------------
# Row mappers
# ---------------------------------------------------------------------------


def _row_to_config(row: object) -> RegistryConfig:
    return RegistryConfig(
        owner=row.owner_id,  # type: ignore[attr-defined]
        resolver=row.resolver_id,  # type: ignore[attr-defined]
        creation_fee=row.creation_fee_cents,  # type: ignore[attr-defined]
        market_count=row.market_count,  # type: ignore[attr-defined]
        collected_balance=row.collected_balance,  # type: ignore[attr-defined]
    )


def _row_to_market(row: object) -> Market:
    return Market(
        id=row.id,  # type: ignore[attr-defined]
        creator=row.creator_id,  # type: ignore[attr-defined]
        question=row.question,  # type: ignore[attr-defined]
        description=row.description,  # type: ignore[attr-defined]
        outcomes=list(row.outcomes),  # type: ignore[attr-defined]
        created_at=row.created_at,  # type: ignore[attr-defined]
        resolution_deadline=row.resolution_deadline,  # type: ignore[attr-defined]
        status=MarketStatus(row.status),  # type: ignore[attr-defined]
        outcome_index=row.outcome_index,  # type: ignore[attr-defined]
        resolution_data=row.resolution_data,  # type: ignore[attr-defined]
        resolution_sources=list(row.resolution_sources),  # type: ignore[attr-defined]
        resolution_confidence=row.resolution_confidence,  # type: ignore[attr-defined]
        proof_data=bytes(row.proof_data),  # type: ignore[attr-defined]
        resolved_at=row.resolved_at,  # type: ignore[attr-defined]
        resolved_by=row.resolved_by,  # type: ignore[attr-defined]
    )


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------

class MarketRepository:
    """Concrete repository. Writers lock registry_config FOR UPDATE first."""

    async def get_config(
        self, db: AsyncSession, for_update: bool = False
    ) -> RegistryConfig:
        sql = _GET_CONFIG_FOR_UPDATE_SQL if for_update else _GET_CONFIG_SQL
        row = (await db.execute(sql)).fetchone()
        if row is None:
            raise InternalError("registry_config row is missing; run migrations")
        return _row_to_config(row)

    async def save_config(self, db: AsyncSession, config: RegistryConfig) -> None:
        await db.execute(
            _SAVE_CONFIG_SQL,
            {
                "owner_id": config.owner,
                "resolver_id": config.resolver,
                "creation_fee_cents": config.creation_fee,
                "market_count": config.market_count,
                "collected_balance": config.collected_balance,
            },
        )

    async def get_market_by_id(
        self, db: AsyncSession, market_id: int, for_update: bool = False
    ) -> Market | None:
        sql = _GET_MARKET_FOR_UPDATE_SQL if for_update else _GET_MARKET_SQL
        result = await db.execute(sql, {"market_id": market_id})
        row = result.fetchone()
        return _row_to_market(row) if row else None

    async def insert_market(self, db: AsyncSession, market: Market) -> None:
        await db.execute(
            _INSERT_MARKET_SQL,
            {
                "id": market.id,
                "creator_id": market.creator,
                "question": market.question,
                "description": market.description,
                "outcomes": market.outcomes,
                "created_at": market.created_at,
                "resolution_deadline": market.resolution_deadline,
                "status": market.status.value,
            },
        )

    async def update_market(self, db: AsyncSession, market: Market) -> None:
        result = await db.execute(
            _UPDATE_MARKET_SQL,
            {
                "id": market.id,
                "status": market.status.value,
                "outcome_index": market.outcome_index,
                "resolution_data": market.resolution_data,
                "resolution_sources": market.resolution_sources,
                "resolution_confidence": market.resolution_confidence,
                "proof_data": market.proof_data,
                "resolved_at": market.resolved_at,
                "resolved_by": market.resolved_by,
            },
        )
        # 0 rows: the row left OPEN under us, which the config lock rules out
        if result.fetchone() is None:
            raise InternalError(f"Market {market.id} was not OPEN at update time")

    async def list_markets(
        self,
        db: AsyncSession,
        status: str | None,
        creator: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[Market]:
        result = await db.execute(
            _LIST_MARKETS_SQL,
            {
                "status": status,
                "creator": creator,
                "cursor_id": cursor_id,
                "limit": limit,
            },
        )
        return [_row_to_market(row) for row in result.fetchall()]

    async def append_event(self, db: AsyncSession, event: RegistryEvent) -> None:
        await db.execute(
            _INSERT_EVENT_SQL,
            {
                "market_id": event_market_id(event),
                "event_type": event.event_type.value,
                "payload": json.dumps(event.payload()),
            },
        )
