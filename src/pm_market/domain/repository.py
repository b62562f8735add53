# src/pm_market/domain/repository.py
"""Repository Protocol — dependency inversion for testability.

Unit tests inject an in-memory fake that conforms to this Protocol.
Infrastructure layer provides the real implementation.

Transaction ownership: the CALLER (RegistryWriter) commits or rolls back.
`for_update=True` reads lock the row until the caller's transaction ends.
"""

from typing import Protocol

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_market.domain.events import RegistryEvent
from src.pm_market.domain.models import Market, RegistryConfig


class MarketRepositoryProtocol(Protocol):
    async def get_config(
        self, db: AsyncSession, for_update: bool = False
    ) -> RegistryConfig: ...

    async def save_config(self, db: AsyncSession, config: RegistryConfig) -> None: ...

    async def get_market_by_id(
        self, db: AsyncSession, market_id: int, for_update: bool = False
    ) -> Market | None: ...

    async def insert_market(self, db: AsyncSession, market: Market) -> None: ...

    async def update_market(self, db: AsyncSession, market: Market) -> None: ...

    async def list_markets(
        self,
        db: AsyncSession,
        status: str | None,
        creator: str | None,
        cursor_id: int | None,
        limit: int,
    ) -> list[Market]: ...

    async def append_event(self, db: AsyncSession, event: RegistryEvent) -> None: ...
