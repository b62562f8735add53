"""RegistryWriter: single serialization point for every registry mutation.

create / resolve / cancel and all admin operations run inside
`writer.transaction(db)`:

  1. take the process-wide asyncio.Lock (one writer at a time in-process)
  2. run the body; the body locks registry_config FOR UPDATE first, which
     orders writers across processes
  3. append the body's events to market_events, then commit
  4. on any exception: rollback and re-raise (nothing is committed)
  5. after commit, still under the lock: publish events in order
"""

import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from sqlalchemy.ext.asyncio import AsyncSession

from src.pm_market.domain.events import EventSinkProtocol, RegistryEvent
from src.pm_market.domain.repository import MarketRepositoryProtocol

logger = logging.getLogger(__name__)


class RegistryWriter:
    def __init__(self, repo: MarketRepositoryProtocol, sink: EventSinkProtocol) -> None:
        self._repo = repo
        self._sink = sink
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def transaction(self, db: AsyncSession) -> AsyncIterator[list[RegistryEvent]]:
        async with self._lock:
            events: list[RegistryEvent] = []
            try:
                yield events
                for event in events:
                    await self._repo.append_event(db, event)
                await db.commit()
            except Exception:
                await db.rollback()
                raise
            for event in events:
                logger.debug("Publishing %s", event.event_type.value)
                await self._sink.publish(event)
