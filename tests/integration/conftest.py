"""Integration-test fixtures (requires running PG + `alembic upgrade head`).

All integration tests share a single event-loop so that the module-level
SQLAlchemy async engine pool and Redis pool (both created at import time)
remain valid across the entire test session.

Services run on the real MarketRepository / AccountTransfer / RedisEventSink;
only the clock is injected so resolution deadlines can be crossed without
sleeping. Redis is optional: a failed publish is logged, not raised.
"""

import uuid
from collections.abc import Awaitable, Callable

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import text
from sqlalchemy.exc import DBAPIError

from src.main import app
from src.pm_account.infrastructure.persistence import AccountTransfer
from src.pm_admin.application.service import RegistryAdminService
from src.pm_common.database import async_session_factory
from src.pm_common.datetime_utils import utc_now
from src.pm_market.api.dependencies import get_admin_service, get_market_service
from src.pm_market.application.service import MarketRegistryService
from src.pm_market.application.writer import RegistryWriter
from src.pm_market.infrastructure.event_sink import RedisEventSink
from src.pm_market.infrastructure.persistence import MarketRepository
from tests.unit.fakes import FakeClock

_FUND_SQL = text("""
    INSERT INTO accounts (user_id, available_balance)
    VALUES (:user_id, :amount)
    ON CONFLICT (user_id) DO UPDATE SET available_balance = EXCLUDED.available_balance
""")

_BALANCE_SQL = text("SELECT available_balance FROM accounts WHERE user_id = :user_id")


@pytest_asyncio.fixture(loop_scope="session", scope="session", autouse=True)
async def _migrated_database() -> None:
    try:
        async with async_session_factory() as db:
            await db.execute(text("SELECT 1 FROM registry_config WHERE id = 1"))
    except (OSError, DBAPIError) as exc:
        pytest.skip(f"PostgreSQL with the registry schema is not reachable: {exc}")


@pytest.fixture(scope="session")
def clock() -> FakeClock:
    return FakeClock(utc_now())


@pytest.fixture(scope="session")
def services(clock: FakeClock) -> tuple[MarketRegistryService, RegistryAdminService]:
    repo = MarketRepository()
    transfer = AccountTransfer()
    writer = RegistryWriter(repo, RedisEventSink())
    return (
        MarketRegistryService(repo=repo, writer=writer, transfer=transfer, clock=clock),
        RegistryAdminService(repo=repo, writer=writer, transfer=transfer),
    )


@pytest.fixture(autouse=True)
def _registry_overrides(services) -> None:
    market_service, admin_service = services
    app.dependency_overrides[get_market_service] = lambda: market_service
    app.dependency_overrides[get_admin_service] = lambda: admin_service


@pytest_asyncio.fixture(loop_scope="session", scope="session")
async def client() -> AsyncClient:  # type: ignore[override]
    """Session-scoped async HTTP client; keeps the engine pool on one loop."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def new_identity() -> Callable[[str], str]:
    """Unique caller identity so reruns never share account rows."""
    return lambda prefix: f"{prefix}-{uuid.uuid4().hex[:8]}"


@pytest.fixture
def fund() -> Callable[[str, int], Awaitable[None]]:
    async def _fund(user_id: str, amount: int) -> None:
        async with async_session_factory() as db:
            await db.execute(_FUND_SQL, {"user_id": user_id, "amount": amount})
            await db.commit()

    return _fund


@pytest.fixture
def balance_of() -> Callable[[str], Awaitable[int | None]]:
    async def _balance(user_id: str) -> int | None:
        async with async_session_factory() as db:
            return (await db.execute(_BALANCE_SQL, {"user_id": user_id})).scalar_one_or_none()

    return _balance
