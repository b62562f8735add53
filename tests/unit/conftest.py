"""Registry fixtures: in-memory repository, transfer, sink and a fixed clock."""

from unittest.mock import AsyncMock

import pytest

from src.pm_admin.application.service import RegistryAdminService
from src.pm_market.application.service import MarketRegistryService
from src.pm_market.application.writer import RegistryWriter
from src.pm_market.domain.models import RegistryConfig
from tests.unit.fakes import (
    FEE,
    OWNER,
    RESOLVER,
    T0,
    FakeClock,
    InMemoryMarketRepository,
    InMemoryTransfer,
    RecordingEventSink,
)


@pytest.fixture
def db():
    return AsyncMock()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(T0)


@pytest.fixture
def repo() -> InMemoryMarketRepository:
    return InMemoryMarketRepository(
        RegistryConfig(
            owner=OWNER,
            resolver=RESOLVER,
            creation_fee=FEE,
            market_count=0,
            collected_balance=0,
        )
    )


@pytest.fixture
def transfer() -> InMemoryTransfer:
    return InMemoryTransfer({"alice": 10_000, "bob": 10_000, OWNER: 0, "treasury": 0})


@pytest.fixture
def sink() -> RecordingEventSink:
    return RecordingEventSink()


@pytest.fixture
def writer(repo, sink) -> RegistryWriter:
    return RegistryWriter(repo, sink)


@pytest.fixture
def service(repo, writer, transfer, clock) -> MarketRegistryService:
    return MarketRegistryService(repo=repo, writer=writer, transfer=transfer, clock=clock)


@pytest.fixture
def admin(repo, writer, transfer) -> RegistryAdminService:
    return RegistryAdminService(repo=repo, writer=writer, transfer=transfer)
