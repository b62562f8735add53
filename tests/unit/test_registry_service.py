# tests/unit/test_registry_service.py
"""MarketRegistryService against in-memory fakes: lifecycle and rejection cases."""
from datetime import timedelta

import pytest

from src.pm_common.errors import (
    InsufficientBalanceError,
    InsufficientFeeError,
    InsufficientOutcomesError,
    InvalidOutcomeIndexError,
    MarketNotFoundError,
    MarketNotOpenError,
    QuestionRequiredError,
    ResolutionNotFutureError,
    TooEarlyError,
    UnauthorizedError,
)
from src.pm_market.domain.events import MarketCancelled, MarketCreated, MarketResolved
from tests.unit.fakes import FEE, OWNER, RESOLVER, T0

DAY = timedelta(days=1)


async def _create(service, db, caller="alice", **kwargs):
    params = dict(
        question="Will it rain?",
        description="Rain in Lisbon tomorrow",
        outcomes=["Yes", "No"],
        resolution_deadline=T0 + DAY,
        paid_amount=FEE,
    )
    params.update(kwargs)
    return await service.create_market(db, caller, **params)


async def _resolve(service, db, market_id, caller=RESOLVER, index=0):
    return await service.resolve_market(
        db, caller, market_id, index, "rained 12mm", ["https://weather.example"], 95, b"\xde\xad"
    )


class TestCreate:
    @pytest.mark.asyncio
    async def test_round_trip_fields(self, service, db) -> None:
        created = await _create(service, db)
        fetched = await service.get_market(db, created.id)

        assert fetched.id == 1
        assert fetched.status == "OPEN"
        assert fetched.outcome_index is None
        assert fetched.creator == "alice"
        assert fetched.question == "Will it rain?"
        assert fetched.description == "Rain in Lisbon tomorrow"
        assert fetched.outcomes == ["Yes", "No"]
        assert fetched.created_at == T0.isoformat()
        assert fetched.resolution_deadline == (T0 + DAY).isoformat()
        assert fetched.resolved_at is None and fetched.resolved_by is None

    @pytest.mark.asyncio
    async def test_ids_increase_by_one(self, service, repo, db) -> None:
        ids = [(await _create(service, db)).id for _ in range(4)]
        assert ids == [1, 2, 3, 4]
        assert repo.config.market_count == 4

    @pytest.mark.asyncio
    async def test_emits_created_snapshot_and_commits(self, service, repo, sink, db) -> None:
        await _create(service, db)

        assert len(sink.published) == 1
        event = sink.published[0]
        assert isinstance(event, MarketCreated)
        assert event.market_id == 1
        assert event.outcomes == ("Yes", "No")
        assert repo.events == sink.published
        db.commit.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_overpayment_is_retained(self, service, repo, transfer, db) -> None:
        await _create(service, db, paid_amount=FEE + 50)
        assert repo.config.collected_balance == FEE + 50
        assert transfer.balances["alice"] == 10_000 - FEE - 50

    @pytest.mark.asyncio
    async def test_insufficient_fee_reports_values(self, service, db) -> None:
        with pytest.raises(InsufficientFeeError) as exc_info:
            await _create(service, db, paid_amount=FEE - 1)
        assert exc_info.value.provided == FEE - 1
        assert exc_info.value.required == FEE

    @pytest.mark.asyncio
    async def test_single_outcome_stores_nothing(self, service, repo, sink, transfer, db) -> None:
        with pytest.raises(InsufficientOutcomesError):
            await _create(service, db, outcomes=["Only one"])

        assert repo.markets == {}
        assert repo.config.market_count == 0
        assert repo.config.collected_balance == 0
        assert transfer.balances["alice"] == 10_000
        assert sink.published == []
        db.rollback.assert_awaited_once()
        db.commit.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_empty_question(self, service, db) -> None:
        with pytest.raises(QuestionRequiredError):
            await _create(service, db, question="")

    @pytest.mark.asyncio
    async def test_past_deadline(self, service, db) -> None:
        with pytest.raises(ResolutionNotFutureError):
            await _create(service, db, resolution_deadline=T0)

    @pytest.mark.asyncio
    async def test_payer_without_funds(self, service, repo, db) -> None:
        with pytest.raises(InsufficientBalanceError):
            await _create(service, db, caller="nobody")
        assert repo.markets == {}
        assert repo.config.market_count == 0


class TestResolve:
    @pytest.mark.asyncio
    async def test_scenario_a(self, service, clock, sink, db) -> None:
        market = await _create(service, db)
        assert market.id == 1 and market.status == "OPEN"

        with pytest.raises(TooEarlyError):
            await _resolve(service, db, 1)

        clock.advance(DAY)
        resolved = await _resolve(service, db, 1, index=0)

        assert resolved.status == "RESOLVED"
        assert resolved.outcome_index == 0
        assert resolved.outcome_text == "Yes"
        assert resolved.resolved_by == RESOLVER
        assert resolved.resolved_at == (T0 + DAY).isoformat()
        assert resolved.resolution_sources == ["https://weather.example"]
        assert resolved.proof_data == "dead"

        event = sink.published[-1]
        assert isinstance(event, MarketResolved)
        assert event.outcome_text == "Yes"
        assert event.proof_data == b"\xde\xad"

    @pytest.mark.asyncio
    async def test_missing_market_checked_before_caller(self, service, db) -> None:
        with pytest.raises(MarketNotFoundError):
            await _resolve(service, db, 42, caller="alice")

    @pytest.mark.asyncio
    async def test_only_resolver(self, service, clock, db) -> None:
        await _create(service, db)
        clock.advance(DAY)
        with pytest.raises(UnauthorizedError):
            await _resolve(service, db, 1, caller=OWNER)

    @pytest.mark.asyncio
    async def test_invalid_index_leaves_market_open(self, service, clock, db) -> None:
        await _create(service, db)
        clock.advance(DAY)

        with pytest.raises(InvalidOutcomeIndexError) as exc_info:
            await _resolve(service, db, 1, index=5)

        assert (exc_info.value.index, exc_info.value.bound) == (5, 2)
        assert (await service.get_market(db, 1)).status == "OPEN"

    @pytest.mark.asyncio
    async def test_resolve_twice_fails(self, service, clock, db) -> None:
        await _create(service, db)
        clock.advance(DAY)
        await _resolve(service, db, 1, index=1)

        with pytest.raises(MarketNotOpenError) as exc_info:
            await _resolve(service, db, 1, index=0)

        assert exc_info.value.status == "RESOLVED"
        assert (await service.get_market(db, 1)).outcome_index == 1

    @pytest.mark.asyncio
    async def test_resolvable_long_after_deadline(self, service, clock, db) -> None:
        await _create(service, db)
        clock.advance(DAY * 400)
        resolved = await _resolve(service, db, 1)
        assert resolved.status == "RESOLVED"


class TestCancel:
    @pytest.mark.asyncio
    async def test_creator_cancels(self, service, sink, db) -> None:
        await _create(service, db)
        cancelled = await service.cancel_market(db, "alice", 1)

        assert cancelled.status == "CANCELLED"
        assert cancelled.outcome_index is None
        event = sink.published[-1]
        assert isinstance(event, MarketCancelled)
        assert event.cancelled_by == "alice"
        assert event.cancelled_at == T0

    @pytest.mark.asyncio
    async def test_owner_cancels(self, service, db) -> None:
        await _create(service, db)
        assert (await service.cancel_market(db, OWNER, 1)).status == "CANCELLED"

    @pytest.mark.asyncio
    async def test_stranger_cannot_cancel(self, service, db) -> None:
        await _create(service, db, caller="alice")

        with pytest.raises(UnauthorizedError):
            await service.cancel_market(db, "bob", 1)

        assert (await service.get_market(db, 1)).status == "OPEN"

    @pytest.mark.asyncio
    async def test_cancelled_market_cannot_be_resolved(self, service, clock, db) -> None:
        await _create(service, db)
        await service.cancel_market(db, "alice", 1)
        clock.advance(DAY)

        with pytest.raises(MarketNotOpenError):
            await _resolve(service, db, 1)
        with pytest.raises(MarketNotOpenError):
            await service.cancel_market(db, OWNER, 1)
        assert (await service.get_market(db, 1)).status == "CANCELLED"

    @pytest.mark.asyncio
    async def test_missing_market(self, service, db) -> None:
        with pytest.raises(MarketNotFoundError):
            await service.cancel_market(db, OWNER, 9)


class TestQueries:
    @pytest.mark.asyncio
    async def test_get_missing(self, service, db) -> None:
        with pytest.raises(MarketNotFoundError):
            await service.get_market(db, 1)

    @pytest.mark.asyncio
    async def test_list_pages_newest_first(self, service, db) -> None:
        for _ in range(5):
            await _create(service, db)

        first = await service.list_markets(db, None, None, None, limit=2)
        assert [m.id for m in first.items] == [5, 4]
        assert first.has_more is True

        second = await service.list_markets(db, None, None, first.next_cursor, limit=2)
        assert [m.id for m in second.items] == [3, 2]

        last = await service.list_markets(db, None, None, second.next_cursor, limit=2)
        assert [m.id for m in last.items] == [1]
        assert last.has_more is False
        assert last.next_cursor is None

    @pytest.mark.asyncio
    async def test_list_filters(self, service, db) -> None:
        await _create(service, db, caller="alice")
        await _create(service, db, caller="bob")
        await service.cancel_market(db, "bob", 2)

        by_creator = await service.list_markets(db, None, "alice", None, limit=10)
        assert [m.id for m in by_creator.items] == [1]
        cancelled = await service.list_markets(db, "CANCELLED", None, None, limit=10)
        assert [m.id for m in cancelled.items] == [2]
