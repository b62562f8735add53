"""Registry notifications for offchain indexers.

Each event is a frozen dataclass with an `event_type` and a JSON-ready
`payload()`. Events are appended to market_events inside the mutating
transaction and handed to an EventSinkProtocol after commit.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Any, ClassVar, Protocol

from src.pm_common.enums import EventType
from src.pm_market.domain.models import Market


@dataclass(frozen=True)
class MarketCreated:
    event_type: ClassVar[EventType] = EventType.MARKET_CREATED

    market_id: int
    creator: str
    question: str
    description: str
    outcomes: tuple[str, ...]
    created_at: datetime
    resolution_deadline: datetime

    @classmethod
    def from_market(cls, market: Market) -> "MarketCreated":
        return cls(
            market_id=market.id,
            creator=market.creator,
            question=market.question,
            description=market.description,
            outcomes=tuple(market.outcomes),
            created_at=market.created_at,
            resolution_deadline=market.resolution_deadline,
        )

    def payload(self) -> dict[str, Any]:
        return {
            "market_id": self.market_id,
            "creator": self.creator,
            "question": self.question,
            "description": self.description,
            "outcomes": list(self.outcomes),
            "created_at": self.created_at.isoformat(),
            "resolution_deadline": self.resolution_deadline.isoformat(),
        }


@dataclass(frozen=True)
class MarketResolved:
    event_type: ClassVar[EventType] = EventType.MARKET_RESOLVED

    market_id: int
    outcome_index: int
    outcome_text: str
    resolver: str
    resolution_data: str
    sources: tuple[str, ...]
    confidence: int
    proof_data: bytes
    resolved_at: datetime

    @classmethod
    def from_market(cls, market: Market) -> "MarketResolved":
        assert market.outcome_index is not None and market.resolved_at is not None
        return cls(
            market_id=market.id,
            outcome_index=market.outcome_index,
            outcome_text=market.outcomes[market.outcome_index],
            resolver=market.resolved_by or "",
            resolution_data=market.resolution_data,
            sources=tuple(market.resolution_sources),
            confidence=market.resolution_confidence,
            proof_data=market.proof_data,
            resolved_at=market.resolved_at,
        )

    def payload(self) -> dict[str, Any]:
        return {
            "market_id": self.market_id,
            "outcome_index": self.outcome_index,
            "outcome_text": self.outcome_text,
            "resolver": self.resolver,
            "resolution_data": self.resolution_data,
            "sources": list(self.sources),
            "confidence": self.confidence,
            "proof_data": self.proof_data.hex(),
            "resolved_at": self.resolved_at.isoformat(),
        }


@dataclass(frozen=True)
class MarketCancelled:
    event_type: ClassVar[EventType] = EventType.MARKET_CANCELLED

    market_id: int
    cancelled_by: str
    cancelled_at: datetime

    def payload(self) -> dict[str, Any]:
        return {
            "market_id": self.market_id,
            "cancelled_by": self.cancelled_by,
            "cancelled_at": self.cancelled_at.isoformat(),
        }


@dataclass(frozen=True)
class FeeUpdated:
    event_type: ClassVar[EventType] = EventType.FEE_UPDATED

    old_fee: int
    new_fee: int

    def payload(self) -> dict[str, Any]:
        return {"old_fee": self.old_fee, "new_fee": self.new_fee}


@dataclass(frozen=True)
class ResolverUpdated:
    event_type: ClassVar[EventType] = EventType.RESOLVER_UPDATED

    old_resolver: str
    new_resolver: str

    def payload(self) -> dict[str, Any]:
        return {"old_resolver": self.old_resolver, "new_resolver": self.new_resolver}


@dataclass(frozen=True)
class FeesWithdrawn:
    event_type: ClassVar[EventType] = EventType.FEES_WITHDRAWN

    to: str
    amount: int

    def payload(self) -> dict[str, Any]:
        return {"to": self.to, "amount": self.amount}


@dataclass(frozen=True)
class OwnershipTransferred:
    event_type: ClassVar[EventType] = EventType.OWNERSHIP_TRANSFERRED

    old_owner: str
    new_owner: str

    def payload(self) -> dict[str, Any]:
        return {"old_owner": self.old_owner, "new_owner": self.new_owner}


RegistryEvent = (
    MarketCreated
    | MarketResolved
    | MarketCancelled
    | FeeUpdated
    | ResolverUpdated
    | FeesWithdrawn
    | OwnershipTransferred
)


def event_market_id(event: RegistryEvent) -> int | None:
    """Market the event belongs to, or None for registry-level events."""
    return getattr(event, "market_id", None)


class EventSinkProtocol(Protocol):
    async def publish(self, event: RegistryEvent) -> None: ...
