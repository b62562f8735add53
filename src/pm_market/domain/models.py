"""Domain models for pm_market: plain dataclasses plus pure predicates.

A Market is created OPEN and mutated exactly once, by resolve (-> RESOLVED)
or cancel (-> CANCELLED). Records are never deleted.
"""

from dataclasses import dataclass, field
from datetime import datetime

from src.pm_common.enums import MarketStatus

# outcome_index value while a market is unresolved
UNRESOLVED_OUTCOME: None = None


@dataclass
class Market:
    id: int                              # 0 = does not exist; issued ids start at 1
    creator: str
    question: str
    description: str
    outcomes: list[str]
    created_at: datetime
    resolution_deadline: datetime
    status: MarketStatus = MarketStatus.OPEN
    outcome_index: int | None = UNRESOLVED_OUTCOME
    resolution_data: str = ""
    resolution_sources: list[str] = field(default_factory=list)
    resolution_confidence: int = 0
    proof_data: bytes = b""
    resolved_at: datetime | None = None
    resolved_by: str | None = None


@dataclass
class RegistryConfig:
    """Singleton registry state: roles, fee, id counter, withdrawable balance."""

    owner: str
    resolver: str
    creation_fee: int        # cents
    market_count: int        # last issued market id
    collected_balance: int   # cents


def exists(market: Market | None) -> bool:
    return market is not None and market.id != 0


def is_open(market: Market) -> bool:
    return market.status == MarketStatus.OPEN


def is_resolved(market: Market) -> bool:
    return market.status == MarketStatus.RESOLVED


def is_cancelled(market: Market) -> bool:
    return market.status == MarketStatus.CANCELLED


def can_resolve(market: Market, now: datetime) -> bool:
    """Deadline is a lower bound only: resolvable any time at or after it."""
    return now >= market.resolution_deadline


def outcome_text(market: Market) -> str | None:
    if market.outcome_index is None:
        return None
    return market.outcomes[market.outcome_index]
