"""Market lifecycle: precondition checks and pure transitions.

Checks raise typed AppErrors in a fixed order; transitions return a new
Market and never touch the input. Callers run every check before mutating
anything, so a failed operation leaves no partial state.

    OPEN --resolve (resolver, now >= deadline)--> RESOLVED
    OPEN --cancel  (creator or owner)----------> CANCELLED
"""

from dataclasses import replace
from datetime import datetime

from src.pm_common.enums import MarketStatus, RequiredRole
from src.pm_common.errors import (
    ConfidenceOutOfRangeError,
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
from src.pm_market.domain.models import (
    UNRESOLVED_OUTCOME,
    Market,
    RegistryConfig,
    can_resolve,
    exists,
    is_open,
)

MIN_OUTCOMES = 2

# Confidence is free-form; the bound is the BIGINT column it is stored in
CONFIDENCE_MIN = -(2**63)
CONFIDENCE_MAX = 2**63 - 1


def check_create(
    config: RegistryConfig,
    question: str,
    outcomes: list[str],
    resolution_deadline: datetime,
    paid_amount: int,
    now: datetime,
) -> None:
    if paid_amount < config.creation_fee:
        raise InsufficientFeeError(paid_amount, config.creation_fee)
    if not question.strip():
        raise QuestionRequiredError()
    if len(outcomes) < MIN_OUTCOMES:
        raise InsufficientOutcomesError(len(outcomes))
    if resolution_deadline <= now:
        raise ResolutionNotFutureError(resolution_deadline, now)


def require_market(market: Market | None, market_id: int) -> Market:
    if market is None or not exists(market):
        raise MarketNotFoundError(market_id)
    return market


def check_resolve(
    market: Market,
    config: RegistryConfig,
    caller: str,
    outcome_index: int,
    now: datetime,
    confidence: int = 0,
) -> None:
    if caller != config.resolver:
        raise UnauthorizedError(caller, RequiredRole.RESOLVER.value)
    if not is_open(market):
        raise MarketNotOpenError(market.id, market.status.value)
    if not can_resolve(market, now):
        raise TooEarlyError(now, market.resolution_deadline)
    if not 0 <= outcome_index < len(market.outcomes):
        raise InvalidOutcomeIndexError(outcome_index, len(market.outcomes))
    if not CONFIDENCE_MIN <= confidence <= CONFIDENCE_MAX:
        raise ConfidenceOutOfRangeError(confidence, CONFIDENCE_MIN, CONFIDENCE_MAX)


def check_cancel(market: Market, config: RegistryConfig, caller: str) -> None:
    if caller not in (market.creator, config.owner):
        raise UnauthorizedError(caller, RequiredRole.CREATOR_OR_OWNER.value)
    if not is_open(market):
        raise MarketNotOpenError(market.id, market.status.value)


def open_market(
    market_id: int,
    creator: str,
    question: str,
    description: str,
    outcomes: list[str],
    resolution_deadline: datetime,
    now: datetime,
) -> Market:
    return Market(
        id=market_id,
        creator=creator,
        question=question,
        description=description,
        outcomes=list(outcomes),
        created_at=now,
        resolution_deadline=resolution_deadline,
        status=MarketStatus.OPEN,
        outcome_index=UNRESOLVED_OUTCOME,
    )


def apply_resolution(
    market: Market,
    outcome_index: int,
    resolution_data: str,
    sources: list[str],
    confidence: int,
    proof_data: bytes,
    resolver: str,
    now: datetime,
) -> Market:
    # proof_data is stored verbatim; attestation verification is not performed
    return replace(
        market,
        status=MarketStatus.RESOLVED,
        outcome_index=outcome_index,
        resolution_data=resolution_data,
        resolution_sources=list(sources),
        resolution_confidence=confidence,
        proof_data=bytes(proof_data),
        resolved_at=now,
        resolved_by=resolver,
    )


def apply_cancellation(market: Market) -> Market:
    return replace(market, status=MarketStatus.CANCELLED)
