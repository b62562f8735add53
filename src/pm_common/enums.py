"""Global enums — must match DB CHECK constraints exactly."""

from enum import Enum


class MarketStatus(str, Enum):
    OPEN = "OPEN"
    RESOLVED = "RESOLVED"
    CANCELLED = "CANCELLED"


class RequiredRole(str, Enum):
    """Role a gated operation demands; reported in UnauthorizedError."""
    RESOLVER = "resolver"
    CREATOR_OR_OWNER = "creator_or_owner"
    OWNER = "owner"


class EventType(str, Enum):
    MARKET_CREATED = "MarketCreated"
    MARKET_RESOLVED = "MarketResolved"
    MARKET_CANCELLED = "MarketCancelled"
    FEE_UPDATED = "FeeUpdated"
    RESOLVER_UPDATED = "ResolverUpdated"
    FEES_WITHDRAWN = "FeesWithdrawn"
    OWNERSHIP_TRANSFERRED = "OwnershipTransferred"
