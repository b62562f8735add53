"""Pydantic schemas for pm_market API requests and responses.

Cursor format for markets (BIGINT PK, issued in increasing order):
  {"id": <last market id>}
  Encoded as Base64 JSON string. Pages are newest-first (id DESC).

Request schemas stay permissive on the fields the registry validates itself
(question, outcomes, deadline, outcome index) so callers get the specific
registry error instead of a generic validation failure.
"""

import base64
import json

from pydantic import AwareDatetime, BaseModel, Field, field_validator

from src.pm_market.domain.models import Market, outcome_text

# ---------------------------------------------------------------------------
# Cursor utilities
# ---------------------------------------------------------------------------


def cursor_encode(last_id: int) -> str:
    """Encode a BIGINT primary key into an opaque Base64 cursor string."""
    payload = json.dumps({"id": last_id})
    return base64.b64encode(payload.encode()).decode()


def cursor_decode(cursor: str | None) -> int | None:
    """Decode a cursor string back to the last seen id. Returns None on error."""
    if cursor is None:
        return None
    try:
        payload = json.loads(base64.b64decode(cursor.encode()).decode())
        return int(payload["id"])
    except Exception:
        return None


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------


class CreateMarketRequest(BaseModel):
    question: str
    description: str = ""
    outcomes: list[str]
    resolution_deadline: AwareDatetime
    paid_amount_cents: int = Field(..., ge=0, description="Payment attached to creation")


class ResolveMarketRequest(BaseModel):
    outcome_index: int
    resolution_data: str = ""
    sources: list[str] = Field(default_factory=list)
    confidence: int = 0
    proof_data: str = Field("", description="Hex-encoded opaque proof blob")

    @field_validator("proof_data")
    @classmethod
    def _must_be_hex(cls, v: str) -> str:
        v = v.removeprefix("0x")
        bytes.fromhex(v)  # raises ValueError -> 422
        return v

    def proof_bytes(self) -> bytes:
        return bytes.fromhex(self.proof_data)


# ---------------------------------------------------------------------------
# Market detail
# ---------------------------------------------------------------------------


class MarketDetail(BaseModel):
    id: int
    creator: str
    question: str
    description: str
    outcomes: list[str]
    created_at: str
    resolution_deadline: str
    status: str
    outcome_index: int | None
    outcome_text: str | None
    resolution_data: str
    resolution_sources: list[str]
    resolution_confidence: int
    proof_data: str
    resolved_at: str | None
    resolved_by: str | None

    @classmethod
    def from_domain(cls, m: Market) -> "MarketDetail":
        return cls(
            id=m.id,
            creator=m.creator,
            question=m.question,
            description=m.description,
            outcomes=list(m.outcomes),
            created_at=m.created_at.isoformat(),
            resolution_deadline=m.resolution_deadline.isoformat(),
            status=m.status.value,
            outcome_index=m.outcome_index,
            outcome_text=outcome_text(m),
            resolution_data=m.resolution_data,
            resolution_sources=list(m.resolution_sources),
            resolution_confidence=m.resolution_confidence,
            proof_data=m.proof_data.hex(),
            resolved_at=m.resolved_at.isoformat() if m.resolved_at else None,
            resolved_by=m.resolved_by,
        )


class MarketListResponse(BaseModel):
    items: list[MarketDetail]
    next_cursor: str | None
    has_more: bool
