"""005: create market_events table

Revision ID: 005
Revises: 004
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "005"
down_revision: Union[str, None] = "004"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE market_events (
            id              BIGSERIAL       PRIMARY KEY,
            market_id       BIGINT          REFERENCES markets (id),
            event_type      VARCHAR(30)     NOT NULL,
            payload         JSONB           NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_market_event_type CHECK (
                event_type IN (
                    'MarketCreated',
                    'MarketResolved',
                    'MarketCancelled',
                    'FeeUpdated',
                    'ResolverUpdated',
                    'FeesWithdrawn',
                    'OwnershipTransferred'
                )
            )
        );
    """)
    op.execute("CREATE INDEX idx_market_events_market ON market_events (market_id, id);")
    op.execute("COMMENT ON TABLE market_events IS 'Registry notification log, Append-Only, replay source for offchain indexers';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS market_events CASCADE;")
