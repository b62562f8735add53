"""004: create markets table

Revision ID: 004
Revises: 003
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "004"
down_revision: Union[str, None] = "003"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE markets (
            id                      BIGINT          PRIMARY KEY,
            creator_id              TEXT            NOT NULL,
            question                TEXT            NOT NULL,
            description             TEXT            NOT NULL DEFAULT '',
            outcomes                TEXT[]          NOT NULL,
            created_at              TIMESTAMPTZ     NOT NULL,
            resolution_deadline     TIMESTAMPTZ     NOT NULL,
            status                  VARCHAR(20)     NOT NULL DEFAULT 'OPEN',
            outcome_index           INT,
            resolution_data         TEXT            NOT NULL DEFAULT '',
            resolution_sources      TEXT[]          NOT NULL DEFAULT '{}',
            resolution_confidence   BIGINT          NOT NULL DEFAULT 0,
            proof_data              BYTEA           NOT NULL DEFAULT ''::bytea,
            resolved_at             TIMESTAMPTZ,
            resolved_by             TEXT,
            CONSTRAINT ck_markets_id_gt_0           CHECK (id > 0),
            CONSTRAINT ck_markets_question          CHECK (btrim(question) <> ''),
            CONSTRAINT ck_markets_outcomes          CHECK (cardinality(outcomes) >= 2),
            CONSTRAINT ck_markets_deadline          CHECK (resolution_deadline > created_at),
            CONSTRAINT ck_markets_status CHECK (
                status IN ('OPEN', 'RESOLVED', 'CANCELLED')
            ),
            CONSTRAINT ck_markets_outcome_index CHECK (
                (status = 'RESOLVED'
                    AND outcome_index >= 0
                    AND outcome_index < cardinality(outcomes)
                    AND resolved_at IS NOT NULL
                    AND resolved_by IS NOT NULL)
                OR
                (status <> 'RESOLVED'
                    AND outcome_index IS NULL
                    AND resolved_at IS NULL
                    AND resolved_by IS NULL)
            )
        );
    """)
    op.execute("CREATE INDEX idx_markets_status ON markets (status);")
    op.execute("CREATE INDEX idx_markets_creator ON markets (creator_id);")
    op.execute("""
        CREATE TRIGGER trg_markets_terminal_guard
            BEFORE UPDATE ON markets
            FOR EACH ROW EXECUTE FUNCTION fn_markets_terminal_guard();
    """)
    op.execute("COMMENT ON TABLE markets IS 'Prediction markets: OPEN until resolved by the oracle or cancelled; never deleted';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS markets CASCADE;")
