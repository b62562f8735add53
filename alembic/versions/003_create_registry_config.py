"""003: create registry_config singleton and seed it from settings

Revision ID: 003
Revises: 002
Create Date: 2026-10-12
"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

from config.settings import settings

revision: str = "003"
down_revision: Union[str, None] = "002"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE registry_config (
            id                  SMALLINT    PRIMARY KEY DEFAULT 1,
            owner_id            TEXT        NOT NULL,
            resolver_id         TEXT        NOT NULL,
            creation_fee_cents  BIGINT      NOT NULL,
            market_count        BIGINT      NOT NULL DEFAULT 0,
            collected_balance   BIGINT      NOT NULL DEFAULT 0,
            updated_at          TIMESTAMPTZ NOT NULL DEFAULT NOW(),
            CONSTRAINT ck_registry_config_singleton   CHECK (id = 1),
            CONSTRAINT ck_registry_config_owner       CHECK (owner_id <> ''),
            CONSTRAINT ck_registry_config_resolver    CHECK (resolver_id <> ''),
            CONSTRAINT ck_registry_config_fee_gte_0   CHECK (creation_fee_cents >= 0),
            CONSTRAINT ck_registry_config_count_gte_0 CHECK (market_count >= 0),
            CONSTRAINT ck_registry_config_balance_gte_0 CHECK (collected_balance >= 0)
        );
    """)
    op.execute("""
        CREATE TRIGGER trg_registry_config_updated_at
            BEFORE UPDATE ON registry_config
            FOR EACH ROW EXECUTE FUNCTION fn_update_timestamp();
    """)
    op.get_bind().execute(
        sa.text(
            "INSERT INTO registry_config (id, owner_id, resolver_id, creation_fee_cents)"
            " VALUES (1, :owner, :resolver, :fee)"
        ),
        {
            "owner": settings.REGISTRY_OWNER_ID,
            "resolver": settings.REGISTRY_RESOLVER_ID,
            "fee": settings.CREATION_FEE_CENTS,
        },
    )
    op.execute("COMMENT ON TABLE registry_config IS 'Registry roles, creation fee, id counter, withdrawable fee balance';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS registry_config CASCADE;")
