"""001: create common functions

Revision ID: 001
Revises: 
Create Date: 2026-10-12
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_update_timestamp()
        RETURNS TRIGGER AS $$
        BEGIN
            NEW.updated_at = NOW();
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)
    # Terminal market states never change; enforced below the application too.
    op.execute("""
        CREATE OR REPLACE FUNCTION fn_markets_terminal_guard()
        RETURNS TRIGGER AS $$
        BEGIN
            IF OLD.status <> 'OPEN' THEN
                RAISE EXCEPTION 'market % is % and cannot change', OLD.id, OLD.status;
            END IF;
            RETURN NEW;
        END;
        $$ LANGUAGE plpgsql;
    """)


def downgrade() -> None:
    op.execute("DROP FUNCTION IF EXISTS fn_markets_terminal_guard();")
    op.execute("DROP FUNCTION IF EXISTS fn_update_timestamp();")
