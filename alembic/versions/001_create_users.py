"""001: create users table

Revision ID: 001
Revises:
Create Date: 2026-10-19
"""
from typing import Sequence, Union
from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.execute("""
        CREATE TABLE users (
            id              BIGSERIAL       PRIMARY KEY,
            username        VARCHAR(255)    NOT NULL,
            email           VARCHAR(255)    NOT NULL,
            created_at      TIMESTAMPTZ     NOT NULL DEFAULT NOW(),
            CONSTRAINT uq_users_username    UNIQUE (username),
            CONSTRAINT uq_users_email       UNIQUE (email),
            CONSTRAINT ck_users_username_nonempty CHECK (LENGTH(username) > 0),
            CONSTRAINT ck_users_email_nonempty    CHECK (LENGTH(email) > 0)
        );
    """)
    op.execute("COMMENT ON TABLE users IS 'Users created through batch insert';")


def downgrade() -> None:
    op.execute("DROP TABLE IF EXISTS users CASCADE;")
