"""Initial cache schema.

Revision ID: 001
Revises: None
Create Date: 2026-10-19

Creates the two cache tables: destinations (accepted attractions waiting
for the next sync run) and titles (compare/display pairs for duplicate
lookup, never cleared by a sync run).
"""
from typing import Sequence, Union

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS destinations (
    id TEXT PRIMARY KEY,
    category TEXT NOT NULL,
    description TEXT NOT NULL,
    location TEXT NOT NULL,
    name TEXT NOT NULL,
    url TEXT,
    copyright TEXT,
    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS titles (
    compare TEXT NOT NULL,
    display TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_titles_compare ON titles(compare);
"""


def upgrade() -> None:
    # Use raw DBAPI connection for multi-statement SQL
    conn = op.get_bind()
    raw_conn = conn.connection.dbapi_connection
    raw_conn.executescript(SCHEMA_SQL)


def downgrade() -> None:
    conn = op.get_bind()
    raw_conn = conn.connection.dbapi_connection
    raw_conn.execute("DROP TABLE IF EXISTS titles")
    raw_conn.execute("DROP TABLE IF EXISTS destinations")
