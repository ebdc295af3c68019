"""stored_documents

Revision ID: 001_stored_documents
Revises:
Create Date: 2024-05-01

Creates the key -> JSON document table behind SqlDocumentStore:
- stored_documents (owner, storage_key) unique, whole-document storage_value

Idempotent: safe to run after Base.metadata.create_all() already created the
table during startup.
"""
import logging
from alembic import op
import sqlalchemy as sa
from sqlalchemy import text

revision = '001_stored_documents'
down_revision = None
branch_labels = None
depends_on = None

logger = logging.getLogger("alembic.001")


def _table_exists(conn, table_name: str) -> bool:
    result = conn.execute(
        text(
            "SELECT EXISTS("
            "  SELECT 1 FROM information_schema.tables"
            "  WHERE table_name = :tname"
            ")"
        ),
        {"tname": table_name},
    )
    return bool(result.scalar())


def upgrade() -> None:
    conn = op.get_bind()

    if _table_exists(conn, 'stored_documents'):
        logger.info("Table stored_documents already exists — skipping")
        return

    op.create_table(
        'stored_documents',
        sa.Column('id', sa.Integer, primary_key=True, autoincrement=True),
        sa.Column('owner', sa.String(255), nullable=False, index=True),
        sa.Column('storage_key', sa.String(255), nullable=False),
        sa.Column('storage_value', sa.JSON, nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.UniqueConstraint('owner', 'storage_key', name='uq_stored_documents_owner_key'),
    )
    logger.info("Created table stored_documents")


def downgrade() -> None:
    conn = op.get_bind()

    if _table_exists(conn, 'stored_documents'):
        op.drop_table('stored_documents')
