# @TASK S0-T0.4 - Initial PostgreSQL schema for notes and note links

"""Create notes and note_links tables.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2026-10-18 08:00:00.000000

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Apply schema migrations."""
    op.create_table(
        "notes",
        sa.Column("id", sa.Uuid, nullable=False),
        sa.Column("owner_id", sa.BigInteger, nullable=False),
        sa.Column("telegram_message_id", sa.BigInteger, nullable=True),
        sa.Column("content", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="active"),
        sa.Column("is_marked", sa.Boolean, nullable=False, server_default="false"),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.CheckConstraint("status IN ('active', 'archived')", name="ck_notes_status"),
    )
    op.create_index("idx_notes_owner_status", "notes", ["owner_id", "status"], unique=False)
    op.create_index("idx_notes_created_at", "notes", ["created_at"], unique=False)

    op.create_table(
        "note_links",
        sa.Column("id", sa.Uuid, nullable=False),
        sa.Column("note_id", sa.Uuid, nullable=False),
        sa.Column("url", sa.Text, nullable=False),
        sa.Column("title", sa.Text, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("og_image", sa.Text, nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("id"),
        sa.ForeignKeyConstraint(["note_id"], ["notes.id"], ondelete="CASCADE"),
    )
    op.create_index("idx_note_links_note_id", "note_links", ["note_id"], unique=False)


def downgrade() -> None:
    """Revert schema migrations."""
    op.drop_index("idx_note_links_note_id", table_name="note_links")
    op.drop_table("note_links")
    op.drop_index("idx_notes_created_at", table_name="notes")
    op.drop_index("idx_notes_owner_status", table_name="notes")
    op.drop_table("notes")
