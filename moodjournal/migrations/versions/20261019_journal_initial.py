"""journal initial schema

Revision ID: 20261019_journal_initial
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "20261019_journal_initial"
down_revision = None
branch_labels = None
depends_on = None

MOODS = (
    "Happy", "Excited", "Relaxed", "Grateful", "Confident",
    "Calm", "Thoughtful", "Curious", "Nostalgic", "Bored",
    "Sad", "Angry", "Stressed", "Lonely", "Anxious",
)  # fmt: skip


def _mood_column(name: str, nullable: bool) -> sa.Column:
    return sa.Column(
        name,
        sa.Enum(*MOODS, name="mood", native_enum=False, length=16, create_constraint=False),
        nullable=nullable,
    )


def upgrade():
    op.create_table(
        "user",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("pin", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_user_created_at", "user", ["created_at"])

    op.create_table(
        "journal_entry",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("title", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=False, server_default=""),
        sa.Column("entry_date", sa.Date(), nullable=False),
        _mood_column("primary_mood", nullable=False),
        _mood_column("secondary_mood_1", nullable=True),
        _mood_column("secondary_mood_2", nullable=True),
        sa.Column("category", sa.String(length=100), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_journal_entry_entry_date", "journal_entry", ["entry_date"], unique=True)
    op.create_index("ix_journal_entry_category", "journal_entry", ["category"])
    op.create_index("ix_journal_entry_primary_mood", "journal_entry", ["primary_mood"])

    op.create_table(
        "tag",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=50), nullable=False),
        sa.Column("name_key", sa.String(length=150), nullable=False),
        sa.Column("is_prebuilt", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column("created_at", sa.DateTime(), nullable=False, server_default=sa.func.now()),
    )
    op.create_index("ix_tag_is_prebuilt_name", "tag", ["is_prebuilt", "name"])
    op.create_index("uq_tag_name_key", "tag", ["name_key"], unique=True)

    op.create_table(
        "journal_entry_tag",
        sa.Column(
            "entry_id",
            sa.String(length=36),
            sa.ForeignKey("journal_entry.id", ondelete="CASCADE"),
            primary_key=True,
        ),
        sa.Column(
            "tag_id",
            sa.String(length=36),
            sa.ForeignKey("tag.id", ondelete="CASCADE"),
            primary_key=True,
        ),
    )
    op.create_index("ix_journal_entry_tag_tag_id", "journal_entry_tag", ["tag_id"])


def downgrade():
    op.drop_index("ix_journal_entry_tag_tag_id", table_name="journal_entry_tag")
    op.drop_table("journal_entry_tag")
    op.drop_index("uq_tag_name_key", table_name="tag")
    op.drop_index("ix_tag_is_prebuilt_name", table_name="tag")
    op.drop_table("tag")
    op.drop_index("ix_journal_entry_primary_mood", table_name="journal_entry")
    op.drop_index("ix_journal_entry_category", table_name="journal_entry")
    op.drop_index("ix_journal_entry_entry_date", table_name="journal_entry")
    op.drop_table("journal_entry")
    op.drop_index("ix_user_created_at", table_name="user")
    op.drop_table("user")
