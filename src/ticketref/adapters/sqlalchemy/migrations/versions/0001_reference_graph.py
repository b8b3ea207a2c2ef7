"""Create ticket, comment and ticket_reference tables.

Revision ID: 0001_reference_graph
Revises:
Create Date: 2026-10-19 09:00:00
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

from ticketref.adapters.sqlalchemy.mappings import UTCDateTime

revision = "0001_reference_graph"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "ticket",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("title", sa.String(), nullable=False, server_default=""),
        sa.Column("reference_fence", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_ticket")),
    )
    op.create_table(
        "comment",
        sa.Column("id", sa.String(length=64), nullable=False),
        sa.Column("ticket_id", sa.String(length=64), nullable=False),
        sa.Column("content", sa.Text(), nullable=False, server_default=""),
        sa.Column("updated_at", UTCDateTime(), nullable=False),
        sa.ForeignKeyConstraint(
            ["ticket_id"],
            ["ticket.id"],
            name=op.f("fk_comment_ticket_id_ticket"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_comment")),
    )
    op.create_index("ix_comment_ticket_id", "comment", ["ticket_id"])
    op.create_table(
        "ticket_reference",
        sa.Column("source_ticket_id", sa.String(length=64), nullable=False),
        sa.Column("target_ticket_id", sa.String(length=64), nullable=False),
        sa.CheckConstraint(
            "source_ticket_id <> target_ticket_id",
            name=op.f("ck_ticket_reference_no_self_reference"),
        ),
        sa.ForeignKeyConstraint(
            ["source_ticket_id"],
            ["ticket.id"],
            name=op.f("fk_ticket_reference_source_ticket_id_ticket"),
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["target_ticket_id"],
            ["ticket.id"],
            name=op.f("fk_ticket_reference_target_ticket_id_ticket"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint(
            "source_ticket_id",
            "target_ticket_id",
            name=op.f("pk_ticket_reference"),
        ),
    )
    op.create_index("ix_ticket_reference_target", "ticket_reference", ["target_ticket_id"])


def downgrade() -> None:
    op.drop_index("ix_ticket_reference_target", table_name="ticket_reference")
    op.drop_table("ticket_reference")
    op.drop_index("ix_comment_ticket_id", table_name="comment")
    op.drop_table("comment")
    op.drop_table("ticket")
