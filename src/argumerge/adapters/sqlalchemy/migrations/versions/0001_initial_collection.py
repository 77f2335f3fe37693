"""Create the debate collection tables.

Revision ID: 0001_initial_collection
Revises:
Create Date: 2026-10-19
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001_initial_collection"
down_revision = None
branch_labels = None
depends_on = None

ID = sa.String(64)
ENUM = sa.String(32)


def _timestamps() -> list[sa.Column[object]]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "tag",
        sa.Column("id", ID, nullable=False),
        sa.Column("label", sa.Text(), nullable=False),
        sa.Column("color", sa.String(32), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_tag"),
    )
    op.create_table(
        "source",
        sa.Column("id", ID, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("citation", sa.Text(), nullable=True),
        sa.Column("url", sa.Text(), nullable=True),
        sa.Column("publisher", sa.Text(), nullable=True),
        sa.Column("date", sa.String(64), nullable=True),
        sa.Column("reliability_score", sa.Float(), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_source"),
    )
    op.create_table(
        "topic",
        sa.Column("id", ID, nullable=False),
        sa.Column("title", sa.Text(), nullable=False),
        sa.Column("summary", sa.Text(), nullable=False),
        sa.Column("posture", ENUM, nullable=False),
        sa.Column("tags", sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_topic"),
    )
    op.create_table(
        "claim",
        sa.Column("id", ID, nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("stance", ENUM, nullable=False),
        sa.Column("strength", ENUM, nullable=False),
        sa.Column("topic_ids", sa.Text(), nullable=False),
        sa.Column("fallacy_ids", sa.Text(), nullable=False),
        sa.Column("fingerprint", sa.String(16), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_claim"),
    )
    op.create_index("ix_claim_fingerprint", "claim", ["fingerprint"])
    op.create_table(
        "rebuttal",
        sa.Column("id", ID, nullable=False),
        sa.Column("claim_id", ID, nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("fallacy_ids", sa.Text(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["claim_id"], ["claim.id"], name="fk_rebuttal_claim_id_claim"),
        sa.PrimaryKeyConstraint("id", name="pk_rebuttal"),
    )
    op.create_table(
        "evidence",
        sa.Column("id", ID, nullable=False),
        sa.Column("claim_id", ID, nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        sa.Column("type", ENUM, nullable=False),
        sa.Column("source_id", ID, nullable=True),
        sa.Column("quality", ENUM, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(["claim_id"], ["claim.id"], name="fk_evidence_claim_id_claim"),
        sa.ForeignKeyConstraint(
            ["source_id"], ["source.id"], name="fk_evidence_source_id_source"
        ),
        sa.PrimaryKeyConstraint("id", name="pk_evidence"),
    )
    op.create_table(
        "question",
        sa.Column("id", ID, nullable=False),
        sa.Column("target_id", ID, nullable=False),
        sa.Column("text", sa.Text(), nullable=False),
        sa.Column("kind", ENUM, nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_question"),
    )


def downgrade() -> None:
    op.drop_table("question")
    op.drop_table("evidence")
    op.drop_table("rebuttal")
    op.drop_index("ix_claim_fingerprint", table_name="claim")
    op.drop_table("claim")
    op.drop_table("topic")
    op.drop_table("source")
    op.drop_table("tag")
