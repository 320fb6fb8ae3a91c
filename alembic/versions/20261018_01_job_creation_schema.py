"""Job creation schema baseline

Revision ID: 20261018_01
Revises: None
Create Date: 2026-10-18
"""
# pylint: disable=no-member,invalid-name,wrong-import-order

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "20261018_01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""

    op.create_table(
        "jobs",
        sa.Column("id", sa.BigInteger(), sa.Identity(always=False), primary_key=True),
        sa.Column("config_type", sa.Text(), nullable=False),
        sa.Column("scope", sa.Text(), nullable=False),
        sa.Column("status", sa.Text(), nullable=False, server_default=sa.text("'pending'")),
        sa.Column("config", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint(
            "status in ('pending', 'running', 'incomplete', 'failed', 'succeeded', 'cancelled')",
            name="ck_jobs_status",
        ),
        sa.CheckConstraint(
            "config_type in ('sync', 'refresh', 'reset_connection')",
            name="ck_jobs_config_type",
        ),
    )
    op.create_index("ix_jobs_scope_status", "jobs", ["scope", "status"])
    op.create_index(
        "uq_jobs_scope_non_terminal",
        "jobs",
        ["scope"],
        unique=True,
        postgresql_where=sa.text("status not in ('failed', 'succeeded', 'cancelled')"),
    )

    op.create_table(
        "stream_refreshes",
        sa.Column("id", sa.BigInteger(), sa.Identity(always=False), primary_key=True),
        sa.Column("connection_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("stream_name", sa.Text(), nullable=False),
        sa.Column("stream_namespace", sa.Text(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )
    op.create_index("ix_stream_refreshes_connection_id", "stream_refreshes", ["connection_id"])

    op.create_table(
        "stream_generation",
        sa.Column("id", sa.BigInteger(), sa.Identity(always=False), primary_key=True),
        sa.Column("connection_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("stream_name", sa.Text(), nullable=False),
        sa.Column("stream_namespace", sa.Text(), nullable=True),
        sa.Column("generation_id", sa.BigInteger(), nullable=False),
        sa.Column("start_job_id", sa.BigInteger(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.CheckConstraint("generation_id >= 0", name="ck_stream_generation_generation_id"),
    )
    op.create_index(
        "ix_stream_generation_connection_stream",
        "stream_generation",
        ["connection_id", "stream_name", "stream_namespace"],
    )

    op.create_table(
        "connection_state",
        sa.Column("connection_id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("state", postgresql.JSONB(astext_type=sa.Text()), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
    )


def downgrade() -> None:
    """Downgrade schema."""

    op.drop_table("connection_state")
    op.drop_index("ix_stream_generation_connection_stream", table_name="stream_generation")
    op.drop_table("stream_generation")
    op.drop_index("ix_stream_refreshes_connection_id", table_name="stream_refreshes")
    op.drop_table("stream_refreshes")
    op.drop_index("uq_jobs_scope_non_terminal", table_name="jobs")
    op.drop_index("ix_jobs_scope_status", table_name="jobs")
    op.drop_table("jobs")
