"""users and quotations

Revision ID: 0001_users_and_quotations
Revises:
Create Date: 2026-10-17
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


revision: str = "0001_users_and_quotations"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("email", sa.String(length=320), nullable=False),
        sa.Column("password_hash", sa.String(length=256), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("name", sa.String(length=256), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.UniqueConstraint("email", name="uq_users_email"),
    )

    op.create_table(
        "quotations",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True, nullable=False),
        sa.Column("proposal_id", sa.String(length=10), nullable=False),
        sa.Column("customer_name", sa.String(length=256), nullable=False),
        sa.Column("customer_email", sa.String(length=320), nullable=False),
        sa.Column("customer_phone", sa.String(length=64), nullable=True),
        sa.Column("customer_address", sa.Text(), nullable=True),
        sa.Column("development_address", sa.Text(), nullable=True),
        sa.Column("site_address", sa.Text(), nullable=False),
        sa.Column("project_title", sa.String(length=256), nullable=True),
        sa.Column("project_description", sa.Text(), nullable=True),
        sa.Column("quotation_type", sa.String(length=128), nullable=True),
        sa.Column("scope", sa.Text(), nullable=True),
        sa.Column("quotation_date", sa.DateTime(timezone=True), nullable=True),
        sa.Column("job_type", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("items", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("subtotal", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("vat_rate", sa.Float(), nullable=False, server_default=sa.text("20")),
        sa.Column("vat_amount", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("total_amount", sa.Float(), nullable=False, server_default=sa.text("0")),
        sa.Column("exclusions", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("payment_terms", sa.Text(), nullable=True),
        sa.Column("hourly_rates", postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column("valid_until", sa.DateTime(timezone=True), nullable=True),
        sa.Column("details_json", postgresql.JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column("status", sa.String(length=16), nullable=False, server_default=sa.text("'draft'")),
        sa.Column("created_by", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.text("now()")),
        sa.ForeignKeyConstraint(
            ["created_by"],
            ["users.id"],
            name="fk_quotations_created_by_users",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("proposal_id", name="uq_quotations_proposal_id"),
        sa.CheckConstraint(
            "status IN ('draft','sent','viewed','accepted','rejected','expired')",
            name="ck_quotations_status",
        ),
    )
    op.create_index(
        "ix_quotations_created_by_created_at", "quotations", ["created_by", "created_at"]
    )


def downgrade() -> None:
    op.drop_index("ix_quotations_created_by_created_at", table_name="quotations")
    op.drop_table("quotations")
    op.drop_table("users")
