"""Initial schema

Revision ID: 0001_initial_schema
Revises:
Create Date: 2026-10-19

"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = "0001_initial_schema"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), nullable=False, unique=True),
        sa.Column("password_hash", sa.String(255), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("last_active", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "leads",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("first_name", sa.String(120), nullable=False),
        sa.Column("last_name", sa.String(120), nullable=False),
        sa.Column("designation", sa.String(255), nullable=False),
        sa.Column("profile_link", sa.String(500), nullable=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("person_mobile", sa.String(40), nullable=True),
        sa.Column("location", sa.String(255), nullable=True),
        sa.Column("company_name", sa.String(255), nullable=False),
        sa.Column("company_link", sa.String(500), nullable=True),
        sa.Column("job_title", sa.String(255), nullable=True),
        sa.Column("job_link", sa.String(500), nullable=False, server_default=""),
        sa.Column("additional_emails", sa.JSON(), nullable=False),
        sa.Column("source", sa.String(120), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("assigned_to_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
        sa.UniqueConstraint("email", "company_name", "job_link", name="uq_lead_email_company_job"),
    )
    op.create_index("ix_leads_email", "leads", ["email"])
    op.create_index("ix_leads_company_name", "leads", ["company_name"])
    op.create_index("ix_leads_assigned_to_id", "leads", ["assigned_to_id"])

    op.create_table(
        "countries",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(120), nullable=False, unique=True),
        *_timestamps(),
    )


def downgrade() -> None:
    op.drop_table("countries")
    op.drop_index("ix_leads_assigned_to_id", table_name="leads")
    op.drop_index("ix_leads_company_name", table_name="leads")
    op.drop_index("ix_leads_email", table_name="leads")
    op.drop_table("leads")
    op.drop_table("users")
