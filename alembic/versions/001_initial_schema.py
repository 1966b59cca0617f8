"""Initial schema — assignments, work records, providers and audit log.

Revision ID: 001
Revises: None
Create Date: 2026-10-19
"""

from typing import Sequence, Union

import sqlalchemy as sa

from alembic import op

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Providers
    op.create_table(
        "providers",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("first_name", sa.String(100), nullable=True),
        sa.Column("last_name", sa.String(100), nullable=True),
        sa.Column("email", sa.String(200), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("available_hours", sa.Float, nullable=False, server_default="0"),
        sa.Column("rating", sa.Float, nullable=True),
        sa.Column("active_clients", sa.Integer, nullable=False, server_default="0"),
    )
    op.create_index("idx_providers_city", "providers", ["city"])

    # Recurring requests
    op.create_table(
        "recurring_requests",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("status", sa.String(40), nullable=False, server_default="requested"),
        sa.Column("customer_name", sa.String(200), nullable=True),
        sa.Column("customer_email", sa.String(200), nullable=True),
        sa.Column("customer_phone", sa.String(40), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("hours", sa.Float, nullable=True),
        sa.Column("frequency", sa.String(20), nullable=True),
        sa.Column("start_week", sa.String(20), nullable=True),
    )

    # Subscriptions
    op.create_table(
        "subscriptions",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("request_id", sa.String(36), nullable=True),
        sa.Column("provider_id", sa.String(36), nullable=True),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("hours", sa.Float, nullable=False),
        sa.Column("minimum_hours", sa.Float, nullable=True),
        sa.Column("frequency", sa.String(20), nullable=False),
        sa.Column("price_per_session", sa.Float, nullable=True),
        sa.Column("sessions_per_cycle", sa.Integer, nullable=True),
        sa.Column("bundle_amount_cents", sa.Integer, nullable=True),
        sa.Column("customer_email", sa.String(200), nullable=True),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index("idx_subscriptions_request", "subscriptions", ["request_id"])

    # Jobs
    op.create_table(
        "jobs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("status", sa.String(40), nullable=False, server_default="requested"),
        sa.Column("provider_id", sa.String(36), nullable=True),
        sa.Column("customer_name", sa.String(200), nullable=True),
        sa.Column("customer_email", sa.String(200), nullable=True),
        sa.Column("city", sa.String(100), nullable=True),
        sa.Column("hours", sa.Float, nullable=True),
        sa.Column("preferred_date", sa.String(20), nullable=True),
        sa.Column("details", sa.JSON, nullable=True),
    )

    # Assignments
    op.create_table(
        "assignments",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("request_id", sa.String(36), nullable=True),
        sa.Column("job_id", sa.String(36), nullable=True),
        sa.Column("provider_id", sa.String(36), nullable=False),
        sa.Column("status", sa.String(20), nullable=False, server_default="open"),
        sa.Column("rejection_reason", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint(
            "(request_id IS NULL) <> (job_id IS NULL)", name="ck_assignments_one_work_ref"
        ),
    )
    op.create_index("idx_assignments_request", "assignments", ["request_id"])
    op.create_index("idx_assignments_job", "assignments", ["job_id"])
    # At most one open assignment per unit of work
    op.create_index(
        "uq_assignments_open_request",
        "assignments",
        ["request_id"],
        unique=True,
        postgresql_where=sa.text("status = 'open' AND request_id IS NOT NULL"),
    )
    op.create_index(
        "uq_assignments_open_job",
        "assignments",
        ["job_id"],
        unique=True,
        postgresql_where=sa.text("status = 'open' AND job_id IS NOT NULL"),
    )

    # Audit log
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("module", sa.String(60), nullable=False),
        sa.Column("entity_id", sa.String(36), nullable=False),
        sa.Column("action", sa.String(60), nullable=False),
        sa.Column("performed_by", sa.String(200), nullable=True),
        sa.Column("details", sa.JSON, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
    )
    op.create_index("idx_audit_logs_entity", "audit_logs", ["module", "entity_id"])


def downgrade() -> None:
    op.drop_table("audit_logs")
    op.drop_table("assignments")
    op.drop_table("jobs")
    op.drop_table("subscriptions")
    op.drop_table("recurring_requests")
    op.drop_table("providers")
