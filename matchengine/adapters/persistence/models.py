"""SQLAlchemy ORM models — one table per record-store collection."""

from datetime import datetime

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    Float,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column

from matchengine.adapters.persistence.database import Base

_OPEN_REQUEST = text("status = 'open' AND request_id IS NOT NULL")
_OPEN_JOB = text("status = 'open' AND job_id IS NOT NULL")


class AssignmentModel(Base):
    __tablename__ = "assignments"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    request_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    job_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    provider_id: Mapped[str] = mapped_column(String(36), nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="open")
    rejection_reason: Mapped[str | None] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (
        CheckConstraint(
            "(request_id IS NULL) <> (job_id IS NULL)", name="ck_assignments_one_work_ref"
        ),
        Index("idx_assignments_request", "request_id"),
        Index("idx_assignments_job", "job_id"),
        # At most one open assignment per unit of work
        Index(
            "uq_assignments_open_request",
            "request_id",
            unique=True,
            postgresql_where=_OPEN_REQUEST,
            sqlite_where=_OPEN_REQUEST,
        ),
        Index(
            "uq_assignments_open_job",
            "job_id",
            unique=True,
            postgresql_where=_OPEN_JOB,
            sqlite_where=_OPEN_JOB,
        ),
    )


class RecurringRequestModel(Base):
    __tablename__ = "recurring_requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    status: Mapped[str] = mapped_column(String(40), nullable=False, default="requested")
    customer_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    customer_email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    customer_phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    frequency: Mapped[str | None] = mapped_column(String(20), nullable=True)
    start_week: Mapped[str | None] = mapped_column(String(20), nullable=True)


class SubscriptionModel(Base):
    __tablename__ = "subscriptions"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    request_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    provider_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    hours: Mapped[float] = mapped_column(Float, nullable=False)
    minimum_hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    frequency: Mapped[str] = mapped_column(String(20), nullable=False)
    price_per_session: Mapped[float | None] = mapped_column(Float, nullable=True)
    sessions_per_cycle: Mapped[int | None] = mapped_column(Integer, nullable=True)
    bundle_amount_cents: Mapped[int | None] = mapped_column(Integer, nullable=True)
    customer_email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    updated_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (Index("idx_subscriptions_request", "request_id"),)


class JobModel(Base):
    __tablename__ = "jobs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    status: Mapped[str] = mapped_column(String(40), nullable=False, default="requested")
    provider_id: Mapped[str | None] = mapped_column(String(36), nullable=True)
    customer_name: Mapped[str | None] = mapped_column(String(200), nullable=True)
    customer_email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    hours: Mapped[float | None] = mapped_column(Float, nullable=True)
    preferred_date: Mapped[str | None] = mapped_column(String(20), nullable=True)
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)


class ProviderModel(Base):
    __tablename__ = "providers"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    first_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    last_name: Mapped[str | None] = mapped_column(String(100), nullable=True)
    email: Mapped[str | None] = mapped_column(String(200), nullable=True)
    city: Mapped[str | None] = mapped_column(String(100), nullable=True)
    active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    available_hours: Mapped[float] = mapped_column(Float, nullable=False, default=0)
    rating: Mapped[float | None] = mapped_column(Float, nullable=True)
    active_clients: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (Index("idx_providers_city", "city"),)


class AuditLogModel(Base):
    __tablename__ = "audit_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    module: Mapped[str] = mapped_column(String(60), nullable=False)
    entity_id: Mapped[str] = mapped_column(String(36), nullable=False)
    action: Mapped[str] = mapped_column(String(60), nullable=False)
    performed_by: Mapped[str | None] = mapped_column(String(200), nullable=True)
    details: Mapped[dict | None] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("idx_audit_logs_entity", "module", "entity_id"),)
