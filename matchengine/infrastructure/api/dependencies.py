"""FastAPI dependency injection — wires adapters into use cases."""

from __future__ import annotations

import logging
import uuid

from fastapi import Depends, Header

from matchengine.adapters.notifications.logging_sink import LoggingNotificationSink
from matchengine.adapters.notifications.webhook_sink import WebhookNotificationSink
from matchengine.adapters.persistence.audit_log import RecordStoreAuditLog
from matchengine.adapters.persistence.database import async_session_factory
from matchengine.adapters.persistence.memory_store import InMemoryRecordStore
from matchengine.adapters.persistence.postgrest_store import PostgrestRecordStore
from matchengine.adapters.persistence.provider_directory import RecordStoreProviderDirectory
from matchengine.adapters.persistence.repositories import (
    JobOrderRepository,
    RecordStoreAssignmentRepository,
    RecordStoreSubscriptionRepository,
    RecurringRequestRepository,
)
from matchengine.adapters.persistence.sql_store import SqlRecordStore
from matchengine.application.ports.notification_sink import NotificationSink
from matchengine.application.ports.record_store import RecordStore
from matchengine.application.ports.work_repo import WorkGateway
from matchengine.application.use_cases.approve_assignment import ApproveAssignmentUseCase
from matchengine.application.use_cases.assignment_workflow import utcnow
from matchengine.application.use_cases.dispatch_notifications import NotificationDispatcher
from matchengine.application.use_cases.reject_assignment import RejectAssignmentUseCase
from matchengine.application.use_cases.rematch_search import RematchSearch
from matchengine.application.use_cases.update_subscription_hours import (
    UpdateSubscriptionHoursUseCase,
)
from matchengine.config import settings
from matchengine.domain.policies.pricing import RateTable

logger = logging.getLogger(__name__)


def build_record_store() -> RecordStore:
    backend = settings.record_store_backend
    if backend == "memory":
        logger.info("Using in-memory record store")
        return InMemoryRecordStore()
    if backend == "sql":
        logger.info("Using SQL record store")
        return SqlRecordStore(async_session_factory)
    logger.info("Using PostgREST record store at %s", settings.record_store_url)
    return PostgrestRecordStore(
        settings.record_store_url,
        settings.record_store_api_key,
        timeout=settings.store_timeout_seconds,
    )


def build_notification_sink() -> NotificationSink:
    if settings.notification_webhook_url:
        return WebhookNotificationSink(
            settings.notification_webhook_url,
            admin_email=settings.admin_email or None,
            timeout=settings.store_timeout_seconds,
        )
    return LoggingNotificationSink()


# Singleton adapters (stateless, or holding the in-memory data set)
_record_store = build_record_store()
_notification_sink = build_notification_sink()


def get_record_store() -> RecordStore:
    return _record_store


def get_notification_sink() -> NotificationSink:
    return _notification_sink


def get_correlation_id(x_correlation_id: str | None = Header(default=None)) -> str:
    return x_correlation_id or uuid.uuid4().hex


def get_rate_table() -> RateTable:
    return settings.rate_table()


def get_work_gateway(store: RecordStore = Depends(get_record_store)) -> WorkGateway:
    return WorkGateway(RecurringRequestRepository(store), JobOrderRepository(store))


def get_assignment_repo(
    store: RecordStore = Depends(get_record_store),
) -> RecordStoreAssignmentRepository:
    return RecordStoreAssignmentRepository(store, clock=utcnow)


def get_approve_uc(
    store: RecordStore = Depends(get_record_store),
) -> ApproveAssignmentUseCase:
    return ApproveAssignmentUseCase(
        get_work_gateway(store),
        RecordStoreAssignmentRepository(store, clock=utcnow),
        RecordStoreAuditLog(store),
        store_timeout=settings.store_timeout_seconds,
        transition_retries=settings.transition_retries,
    )


def get_reject_uc(
    store: RecordStore = Depends(get_record_store),
) -> RejectAssignmentUseCase:
    assignments = RecordStoreAssignmentRepository(store, clock=utcnow)
    return RejectAssignmentUseCase(
        get_work_gateway(store),
        assignments,
        RecordStoreAuditLog(store),
        RematchSearch(RecordStoreProviderDirectory(store), assignments),
        store_timeout=settings.store_timeout_seconds,
        rematch_timeout=settings.rematch_timeout_seconds,
        transition_retries=settings.transition_retries,
    )


def get_update_subscription_uc(
    store: RecordStore = Depends(get_record_store),
    rate_table: RateTable = Depends(get_rate_table),
) -> UpdateSubscriptionHoursUseCase:
    return UpdateSubscriptionHoursUseCase(
        RecordStoreSubscriptionRepository(store, clock=utcnow),
        RecordStoreAuditLog(store),
        rate_table,
        store_timeout=settings.store_timeout_seconds,
    )


def get_dispatcher(
    sink: NotificationSink = Depends(get_notification_sink),
) -> NotificationDispatcher:
    return NotificationDispatcher(sink)
