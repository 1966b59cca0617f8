"""UpdateSubscriptionHoursUseCase — customer changes hours or frequency."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime

from matchengine.application.deadlines import bounded
from matchengine.application.ports.audit_log import AuditLog
from matchengine.application.ports.work_repo import SubscriptionRepository
from matchengine.application.result import Result
from matchengine.application.use_cases.assignment_workflow import utcnow
from matchengine.domain.entities.audit import AuditEntry
from matchengine.domain.entities.notification import NotificationIntent
from matchengine.domain.entities.work import Subscription
from matchengine.domain.errors import EngineError, ErrorKind
from matchengine.domain.policies.notification_rules import subscription_change_intents
from matchengine.domain.policies.pricing import RateTable, compute_subscription_price
from matchengine.domain.value_objects.enums import Frequency
from matchengine.domain.value_objects.work_ref import WorkRef

logger = logging.getLogger(__name__)


@dataclass
class SubscriptionUpdate:
    subscription: Subscription
    previous: Subscription
    changed: bool
    notifications: list[NotificationIntent] = field(default_factory=list)


class UpdateSubscriptionHoursUseCase:
    """Re-prices a subscription; never rounds hours up behind the customer's back."""

    def __init__(
        self,
        subscription_repo: SubscriptionRepository,
        audit_log: AuditLog,
        rate_table: RateTable,
        *,
        clock: Callable[[], datetime] = utcnow,
        store_timeout: float | None = None,
    ):
        self._subscriptions = subscription_repo
        self._audit = audit_log
        self._rate = rate_table
        self._clock = clock
        self._store_timeout = store_timeout

    async def execute(
        self,
        subscription_id: str,
        hours: float,
        frequency: Frequency | None = None,
        *,
        timeout: float | None = None,
        correlation_id: str | None = None,
    ) -> Result[SubscriptionUpdate]:
        cid = correlation_id or "-"
        if timeout is None:
            timeout = self._store_timeout
        try:
            update = await self._update(subscription_id, hours, frequency, timeout, cid)
        except EngineError as e:
            logger.warning(
                "[%s] Subscription %s update failed: %s (%s)", cid, subscription_id, e.kind.value, e.message
            )
            return Result(error=e)
        return Result(value=update)

    async def _update(
        self,
        subscription_id: str,
        hours: float,
        frequency: Frequency | None,
        timeout: float | None,
        cid: str,
    ) -> SubscriptionUpdate:
        current = await bounded(self._subscriptions.get(subscription_id), timeout, "load subscription")
        if current is None:
            raise EngineError(
                ErrorKind.NOT_FOUND, "Subscription not found", {"subscription_id": subscription_id}
            )

        frequency = Frequency(frequency) if frequency else current.frequency
        price = compute_subscription_price(
            hours, frequency, self._rate, minimum_hours=current.minimum_hours
        )

        if price.hours == current.hours and frequency == current.frequency:
            logger.info("[%s] Subscription %s unchanged", cid, subscription_id)
            return SubscriptionUpdate(subscription=current, previous=current, changed=False)

        updated = replace(
            current,
            hours=price.hours,
            frequency=frequency,
            price_per_session=price.price_per_session,
            sessions_per_cycle=price.sessions_per_cycle,
            bundle_amount_cents=price.bundle_amount_cents,
        )
        saved = await bounded(self._subscriptions.save_pricing(updated), timeout, "update subscription")
        logger.info(
            "[%s] Subscription %s: %gh %s → %gh %s",
            cid, subscription_id, current.hours, current.frequency.value,
            saved.hours, saved.frequency.value,
        )

        try:
            await bounded(
                self._audit.append(
                    AuditEntry(
                        module="subscription",
                        entity_id=subscription_id,
                        action="hours_updated",
                        performed_by=current.customer_email,
                        timestamp=self._clock(),
                        details={
                            "previous_hours": current.hours,
                            "hours": saved.hours,
                            "previous_frequency": current.frequency.value,
                            "frequency": saved.frequency.value,
                            "bundle_amount_cents": saved.bundle_amount_cents,
                        },
                    )
                ),
                timeout,
                "write audit entry",
            )
        except Exception:
            logger.warning("[%s] Audit entry for subscription %s not written", cid, subscription_id, exc_info=True)

        notifications = []
        if saved.request_id:
            notifications = subscription_change_intents(WorkRef.request(saved.request_id), current, saved)

        return SubscriptionUpdate(
            subscription=saved, previous=current, changed=True, notifications=notifications
        )
