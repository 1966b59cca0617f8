"""Subscription endpoints — customer changes to hours and frequency."""

from __future__ import annotations

from fastapi import APIRouter, BackgroundTasks, Depends
from pydantic import BaseModel

from matchengine.application.use_cases.dispatch_notifications import NotificationDispatcher
from matchengine.application.use_cases.update_subscription_hours import (
    SubscriptionUpdate,
    UpdateSubscriptionHoursUseCase,
)
from matchengine.domain.value_objects.enums import Frequency
from matchengine.infrastructure.api.dependencies import (
    get_correlation_id,
    get_dispatcher,
    get_update_subscription_uc,
)
from matchengine.infrastructure.api.errors import error_response

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


class HoursUpdateBody(BaseModel):
    hours: float
    frequency: Frequency | None = None


@router.patch("/{subscription_id}/hours")
async def update_hours(
    subscription_id: str,
    body: HoursUpdateBody,
    background_tasks: BackgroundTasks,
    cid: str = Depends(get_correlation_id),
    uc: UpdateSubscriptionHoursUseCase = Depends(get_update_subscription_uc),
    dispatcher: NotificationDispatcher = Depends(get_dispatcher),
):
    """Re-price the subscription; hours below its minimum are refused."""
    result = await uc.execute(subscription_id, body.hours, body.frequency, correlation_id=cid)
    if not result.ok:
        return error_response(result.error, cid)
    if result.value.notifications:
        background_tasks.add_task(dispatcher.dispatch, result.value.notifications, cid)
    return _serialize_update(result.value, cid)


def _serialize_update(u: SubscriptionUpdate, cid: str) -> dict:
    s = u.subscription
    return {
        "status": "ok" if u.changed else "unchanged",
        "correlation_id": cid,
        "subscription": {
            "id": s.id,
            "request_id": s.request_id,
            "hours": s.hours,
            "frequency": s.frequency.value,
            "price_per_session": s.price_per_session,
            "sessions_per_cycle": s.sessions_per_cycle,
            "bundle_amount_cents": s.bundle_amount_cents,
        },
        "previous": {"hours": u.previous.hours, "frequency": u.previous.frequency.value},
    }
