"""Work entities — recurring requests (with their subscription) and job orders."""

from dataclasses import dataclass

from matchengine.domain.value_objects.enums import (
    Frequency,
    SubscriptionStatus,
    WorkKind,
    WorkStatus,
)
from matchengine.domain.value_objects.work_ref import WorkRef


@dataclass
class Subscription:
    id: str
    request_id: str | None
    provider_id: str | None
    status: SubscriptionStatus
    hours: float
    frequency: Frequency
    minimum_hours: float | None = None
    price_per_session: float | None = None
    sessions_per_cycle: int | None = None
    bundle_amount_cents: int | None = None
    customer_email: str | None = None


@dataclass
class WorkRecord:
    """A unit of work as the engine sees it.

    Recurring requests and one-time jobs share this shape; a request also
    carries the subscription it will activate once a provider accepts.
    """

    ref: WorkRef
    status: WorkStatus
    customer_name: str | None = None
    customer_email: str | None = None
    city: str | None = None
    hours: float | None = None
    provider_id: str | None = None
    preferred_date: str | None = None
    subscription: Subscription | None = None

    @property
    def is_recurring(self) -> bool:
        return self.ref.kind is WorkKind.REQUEST

    def summary(self) -> dict:
        """Customer-facing fields copied into notification payloads."""
        return {
            "customer_name": self.customer_name,
            "customer_email": self.customer_email,
            "city": self.city,
            "hours": self.hours,
            "preferred_date": self.preferred_date,
        }
