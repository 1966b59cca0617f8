"""Pricing endpoint — quote for a new subscription."""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from matchengine.domain.policies.pricing import FixtureCounts, RateTable, quote_subscription
from matchengine.domain.value_objects.enums import Frequency
from matchengine.infrastructure.api.dependencies import get_rate_table

router = APIRouter(prefix="/pricing", tags=["pricing"])


class QuoteRequest(BaseModel):
    area_m2: float = Field(ge=0)
    toilets: int = Field(default=0, ge=0)
    bathrooms: int = Field(default=0, ge=0)
    hours: float | None = None
    frequency: Frequency = Frequency.WEEKLY


@router.post("/quote")
async def quote(body: QuoteRequest, rate_table: RateTable = Depends(get_rate_table)):
    """Hours are raised to the computed minimum, never refused."""
    price = quote_subscription(
        body.area_m2,
        FixtureCounts(toilets=body.toilets, bathrooms=body.bathrooms),
        body.hours,
        body.frequency,
        rate_table,
    )
    return {
        "hours": price.hours,
        "minimum_hours": price.minimum_hours,
        "frequency": body.frequency.value,
        "price_per_hour": price.price_per_hour,
        "price_per_session": price.price_per_session,
        "sessions_per_cycle": price.sessions_per_cycle,
        "bundle_amount_cents": price.bundle_amount_cents,
        "bundle_amount": price.bundle_amount,
    }
