"""Pricing calculator — work-hours, per-session price and per-cycle bundle.

Hours and prices are floats while they are being worked out; the bundle
amount is converted to integer cents exactly once, at the end.

Two entry points exist on purpose:
- ``quote_subscription`` is used when a subscription is first created and
  silently raises too-few hours up to the computed minimum.
- ``compute_subscription_price`` is used by update flows and refuses hours
  below the minimum with BELOW_MINIMUM instead of correcting them.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal

from matchengine.domain.errors import EngineError, ErrorKind
from matchengine.domain.value_objects.enums import Frequency

# Sessions in one 4-week billing cycle
SESSIONS_PER_CYCLE: dict[Frequency, int] = {
    Frequency.WEEKLY: 4,
    Frequency.BIWEEKLY: 2,
    Frequency.FOURWEEKLY: 1,
}


@dataclass(frozen=True)
class RateTable:
    price_per_hour: float
    min_hours: float
    minutes_per_10m2: float = 0.0
    minutes_per_toilet: float = 0.0
    minutes_per_bathroom: float = 0.0


@dataclass(frozen=True)
class FixtureCounts:
    toilets: int = 0
    bathrooms: int = 0


@dataclass(frozen=True)
class SubscriptionPrice:
    hours: float
    minimum_hours: float
    price_per_hour: float
    price_per_session: float
    sessions_per_cycle: int
    bundle_amount_cents: int

    @property
    def bundle_amount(self) -> float:
        return self.bundle_amount_cents / 100


def round_up_half_hour(hours: float) -> float:
    # Round away float noise first so 1.5000000000000002 stays 1.5
    return math.ceil(round(hours * 2, 6)) / 2


def normalise_half_hour(hours: float | None) -> float:
    """Snap *hours* to the nearest half-hour (halves round up). Creation flow only."""
    if hours is None or not math.isfinite(hours) or hours <= 0:
        return 0.0
    return math.floor(hours * 2 + 0.5) / 2


def _is_positive(value: float | None) -> bool:
    return value is not None and math.isfinite(value) and value > 0


def _minutes(area: float, fixtures: FixtureCounts, rate: RateTable) -> float:
    total = (
        (max(area, 0.0) / 10) * rate.minutes_per_10m2
        + max(fixtures.toilets, 0) * rate.minutes_per_toilet
        + max(fixtures.bathrooms, 0) * rate.minutes_per_bathroom
    )
    return total if math.isfinite(total) and total > 0 else 0.0


def compute_hours(area: float, fixtures: FixtureCounts | None, rate: RateTable) -> float:
    """Hours needed for a home of *area* m² with the given fixtures.

    Always a multiple of 0.5 and never below ``rate.min_hours``.
    """
    minutes = _minutes(area, fixtures or FixtureCounts(), rate)
    return max(round_up_half_hour(minutes / 60), round_up_half_hour(max(rate.min_hours, 0.0)))


def _check_rate(rate: RateTable) -> None:
    if not math.isfinite(rate.price_per_hour) or rate.price_per_hour <= 0:
        raise ValueError("Rate table has no valid price per hour")


def _to_cents(amount: float) -> int:
    return int(Decimal(repr(amount * 100)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _price(hours: float, minimum: float, frequency: Frequency, rate: RateTable) -> SubscriptionPrice:
    sessions = SESSIONS_PER_CYCLE[Frequency(frequency)]
    per_session = hours * rate.price_per_hour
    return SubscriptionPrice(
        hours=hours,
        minimum_hours=minimum,
        price_per_hour=rate.price_per_hour,
        price_per_session=per_session,
        sessions_per_cycle=sessions,
        bundle_amount_cents=_to_cents(per_session * sessions),
    )


def compute_subscription_price(
    requested_hours: float | None,
    frequency: Frequency | str,
    rate: RateTable,
    minimum_hours: float | None = None,
) -> SubscriptionPrice:
    """Price an existing subscription after its hours or frequency change.

    *minimum_hours* is the minimum stored on the subscription; the effective
    minimum is the larger of that and the rate table's.

    The requested hours are taken as given: they are never rounded, so a
    value just under the minimum cannot be snapped up to it.

    Raises:
        EngineError: BELOW_MINIMUM when the requested hours are missing,
            not positive, too few, or not a multiple of half an hour.
    """
    _check_rate(rate)
    stored_min = minimum_hours if _is_positive(minimum_hours) else 0.0
    effective_min = max(
        round_up_half_hour(max(rate.min_hours, 0.0)),
        round_up_half_hour(stored_min),
    )
    details = {"requested_hours": requested_hours, "minimum_hours": effective_min}

    if not _is_positive(requested_hours):
        raise EngineError(
            ErrorKind.BELOW_MINIMUM, "Hours must be a positive number", {**details, "reason": "invalid"}
        )
    hours = float(requested_hours)
    if hours < effective_min:
        raise EngineError(
            ErrorKind.BELOW_MINIMUM,
            f"Hours may not be lower than {effective_min:g}",
            {**details, "reason": "below_minimum"},
        )
    if not (hours * 2).is_integer():
        raise EngineError(
            ErrorKind.BELOW_MINIMUM,
            "Hours must be in half-hour steps (e.g. 3, 3.5, 4)",
            {**details, "reason": "not_half_hour_step"},
        )
    return _price(hours, effective_min, Frequency(frequency), rate)


def quote_subscription(
    area: float,
    fixtures: FixtureCounts | None,
    requested_hours: float | None,
    frequency: Frequency | str,
    rate: RateTable,
) -> SubscriptionPrice:
    """Price a new subscription, raising too-few hours to the minimum."""
    _check_rate(rate)
    minimum = compute_hours(area, fixtures, rate)
    hours = max(normalise_half_hour(requested_hours), minimum)
    return _price(hours, minimum, Frequency(frequency), rate)
