"""Tests for the pricing calculator."""

import pytest

from matchengine.domain.errors import EngineError, ErrorKind
from matchengine.domain.policies.pricing import (
    FixtureCounts,
    RateTable,
    compute_hours,
    compute_subscription_price,
    normalise_half_hour,
    quote_subscription,
    round_up_half_hour,
)
from matchengine.domain.value_objects.enums import Frequency

RATE = RateTable(
    price_per_hour=32.5,
    min_hours=3,
    minutes_per_10m2=6,
    minutes_per_toilet=15,
    minutes_per_bathroom=30,
)


def test_round_up_half_hour():
    assert round_up_half_hour(3.0) == 3.0
    assert round_up_half_hour(3.01) == 3.5
    assert round_up_half_hour(3.5) == 3.5
    assert round_up_half_hour(3.51) == 4.0
    assert round_up_half_hour(0.1 * 15) == 1.5


def test_normalise_half_hour():
    assert normalise_half_hour(None) == 0.0
    assert normalise_half_hour(-2) == 0.0
    assert normalise_half_hour(3.2) == 3.0
    assert normalise_half_hour(3.25) == 3.5
    assert normalise_half_hour(3.74) == 3.5


def test_compute_hours_small_home_hits_minimum():
    assert compute_hours(20, FixtureCounts(toilets=1), RATE) == 3.0


def test_compute_hours_large_home_rounds_up():
    # 150 m² → 90 min, 2 toilets → 30, 2 bathrooms → 60: 180 min = 3h
    assert compute_hours(150, FixtureCounts(toilets=2, bathrooms=2), RATE) == 3.0
    # 160 m² → 96 min + 30 + 60 = 186 min = 3.1h → 3.5
    assert compute_hours(160, FixtureCounts(toilets=2, bathrooms=2), RATE) == 3.5


def test_compute_hours_is_monotone_half_hour_and_above_minimum():
    previous = 0.0
    for area in range(0, 400, 7):
        hours = compute_hours(area, FixtureCounts(toilets=1, bathrooms=1), RATE)
        assert hours >= previous
        assert hours >= RATE.min_hours
        assert (hours * 2) == int(hours * 2)
        previous = hours


def test_compute_hours_without_fixtures():
    assert compute_hours(0, None, RATE) == 3.0


def test_subscription_price_weekly():
    price = compute_subscription_price(4, Frequency.WEEKLY, RATE)
    assert price.hours == 4.0
    assert price.sessions_per_cycle == 4
    assert price.price_per_session == pytest.approx(130.0)
    assert price.bundle_amount_cents == 52000
    assert price.bundle_amount == pytest.approx(520.0)


@pytest.mark.parametrize(
    "frequency, sessions",
    [("weekly", 4), ("biweekly", 2), ("fourweekly", 1)],
)
def test_sessions_per_cycle(frequency, sessions):
    assert compute_subscription_price(3, frequency, RATE).sessions_per_cycle == sessions


def test_bundle_rounds_to_whole_cents():
    rate = RateTable(price_per_hour=10.125, min_hours=1)
    # 1.5h × 10.125 × 1 session = 1518.75 cents
    price = compute_subscription_price(1.5, Frequency.FOURWEEKLY, rate)
    assert price.price_per_session == pytest.approx(15.1875)
    assert price.bundle_amount_cents == 1519


def test_update_below_rate_minimum_is_refused():
    """Updates never silently raise hours to the minimum."""
    rate = RateTable(price_per_hour=10, min_hours=4)
    with pytest.raises(EngineError) as exc:
        compute_subscription_price(3, "weekly", rate)
    assert exc.value.kind is ErrorKind.BELOW_MINIMUM
    assert exc.value.details["minimum_hours"] == 4


def test_update_below_stored_minimum_is_refused():
    with pytest.raises(EngineError) as exc:
        compute_subscription_price(3.5, Frequency.WEEKLY, RATE, minimum_hours=4)
    assert exc.value.kind is ErrorKind.BELOW_MINIMUM


def test_update_at_minimum_is_accepted():
    assert compute_subscription_price(4, Frequency.WEEKLY, RATE, minimum_hours=4).hours == 4.0


def test_quote_raises_hours_to_computed_minimum():
    rate = RateTable(price_per_hour=10, min_hours=4)
    price = quote_subscription(30, FixtureCounts(), 3, Frequency.WEEKLY, rate)
    assert price.hours == 4.0
    assert price.minimum_hours == 4.0
    assert price.bundle_amount_cents == 16000


def test_quote_keeps_requested_hours_above_minimum():
    price = quote_subscription(30, FixtureCounts(), 5, Frequency.BIWEEKLY, RATE)
    assert price.hours == 5.0
    assert price.sessions_per_cycle == 2


def test_quote_without_requested_hours_uses_minimum():
    assert quote_subscription(30, None, None, "weekly", RATE).hours == 3.0


def test_invalid_rate_is_configuration_error():
    with pytest.raises(ValueError):
        compute_subscription_price(4, "weekly", RateTable(price_per_hour=0, min_hours=3))


def test_update_just_under_minimum_is_not_snapped_up():
    rate = RateTable(price_per_hour=10, min_hours=4)
    with pytest.raises(EngineError) as exc:
        compute_subscription_price(3.75, "weekly", rate)
    assert exc.value.kind is ErrorKind.BELOW_MINIMUM
    assert exc.value.details["reason"] == "below_minimum"


@pytest.mark.parametrize("hours", [3.2, 3.25, 4.1])
def test_update_outside_half_hour_steps_is_refused(hours):
    with pytest.raises(EngineError) as exc:
        compute_subscription_price(hours, Frequency.WEEKLY, RATE)
    assert exc.value.kind is ErrorKind.BELOW_MINIMUM
    assert exc.value.details["reason"] == "not_half_hour_step"


@pytest.mark.parametrize("hours", [None, 0, -3, float("nan"), float("inf")])
def test_update_without_valid_hours_is_refused(hours):
    with pytest.raises(EngineError) as exc:
        compute_subscription_price(hours, Frequency.WEEKLY, RATE)
    assert exc.value.details["reason"] == "invalid"


def test_update_half_hour_step_above_minimum_is_accepted():
    assert compute_subscription_price(3.5, Frequency.WEEKLY, RATE).hours == 3.5
