from datetime import timedelta

import pytest

from parking.utils.time_utils import calculate_hours, duration_minutes, format_duration
from services.billing import BillingService, compute_fee
from services.domain import DurationBreakdown, Occupant, Tariff
from services.exceptions import InvalidDuration

from .conftest import START


def test_one_minute_bills_a_full_hour():
    assert compute_fee(START, START + timedelta(minutes=1), 500, 300) == 500


def test_minimum_fee_dominates_short_visit():
    assert compute_fee(START, START + timedelta(minutes=45), 500, 1000) == 1000


def test_zero_elapsed_charges_minimum_fee():
    assert compute_fee(START, START, 500, 300) == 300


def test_partial_hour_rounds_up():
    assert compute_fee(START, START + timedelta(hours=1), 500, 300) == 500
    assert compute_fee(START, START + timedelta(hours=1, seconds=1), 500, 300) == 1000
    assert compute_fee(START, START + timedelta(hours=2, minutes=59), 500, 300) == 1500


def test_fee_is_a_non_decreasing_step_function():
    fees = [
        compute_fee(START, START + timedelta(minutes=m), 500, 300) for m in range(301)
    ]
    for m in range(1, len(fees)):
        assert fees[m] >= fees[m - 1]
        if fees[m] > fees[m - 1]:
            # only the first minute past a whole hour raises the fee
            assert (m - 1) % 60 == 0


def test_negative_duration_is_an_error():
    with pytest.raises(InvalidDuration):
        compute_fee(START, START - timedelta(seconds=1), 500, 300)
    with pytest.raises(InvalidDuration):
        format_duration(START, START - timedelta(minutes=5))


def test_format_duration_truncates():
    now = START + timedelta(hours=1, minutes=2, seconds=5, milliseconds=900)
    assert format_duration(START, now) == DurationBreakdown(1, 2, 5)
    assert str(format_duration(START, now)) == "1h 2m 5s"


def test_duration_minutes_floors():
    assert duration_minutes(START, START + timedelta(seconds=119)) == 1
    assert calculate_hours(START, START + timedelta(seconds=119)) == 1


def test_quote_matches_fee():
    billing = BillingService(Tariff(hourly_rate=500, min_fee=300))
    occupant = Occupant("RAB123A", "Jean", "0788000000", START, "slot-1")
    quote = billing.quote(occupant, START + timedelta(minutes=75))
    assert quote["fee"] == 1000
    assert quote["hours"] == 2
    assert quote["duration"] == DurationBreakdown(1, 15, 0)
