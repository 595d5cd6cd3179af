from datetime import datetime, timezone

import pytest

from services.allocation import AllocationService
from services.clock import ManualClock
from services.domain import Tariff
from services.persistence import InMemoryStateStore

START = datetime(2025, 3, 14, 8, 0, tzinfo=timezone.utc)


@pytest.fixture
def clock():
    return ManualClock(START)


@pytest.fixture
def tariff():
    return Tariff(hourly_rate=500, min_fee=300)


@pytest.fixture
def store():
    return InMemoryStateStore()


@pytest.fixture
def facility(store, tariff, clock):
    return AllocationService.open(store, tariff, clock=clock, initial_slots=3)


@pytest.fixture
def installed_facility(facility, monkeypatch):
    """Make ``facility`` the process-wide instance used by the views."""
    monkeypatch.setattr("parking.facility._facility", facility)
    return facility


@pytest.fixture
def fresh_facility_module(monkeypatch):
    monkeypatch.setattr("parking.facility._facility", None)
