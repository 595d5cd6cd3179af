import io

import pytest
from django.core.management import call_command

from parking.facility import get_facility
from parking.models import LedgerEntry, Slot

pytestmark = pytest.mark.django_db


def test_init_parking_data_is_idempotent(fresh_facility_module):
    out = io.StringIO()
    call_command("init_parking_data", slots=26, stdout=out)
    call_command("init_parking_data", slots=26, stdout=out)
    assert Slot.objects.count() == 26
    assert "Created Slot A25" in out.getvalue()
    assert out.getvalue().count("Created Slot A26") == 1


def test_init_parking_data_reset(fresh_facility_module):
    facility = get_facility()
    facility.check_in("RAB123A", "Jean", "0788000000")
    call_command(
        "init_parking_data", slots=4, prefix="C", reset=True, stdout=io.StringIO()
    )
    assert list(Slot.objects.values_list("number", flat=True)) == [
        "C01",
        "C02",
        "C03",
        "C04",
    ]
    assert LedgerEntry.objects.count() == 0


def test_live_board(installed_facility, clock):
    installed_facility.check_in("RAB123A", "Jean", "0788000000")
    clock.advance(minutes=61)
    out = io.StringIO()
    call_command("live_board", iterations=1, stdout=out)
    text = out.getvalue()
    assert "1/3 occupied (33%)" in text
    assert "BAY A01" in text
    assert "1,000 RWF" in text
