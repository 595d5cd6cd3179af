import csv
import io

import pytest
from django.test import Client

from parking.models import Slot

pytestmark = pytest.mark.django_db


def check_in(client, plate="RAB123A", **extra):
    data = {"plate_number": plate, "driver_name": "Jean", "driver_phone": "0788000000"}
    data.update(extra)
    return client.post("/checkin/", data)


def test_home_and_stats(client, installed_facility):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["facility"]["name"] == "SmartPark Rubavu"
    assert response.json()["stats"]["total_slots"] == 3
    assert client.get("/stats/").json()["available_slots"] == 3


def test_check_in_and_check_out(client, installed_facility, clock):
    response = check_in(client, plate="rab 123a")
    assert response.status_code == 201
    occupant = response.json()
    assert occupant["plate_number"] == "RAB 123A"

    clock.advance(minutes=45)
    slots = client.get("/slots/").json()["slots"]
    assert slots[0]["status"] == "OCCUPIED"
    assert slots[0]["fee"] == 500
    assert slots[0]["duration"] == "0h 45m 0s"
    assert "occupant" not in slots[1]

    response = client.post(f"/checkout/{occupant['slot_id']}/")
    assert response.status_code == 200
    assert response.json()["total_fee"] == 500
    assert response.json()["duration_minutes"] == 45
    assert client.get("/stats/").json()["total_revenue"] == 500


def test_invalid_check_in_form(client, installed_facility):
    response = check_in(client, plate="!!")
    assert response.status_code == 400
    assert "plate_number" in response.json()["errors"]
    assert installed_facility.stats().occupied_slots == 0


def test_engine_errors_become_json(client, installed_facility):
    free_slot = installed_facility.registry.slots[0].id
    response = client.post(f"/checkout/{free_slot}/")
    assert response.status_code == 409
    assert response.json()["error"] == "SlotNotOccupied"

    response = client.post("/checkout/missing/")
    assert response.status_code == 404
    assert response.json()["error"] == "NotFound"

    for plate in ("RAA111A", "RAB222B", "RAC333C"):
        check_in(client, plate=plate)
    response = check_in(client, plate="RAD444D")
    assert response.status_code == 409
    assert response.json()["error"] == "NoCapacity"


def test_posts_require_csrf_token_issued_by_slot_board(installed_facility):
    csrf_client = Client(enforce_csrf_checks=True)
    assert csrf_client.get("/slots/").status_code == 200
    token = csrf_client.cookies["csrftoken"].value
    data = {
        "plate_number": "RAB123A",
        "driver_name": "Jean",
        "driver_phone": "0788000000",
    }

    assert csrf_client.post("/checkin/", data).status_code == 403
    response = csrf_client.post("/checkin/", data, HTTP_X_CSRFTOKEN=token)
    assert response.status_code == 201
    assert installed_facility.stats().occupied_slots == 1


def test_get_not_allowed_on_mutations(client, installed_facility):
    assert client.get("/checkin/").status_code == 405


def test_add_slot_and_force_release(client, installed_facility):
    response = client.post("/slots/add/", {"label": "b01"})
    assert response.status_code == 201
    assert response.json()["number"] == "B01"

    slot_id = check_in(client).json()["slot_id"]
    assert client.post(f"/slots/{slot_id}/release/").status_code == 400
    response = client.post(f"/slots/{slot_id}/release/", {"confirm": "yes"})
    assert response.status_code == 200
    assert response.json()["discarded"]["plate_number"] == "RAB123A"
    assert installed_facility.stats().occupied_slots == 0
    assert len(installed_facility.ledger) == 0


def test_vehicles_search(client, installed_facility):
    check_in(client, plate="RAA111A")
    check_in(client, plate="RAB222B")
    data = client.get("/vehicles/", {"q": "rab"}).json()
    assert data["count"] == 1
    assert data["vehicles"][0]["plate_number"] == "RAB222B"
    assert data["vehicles"][0]["fee"] == 300


def settle(client, clock, plate, minutes):
    slot_id = check_in(client, plate=plate).json()["slot_id"]
    clock.advance(minutes=minutes)
    return client.post(f"/checkout/{slot_id}/").json()


def test_ledger_edit_delete(client, installed_facility, clock):
    first = settle(client, clock, "RAA111A", 30)
    second = settle(client, clock, "RAB222B", 90)

    data = client.get("/ledger/", {"q": "raa"}).json()
    assert [t["id"] for t in data["transactions"]] == [first["id"]]

    response = client.post(
        f"/ledger/{first['id']}/edit/", {"driver_name": "Aline", "total_fee": "700"}
    )
    assert response.status_code == 200
    assert response.json()["driver_name"] == "Aline"
    assert response.json()["total_fee"] == 700
    assert response.json()["plate_number"] == "RAA111A"

    assert client.post(f"/ledger/{second['id']}/delete/").status_code == 200
    assert client.post(f"/ledger/{second['id']}/delete/").status_code == 404
    assert client.get("/ledger/").json()["count"] == 1


def test_reports(client, installed_facility, clock):
    settle(client, clock, "RAA111A", 60)
    check_in(client, plate="RAB222B")
    data = client.get("/reports/", {"days": "3"}).json()
    assert len(data["revenue_by_day"]) == 3
    assert len(data["entries_by_hour"]) == 24
    assert data["duration_distribution"]["Mid (1-3h)"] == 1
    assert data["active_duration_distribution"]["Short (<1h)"] == 1


def test_export_and_receipt(client, installed_facility, clock):
    transaction = settle(client, clock, "RAA111A", 30)

    response = client.get("/ledger/export/")
    assert response.status_code == 200
    assert response["Content-Type"].startswith("text/csv")
    assert "SmartPark_Ledger_" in response["Content-Disposition"]
    rows = list(csv.reader(io.StringIO(response.content.decode())))
    assert rows[1][0] == "RAA111A"

    response = client.get(f"/ledger/{transaction['id']}/receipt/")
    assert response.status_code == 200
    assert response.content.startswith(b"%PDF")


def test_insights_fallback(client, installed_facility, monkeypatch):
    monkeypatch.setattr("services.insights.InsightsClient.from_config", lambda: None)
    response = client.get("/insights/")
    assert response.json()["insight"].startswith("Unable to generate insights")


def test_facility_loads_from_database(client, fresh_facility_module):
    response = client.get("/stats/")
    assert response.json()["total_slots"] == 24
    assert Slot.objects.count() == 24
