from datetime import timedelta

import pytest

from parking.models import ActiveVisit, LedgerEntry, Slot
from parking.state_store import DatabaseStateStore
from services.domain import Occupant, ParkingSlot, SlotStatus, Transaction
from services.exceptions import PersistenceError
from services.persistence import (
    STORAGE_KEY_SLOTS,
    InMemoryStateStore,
    slot_from_record,
    slot_to_record,
)

from .conftest import START


def sample_state():
    free = ParkingSlot(number="A01")
    taken = ParkingSlot(number="A02")
    taken.occupant = Occupant(
        plate_number="RAB123A",
        driver_name="Jean",
        driver_phone="+250788000000",
        entry_time=START + timedelta(microseconds=123456),
        slot_id=taken.id,
    )
    closed = ParkingSlot(number="A03", maintenance=True)
    transaction = Transaction(
        plate_number="RAC999C",
        driver_name="Aline",
        entry_time=START - timedelta(hours=2),
        exit_time=START - timedelta(minutes=15),
        duration_minutes=105,
        total_fee=1000,
        slot_number="A01",
        payment_date=START - timedelta(minutes=15),
    )
    return [free, taken, closed], [transaction]


def assert_same_state(loaded, expected):
    loaded_slots, loaded_transactions = loaded
    slots, transactions = expected
    assert [slot_to_record(s) for s in loaded_slots] == [
        slot_to_record(s) for s in slots
    ]
    assert [s.status for s in loaded_slots] == [
        SlotStatus.AVAILABLE,
        SlotStatus.OCCUPIED,
        SlotStatus.MAINTENANCE,
    ]
    assert loaded_slots[1].occupant == slots[1].occupant
    assert loaded_transactions == transactions


def test_in_memory_store_round_trips_every_field():
    store = InMemoryStateStore()
    state = sample_state()
    store.save_state(*state)
    assert_same_state(store.load_state(), state)


def test_empty_store_loads_nothing():
    assert InMemoryStateStore().load_state() == ([], [])


def test_corrupt_document_raises():
    store = InMemoryStateStore({STORAGE_KEY_SLOTS: "{not json"})
    with pytest.raises(PersistenceError):
        store.load_state()


def test_occupied_record_without_vehicle_is_rejected():
    record = slot_to_record(ParkingSlot(number="A01"))
    record["status"] = "OCCUPIED"
    with pytest.raises(PersistenceError):
        slot_from_record(record)


@pytest.mark.django_db
def test_database_store_round_trips_every_field():
    store = DatabaseStateStore()
    state = sample_state()
    store.save_state(*state)
    assert Slot.objects.count() == 3
    assert ActiveVisit.objects.count() == 1
    assert LedgerEntry.objects.count() == 1
    assert_same_state(store.load_state(), state)


@pytest.mark.django_db
def test_database_store_replaces_previous_state():
    store = DatabaseStateStore()
    slots, transactions = sample_state()
    store.save_state(slots, transactions)

    released = slots[1].occupant
    slots[1].occupant = None
    store.save_state(slots[:2], [])

    loaded_slots, loaded_transactions = store.load_state()
    assert [s.number for s in loaded_slots] == ["A01", "A02"]
    assert all(s.status == SlotStatus.AVAILABLE for s in loaded_slots)
    assert loaded_transactions == []
    assert not ActiveVisit.objects.filter(id=released.id).exists()


@pytest.mark.django_db
def test_database_store_keeps_ledger_order():
    store = DatabaseStateStore()
    slots, (first,) = sample_state()
    second = Transaction(
        plate_number="RAA000A",
        driver_name="Eric",
        entry_time=START - timedelta(hours=1),
        exit_time=START,
        duration_minutes=60,
        total_fee=500,
        slot_number="A02",
        payment_date=START,
    )
    store.save_state(slots, [second, first])
    assert [t.plate_number for t in store.load_state()[1]] == ["RAA000A", "RAC999C"]


@pytest.mark.django_db
def test_inconsistent_rows_are_rejected():
    Slot.objects.create(id="s1", number="A01", status="OCCUPIED", position=0)
    with pytest.raises(PersistenceError):
        DatabaseStateStore().load_state()
