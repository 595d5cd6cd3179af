import json
import logging
from datetime import datetime

from services.domain import Occupant, ParkingSlot, SlotStatus, Transaction
from services.exceptions import PersistenceError

logger = logging.getLogger(__name__)

STORAGE_KEY_SLOTS = "smartpark_slots_v3"
STORAGE_KEY_TRANS = "smartpark_transactions_v3"


def _dump_time(value):
    return value.isoformat() if value is not None else None


def _load_time(value):
    return datetime.fromisoformat(value) if value else None


def occupant_to_record(occupant):
    return {
        "id": occupant.id,
        "plate_number": occupant.plate_number,
        "driver_name": occupant.driver_name,
        "driver_phone": occupant.driver_phone,
        "entry_time": _dump_time(occupant.entry_time),
        "slot_id": occupant.slot_id,
    }


def occupant_from_record(record):
    return Occupant(
        id=record["id"],
        plate_number=record["plate_number"],
        driver_name=record["driver_name"],
        driver_phone=record["driver_phone"],
        entry_time=_load_time(record["entry_time"]),
        slot_id=record["slot_id"],
    )


def slot_to_record(slot):
    return {
        "id": slot.id,
        "number": slot.number,
        "status": slot.status.value,
        "current_car": (
            occupant_to_record(slot.occupant) if slot.occupant is not None else None
        ),
    }


def slot_from_record(record):
    status = SlotStatus(record["status"])
    occupant = record.get("current_car")
    if (status == SlotStatus.OCCUPIED) != (occupant is not None):
        raise PersistenceError(
            f"Slot {record['number']} is {status.value} "
            f"{'with' if occupant else 'without'} a vehicle."
        )
    return ParkingSlot(
        id=record["id"],
        number=record["number"],
        occupant=occupant_from_record(occupant) if occupant else None,
        maintenance=status == SlotStatus.MAINTENANCE,
    )


def transaction_to_record(transaction):
    return {
        "id": transaction.id,
        "plate_number": transaction.plate_number,
        "driver_name": transaction.driver_name,
        "entry_time": _dump_time(transaction.entry_time),
        "exit_time": _dump_time(transaction.exit_time),
        "duration_minutes": transaction.duration_minutes,
        "total_fee": transaction.total_fee,
        "payment_date": _dump_time(transaction.payment_date),
        "slot_number": transaction.slot_number,
    }


def transaction_from_record(record):
    return Transaction(
        id=record["id"],
        plate_number=record["plate_number"],
        driver_name=record["driver_name"],
        entry_time=_load_time(record["entry_time"]),
        exit_time=_load_time(record["exit_time"]),
        duration_minutes=int(record["duration_minutes"]),
        total_fee=int(record["total_fee"]),
        payment_date=_load_time(record.get("payment_date")),
        slot_number=record["slot_number"],
    )


class StateStore:
    """Persistence boundary for the facility.

    ``save_state`` must be all-or-nothing; failures are raised as
    ``PersistenceError`` and never retried here.
    """

    def load_state(self):
        raise NotImplementedError

    def save_state(self, slots, transactions):
        raise NotImplementedError


class InMemoryStateStore(StateStore):
    """Key-value store holding serialized JSON documents."""

    def __init__(self, data=None):
        self.data = data if data is not None else {}

    def load_state(self):
        try:
            slots = json.loads(self.data.get(STORAGE_KEY_SLOTS, "[]"))
            transactions = json.loads(self.data.get(STORAGE_KEY_TRANS, "[]"))
        except ValueError as e:
            raise PersistenceError(f"Stored facility state is corrupt: {e}") from e
        return (
            [slot_from_record(r) for r in slots],
            [transaction_from_record(r) for r in transactions],
        )

    def save_state(self, slots, transactions):
        payload = {
            STORAGE_KEY_SLOTS: json.dumps([slot_to_record(s) for s in slots]),
            STORAGE_KEY_TRANS: json.dumps(
                [transaction_to_record(t) for t in transactions]
            ),
        }
        self.data.update(payload)
        logger.debug(f"Saved {len(slots)} slots and {len(transactions)} transactions.")
