import logging

from django.db import DatabaseError, transaction

from services.domain import Occupant, ParkingSlot, SlotStatus, Transaction
from services.exceptions import PersistenceError
from services.persistence import StateStore

from .models import ActiveVisit, LedgerEntry, Slot

logger = logging.getLogger(__name__)


class DatabaseStateStore(StateStore):
    """Facility state kept in the Django database, saved in one transaction."""

    def load_state(self):
        try:
            slot_rows = list(
                Slot.objects.select_related("occupant").order_by("position")
            )
            ledger_rows = list(LedgerEntry.objects.order_by("position"))
        except DatabaseError as e:
            raise PersistenceError(f"Loading facility state failed: {e}") from e

        slots = [self._slot_from_row(row) for row in slot_rows]
        transactions = [
            Transaction(
                id=row.id,
                plate_number=row.plate_number,
                driver_name=row.driver_name,
                entry_time=row.entry_time,
                exit_time=row.exit_time,
                duration_minutes=row.duration_minutes,
                total_fee=row.total_fee,
                payment_date=row.payment_date,
                slot_number=row.slot_number,
            )
            for row in ledger_rows
        ]
        return slots, transactions

    def _slot_from_row(self, row):
        try:
            visit = row.occupant
        except ActiveVisit.DoesNotExist:
            visit = None

        if (row.status == SlotStatus.OCCUPIED.value) != (visit is not None):
            raise PersistenceError(f"Slot {row.number} has inconsistent occupancy.")

        occupant = None
        if visit is not None:
            occupant = Occupant(
                id=visit.id,
                plate_number=visit.plate_number,
                driver_name=visit.driver_name,
                driver_phone=visit.driver_phone,
                entry_time=visit.entry_time,
                slot_id=row.id,
            )
        return ParkingSlot(
            id=row.id,
            number=row.number,
            occupant=occupant,
            maintenance=row.status == SlotStatus.MAINTENANCE.value,
        )

    def save_state(self, slots, transactions):
        try:
            with transaction.atomic():
                self._save_slots(slots)
                self._save_ledger(transactions)
        except DatabaseError as e:
            logger.error(f"Saving facility state failed: {e}", exc_info=True)
            raise PersistenceError(f"Saving facility state failed: {e}") from e

    def _save_slots(self, slots):
        ids = [slot.id for slot in slots]
        ActiveVisit.objects.all().delete()
        Slot.objects.exclude(id__in=ids).delete()
        Slot.objects.bulk_create(
            [
                Slot(id=s.id, number=s.number, status=s.status.value, position=i)
                for i, s in enumerate(slots)
            ],
            update_conflicts=True,
            unique_fields=["id"],
            update_fields=["number", "status", "position"],
        )
        ActiveVisit.objects.bulk_create(
            [
                ActiveVisit(
                    id=s.occupant.id,
                    slot_id=s.id,
                    plate_number=s.occupant.plate_number,
                    driver_name=s.occupant.driver_name,
                    driver_phone=s.occupant.driver_phone,
                    entry_time=s.occupant.entry_time,
                )
                for s in slots
                if s.occupant is not None
            ]
        )

    def _save_ledger(self, transactions):
        LedgerEntry.objects.exclude(id__in=[t.id for t in transactions]).delete()
        LedgerEntry.objects.bulk_create(
            [
                LedgerEntry(
                    id=t.id,
                    plate_number=t.plate_number,
                    driver_name=t.driver_name,
                    entry_time=t.entry_time,
                    exit_time=t.exit_time,
                    duration_minutes=t.duration_minutes,
                    total_fee=t.total_fee,
                    payment_date=t.payment_date,
                    slot_number=t.slot_number,
                    position=i,
                )
                for i, t in enumerate(transactions)
            ],
            update_conflicts=True,
            unique_fields=["id"],
            update_fields=[
                "plate_number",
                "driver_name",
                "entry_time",
                "exit_time",
                "duration_minutes",
                "total_fee",
                "payment_date",
                "slot_number",
                "position",
            ],
        )
