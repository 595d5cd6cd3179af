import logging
import threading
from datetime import timedelta

from parking.utils.time_utils import duration_minutes, elapsed_seconds, format_duration
from services.billing import BillingService
from services.clock import SystemClock
from services.domain import FacilityStats, Occupant, SlotStatus, Transaction
from services.exceptions import PersistenceError, SlotNotOccupied
from services.ledger import DEFAULT_DURATION_BUCKETS, VisitLedger, duration_histogram
from services.slot_allocator import SlotAllocator

logger = logging.getLogger(__name__)


def slot_labels(count, prefix="A"):
    return [f"{prefix}{i:02d}" for i in range(1, count + 1)]


class AllocationService:
    """Owns the slot registry and visit ledger of one facility.

    All mutations run under a single lock. State is written through the
    injected store once ``save_batch`` mutations are pending, and always
    before a checked-out slot is released.
    """

    def __init__(
        self, store, tariff, clock=None, save_batch=1, slots=None, transactions=None
    ):
        self.store = store
        self.tariff = tariff
        self.clock = clock or SystemClock()
        self.save_batch = max(int(save_batch), 1)
        self.billing = BillingService(tariff)
        self.registry = SlotAllocator(slots)
        self.ledger = VisitLedger(tariff.min_fee, transactions)
        self._lock = threading.RLock()
        self._pending = 0

    @classmethod
    def open(
        cls, store, tariff, clock=None, save_batch=1, initial_slots=24, prefix="A"
    ):
        """Load a facility from ``store``, provisioning slots when it is empty."""
        slots, transactions = store.load_state()
        service = cls(
            store,
            tariff,
            clock=clock,
            save_batch=save_batch,
            slots=slots,
            transactions=transactions,
        )
        if not slots:
            with service._lock:
                for label in slot_labels(initial_slots, prefix):
                    service.registry.add_slot(label)
                service.flush(force=True)
            logger.info(f"Provisioned {initial_slots} slots.")
        return service

    # =============================================
    # Arrival & Departure
    # =============================================

    def check_in(self, plate, driver_name, driver_phone, requested_slot=None):
        with self._lock:
            slot = None
            if requested_slot:
                slot = self.registry.get(requested_slot)
                if not slot.is_available:
                    logger.info(
                        f"Requested slot {slot.number} is {slot.status.value}; "
                        "using first available slot."
                    )
                    slot = None
            if slot is None:
                slot = self.registry.find_first_available()

            occupant = Occupant(
                plate_number=plate.strip().upper(),
                driver_name=driver_name.strip(),
                driver_phone=driver_phone.strip(),
                entry_time=self.clock.now(),
                slot_id=slot.id,
            )
            self.registry.assign(slot.id, occupant)
            logger.info(f"{occupant.plate_number} checked in to slot {slot.number}.")
            self._mark_dirty()
            return occupant

    def check_out(self, slot_id):
        with self._lock:
            slot = self.registry.get(slot_id)
            if slot.status != SlotStatus.OCCUPIED:
                raise SlotNotOccupied(
                    f"Slot {slot.number} has no vehicle to check out."
                )

            occupant = slot.occupant
            exit_time = self.clock.now()
            transaction = Transaction(
                plate_number=occupant.plate_number,
                driver_name=occupant.driver_name,
                entry_time=occupant.entry_time,
                exit_time=exit_time,
                duration_minutes=duration_minutes(occupant.entry_time, exit_time),
                total_fee=self.billing.fee(occupant.entry_time, exit_time),
                slot_number=slot.number,
                payment_date=exit_time,
            )
            self.ledger.append(transaction)
            try:
                self.flush(force=True)
            except PersistenceError:
                self.ledger.discard(transaction.id)
                logger.error(
                    f"Checkout of {occupant.plate_number} from slot {slot.number} "
                    "not recorded; slot left occupied.",
                    exc_info=True,
                )
                raise

            self.registry.release(slot_id)
            logger.info(
                f"{occupant.plate_number} checked out of slot {slot.number}: "
                f"{transaction.duration_minutes} min, {transaction.total_fee} RWF."
            )
            self._mark_dirty()
            return transaction

    # =============================================
    # Administration
    # =============================================

    def add_slot(self, label):
        with self._lock:
            slot = self.registry.add_slot(label)
            self._mark_dirty()
            return slot

    def forced_release(self, slot_id, confirm=False):
        if not confirm:
            raise ValueError("Forced release discards the visit; pass confirm=True.")
        with self._lock:
            occupant = self.registry.forced_release(slot_id)
            self._mark_dirty()
            return occupant

    def edit_transaction(self, transaction_id, **patch):
        with self._lock:
            transaction = self.ledger.edit(transaction_id, **patch)
            self._mark_dirty()
            return transaction

    def delete_transaction(self, transaction_id):
        with self._lock:
            transaction = self.ledger.delete(transaction_id)
            self._mark_dirty()
            return transaction

    def factory_reset(self, slot_count, prefix="A"):
        """Drop every slot, visit and transaction and provision fresh slots."""
        with self._lock:
            self.registry = SlotAllocator()
            self.ledger.clear()
            for label in slot_labels(slot_count, prefix):
                self.registry.add_slot(label)
            self.flush(force=True)
            logger.warning(f"Facility reset to {slot_count} empty slots.")

    # =============================================
    # Read-only projections
    # =============================================

    def stats(self):
        with self._lock:
            counts = self.registry.count_by_status()
            return FacilityStats(
                total_revenue=self.ledger.revenue_total(),
                total_entries=self.ledger.count_all() + counts[SlotStatus.OCCUPIED],
                available_slots=counts[SlotStatus.AVAILABLE],
                occupied_slots=counts[SlotStatus.OCCUPIED],
                total_slots=len(self.registry),
            )

    def live_board(self, now=None):
        """Per-slot view with live fee and elapsed time for occupied slots."""
        with self._lock:
            slots = self.registry.slots
            now = now or self.clock.now()
            board = []
            for slot in slots:
                row = {
                    "slot": slot,
                    "occupant": slot.occupant,
                    "fee": None,
                    "duration": None,
                }
                if slot.occupant is not None:
                    row["fee"] = self.billing.fee(slot.occupant.entry_time, now)
                    row["duration"] = format_duration(slot.occupant.entry_time, now)
                board.append(row)
            return board

    def search_active(self, query=""):
        query = (query or "").strip().lower()
        with self._lock:
            occupied = self.registry.occupied_slots()
        return [
            slot
            for slot in occupied
            if query in slot.occupant.plate_number.lower()
            or query in slot.occupant.driver_name.lower()
        ]

    def active_duration_histogram(self, now=None, buckets=DEFAULT_DURATION_BUCKETS):
        with self._lock:
            occupants = self.registry.active_occupants()
            now = now or self.clock.now()
        durations = [
            timedelta(seconds=elapsed_seconds(o.entry_time, now)) for o in occupants
        ]
        return duration_histogram(durations, buckets)

    def snapshot(self, recent=10):
        """Aggregate stats plus the most recent transactions."""
        with self._lock:
            return {
                "stats": self.stats(),
                "transactions": self.ledger.recent(recent),
            }

    # =============================================
    # Persistence
    # =============================================

    def _mark_dirty(self):
        """Count a mutation and write state once the batch is full.

        A failed batched write leaves the state pending for the next flush.
        """
        self._pending += 1
        if self._pending < self.save_batch:
            return
        try:
            self.flush()
        except PersistenceError:
            logger.error(
                f"Saving facility state failed; {self._pending} changes pending.",
                exc_info=True,
            )

    def flush(self, force=False):
        with self._lock:
            if not (force or self._pending):
                return
            self.store.save_state(self.registry.slots, self.ledger.transactions)
            self._pending = 0

    def close(self):
        self.flush()
