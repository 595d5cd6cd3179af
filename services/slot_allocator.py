import logging
from collections import Counter

from services.domain import ParkingSlot, SlotStatus
from services.exceptions import NoCapacity, NotFound, SlotNotOccupied, SlotUnavailable

logger = logging.getLogger(__name__)


class SlotAllocator:
    """Registry of parking slots kept in insertion order.

    Enforces one vehicle per slot. Callers are expected to serialize
    mutations; see ``AllocationService``.
    """

    def __init__(self, slots=None):
        self._slots = {}
        for slot in slots or []:
            self._slots[slot.id] = slot

    @property
    def slots(self):
        return list(self._slots.values())

    def __len__(self):
        return len(self._slots)

    def get(self, slot_id):
        try:
            return self._slots[slot_id]
        except KeyError:
            raise NotFound(f"Slot '{slot_id}' does not exist.")

    def add_slot(self, label):
        label = str(label).strip()
        if any(slot.number == label for slot in self._slots.values()):
            logger.warning(f"Adding slot with duplicate label '{label}'.")
        slot = ParkingSlot(number=label)
        self._slots[slot.id] = slot
        logger.info(f"Slot {slot.number} added (ID: {slot.id}).")
        return slot

    def find_first_available(self):
        for slot in self._slots.values():
            if slot.is_available:
                return slot
        raise NoCapacity()

    def assign(self, slot_id, occupant):
        slot = self.get(slot_id)
        if not slot.is_available:
            raise SlotUnavailable(
                f"Slot {slot.number} is {slot.status.value.lower()}."
            )
        if any(s.occupant.id == occupant.id for s in self.occupied_slots()):
            raise SlotUnavailable(f"Occupant {occupant.id} is already parked.")
        slot.occupant = occupant
        return slot

    def release(self, slot_id):
        slot = self.get(slot_id)
        if slot.status != SlotStatus.OCCUPIED:
            raise SlotNotOccupied(f"Slot {slot.number} has no vehicle to release.")
        occupant = slot.occupant
        slot.occupant = None
        return occupant

    def forced_release(self, slot_id):
        """Free an occupied slot without billing; the occupant is discarded."""
        occupant = self.release(slot_id)
        logger.warning(
            f"Forced release of slot {self._slots[slot_id].number}: "
            f"{occupant.plate_number} removed without a transaction."
        )
        return occupant

    def occupied_slots(self):
        return [slot for slot in self._slots.values() if slot.occupant is not None]

    def active_occupants(self):
        return [slot.occupant for slot in self.occupied_slots()]

    def count_by_status(self):
        counts = Counter(slot.status for slot in self._slots.values())
        return {status: counts.get(status, 0) for status in SlotStatus}
