import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional


def generate_id():
    return str(uuid.uuid4())


class SlotStatus(str, Enum):
    AVAILABLE = "AVAILABLE"
    OCCUPIED = "OCCUPIED"
    MAINTENANCE = "MAINTENANCE"


@dataclass(frozen=True)
class Tariff:
    hourly_rate: int
    min_fee: int


@dataclass(frozen=True)
class Occupant:
    """An open visit: the vehicle currently parked in a slot."""

    plate_number: str
    driver_name: str
    driver_phone: str
    entry_time: datetime
    slot_id: str
    id: str = field(default_factory=generate_id)


@dataclass
class ParkingSlot:
    """A single parking space.

    Status is derived from ``occupant`` so a slot can never hold a vehicle
    while reporting itself available, or the reverse.
    """

    number: str
    id: str = field(default_factory=generate_id)
    occupant: Optional[Occupant] = None
    maintenance: bool = False

    @property
    def status(self):
        if self.occupant is not None:
            return SlotStatus.OCCUPIED
        if self.maintenance:
            return SlotStatus.MAINTENANCE
        return SlotStatus.AVAILABLE

    @property
    def is_available(self):
        return self.status == SlotStatus.AVAILABLE

    def __str__(self):
        return f"Slot {self.number}"


@dataclass(frozen=True)
class Transaction:
    """The settled record of a completed visit."""

    plate_number: str
    driver_name: str
    entry_time: datetime
    exit_time: datetime
    duration_minutes: int
    total_fee: int
    slot_number: str
    payment_date: Optional[datetime] = None
    id: str = field(default_factory=generate_id)


@dataclass(frozen=True)
class DurationBreakdown:
    hours: int
    minutes: int
    seconds: int

    def __str__(self):
        return f"{self.hours}h {self.minutes}m {self.seconds}s"


@dataclass(frozen=True)
class FacilityStats:
    total_revenue: int
    total_entries: int
    available_slots: int
    occupied_slots: int
    total_slots: int

    @property
    def occupancy_rate(self):
        if not self.total_slots:
            return 0
        return round(self.occupied_slots / self.total_slots * 100)

    def as_dict(self):
        return {
            "total_revenue": self.total_revenue,
            "total_entries": self.total_entries,
            "available_slots": self.available_slots,
            "occupied_slots": self.occupied_slots,
            "total_slots": self.total_slots,
            "occupancy_rate": self.occupancy_rate,
        }
