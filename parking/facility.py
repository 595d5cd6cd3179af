import atexit
import logging
import threading

from config import (
    HOURLY_RATE,
    INITIAL_SLOT_COUNT,
    MIN_FEE,
    SLOT_LABEL_PREFIX,
    STATE_SAVE_BATCH,
)
from services.allocation import AllocationService
from services.domain import Tariff

from .state_store import DatabaseStateStore

logger = logging.getLogger(__name__)

_facility = None
_lock = threading.Lock()


def get_facility():
    """Process-wide facility, loaded from the database on first use.

    Each save replaces the whole stored state, so the app must be served by
    a single process. A second worker would overwrite this one's writes.
    """
    global _facility
    with _lock:
        if _facility is None:
            _facility = AllocationService.open(
                DatabaseStateStore(),
                Tariff(hourly_rate=HOURLY_RATE, min_fee=MIN_FEE),
                save_batch=STATE_SAVE_BATCH,
                initial_slots=INITIAL_SLOT_COUNT,
                prefix=SLOT_LABEL_PREFIX,
            )
            logger.info(f"Facility loaded with {len(_facility.registry)} slots.")
        return _facility


def set_facility(service):
    """Replace the process-wide facility, flushing the previous one."""
    global _facility
    with _lock:
        if _facility is not None and _facility is not service:
            _facility.close()
        _facility = service


def close_facility():
    with _lock:
        if _facility is not None:
            _facility.close()


atexit.register(close_facility)
