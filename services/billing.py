from parking.utils.time_utils import calculate_hours, format_duration


def compute_fee(entry_time, now, hourly_rate, min_fee):
    """Fee for a visit that started at ``entry_time``, as of ``now``.

    Every started hour is billed in full, and the result is never below
    ``min_fee``. A ``now`` earlier than ``entry_time`` raises
    ``InvalidDuration``.
    """
    billed = calculate_hours(entry_time, now) * hourly_rate
    return max(billed, min_fee)


class BillingService:
    """Applies one facility tariff to open visits."""

    def __init__(self, tariff):
        self.tariff = tariff

    def fee(self, entry_time, now):
        return compute_fee(
            entry_time, now, self.tariff.hourly_rate, self.tariff.min_fee
        )

    def quote(self, occupant, now):
        """Live quote for an occupant; identical to the fee charged at exit."""
        return {
            "fee": self.fee(occupant.entry_time, now),
            "hours": calculate_hours(occupant.entry_time, now),
            "duration": format_duration(occupant.entry_time, now),
        }
