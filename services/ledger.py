import dataclasses
import logging
from collections import OrderedDict, namedtuple
from datetime import timedelta

from services.exceptions import InvalidTransaction, NotFound

logger = logging.getLogger(__name__)


DurationBucket = namedtuple("DurationBucket", ["name", "lower", "upper"])

DEFAULT_DURATION_BUCKETS = (
    DurationBucket("Short (<1h)", timedelta(0), timedelta(hours=1)),
    DurationBucket("Mid (1-3h)", timedelta(hours=1), timedelta(hours=3)),
    DurationBucket("Long (>3h)", timedelta(hours=3), None),
)


def classify_duration(duration, buckets=DEFAULT_DURATION_BUCKETS):
    """Name of the ``[lower, upper)`` bucket holding ``duration``.

    The last bucket is unbounded above. Durations below the first lower
    bound fall into the first bucket.
    """
    for bucket in buckets[:-1]:
        if bucket.upper is not None and duration < bucket.upper:
            return bucket.name
    return buckets[-1].name


def duration_histogram(durations, buckets=DEFAULT_DURATION_BUCKETS):
    counts = OrderedDict((bucket.name, 0) for bucket in buckets)
    for duration in durations:
        counts[classify_duration(duration, buckets)] += 1
    return counts


def _local(instant, tz):
    return instant.astimezone(tz) if tz is not None else instant


class VisitLedger:
    """Ordered, append-only record of settled visits."""

    def __init__(self, min_fee, transactions=None):
        self.min_fee = min_fee
        self._entries = list(transactions or [])

    def __iter__(self):
        return iter(self._entries)

    def __len__(self):
        return len(self._entries)

    @property
    def transactions(self):
        return list(self._entries)

    def append(self, transaction):
        if transaction.exit_time <= transaction.entry_time:
            raise InvalidTransaction(
                f"Exit time {transaction.exit_time} must be later than "
                f"entry time {transaction.entry_time}."
            )
        if transaction.total_fee < self.min_fee:
            raise InvalidTransaction(
                f"Fee {transaction.total_fee} is below the minimum fee {self.min_fee}."
            )
        if any(t.id == transaction.id for t in self._entries):
            raise InvalidTransaction(f"Transaction {transaction.id} already recorded.")
        self._entries.append(transaction)
        return transaction

    def get(self, transaction_id):
        for transaction in self._entries:
            if transaction.id == transaction_id:
                return transaction
        raise NotFound(f"Transaction '{transaction_id}' does not exist.")

    def recent(self, n):
        return self._entries[-n:] if n > 0 else []

    def search(self, query):
        query = (query or "").strip()
        if not query:
            return self.transactions
        return [
            t
            for t in self._entries
            if query.upper() in t.plate_number
            or query.lower() in t.driver_name.lower()
        ]

    # =============================================
    # Aggregates
    # =============================================

    def revenue_total(self):
        return sum(t.total_fee for t in self._entries)

    def count_all(self):
        return len(self._entries)

    def revenue_by_day(self, start, end, tz=None):
        """Revenue per calendar day of exit, ``start`` to ``end`` inclusive."""
        days = OrderedDict()
        day = start
        while day <= end:
            days[day] = 0
            day += timedelta(days=1)
        for t in self._entries:
            exit_day = _local(t.exit_time, tz).date()
            if exit_day in days:
                days[exit_day] += t.total_fee
        return days

    def revenue_last_days(self, today, days=7, tz=None):
        return self.revenue_by_day(today - timedelta(days=days - 1), today, tz=tz)

    def entries_by_hour_of_day(self, hours=range(24), tz=None):
        counts = OrderedDict((hour, 0) for hour in hours)
        for t in self._entries:
            hour = _local(t.entry_time, tz).hour
            if hour in counts:
                counts[hour] += 1
        return counts

    def duration_histogram(self, buckets=DEFAULT_DURATION_BUCKETS):
        return duration_histogram(
            (timedelta(minutes=t.duration_minutes) for t in self._entries), buckets
        )

    # =============================================
    # Administrative corrections
    # =============================================

    def edit(self, transaction_id, **patch):
        """Replace fields of a recorded transaction.

        Fee and duration are not recomputed; the caller supplies consistent
        values.
        """
        if "id" in patch:
            raise InvalidTransaction("Transaction id cannot be changed.")
        current = self.get(transaction_id)
        unknown = set(patch) - {f.name for f in dataclasses.fields(current)}
        if unknown:
            raise InvalidTransaction(
                f"Unknown transaction fields: {', '.join(sorted(unknown))}."
            )
        updated = dataclasses.replace(current, **patch)
        self._entries[self._entries.index(current)] = updated
        logger.warning(f"Transaction {transaction_id} edited: {sorted(patch)}.")
        return updated

    def delete(self, transaction_id):
        transaction = self.get(transaction_id)
        self._entries.remove(transaction)
        logger.warning(
            f"Transaction {transaction_id} ({transaction.plate_number}) deleted."
        )
        return transaction

    def discard(self, transaction_id):
        """Undo an append whose persistence failed."""
        self._entries = [t for t in self._entries if t.id != transaction_id]

    def clear(self):
        self._entries = []
