from datetime import timedelta

from django.utils import timezone


class SystemClock:
    """Wall clock backed by Django's timezone-aware ``now``."""

    def now(self):
        return timezone.now()


class ManualClock:
    """Settable clock for tests and simulations."""

    def __init__(self, start=None):
        self._now = start or timezone.now()

    def now(self):
        return self._now

    def set(self, instant):
        self._now = instant

    def advance(self, **delta):
        self._now = self._now + timedelta(**delta)
        return self._now
