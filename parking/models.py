from django.db import models


class Slot(models.Model):
    STATUS_CHOICES = (
        ("AVAILABLE", "Available"),
        ("OCCUPIED", "Occupied"),
        ("MAINTENANCE", "Maintenance"),
    )

    id = models.CharField(primary_key=True, max_length=64)
    number = models.CharField(max_length=20)
    status = models.CharField(
        max_length=12, choices=STATUS_CHOICES, default="AVAILABLE"
    )
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ("position",)

    def __str__(self):
        return f"Slot {self.number}"


class ActiveVisit(models.Model):
    id = models.CharField(primary_key=True, max_length=64)
    slot = models.OneToOneField(
        Slot, on_delete=models.CASCADE, related_name="occupant"
    )
    plate_number = models.CharField(max_length=20)
    driver_name = models.CharField(max_length=100)
    driver_phone = models.CharField(max_length=20)
    entry_time = models.DateTimeField()

    def __str__(self):
        return f"{self.plate_number} @ {self.slot}"


class LedgerEntry(models.Model):
    id = models.CharField(primary_key=True, max_length=64)
    plate_number = models.CharField(max_length=20)
    driver_name = models.CharField(max_length=100)
    entry_time = models.DateTimeField()
    exit_time = models.DateTimeField()
    duration_minutes = models.IntegerField()
    total_fee = models.IntegerField()
    payment_date = models.DateTimeField(null=True, blank=True)
    slot_number = models.CharField(max_length=20)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ("position",)
        verbose_name_plural = "ledger entries"

    def __str__(self):
        return f"{self.plate_number} ({self.total_fee} RWF)"
