from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Slot",
            fields=[
                (
                    "id",
                    models.CharField(max_length=64, primary_key=True, serialize=False),
                ),
                ("number", models.CharField(max_length=20)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("AVAILABLE", "Available"),
                            ("OCCUPIED", "Occupied"),
                            ("MAINTENANCE", "Maintenance"),
                        ],
                        default="AVAILABLE",
                        max_length=12,
                    ),
                ),
                ("position", models.PositiveIntegerField(default=0)),
            ],
            options={
                "ordering": ("position",),
            },
        ),
        migrations.CreateModel(
            name="LedgerEntry",
            fields=[
                (
                    "id",
                    models.CharField(max_length=64, primary_key=True, serialize=False),
                ),
                ("plate_number", models.CharField(max_length=20)),
                ("driver_name", models.CharField(max_length=100)),
                ("entry_time", models.DateTimeField()),
                ("exit_time", models.DateTimeField()),
                ("duration_minutes", models.IntegerField()),
                ("total_fee", models.IntegerField()),
                ("payment_date", models.DateTimeField(blank=True, null=True)),
                ("slot_number", models.CharField(max_length=20)),
                ("position", models.PositiveIntegerField(default=0)),
            ],
            options={
                "ordering": ("position",),
                "verbose_name_plural": "ledger entries",
            },
        ),
        migrations.CreateModel(
            name="ActiveVisit",
            fields=[
                (
                    "id",
                    models.CharField(max_length=64, primary_key=True, serialize=False),
                ),
                ("plate_number", models.CharField(max_length=20)),
                ("driver_name", models.CharField(max_length=100)),
                ("driver_phone", models.CharField(max_length=20)),
                ("entry_time", models.DateTimeField()),
                (
                    "slot",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="occupant",
                        to="parking.slot",
                    ),
                ),
            ],
        ),
    ]
