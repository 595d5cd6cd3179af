from django.core.management.base import BaseCommand

from config import INITIAL_SLOT_COUNT, SLOT_LABEL_PREFIX
from parking.facility import get_facility


class Command(BaseCommand):
    help = "Initialize parking slots, optionally wiping all facility data"

    def add_arguments(self, parser):
        parser.add_argument("--slots", type=int, default=INITIAL_SLOT_COUNT)
        parser.add_argument("--prefix", default=SLOT_LABEL_PREFIX)
        parser.add_argument(
            "--reset",
            action="store_true",
            help="Purge all slots, active visits and transactions first.",
        )

    def handle(self, *args, **options):
        facility = get_facility()

        if options["reset"]:
            facility.factory_reset(options["slots"], prefix=options["prefix"])
            self.stdout.write(
                self.style.WARNING(f"Facility reset to {options['slots']} slots")
            )
            return

        existing = {slot.number for slot in facility.registry.slots}
        for i in range(1, options["slots"] + 1):
            label = f"{options['prefix']}{i:02d}"
            if label not in existing:
                facility.add_slot(label)
                self.stdout.write(f"Created Slot {label}")
        facility.flush()

        self.stdout.write(self.style.SUCCESS("Data initialized"))
