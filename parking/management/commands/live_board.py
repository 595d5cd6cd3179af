import time

from django.core.management.base import BaseCommand

from parking.facility import get_facility


class Command(BaseCommand):
    help = "Print occupied slots with live duration and fee at a fixed interval"

    def add_arguments(self, parser):
        parser.add_argument("--interval", type=float, default=1.0)
        parser.add_argument(
            "--iterations",
            type=int,
            default=0,
            help="Number of refreshes; 0 runs until interrupted.",
        )

    def handle(self, *args, **options):
        facility = get_facility()
        count = 0
        try:
            while True:
                self.render(facility)
                count += 1
                if options["iterations"] and count >= options["iterations"]:
                    break
                time.sleep(options["interval"])
        except KeyboardInterrupt:
            pass

    def render(self, facility):
        stats = facility.stats()
        self.stdout.write(
            f"{stats.occupied_slots}/{stats.total_slots} occupied "
            f"({stats.occupancy_rate}%), revenue {stats.total_revenue:,} RWF"
        )
        for row in facility.live_board():
            if row["occupant"] is None:
                continue
            self.stdout.write(
                f"  BAY {row['slot'].number}  {row['occupant'].plate_number:<12} "
                f"{row['duration']}  {row['fee']:,} RWF"
            )
