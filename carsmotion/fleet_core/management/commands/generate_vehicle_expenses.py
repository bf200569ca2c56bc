from django.core.management.base import BaseCommand, CommandError
from django.utils.dateparse import parse_date

from fleet_core.services import generate_monthly_vehicle_expenses


class Command(BaseCommand):
    help = (
        "Book the monthly loan payments and insurance fees of every vehicle. "
        "Already booked months are skipped, so it is safe to re-run."
    )

    def add_arguments(self, parser):
        parser.add_argument(
            "--date",
            help="Any day of the month to generate (YYYY-MM-DD, default: today).",
        )

    def handle(self, *args, **options):
        for_date = None
        if options["date"]:
            for_date = parse_date(options["date"])
            if for_date is None:
                raise CommandError(f"Invalid date: {options['date']}")

        created = generate_monthly_vehicle_expenses(for_date)
        self.stdout.write(self.style.SUCCESS(f"{created} expense(s) created."))
