import json

from django.core.management.base import BaseCommand

from fleet_core.services import export_backup


class Command(BaseCommand):
    help = "Write every collection and the agency settings to one JSON document."

    def add_arguments(self, parser):
        parser.add_argument(
            "--output", "-o",
            help="File to write (default: print to stdout).",
        )

    def handle(self, *args, **options):
        document = export_backup()
        text = json.dumps(document, indent=2, ensure_ascii=False)

        if not options["output"]:
            self.stdout.write(text)
            return

        with open(options["output"], "w", encoding="utf-8") as fh:
            fh.write(text)
        counts = ", ".join(
            f"{name}={len(document[name])}"
            for name in ("vehicles", "customers", "reservations",
                         "invoices", "transactions", "maintenance")
        )
        self.stdout.write(self.style.SUCCESS(
            f"Backup written to {options['output']} ({counts})"))
