import json

from django.core.management.base import BaseCommand, CommandError

from fleet_core.services import restore_backup


class Command(BaseCommand):
    help = (
        "Replace the stored collections with the content of a backup file. "
        "Collections missing from the file are kept as they are."
    )

    def add_arguments(self, parser):
        parser.add_argument("path", help="Backup JSON file produced by export_backup.")

    def handle(self, *args, **options):
        try:
            with open(options["path"], encoding="utf-8") as fh:
                document = json.load(fh)
        except OSError as exc:
            raise CommandError(f"Cannot read {options['path']}: {exc}")
        except ValueError as exc:
            raise CommandError(f"{options['path']} is not valid JSON: {exc}")

        if not isinstance(document, dict):
            raise CommandError("A backup document must be a JSON object.")

        counts = restore_backup(document)
        for name, count in counts.items():
            self.stdout.write(f"  {name}: {count}")
        self.stdout.write(self.style.SUCCESS("Backup restored."))
