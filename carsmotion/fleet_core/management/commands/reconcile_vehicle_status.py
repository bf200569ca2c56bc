from django.core.management.base import BaseCommand

from fleet_core.services import reconcile_vehicle_statuses


class Command(BaseCommand):
    help = "Realign vehicle statuses (available / rented) with today's confirmed reservations."

    def handle(self, *args, **options):
        changed = reconcile_vehicle_statuses()
        self.stdout.write(self.style.SUCCESS(f"{changed} vehicle(s) updated."))
