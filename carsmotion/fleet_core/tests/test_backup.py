import json
from decimal import Decimal

from django.test import TestCase

from ..models import (AgencySettings, Customer, MaintenanceRecord, Reservation,
                      Transaction, Vehicle)
from ..services import (export_backup, record_maintenance, reset_all_data,
                        restore_backup, save_reservation)
from .helpers import FleetFixturesMixin, d


class BackupRestoreTests(FleetFixturesMixin, TestCase):
    def setUp(self):
        self.vehicle = self.make_vehicle(license_plate="BK-001-UP")
        self.customer = self.make_customer(first_name="Chloé", last_name="Durand")
        self.reservation = save_reservation({
            "vehicle_id": self.vehicle.pk,
            "customer_id": self.customer.pk,
            "start_date": d(2024, 3, 10),
            "end_date": d(2024, 3, 12),
            "status": "confirmed",
        }, today=d(2024, 3, 11))
        record_maintenance({
            "vehicle_id": self.vehicle.pk,
            "type": "service",
            "date": d(2024, 3, 1),
            "mileage": 100,
            "description": "Vidange",
            "cost": Decimal("90.00"),
        })
        settings_row = AgencySettings.load()
        settings_row.company_name = "Carsmotion"
        settings_row.save()

    def test_export_is_plain_json(self):
        document = export_backup()
        for key in ("vehicles", "customers", "reservations", "invoices",
                    "transactions", "maintenance", "settings", "backupDate"):
            self.assertIn(key, document)
        # serializable as-is
        json.dumps(document)

        reservation = document["reservations"][0]
        self.assertEqual(reservation["vehicle_id"], self.vehicle.pk)
        self.assertEqual(reservation["start_date"], "2024-03-10")
        self.assertEqual(reservation["total_amount"], "150.00")
        self.assertEqual(len(document["transactions"]), 2)
        self.assertEqual(document["settings"]["company_name"], "Carsmotion")

    def test_reset_keeps_settings(self):
        reset_all_data()
        for model in (Vehicle, Customer, Reservation, Transaction, MaintenanceRecord):
            self.assertFalse(model.objects.exists())
        settings_row = AgencySettings.load()
        self.assertEqual(settings_row.company_name, "Carsmotion")
        self.assertIsNotNone(settings_row.last_backup_date)

    def test_restore_brings_everything_back_with_the_same_ids(self):
        document = export_backup()
        created_at = Reservation.objects.get().created_at
        # JSON keeps milliseconds only
        created_at = created_at.replace(microsecond=created_at.microsecond // 1000 * 1000)
        reset_all_data()

        counts = restore_backup(document)

        self.assertEqual(counts["vehicles"], 1)
        self.assertEqual(counts["transactions"], 2)
        restored = Reservation.objects.get(pk=self.reservation.pk)
        self.assertEqual(restored.vehicle_id, self.vehicle.pk)
        self.assertEqual(restored.total_amount, Decimal("150.00"))
        self.assertEqual(restored.status, "confirmed")
        self.assertEqual(restored.created_at, created_at)
        self.assertEqual(Vehicle.objects.get(pk=self.vehicle.pk).license_plate, "BK-001-UP")

    def test_restore_fires_no_side_effects(self):
        document = export_backup()
        reset_all_data()
        restore_backup(document)
        # still one income row and one maintenance expense
        self.assertEqual(Transaction.objects.count(), 2)

    def test_restore_overwrites_and_leaves_absent_collections(self):
        self.make_vehicle(license_plate="NEW-01")
        restore_backup({"vehicles": [], "settings": {"company_name": "Autre"}})

        self.assertFalse(Vehicle.objects.exists())
        # collections absent from the document are untouched
        self.assertTrue(Reservation.objects.exists())
        settings_row = AgencySettings.load()
        self.assertEqual(settings_row.company_name, "Autre")
        self.assertIsNotNone(settings_row.last_backup_date)

    def test_dangling_references_survive_a_restore(self):
        document = export_backup()
        document["vehicles"] = []
        restore_backup(document)
        self.assertEqual(Reservation.objects.get().vehicle_id, self.vehicle.pk)
        self.assertFalse(Vehicle.objects.exists())

    def test_records_missing_newer_fields_take_defaults(self):
        restore_backup({"customers": [
            {"id": 77, "first_name": "Ancien", "last_name": "Format", "legacy": "x"},
        ]})
        customer = Customer.objects.get(pk=77)
        self.assertEqual(customer.email, "")
        self.assertIsNone(customer.license_expiry_date)
