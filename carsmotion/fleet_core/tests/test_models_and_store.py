import datetime
from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db.models import Q
from django.test import TestCase
from django.utils import timezone

from ..models import (AgencySettings, AuditLog, Customer, Reservation,
                      Transaction, Vehicle)
from ..store import EntityStore, FleetStores, default_stores
from .helpers import FleetFixturesMixin, d


class CustomerValidationTests(FleetFixturesMixin, TestCase):
    def future(self, days=365):
        return timezone.localdate() + datetime.timedelta(days=days)

    def test_expiry_must_follow_issue(self):
        with self.assertRaises(ValidationError) as ctx:
            self.make_customer(license_issue_date=self.future(30),
                               license_expiry_date=self.future(10))
        self.assertIn("license_expiry_date", ctx.exception.message_dict)

    def test_expired_licence_refused_at_entry(self):
        with self.assertRaises(ValidationError):
            self.make_customer(license_expiry_date=timezone.localdate())

    def test_lapsed_licence_does_not_block_other_edits(self):
        customer = self.make_customer(license_expiry_date=self.future())
        # the licence expires later on; the record stays editable
        Customer.objects.filter(pk=customer.pk).update(
            license_expiry_date=d(2020, 1, 1))
        customer.refresh_from_db()
        customer.phone = "06 12 34 56 78"
        customer.save()

    def test_negative_deposit_refused(self):
        with self.assertRaises(ValidationError):
            self.make_customer(deposit_amount=Decimal("-1.00"))


class VehicleModelTests(FleetFixturesMixin, TestCase):
    def test_plate_is_unique(self):
        self.make_vehicle(license_plate="AA-000-AA")
        with self.assertRaises(ValidationError):
            self.make_vehicle(license_plate="AA-000-AA")

    def test_negative_monthly_amounts_refused(self):
        with self.assertRaises(ValidationError):
            self.make_vehicle(monthly_payment=Decimal("-10.00"))

    def test_deleting_a_vehicle_leaves_reservations_and_an_audit_trace(self):
        vehicle = self.make_vehicle()
        customer = self.make_customer()
        reservation = self.make_reservation(vehicle, customer, d(2024, 1, 1), d(2024, 1, 2))
        vehicle_id = vehicle.pk
        vehicle.delete()

        reservation.refresh_from_db()
        self.assertEqual(reservation.vehicle_id, vehicle_id)
        self.assertTrue(AuditLog.objects.filter(
            action="delete", object_type="Vehicle", object_id=str(vehicle_id)).exists())


class AgencySettingsTests(TestCase):
    def test_single_row(self):
        AgencySettings(company_name="A").save()
        AgencySettings(company_name="B").save()
        self.assertEqual(AgencySettings.objects.count(), 1)
        self.assertEqual(AgencySettings.load().company_name, "B")

    def test_cannot_be_deleted(self):
        settings_row = AgencySettings.load()
        settings_row.delete()
        self.assertTrue(AgencySettings.objects.exists())


class EntityStoreTests(FleetFixturesMixin, TestCase):
    def setUp(self):
        self.store = EntityStore(Vehicle)

    def test_create_and_get(self):
        vehicle = self.store.create(
            make="Fiat", model="500", year=2020, license_plate="FI-500-AT",
            fuel_type="essence", purchase_type="cash", daily_rate=Decimal("35.00"))
        self.assertIsNotNone(vehicle.pk)
        self.assertEqual(self.store.get_by_id(vehicle.pk), vehicle)
        self.assertEqual(self.store.get_all(), [vehicle])

    def test_unknown_or_missing_id_returns_none(self):
        self.assertIsNone(self.store.get_by_id(123456))
        self.assertIsNone(self.store.get_by_id(None))

    def test_update_merges_fields(self):
        vehicle = self.make_vehicle(notes="à laver")
        updated = self.store.update(vehicle.pk, mileage=5000)
        self.assertEqual(updated.mileage, 5000)
        self.assertEqual(updated.notes, "à laver")
        self.assertIsNone(self.store.update(123456, mileage=1))

    def test_delete(self):
        vehicle = self.make_vehicle()
        self.assertTrue(self.store.delete(vehicle.pk))
        self.assertFalse(self.store.delete(vehicle.pk))

    def test_query_with_q_or_callable(self):
        cheap = self.make_vehicle(daily_rate=Decimal("30.00"))
        self.make_vehicle(daily_rate=Decimal("90.00"))
        self.assertEqual(self.store.query(Q(daily_rate__lt=50)), [cheap])
        self.assertEqual(self.store.query(lambda v: v.daily_rate < 50), [cheap])
        self.assertEqual(len(self.store.query(status="available")), 2)

    def test_default_bundle(self):
        stores = default_stores()
        self.assertIs(stores, default_stores())
        self.assertIsInstance(stores, FleetStores)
        self.assertEqual(
            [name for name, _ in stores.collections()],
            ["vehicles", "customers", "reservations", "invoices", "transactions", "maintenance"],
        )
        self.assertIs(stores.reservations.model, Reservation)


class QueryHelperTests(FleetFixturesMixin, TestCase):
    def test_reservation_helpers(self):
        vehicle = self.make_vehicle()
        customer = self.make_customer()
        booked = self.make_reservation(vehicle, customer, d(2024, 3, 10), d(2024, 3, 15),
                                       status="confirmed")
        self.make_reservation(vehicle, customer, d(2024, 3, 14), d(2024, 3, 16),
                              status="cancelled")

        calendar = Reservation.objects.for_vehicle(vehicle.pk).active()
        self.assertEqual(list(calendar.overlapping(d(2024, 3, 15), d(2024, 3, 20))), [booked])
        self.assertFalse(calendar.overlapping(d(2024, 3, 16), d(2024, 3, 20)).exists())
        self.assertEqual(list(calendar.confirmed().covering(d(2024, 3, 10))), [booked])

    def test_transactions_by_source(self):
        entry = Transaction.objects.create(
            date=d(2024, 3, 1), type="income", category="Locations",
            amount=Decimal("10.00"), source_type="reservation", source_id=7)
        self.assertEqual(list(Transaction.objects.for_source("reservation", 7)), [entry])
        self.assertFalse(Transaction.objects.for_source("reservation", 8).exists())
