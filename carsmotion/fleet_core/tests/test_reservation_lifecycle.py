from decimal import Decimal

from django.core.exceptions import ValidationError
from django.test import TestCase

from ..exceptions import InvalidStatusTransition, ReservationConflictError
from ..models import AuditLog, Reservation, Transaction, Vehicle
from ..models.ledger import RENTAL_INCOME_CATEGORY
from ..services import (cancel_reservation, complete_reservation,
                        confirm_reservation, delete_reservation,
                        quote_reservation, reconcile_vehicle_statuses,
                        save_reservation)
from ..services.lifecycle import derive_vehicle_status
from .helpers import FleetFixturesMixin, d

TODAY = d(2024, 3, 12)


class ReservationWorkflowTests(FleetFixturesMixin, TestCase):
    def setUp(self):
        self.vehicle = self.make_vehicle(daily_rate=Decimal("50.00"))
        self.customer = self.make_customer()

    def book(self, start, end, status="pending", reservation_id=None, **extra):
        data = {
            "vehicle_id": self.vehicle.pk,
            "customer_id": self.customer.pk,
            "start_date": start,
            "end_date": end,
            "status": status,
        }
        data.update(extra)
        return save_reservation(data, reservation_id, today=TODAY)

    def income_rows(self, reservation):
        return Transaction.objects.filter(
            category=RENTAL_INCOME_CATEGORY,
            source_type="reservation",
            source_id=reservation.pk,
        )

    # ----- pricing -----

    def test_total_computed_from_daily_rate(self):
        reservation = self.book(d(2024, 3, 10), d(2024, 3, 15))
        self.assertEqual(reservation.total_amount, Decimal("300.00"))

    def test_explicit_total_wins(self):
        reservation = self.book(d(2024, 3, 10), d(2024, 3, 15), total_amount="250")
        self.assertEqual(reservation.total_amount, Decimal("250.00"))

    def test_total_kept_on_plain_edit_and_recomputed_on_date_change(self):
        reservation = self.book(d(2024, 3, 10), d(2024, 3, 15), total_amount="250")
        reservation = save_reservation({"notes": "siège bébé"}, reservation.pk, today=TODAY)
        self.assertEqual(reservation.total_amount, Decimal("250.00"))

        reservation = save_reservation(
            {"end_date": d(2024, 3, 11)}, reservation.pk, today=TODAY)
        self.assertEqual(reservation.total_amount, Decimal("100.00"))

    def test_iso_strings_are_accepted(self):
        reservation = save_reservation({
            "vehicle": self.vehicle.pk,
            "customer": self.customer.pk,
            "start_date": "2024-03-10",
            "end_date": "2024-03-12T00:00:00.000Z",
        }, today=TODAY)
        self.assertEqual(reservation.end_date, d(2024, 3, 12))
        self.assertEqual(reservation.total_amount, Decimal("150.00"))

    def test_string_ids_do_not_count_as_a_vehicle_change(self):
        reservation = self.book(d(2024, 3, 10), d(2024, 3, 12), total_amount="999")
        reservation = save_reservation({
            "vehicle_id": str(self.vehicle.pk),
            "customer_id": str(self.customer.pk),
            "notes": "x",
        }, reservation.pk, today=TODAY)
        self.assertEqual(reservation.vehicle_id, self.vehicle.pk)
        self.assertEqual(reservation.total_amount, Decimal("999.00"))

    def test_unparsable_vehicle_id_is_a_validation_error(self):
        with self.assertRaises(ValidationError) as ctx:
            self.book(d(2024, 3, 10), d(2024, 3, 12), vehicle_id="abc")
        self.assertIn("vehicle", ctx.exception.message_dict)
        self.assertFalse(Reservation.objects.exists())

    def test_quote_does_not_write(self):
        quote = quote_reservation(self.vehicle.pk, "2024-01-01", "2024-01-03")
        self.assertEqual(quote["days"], 3)
        self.assertEqual(quote["total_amount"], Decimal("150.00"))
        self.assertFalse(Reservation.objects.exists())

    # ----- validation -----

    def test_missing_fields_rejected_before_any_write(self):
        with self.assertRaises(ValidationError) as ctx:
            save_reservation({"vehicle_id": self.vehicle.pk}, today=TODAY)
        self.assertIn("customer", ctx.exception.message_dict)
        self.assertFalse(Reservation.objects.exists())

    def test_end_must_follow_start(self):
        with self.assertRaises(ValidationError):
            self.book(d(2024, 3, 15), d(2024, 3, 15))
        self.assertFalse(Reservation.objects.exists())

    def test_unknown_reservation_id(self):
        with self.assertRaises(Reservation.DoesNotExist):
            save_reservation({"notes": "x"}, 424242, today=TODAY)

    # ----- conflicts -----

    def test_overlapping_booking_is_rejected(self):
        self.book(d(2024, 3, 10), d(2024, 3, 15), status="confirmed")
        with self.assertRaises(ReservationConflictError):
            self.book(d(2024, 3, 15), d(2024, 3, 20))
        self.assertEqual(Reservation.objects.count(), 1)

    def test_next_day_booking_is_accepted(self):
        self.book(d(2024, 3, 10), d(2024, 3, 15), status="confirmed")
        self.book(d(2024, 3, 16), d(2024, 3, 20))
        self.assertEqual(Reservation.objects.count(), 2)

    def test_editing_a_booking_does_not_conflict_with_itself(self):
        reservation = self.book(d(2024, 3, 10), d(2024, 3, 15))
        reservation = save_reservation(
            {"start_date": d(2024, 3, 11)}, reservation.pk, today=TODAY)
        self.assertEqual(reservation.start_date, d(2024, 3, 11))

    def test_cancelling_skips_the_calendar_check(self):
        first = self.make_reservation(
            self.vehicle, self.customer, d(2024, 3, 10), d(2024, 3, 15), status="pending")
        # a second overlapping row written behind the workflow's back
        second = self.make_reservation(
            self.vehicle, self.customer, d(2024, 3, 12), d(2024, 3, 14), status="pending")
        cancel_reservation(second.pk, today=TODAY)
        second.refresh_from_db()
        self.assertEqual(second.status, "cancelled")
        # and the remaining booking can now be confirmed
        confirm_reservation(first.pk, today=TODAY)

    # ----- lifecycle -----

    def test_confirm_covering_today_rents_the_vehicle(self):
        self.book(d(2024, 3, 10), d(2024, 3, 15), status="confirmed")
        self.vehicle.refresh_from_db()
        self.assertEqual(self.vehicle.status, "rented")

    def test_future_confirmation_leaves_vehicle_available(self):
        self.book(d(2024, 4, 1), d(2024, 4, 5), status="confirmed")
        self.vehicle.refresh_from_db()
        self.assertEqual(self.vehicle.status, "available")

    def test_complete_releases_the_vehicle(self):
        reservation = self.book(d(2024, 3, 10), d(2024, 3, 15), status="confirmed")
        complete_reservation(reservation.pk, today=TODAY)
        self.vehicle.refresh_from_db()
        self.assertEqual(self.vehicle.status, "available")

    def test_vehicle_stays_rented_while_another_confirmed_booking_remains(self):
        current = self.book(d(2024, 3, 10), d(2024, 3, 15), status="confirmed")
        self.book(d(2024, 3, 20), d(2024, 3, 25), status="confirmed")
        cancel_reservation(current.pk, today=TODAY)
        self.vehicle.refresh_from_db()
        self.assertEqual(self.vehicle.status, "rented")

    def test_release_applies_over_a_manual_status(self):
        reservation = self.book(d(2024, 3, 10), d(2024, 3, 15), status="confirmed")
        Vehicle.objects.filter(pk=self.vehicle.pk).update(status="maintenance")
        complete_reservation(reservation.pk, today=TODAY)
        self.vehicle.refresh_from_db()
        self.assertEqual(self.vehicle.status, "available")

    def test_illegal_transitions(self):
        reservation = self.book(d(2024, 3, 10), d(2024, 3, 15), status="confirmed")
        complete_reservation(reservation.pk, today=TODAY)
        with self.assertRaises(InvalidStatusTransition):
            save_reservation({"status": "pending"}, reservation.pk, today=TODAY)

        other = self.book(d(2024, 5, 1), d(2024, 5, 2))
        cancel_reservation(other.pk, today=TODAY)
        with self.assertRaises(InvalidStatusTransition):
            confirm_reservation(other.pk, today=TODAY)

    def test_new_reservation_cannot_start_completed(self):
        with self.assertRaises(InvalidStatusTransition):
            self.book(d(2024, 3, 10), d(2024, 3, 15), status="completed")

    def test_delete_confirmed_reservation_releases_vehicle(self):
        reservation = self.book(d(2024, 3, 10), d(2024, 3, 15), status="confirmed")
        self.assertTrue(delete_reservation(reservation.pk, today=TODAY))
        self.vehicle.refresh_from_db()
        self.assertEqual(self.vehicle.status, "available")
        # booked income stays in the journal
        self.assertEqual(self.income_rows(reservation).count(), 1)
        self.assertFalse(delete_reservation(reservation.pk, today=TODAY))

    # ----- ledger side effect -----

    def test_one_income_entry_across_the_whole_lifecycle(self):
        reservation = self.book(d(2024, 3, 10), d(2024, 3, 15))
        self.assertEqual(self.income_rows(reservation).count(), 0)

        save_reservation({"notes": "client fidèle"}, reservation.pk, today=TODAY)
        confirm_reservation(reservation.pk, today=TODAY)
        save_reservation({"notes": "clés remises"}, reservation.pk, today=TODAY)
        save_reservation({"status": "confirmed"}, reservation.pk, today=TODAY)
        complete_reservation(reservation.pk, today=TODAY)

        rows = self.income_rows(reservation)
        self.assertEqual(rows.count(), 1)
        entry = rows.get()
        self.assertEqual(entry.type, "income")
        self.assertEqual(entry.amount, Decimal("300.00"))
        self.assertEqual(entry.date, TODAY)
        self.assertEqual(entry.description, "Location de Peugeot 208 à Alice Martin")

    def test_zero_total_confirmation_books_nothing(self):
        self.book(d(2024, 3, 10), d(2024, 3, 15), status="confirmed", total_amount="0")
        self.assertFalse(Transaction.objects.exists())

    def test_dangling_vehicle_is_tolerated(self):
        reservation = self.book(d(2024, 3, 10), d(2024, 3, 15))
        Vehicle.objects.get(pk=self.vehicle.pk).delete()

        confirm_reservation(reservation.pk, today=TODAY)

        reservation.refresh_from_db()
        self.assertEqual(reservation.status, "confirmed")
        entry = self.income_rows(reservation).get()
        self.assertEqual(entry.description, "Location de Véhicule à Alice Martin")

    def test_conflict_rolls_back_every_write(self):
        self.book(d(2024, 3, 10), d(2024, 3, 15), status="confirmed")
        writes_before = (Transaction.objects.count(), AuditLog.objects.count())
        with self.assertRaises(ReservationConflictError):
            self.book(d(2024, 3, 12), d(2024, 3, 13), status="confirmed")
        self.assertEqual(
            (Transaction.objects.count(), AuditLog.objects.count()), writes_before)


class VehicleStatusReconciliationTests(FleetFixturesMixin, TestCase):
    def setUp(self):
        self.vehicle = self.make_vehicle()
        self.customer = self.make_customer()

    def test_future_booking_flips_when_its_first_day_comes(self):
        self.make_reservation(
            self.vehicle, self.customer, d(2024, 4, 1), d(2024, 4, 5), status="confirmed")
        self.assertEqual(reconcile_vehicle_statuses(today=d(2024, 3, 31)), 0)
        self.assertEqual(reconcile_vehicle_statuses(today=d(2024, 4, 1)), 1)
        self.vehicle.refresh_from_db()
        self.assertEqual(self.vehicle.status, "rented")
        # second run is a no-op
        self.assertEqual(reconcile_vehicle_statuses(today=d(2024, 4, 1)), 0)

    def test_rented_vehicle_without_booking_is_released(self):
        Vehicle.objects.filter(pk=self.vehicle.pk).update(status="rented")
        self.assertEqual(reconcile_vehicle_statuses(today=TODAY), 1)
        self.vehicle.refresh_from_db()
        self.assertEqual(self.vehicle.status, "available")

    def test_maintenance_wins(self):
        Vehicle.objects.filter(pk=self.vehicle.pk).update(status="maintenance")
        self.make_reservation(
            self.vehicle, self.customer, d(2024, 3, 10), d(2024, 3, 15), status="confirmed")
        self.vehicle.refresh_from_db()
        self.assertEqual(derive_vehicle_status(self.vehicle, TODAY), "maintenance")
        self.assertEqual(reconcile_vehicle_statuses(today=TODAY), 0)
