from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse

from ..admin.forms import ReservationAdminForm
from ..models import Reservation, Transaction
from .helpers import FleetFixturesMixin, d


class ReservationAdminFormTests(FleetFixturesMixin, TestCase):
    def setUp(self):
        self.vehicle = self.make_vehicle()
        self.customer = self.make_customer()

    def form(self, instance=None, **overrides):
        data = {
            "vehicle": self.vehicle.pk,
            "customer": self.customer.pk,
            "start_date": "2024-03-15",
            "end_date": "2024-03-20",
            "status": "pending",
            "notes": "",
        }
        data.update(overrides)
        return ReservationAdminForm(data=data, instance=instance)

    def test_overlap_is_a_form_error(self):
        self.make_reservation(self.vehicle, self.customer, d(2024, 3, 10), d(2024, 3, 15),
                              status="confirmed")
        form = self.form()
        self.assertFalse(form.is_valid())
        self.assertIn("start_date", form.errors)

    def test_cancelled_booking_does_not_block(self):
        self.make_reservation(self.vehicle, self.customer, d(2024, 3, 10), d(2024, 3, 15),
                              status="cancelled")
        self.assertTrue(self.form().is_valid())

    def test_refused_transition_is_reported_on_status(self):
        reservation = self.make_reservation(self.vehicle, self.customer,
                                            d(2024, 3, 15), d(2024, 3, 20),
                                            status="confirmed")
        form = self.form(instance=reservation, status="pending")
        self.assertFalse(form.is_valid())
        self.assertIn("status", form.errors)

    def test_empty_total_is_left_to_the_workflow(self):
        form = self.form()
        self.assertTrue(form.is_valid())
        self.assertNotIn("total_amount", form.cleaned_data)


class ReservationAdminTests(FleetFixturesMixin, TestCase):
    def setUp(self):
        self.admin_user = get_user_model().objects.create_superuser(
            "admin", "admin@example.com", "secret")
        self.client.force_login(self.admin_user)
        self.vehicle = self.make_vehicle(daily_rate=Decimal("40.00"))
        self.customer = self.make_customer()

    def test_add_goes_through_the_save_workflow(self):
        response = self.client.post(reverse("admin:fleet_core_reservation_add"), {
            "vehicle": self.vehicle.pk,
            "customer": self.customer.pk,
            "start_date": "2024-01-01",
            "end_date": "2024-01-02",
            "total_amount": "",
            "status": "confirmed",
            "notes": "",
        })
        self.assertEqual(response.status_code, 302)
        reservation = Reservation.objects.get()
        self.assertEqual(reservation.total_amount, Decimal("80.00"))
        self.assertEqual(Transaction.objects.income().get().amount, Decimal("80.00"))

    def test_confirm_action(self):
        reservation = self.make_reservation(self.vehicle, self.customer,
                                            d(2024, 1, 1), d(2024, 1, 2),
                                            total_amount=Decimal("80.00"))
        response = self.client.post(reverse("admin:fleet_core_reservation_changelist"), {
            "action": "confirm_reservations",
            "_selected_action": [reservation.pk],
        })
        self.assertEqual(response.status_code, 302)
        reservation.refresh_from_db()
        self.assertEqual(reservation.status, "confirmed")
        self.assertEqual(Transaction.objects.income().count(), 1)

    def test_changelists_render_with_a_dangling_vehicle(self):
        self.make_reservation(self.vehicle, self.customer, d(2024, 1, 1), d(2024, 1, 2))
        self.vehicle.delete()
        response = self.client.get(reverse("admin:fleet_core_reservation_changelist"))
        self.assertContains(response, "Véhicule inconnu")
